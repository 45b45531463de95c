"""Request-scoped accessors for the pipelines built once in create_app()."""
from fastapi import Request

from .services.guide_pipeline import ContentToGuide


def get_guide_pipeline(request: Request) -> ContentToGuide:
    return request.app.state.guide_pipeline


def get_infographic_pipeline(request: Request) -> ContentToGuide:
    return request.app.state.infographic_pipeline
