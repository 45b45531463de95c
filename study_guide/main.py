"""Study Guide Generator — FastAPI application entry point."""
from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import Optional

import httpx
from dotenv import load_dotenv
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from .config import Settings
from .routers import export, guide, infographic
from .services import gemini_client
from .services.errors import StudyGuideError
from .services.guide_pipeline import GeminiGuidePipeline
from .services.infographic_pipeline import InfographicPipeline

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s %(levelname)s %(name)s — %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    settings: Settings = app.state.settings
    if settings.gemini_api_key:
        logger.info(f"Gemini configured, models in order: {', '.join(settings.gemini_models)}")
    else:
        logger.warning("GEMINI_API_KEY not set, study guide generation will fail until it is configured")
    if not settings.fal_key:
        logger.warning("FAL_KEY not set, infographic generation is unavailable")
    yield


async def study_guide_error_handler(request: Request, exc: StudyGuideError) -> JSONResponse:
    logger.warning(f"{request.method} {request.url.path} failed ({exc.kind}): {exc.message}")
    return JSONResponse(
        status_code=exc.status_code,
        content={"detail": exc.message, "kind": exc.kind},
    )


def create_app(
    settings: Optional[Settings] = None,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> FastAPI:
    if settings is None:
        load_dotenv()
        settings = Settings.from_env()

    app = FastAPI(
        title="Study Guide Generator",
        description="Turns academic text into structured study guides and infographics",
        version="1.0.0",
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.guide_pipeline = GeminiGuidePipeline(settings, transport=transport)
    app.state.infographic_pipeline = InfographicPipeline(settings, transport=transport)

    app.add_exception_handler(StudyGuideError, study_guide_error_handler)

    # CORS: Vite dev server plus ALLOWED_ORIGINS
    app.add_middleware(
        CORSMiddleware,
        allow_origins=list(settings.allowed_origins),
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(guide.router)
    app.include_router(infographic.router)
    app.include_router(export.router)

    @app.get("/health")
    async def health() -> dict:
        gemini_ok = await gemini_client.check_health(
            settings.gemini_api_key, settings.gemini_base_url, transport=transport
        )
        return {
            "status": "ok",
            "gemini_reachable": gemini_ok,
            **settings.status(),
        }

    @app.get("/")
    async def root() -> dict:
        return {"message": "Study Guide Generator API", "docs": "/docs"}

    return app


app = create_app()
