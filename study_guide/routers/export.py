"""POST /api/export — download a study guide as JSON or Markdown."""
from __future__ import annotations

from fastapi import APIRouter
from fastapi.responses import Response

from ..models.guide import GuideOutcome, StudyGuide, render_json
from ..services import markdown_renderer

router = APIRouter(prefix="/api")


@router.post("/export/json")
async def export_json(guide: StudyGuide) -> Response:
    return Response(
        content=render_json(guide),
        media_type="application/json",
        headers={"Content-Disposition": 'attachment; filename="study-guide.json"'},
    )


@router.post("/export/markdown")
async def export_markdown(outcome: GuideOutcome) -> Response:
    """Takes the full outcome so an infographic link survives the export."""
    return Response(
        content=markdown_renderer.render_markdown(outcome.study_guide, outcome.infographic_url),
        media_type="text/markdown; charset=utf-8",
        headers={"Content-Disposition": 'attachment; filename="study-guide.md"'},
    )
