"""POST /api/infographic — content → study guide plus generated infographic."""
from __future__ import annotations

from fastapi import APIRouter, Depends, UploadFile

from ..dependencies import get_infographic_pipeline
from ..models.guide import GuideOutcome
from ..models.requests import InfographicRequest
from ..services.file_input import UploadKind, classify_upload
from ..services.guide_pipeline import ContentToGuide

router = APIRouter(prefix="/api")


@router.post("/infographic", response_model=GuideOutcome)
async def create_infographic(
    req: InfographicRequest,
    pipeline: ContentToGuide = Depends(get_infographic_pipeline),
) -> GuideOutcome:
    return await pipeline.create(req.content)


@router.post("/infographic/upload", response_model=GuideOutcome)
async def create_infographic_from_file(
    file: UploadFile,
    pipeline: ContentToGuide = Depends(get_infographic_pipeline),
) -> GuideOutcome:
    data = await file.read()
    content = classify_upload(file.filename, file.content_type, data)
    if content.kind is UploadKind.TEXT:
        return await pipeline.create(content.as_text())
    return await pipeline.create(content)
