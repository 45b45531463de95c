"""POST /api/guide — text or uploaded text file → study guide."""
from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, UploadFile

from ..dependencies import get_guide_pipeline
from ..models.guide import StudyGuide
from ..models.requests import GuideRequest
from ..services.errors import UnsupportedInputError
from ..services.file_input import UploadKind, classify_upload
from ..services.guide_pipeline import ContentToGuide

router = APIRouter(prefix="/api")
logger = logging.getLogger(__name__)


@router.post("/guide", response_model=StudyGuide)
async def create_guide(
    req: GuideRequest,
    pipeline: ContentToGuide = Depends(get_guide_pipeline),
) -> StudyGuide:
    outcome = await pipeline.create(req.content)
    return outcome.study_guide


@router.post("/guide/upload", response_model=StudyGuide)
async def create_guide_from_file(
    file: UploadFile,
    pipeline: ContentToGuide = Depends(get_guide_pipeline),
) -> StudyGuide:
    """Text files only. Images are read by the infographic endpoint."""
    data = await file.read()
    content = classify_upload(file.filename, file.content_type, data)
    logger.info(f"Upload '{content.file_name}' classified as {content.kind.value}")

    if content.kind is UploadKind.IMAGE:
        raise UnsupportedInputError(
            f"'{content.file_name}' is an image. Upload images to /api/infographic/upload, "
            "or upload a .txt file here."
        )
    outcome = await pipeline.create(content.as_text())
    return outcome.study_guide
