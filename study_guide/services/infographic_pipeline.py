"""
Infographic Pipeline — content → fal.ai LLM extraction → generated image.

Text goes straight to the text LLM workflow; images are uploaded to fal
storage first and read by the vision workflow. The extracted structure is
folded back into the regular StudyGuide shape so the presentation layer
handles both producers the same way.
"""
from __future__ import annotations

import asyncio
import logging
import random
from typing import Optional

import httpx
from pydantic import ValidationError

from ..config import Settings
from ..models.guide import STUDENT_BENEFIT_FOCUS, GuideOutcome, StudyGuide
from ..models.infographic import ContentExtraction
from .errors import ConfigurationError, GuideValidationError, InfographicError
from .fal_client import FalClient
from .file_input import BinaryContent, UploadKind
from .guide_pipeline import GuideInput
from .normalizer import parse_json_payload
from .prompts import infographic_instructions
from .validation import validate_study_guide

logger = logging.getLogger(__name__)

TEXT_WORKFLOW = "fal-ai/any-llm"
VISION_WORKFLOW = "fal-ai/any-llm/vision"
IMAGE_WORKFLOW = "fal-ai/nano-banana-pro"


def choose_workflow(content: GuideInput) -> str:
    if isinstance(content, BinaryContent) and content.kind is UploadKind.IMAGE:
        return VISION_WORKFLOW
    return TEXT_WORKFLOW


def extract_image_url(result: dict) -> str:
    images = result.get("images") if isinstance(result, dict) else None
    if images and isinstance(images[0], dict) and images[0].get("url"):
        return images[0]["url"]
    raise InfographicError("No images generated by fal.ai")


def to_study_guide(extraction: ContentExtraction) -> StudyGuide:
    style = extraction.visual_style
    visual_suggestions = [
        c.visual_metaphor for c in extraction.key_concepts if c.importance.lower() == "high"
    ]
    visual_suggestions.append(f"Layout: {style.layout}")
    visual_suggestions.append(f"Color scheme: {style.color_scheme}")
    reminder_tips = [f"Remember: {c.concept} - {c.description}" for c in extraction.key_concepts]

    return validate_study_guide({
        "title": extraction.title,
        "summary": f"Infographic about {extraction.main_theme}",
        "student_benefit_focus": STUDENT_BENEFIT_FOCUS,
        "sections": [
            {
                "header": section.section_title,
                "bullet_points": section.content_points,
                "visual_suggestions": visual_suggestions,
                "reminder_tips": reminder_tips,
            }
            for section in extraction.sections
        ],
        "infographic_style": f"{style.mood}, {style.layout}",
    })


class InfographicPipeline:
    def __init__(
        self,
        settings: Settings,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self.settings = settings
        self._transport = transport
        self._lock = asyncio.Lock()

    def _fal(self) -> FalClient:
        if not self.settings.fal_key:
            raise ConfigurationError(
                "fal.ai API key is not configured. Please set FAL_KEY in your .env file."
            )
        return FalClient(
            self.settings.fal_key,
            queue_url=self.settings.fal_queue_url,
            storage_url=self.settings.fal_storage_url,
            poll_interval=self.settings.fal_poll_interval,
            timeout=self.settings.fal_timeout,
            transport=self._transport,
        )

    async def extract(self, fal: FalClient, content: GuideInput) -> ContentExtraction:
        workflow = choose_workflow(content)
        arguments = {
            "model": self.settings.fal_llm_model,
            "max_tokens": 2000,
            "temperature": 0.7,
        }
        if isinstance(content, BinaryContent) and content.kind is UploadKind.IMAGE:
            arguments["image_url"] = await fal.upload_binary(
                content.data, content.content_type, content.file_name
            )
            arguments["prompt"] = (
                f"{infographic_instructions()}\n\n"
                "Analyze the image provided and extract the educational content from it."
            )
        else:
            text = content.as_text() if isinstance(content, BinaryContent) else content
            arguments["prompt"] = f"{infographic_instructions()}\n\nUser content to process:\n{text}"

        logger.info(f"Extracting infographic content with {workflow}")
        result = await fal.run_workflow(workflow, arguments)
        output = result.get("output") if isinstance(result, dict) else None
        if not isinstance(output, str) or not output.strip():
            raise InfographicError("No response text from fal.ai LLM")

        value = parse_json_payload(output, source="fal.ai LLM")
        try:
            return ContentExtraction.model_validate(value)
        except ValidationError as e:
            raise GuideValidationError(
                f"Invalid infographic structure received from fal.ai LLM: {e.error_count()} error(s)"
            ) from e

    async def generate_image(self, fal: FalClient, prompt: str) -> str:
        result = await fal.run_workflow(IMAGE_WORKFLOW, {
            "prompt": prompt,
            "image_size": "landscape_16_9",
            "num_images": 1,
            "enable_safety_checker": True,
            "seed": random.randint(0, 999999),
        })
        return extract_image_url(result)

    async def create(self, content: GuideInput) -> GuideOutcome:
        fal = self._fal()
        async with self._lock:
            extraction = await self.extract(fal, content)
            image_url = await self.generate_image(fal, extraction.infographic_prompt)
        logger.info(f"Infographic generated for '{extraction.title}'")
        return GuideOutcome(study_guide=to_study_guide(extraction), infographic_url=image_url)
