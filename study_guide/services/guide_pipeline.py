"""
Content-to-Guide Pipeline — free text in, validated StudyGuide out.

Composes the tutoring prompt, checks the credential, and hands off to the
endpoint fallback driver. Either a complete guide comes back or an error is
raised; there are no partial results.
"""
from __future__ import annotations

import asyncio
import logging
from typing import Optional, Protocol, Union

import httpx

from ..config import Settings
from ..models.guide import GuideOutcome, StudyGuide
from .errors import ConfigurationError
from .fallback import EndpointFallbackDriver
from .file_input import BinaryContent
from .prompts import study_guide_instructions

logger = logging.getLogger(__name__)

GuideInput = Union[str, BinaryContent]


class ContentToGuide(Protocol):
    """Anything that can turn user content into a study guide."""

    async def create(self, content: GuideInput) -> GuideOutcome:
        ...


def build_prompt(content: str) -> str:
    return f"{study_guide_instructions()}\n\nContent to process:\n{content}"


class GeminiGuidePipeline:
    def __init__(
        self,
        settings: Settings,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self.settings = settings
        self._transport = transport
        # Overlapping calls on one instance are queued, not run concurrently.
        self._lock = asyncio.Lock()

    async def generate(self, content: str) -> StudyGuide:
        api_key = self.settings.gemini_api_key
        if not api_key:
            raise ConfigurationError(
                "Gemini API key is not configured. Please set GEMINI_API_KEY in your .env file."
            )

        driver = EndpointFallbackDriver(
            self.settings.gemini_models,
            api_key,
            base_url=self.settings.gemini_base_url,
            timeout=self.settings.gemini_timeout,
            transport=self._transport,
        )
        prompt = build_prompt(content)

        async with self._lock:
            logger.info(f"Generating study guide from {len(content)} characters of content")
            guide = await driver.run(prompt)

        if guide.is_degenerate:
            logger.warning(f"Study guide '{guide.title}' has no sections")
        return guide

    async def create(self, content: GuideInput) -> GuideOutcome:
        if isinstance(content, BinaryContent):
            content = content.as_text()
        return GuideOutcome(study_guide=await self.generate(content))
