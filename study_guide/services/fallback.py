"""
Endpoint Fallback Driver — tries each configured Gemini model in order.

Only "model unavailable" failures move on to the next model. Every other
failure (auth, rate limit, network, empty envelope, bad JSON, bad schema)
would reproduce identically on the next model, so it aborts the run.
"""
from __future__ import annotations

import logging
from enum import Enum
from typing import Optional, Sequence

import httpx

from ..models.guide import StudyGuide
from . import gemini_client
from .errors import EndpointUnavailableError, EndpointsExhaustedError, UpstreamAPIError
from .normalizer import parse_json_payload
from .validation import validate_study_guide

logger = logging.getLogger(__name__)

RETRYABLE_MARKERS = ("not found", "not supported")


class ErrorClass(Enum):
    RETRYABLE = "retryable"
    FATAL = "fatal"


def classify_error_message(message: str) -> ErrorClass:
    """
    Best-effort heuristic over the provider's human-readable error text.
    Swap for structured error codes if the API starts exposing them.
    """
    lowered = message.lower()
    if any(marker in lowered for marker in RETRYABLE_MARKERS):
        return ErrorClass.RETRYABLE
    return ErrorClass.FATAL


class EndpointFallbackDriver:
    def __init__(
        self,
        models: Sequence[str],
        api_key: str,
        *,
        base_url: str,
        timeout: float = 60.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        if not models:
            raise ValueError("At least one model endpoint is required")
        self.models = tuple(models)
        self.api_key = api_key
        self.base_url = base_url
        self.timeout = timeout
        self._transport = transport

    async def run(self, prompt: str) -> StudyGuide:
        last_error: Optional[EndpointUnavailableError] = None

        async with httpx.AsyncClient(timeout=self.timeout, transport=self._transport) as client:
            for index, model in enumerate(self.models, start=1):
                logger.info(f"Requesting study guide from {model} ({index}/{len(self.models)})")
                try:
                    text = await gemini_client.generate_content(
                        client, self.base_url, model, prompt, self.api_key
                    )
                except UpstreamAPIError as e:
                    if classify_error_message(e.message) is ErrorClass.RETRYABLE:
                        logger.warning(f"Model {model} unavailable, trying next: {e.message}")
                        last_error = EndpointUnavailableError(e.message)
                        continue
                    logger.error(f"Model {model} failed: {e.message}")
                    raise

                value = parse_json_payload(text)
                guide = validate_study_guide(value)
                logger.info(f"Study guide '{guide.title}' generated by {model}")
                return guide

        last_message = last_error.message if last_error else "Unknown error"
        raise EndpointsExhaustedError(
            f"All model endpoints failed. Last error: {last_message}\n\n"
            "Please check your API key and ensure it has access to Gemini models."
        )
