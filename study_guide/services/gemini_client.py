"""
Gemini Client — one generateContent call against one named model.

The credential travels in the `key` query parameter and is never placed in
the prompt or in error messages.
"""
from __future__ import annotations

import logging
from typing import Any, Optional

import httpx

from .errors import MalformedEnvelopeError, UpstreamAPIError

logger = logging.getLogger(__name__)


def endpoint_url(base_url: str, model: str) -> str:
    return f"{base_url.rstrip('/')}/models/{model}:generateContent"


def build_payload(prompt: str) -> dict:
    return {"contents": [{"parts": [{"text": prompt}]}]}


def extract_error_message(response: httpx.Response) -> str:
    """Prefer the structured `error.message` body, else a generic status line."""
    try:
        data = response.json()
    except ValueError:
        data = {}
    error = data.get("error") if isinstance(data, dict) else None
    if isinstance(error, dict) and isinstance(error.get("message"), str) and error["message"]:
        return error["message"]
    reason = response.reason_phrase or f"HTTP {response.status_code}"
    return f"API request failed: {reason}"


def extract_text(data: Any) -> Optional[str]:
    """Pull candidates[0].content.parts[0].text out of the response envelope."""
    try:
        text = data["candidates"][0]["content"]["parts"][0]["text"]
    except (KeyError, IndexError, TypeError):
        return None
    if not isinstance(text, str) or not text:
        return None
    return text


async def generate_content(
    client: httpx.AsyncClient,
    base_url: str,
    model: str,
    prompt: str,
    api_key: str,
) -> str:
    """
    Issue one request. Raises UpstreamAPIError carrying the provider's
    message on transport failure or non-success status, and
    MalformedEnvelopeError when a success response holds no text.
    """
    url = endpoint_url(base_url, model)
    try:
        resp = await client.post(url, params={"key": api_key}, json=build_payload(prompt))
    except httpx.RequestError as e:
        raise UpstreamAPIError(f"Request to Gemini failed: {type(e).__name__}: {e}") from e

    if not resp.is_success:
        raise UpstreamAPIError(extract_error_message(resp))

    try:
        data = resp.json()
    except ValueError as e:
        raise MalformedEnvelopeError("Gemini API returned a non-JSON response envelope") from e

    text = extract_text(data)
    if text is None:
        raise MalformedEnvelopeError("No response text from Gemini API")
    return text


async def check_health(
    api_key: Optional[str],
    base_url: str,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> bool:
    if not api_key:
        return False
    try:
        async with httpx.AsyncClient(timeout=5.0, transport=transport) as client:
            resp = await client.get(f"{base_url.rstrip('/')}/models", params={"key": api_key})
            return resp.status_code == 200
    except httpx.HTTPError as e:
        logger.warning(f"Gemini health check failed: {type(e).__name__}")
        return False
