"""
Response Normalizer — turns a raw model reply into a parsed JSON value.

Models are told to answer with bare JSON but often wrap it in a markdown
fenced block anyway, either labelled (```json) or generic (```).
"""
from __future__ import annotations

import json
import re
from typing import Any

from .errors import ResponseFormatError

_JSON_FENCE_OPEN = re.compile(r"^```json\s*", re.IGNORECASE)
_GENERIC_FENCE_OPEN = re.compile(r"^```\s*")
_FENCE_CLOSE = re.compile(r"\s*```$")


def strip_code_fence(text: str) -> str:
    cleaned = text.strip()
    if _JSON_FENCE_OPEN.match(cleaned):
        cleaned = _FENCE_CLOSE.sub("", _JSON_FENCE_OPEN.sub("", cleaned, count=1), count=1)
    elif cleaned.startswith("```"):
        cleaned = _FENCE_CLOSE.sub("", _GENERIC_FENCE_OPEN.sub("", cleaned, count=1), count=1)
    return cleaned


def parse_json_payload(text: str, source: str = "Gemini API") -> Any:
    """
    Strip fencing and parse. A failure here means the upstream returned
    garbage, which no other endpoint will fix, so it is always fatal.
    """
    cleaned = strip_code_fence(text)
    try:
        return json.loads(cleaned)
    except json.JSONDecodeError as e:
        raise ResponseFormatError(
            f"Failed to parse JSON response from {source}. "
            f"The API may have returned invalid JSON ({e.msg} at line {e.lineno}, column {e.colno})."
        ) from e
