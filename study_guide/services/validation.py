"""Schema validation — loosely typed parsed JSON in, typed StudyGuide out."""
from __future__ import annotations

from typing import Any

from pydantic import ValidationError

from ..models.guide import StudyGuide
from .errors import GuideValidationError

INVALID_STRUCTURE = "Invalid study guide structure received from API"


def validate_study_guide(value: Any) -> StudyGuide:
    if not isinstance(value, dict):
        raise GuideValidationError(f"{INVALID_STRUCTURE}: expected a JSON object")
    if not value.get("title"):
        raise GuideValidationError(f"{INVALID_STRUCTURE}: missing title")
    if not isinstance(value.get("sections"), list):
        raise GuideValidationError(f"{INVALID_STRUCTURE}: sections must be a list")

    # Models sometimes send null for text fields they had nothing to say about.
    data = {k: v for k, v in value.items() if v is not None}
    data["sections"] = [
        {k: v for k, v in section.items() if v is not None} if isinstance(section, dict) else section
        for section in data["sections"]
    ]
    try:
        return StudyGuide.model_validate(data)
    except ValidationError as e:
        first = e.errors()[0]
        location = ".".join(str(part) for part in first["loc"])
        raise GuideValidationError(f"{INVALID_STRUCTURE}: {location}: {first['msg']}") from e
