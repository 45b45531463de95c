"""StudyGuide schema — the JSON shape handed to the downstream consuming API."""
from __future__ import annotations

import json
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

STUDENT_BENEFIT_FOCUS = (
    "Making academic life smoother through simplified study tools, "
    "reminders, and tutoring-style explanations."
)


class GuideSection(BaseModel):
    model_config = ConfigDict(frozen=True)

    header: str = Field(min_length=1)
    bullet_points: list[str] = []
    visual_suggestions: list[str] = []
    reminder_tips: list[str] = []


class StudyGuide(BaseModel):
    # Declaration order is the output key order.
    model_config = ConfigDict(frozen=True)

    title: str = Field(min_length=1)
    summary: str = ""
    student_benefit_focus: str = STUDENT_BENEFIT_FOCUS
    sections: list[GuideSection]
    infographic_style: str = ""

    @property
    def is_degenerate(self) -> bool:
        """A guide with no sections is accepted but carries no study content."""
        return not self.sections


class GuideOutcome(BaseModel):
    """What a guide producer hands back to the presentation layer."""
    model_config = ConfigDict(frozen=True)

    study_guide: StudyGuide
    infographic_url: Optional[str] = None


def render_json(guide: StudyGuide) -> str:
    return json.dumps(guide.model_dump(), indent=2, ensure_ascii=False)


def parse_json(text: str) -> StudyGuide:
    return StudyGuide.model_validate_json(text)
