"""Instruction templates, loaded from study_guide/prompts/ with built-in fallbacks."""
from __future__ import annotations

from pathlib import Path

PROMPTS_DIR = Path(__file__).parent.parent / "prompts"

STUDY_GUIDE_PROMPT_FILE = "study_guide.txt"
INFOGRAPHIC_PROMPT_FILE = "infographic.txt"


def load_prompt(filename: str) -> str:
    path = PROMPTS_DIR / filename
    if path.exists():
        return path.read_text(encoding="utf-8").strip()
    return ""


def study_guide_instructions() -> str:
    return load_prompt(STUDY_GUIDE_PROMPT_FILE) or _default_study_guide_prompt()


def infographic_instructions() -> str:
    return load_prompt(INFOGRAPHIC_PROMPT_FILE) or _default_infographic_prompt()


def _default_study_guide_prompt() -> str:
    return """You are an AI tutor helping students create study guides. Transform the academic content below into a structured study guide.

Extract the key information, break instructions into steps where applicable, and always include visual suggestions.

Output ONLY valid JSON with the fields, in order: title, summary, student_benefit_focus,
sections (each with header, bullet_points, visual_suggestions, reminder_tips), infographic_style."""


def _default_infographic_prompt() -> str:
    return """You are an AI assistant that converts educational content into structured JSON for infographic generation.

Output ONLY valid JSON with: title, main_theme, key_concepts (concept, description, visual_metaphor, importance),
visual_style (color_scheme, layout, icons_needed, mood), infographic_prompt,
sections (section_title, content_points, visual_weight)."""
