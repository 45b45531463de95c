"""Intermediate shape returned by the infographic LLM workflow."""
from pydantic import BaseModel


class KeyConcept(BaseModel):
    concept: str
    description: str = ""
    visual_metaphor: str = ""
    importance: str = "medium"


class VisualStyle(BaseModel):
    color_scheme: str = ""
    layout: str = ""
    icons_needed: list[str] = []
    mood: str = ""


class InfographicSection(BaseModel):
    section_title: str
    content_points: list[str] = []
    visual_weight: str = ""


class ContentExtraction(BaseModel):
    title: str
    main_theme: str = ""
    key_concepts: list[KeyConcept] = []
    visual_style: VisualStyle = VisualStyle()
    infographic_prompt: str
    sections: list[InfographicSection] = []
