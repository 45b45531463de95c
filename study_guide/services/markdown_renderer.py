"""Markdown Renderer — readable study guide for copy/download."""
from __future__ import annotations

from ..models.guide import GuideSection, StudyGuide


def _bullets(heading: str, items: list[str]) -> list[str]:
    if not items:
        return []
    return [f"**{heading}**", "", *(f"- {item}" for item in items), ""]


def render_section(index: int, section: GuideSection) -> str:
    lines = [f"## {index}. {section.header}", ""]
    lines += _bullets("Key points", section.bullet_points)
    lines += _bullets("Visual suggestions", section.visual_suggestions)
    lines += _bullets("Reminder tips", section.reminder_tips)
    return "\n".join(lines).rstrip() + "\n"


def render_markdown(guide: StudyGuide, infographic_url: str | None = None) -> str:
    parts = [f"# {guide.title}\n"]
    if guide.summary:
        parts.append(f"{guide.summary}\n")
    if guide.student_benefit_focus:
        parts.append(f"> {guide.student_benefit_focus}\n")
    if infographic_url:
        parts.append(f"![Infographic]({infographic_url})\n")

    if guide.is_degenerate:
        parts.append("_This study guide has no sections._\n")
    for i, section in enumerate(guide.sections, start=1):
        parts.append(render_section(i, section))

    if guide.infographic_style:
        parts.append(f"---\n\n_Infographic style: {guide.infographic_style}_\n")
    return "\n".join(parts)
