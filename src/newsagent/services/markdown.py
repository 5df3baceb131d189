"""Render a :class:`~newsagent.models.GenerationResult` as Markdown."""

from __future__ import annotations

from typing import List

from newsagent.models import ContentSection, GenerationResult

__all__ = ["render_markdown"]


def _render_section(section: ContentSection) -> str:
    bullets = "\n".join(f"- {bullet}" for bullet in section.bullets)
    source = ""
    if section.source is not None:
        source = f"\n\n[Source]({section.source.url}) - {section.source.publisher or ''}".rstrip()
    return f"### {section.title}\n{section.summary}\n\n{bullets}\n\n{section.insight}{source}\n"


def render_markdown(result: GenerationResult) -> str:
    """Return a copy-ready Markdown version of ``result``."""

    kind = "Newsletter" if result.mode == "newsletter" else "Blog"
    parts: List[str] = [
        f"# {kind}: {result.topic or 'Latest Moves'}\n",
        f"*Audience:* {result.audience}\n\n*Voice:* {result.voice}\n\n"
        f"*Generated:* {result.generated_at.strftime('%Y-%m-%d %H:%M UTC')}\n\n",
    ]

    if result.hero is not None:
        parts.append(f"## {result.hero.headline}\n{result.hero.excerpt}\n\n")
    elif result.introduction:
        parts.append(f"## Introduction\n{result.introduction}\n\n")

    parts.append("\n".join(_render_section(section) for section in result.sections))

    if result.conclusion:
        parts.append(f"\n## Conclusion\n{result.conclusion}\n")
    if result.call_to_action:
        parts.append(f"\n> {result.call_to_action}\n")
    if result.sources:
        links = "\n".join(f"- [{source.title}]({source.url})" for source in result.sources)
        parts.append(f"\n## Sources\n{links}\n")

    return "".join(parts).strip()
