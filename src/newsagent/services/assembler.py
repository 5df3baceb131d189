"""Assemble ranked articles into newsletter or blog documents."""

from __future__ import annotations

import math
from datetime import datetime, timezone
from typing import Dict, Iterable, List, Optional, Sequence

from newsagent.models import (
    Article,
    ContentSection,
    GenerationRequest,
    GenerationResult,
    Hero,
    Length,
    ResultMeta,
    SourceLink,
)
from newsagent.services.composer import (
    build_bullets,
    craft_highlight,
    craft_insight,
    sentences_for_length,
    summarize,
    tone_modifier,
)

__all__ = [
    "apply_source_policy",
    "assemble",
    "assemble_blog",
    "assemble_newsletter",
    "compute_word_count",
    "estimate_reading_time",
    "section_count",
]

NEWSLETTER_WPM = 220
BLOG_WPM = 210
HIGHLIGHT_COUNT = 3

_SECTION_COUNTS: Dict[str, int] = {"brief": 3, "standard": 4, "deep": 6}

NEWSLETTER_CALLS_TO_ACTION: Dict[str, str] = {
    "executives": "Share with your leadership team and align the next operating review.",
    "investors": "Send to LPs with your perspective before the weekly update.",
}
NEWSLETTER_DEFAULT_CALL_TO_ACTION = "Forward to your community with a quick note on how to react."

BLOG_CALLS_TO_ACTION: Dict[str, str] = {
    "builders": "Invite readers to comment with the experiments they are running.",
    "investors": "Prompt readers to subscribe for weekly deal-flow signals.",
}
BLOG_DEFAULT_CALL_TO_ACTION = "Ask readers to share their perspective and subscribe for more breakdowns."

BLOG_INSIGHT_SUFFIX = "Leverage this development by crafting a response plan within the next sprint."

VISIONARY_CONCLUSION = (
    "These signals sketch the outline of the next wave. Set bold goals, back them with "
    "resources, and communicate the narrative before rivals do."
)
DEFAULT_CONCLUSION = (
    "Stay close to these moves, translate them into action items, and update stakeholders "
    "before momentum shifts again."
)


def section_count(available: int, length: Length) -> int:
    return min(available, _SECTION_COUNTS.get(length, _SECTION_COUNTS["standard"]))


def estimate_reading_time(word_count: int, words_per_minute: int) -> int:
    if word_count <= 0:
        return 1
    # half-up rounding, 2.5 minutes reads as 3
    return max(1, math.floor(word_count / words_per_minute + 0.5))


def compute_word_count(
    sections: Iterable[ContentSection],
    *,
    hero: Optional[Hero] = None,
    introduction: Optional[str] = None,
    conclusion: Optional[str] = None,
    call_to_action: Optional[str] = None,
) -> int:
    """Count whitespace separated words across every text field of a document."""

    parts: List[Optional[str]] = []
    if hero is not None:
        parts.extend([hero.headline, hero.excerpt])
    parts.append(introduction)
    for section in sections:
        parts.append(
            f"{section.title} {section.summary} {' '.join(section.bullets)} {section.insight}"
        )
    parts.extend([conclusion, call_to_action])

    text = " ".join(part for part in parts if part)
    return len(text.split())


def _sources(articles: Sequence[Article]) -> List[SourceLink]:
    return [SourceLink.from_article(article) for article in articles]


def _build_result(
    request: GenerationRequest,
    selected: Sequence[Article],
    sections: List[ContentSection],
    *,
    words_per_minute: int,
    now: Optional[datetime],
    hero: Optional[Hero] = None,
    introduction: Optional[str] = None,
    conclusion: Optional[str] = None,
    call_to_action: Optional[str] = None,
) -> GenerationResult:
    word_count = compute_word_count(
        sections,
        hero=hero,
        introduction=introduction,
        conclusion=conclusion,
        call_to_action=call_to_action,
    )
    return GenerationResult(
        mode=request.mode,
        topic=request.topic,
        audience=request.audience,
        voice=request.voice,
        length=request.length,
        generated_at=now or datetime.now(timezone.utc),
        highlights=[craft_highlight(article) for article in selected[:HIGHLIGHT_COUNT]],
        hero=hero,
        introduction=introduction,
        sections=sections,
        conclusion=conclusion,
        call_to_action=call_to_action,
        sources=_sources(selected),
        meta=ResultMeta(
            word_count=word_count,
            reading_time_minutes=estimate_reading_time(word_count, words_per_minute),
        ),
    )


def assemble_newsletter(
    articles: Sequence[Article], request: GenerationRequest, now: Optional[datetime] = None
) -> GenerationResult:
    """Lead with a hero story and follow with one section per selected article."""

    selected = list(articles[: section_count(len(articles), request.length)])
    budget = sentences_for_length(request.length)

    hero = None
    if selected:
        lead = selected[0]
        hero = Hero(kicker=lead.publisher, headline=lead.title, excerpt=summarize(lead.summary, budget))

    sections = [
        ContentSection(
            title=article.title,
            summary=summarize(article.summary, budget),
            bullets=build_bullets(article, request.length, request.voice),
            insight=craft_insight(article, request.audience),
            source=SourceLink.from_article(article),
        )
        for article in selected
    ]

    return _build_result(
        request,
        selected,
        sections,
        words_per_minute=NEWSLETTER_WPM,
        now=now,
        hero=hero,
        call_to_action=NEWSLETTER_CALLS_TO_ACTION.get(
            request.audience, NEWSLETTER_DEFAULT_CALL_TO_ACTION
        ),
    )


def assemble_blog(
    articles: Sequence[Article], request: GenerationRequest, now: Optional[datetime] = None
) -> GenerationResult:
    """Open with an introduction and walk through the stories as numbered trends."""

    selected = list(articles[: section_count(len(articles), request.length)])
    tone = tone_modifier(request.voice, request.audience)

    opening = " ".join(summarize(article.summary, 1) for article in selected[:2])
    introduction = f"{opening} {tone}" if opening else tone

    sections = [
        ContentSection(
            title=f"Trend {index}: {article.title}",
            summary=summarize(article.content, sentences_for_length(request.length) + 1),
            bullets=build_bullets(article, request.length, request.voice),
            insight=f"{tone} {BLOG_INSIGHT_SUFFIX}",
            source=SourceLink.from_article(article),
        )
        for index, article in enumerate(selected, start=1)
    ]

    conclusion = VISIONARY_CONCLUSION if request.voice == "visionary" else DEFAULT_CONCLUSION

    return _build_result(
        request,
        selected,
        sections,
        words_per_minute=BLOG_WPM,
        now=now,
        introduction=introduction,
        conclusion=conclusion,
        call_to_action=BLOG_CALLS_TO_ACTION.get(request.audience, BLOG_DEFAULT_CALL_TO_ACTION),
    )


def apply_source_policy(result: GenerationResult, include_sources: bool) -> GenerationResult:
    """Strip every source reference from ``result`` when sources are not wanted."""

    if include_sources:
        return result
    return result.model_copy(
        update={
            "sources": [],
            "sections": [section.model_copy(update={"source": None}) for section in result.sections],
        }
    )


def assemble(
    articles: Sequence[Article], request: GenerationRequest, now: Optional[datetime] = None
) -> GenerationResult:
    """Assemble the document for ``request.mode`` and apply the source policy."""

    if request.mode == "newsletter":
        result = assemble_newsletter(articles, request, now)
    else:
        result = assemble_blog(articles, request, now)
    return apply_source_policy(result, request.include_sources)
