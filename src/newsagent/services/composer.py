"""Sentence-budgeted text helpers used to compose document sections."""

from __future__ import annotations

import re
from typing import Dict, List

from newsagent.models import Article, Audience, Length, Voice

__all__ = [
    "build_bullets",
    "craft_highlight",
    "craft_insight",
    "sentence_split",
    "sentences_for_length",
    "summarize",
    "tone_modifier",
]

_SENTENCE_BOUNDARY_RE = re.compile(r"(?<=[.!?])\s+")
_WHITESPACE_RE = re.compile(r"\s+")
_IMPACT_RE = re.compile(r"impact|implication|means|could", re.IGNORECASE)
_FORWARD_RE = re.compile(r"next|looking|expects|forecast|watch", re.IGNORECASE)

_SENTENCE_BUDGETS: Dict[str, int] = {"brief": 2, "standard": 3, "deep": 5}

_VOICE_DIRECTIVES: Dict[str, str] = {
    "analytical": "Focus on the signal and quantify the impact.",
    "optimistic": "Spot the opportunity and highlight upside potential.",
    "urgent": "Flag what needs immediate attention and outline actions.",
    "casual": "Keep it conversational and relatable.",
    "visionary": "Connect the dots to the bigger-picture future.",
}

_AUDIENCE_DIRECTIVES: Dict[str, str] = {
    "executives": "Prioritise strategic implications and bottom-line significance.",
    "builders": "Surface technical shifts and implementation tips.",
    "investors": "Watch for leading indicators and capital flows.",
    "general": "Explain why this matters in plain language.",
}

_INSIGHT_CLOSERS: Dict[str, str] = {
    "executives": "Translate that into board-ready talking points and align cross-functional owners.",
    "investors": "Map the likely capital rotations and risk signals across the sector.",
    "builders": "Plan the technical backlog adjustments before momentum compounds.",
    "general": "Make it tangible with a real-world example for readers.",
}


def sentence_split(text: str) -> List[str]:
    """Split ``text`` after ``.``, ``!`` or ``?`` and drop empty fragments."""

    collapsed = _WHITESPACE_RE.sub(" ", text)
    sentences = (fragment.strip() for fragment in _SENTENCE_BOUNDARY_RE.split(collapsed))
    return [sentence for sentence in sentences if sentence]


def summarize(text: str, max_sentences: int) -> str:
    """Return the first ``max_sentences`` sentences of ``text``.

    Text without any detectable sentence is returned trimmed but otherwise
    untouched.
    """

    sentences = sentence_split(text)
    if not sentences:
        return text.strip()
    return " ".join(sentences[:max_sentences])


def sentences_for_length(length: Length) -> int:
    return _SENTENCE_BUDGETS.get(length, _SENTENCE_BUDGETS["standard"])


def build_bullets(article: Article, length: Length, voice: Voice) -> List[str]:
    """Build the "what happened / why it matters / what next" bullet list."""

    details = sentence_split(article.content)
    impact = next((sentence for sentence in details if _IMPACT_RE.search(sentence)), None)
    forward = next((sentence for sentence in details if _FORWARD_RE.search(sentence)), None)

    bullets = [f"What happened: {summarize(article.summary, 1)}"]

    if impact:
        bullets.append(f"Why it matters: {impact}")
    elif voice == "visionary":
        bullets.append("Why it matters: Signals an inflection worth preparing for.")
    else:
        bullets.append("Why it matters: Indicates a shift with near-term consequences.")

    if forward:
        bullets.append(f"What to watch: {forward}")
    elif voice == "optimistic":
        bullets.append("Opportunity: Position teams to capture the upswing early.")
    else:
        bullets.append("Next move: Track follow-on announcements and reactions.")

    if length == "deep":
        bullets.append(f"Counterpoint: Balance this with {article.publisher} coverage for blind spots.")

    if length == "brief":
        return bullets[:3]
    return bullets


def craft_highlight(article: Article) -> str:
    return f"{article.publisher}: {summarize(article.summary, 1)}"


def craft_insight(article: Article, audience: Audience) -> str:
    """Frame the lead sentence for the audience the document is written for."""

    lead = summarize(article.summary, 1).lower()
    if not lead.endswith((".", "!", "?")):
        lead = f"{lead}."
    closer = _INSIGHT_CLOSERS.get(audience, _INSIGHT_CLOSERS["general"])
    return f"{article.publisher} frames this as {lead} {closer}"


def tone_modifier(voice: Voice, audience: Audience) -> str:
    return f"{_VOICE_DIRECTIVES[voice]} {_AUDIENCE_DIRECTIVES[audience]}"
