"""Relevance scoring for aggregated articles."""

from __future__ import annotations

import math
import random
from datetime import datetime, timezone
from typing import Callable

from newsagent.models import Article, GenerationRequest
from newsagent.services.normalizer import parse_timestamp

__all__ = ["RandomSource", "compute_score", "hours_old", "matches_topic", "score_article"]

#: Returns a float in ``[0, 1)``; ``random.random`` in production.
RandomSource = Callable[[], float]

TOPIC_BOOST = 4.0
RECENCY_CEILING = 3.0
URGENT_RECENCY_CEILING = 2.5
JITTER_SPAN = 0.3


def matches_topic(topic: str, title: str, summary: str) -> bool:
    """Case-insensitive substring match; an empty topic matches everything."""

    query = topic.strip().lower()
    if not query:
        return True
    return query in f"{title} {summary}".lower()


def hours_old(published_at: str | None, now: datetime | None = None) -> float:
    """Age in hours, floored at one. Missing or unreadable dates count as fresh."""

    current = now or datetime.now(timezone.utc)
    published = parse_timestamp(published_at)
    if published is None:
        return 1.0
    return max(1.0, (current - published).total_seconds() / 3600)


def compute_score(
    article: Article,
    request: GenerationRequest,
    topic_match: bool,
    *,
    now: datetime | None = None,
    rng: RandomSource = random.random,
) -> float:
    age = math.log(hours_old(article.published_at, now))
    recency_boost = max(0.0, RECENCY_CEILING - age)
    topic_boost = TOPIC_BOOST if topic_match else 0.0
    voice_boost = max(0.0, URGENT_RECENCY_CEILING - age) if request.voice == "urgent" else 0.0
    return recency_boost + topic_boost + voice_boost + rng() * JITTER_SPAN


def score_article(
    article: Article,
    request: GenerationRequest,
    topic_match: bool,
    *,
    now: datetime | None = None,
    rng: RandomSource = random.random,
) -> Article:
    """Return a copy of ``article`` carrying its relevance score."""

    score = compute_score(article, request, topic_match, now=now, rng=rng)
    return article.model_copy(update={"score": score})
