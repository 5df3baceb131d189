"""Turn raw feed items into canonical :class:`~newsagent.models.Article` records."""

from __future__ import annotations

import logging
import re
from datetime import datetime, timezone
from email.utils import parsedate_to_datetime

from newsagent.config import FeedConfig
from newsagent.models import Article, FeedDocument, RawFeedItem

__all__ = [
    "FALLBACK_CONTENT",
    "FALLBACK_PUBLISHER",
    "normalise_url",
    "normalize_document",
    "normalize_item",
    "parse_timestamp",
    "sanitize_text",
    "strip_html",
]

logger = logging.getLogger(__name__)

FALLBACK_CONTENT = "A notable development shaping the current news cycle."
FALLBACK_PUBLISHER = "Latest Feed"

_TAG_RE = re.compile(r"<[^>]+>")
_WHITESPACE_RE = re.compile(r"\s+")


def strip_html(html: str | None) -> str:
    """Remove markup from ``html`` and collapse the remaining whitespace."""

    if not html:
        return ""
    return sanitize_text(_TAG_RE.sub(" ", html))


def sanitize_text(text: str | None) -> str:
    if not text:
        return ""
    return _WHITESPACE_RE.sub(" ", text).strip()


def normalise_url(url: str | None) -> str | None:
    """Drop ``?ref`` tracking suffixes so variants of a story share one key."""

    if not url:
        return None
    canonical = url.strip().split("?ref", 1)[0]
    return canonical or None


def parse_timestamp(value: str | None) -> datetime | None:
    """Parse an ISO 8601 or RFC 822 timestamp; naive values are taken as UTC."""

    if not value:
        return None

    text = value.strip()
    parsed: datetime | None
    try:
        parsed = datetime.fromisoformat(text.replace("Z", "+00:00"))
    except ValueError:
        try:
            parsed = parsedate_to_datetime(text)
        except (TypeError, ValueError, IndexError):
            return None
    if parsed is None:
        return None

    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def normalize_item(
    item: RawFeedItem, feed: FeedConfig | None, feed_title: str | None = None
) -> Article | None:
    """Build an unscored article from ``item``.

    Returns ``None`` when the item carries no usable URL or title; such items
    are expected feed noise and are dropped quietly.
    """

    url = normalise_url(item.link or item.guid)
    title = sanitize_text(item.title) or sanitize_text(item.link)
    if not url or not title:
        logger.debug("Skipping feed item without url or title: %r", item.title or item.guid)
        return None

    summary = sanitize_text(item.content_snippet) or strip_html(item.content) or FALLBACK_CONTENT
    content = strip_html(item.content_encoded) or strip_html(item.content) or summary

    publisher = (feed.label if feed else "") or strip_html(feed_title) or FALLBACK_PUBLISHER

    return Article(
        id=url,
        title=title,
        url=url,
        publisher=publisher,
        published_at=item.iso_date or item.pub_date,
        summary=summary,
        content=content,
        categories=list(feed.tags) if feed else [],
        score=0.0,
    )


def normalize_document(document: FeedDocument, feed: FeedConfig | None) -> list[Article]:
    """Normalize every item of ``document``, dropping the unusable ones."""

    articles: list[Article] = []
    for item in document.items:
        article = normalize_item(item, feed, document.title)
        if article is not None:
            articles.append(article)
    return articles
