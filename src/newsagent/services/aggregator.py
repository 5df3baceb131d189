"""Fan out to the configured feeds and build a ranked, deduplicated article list."""

from __future__ import annotations

import asyncio
import logging
import random
from datetime import datetime, timezone
from typing import Callable, Dict, Iterable, List, Sequence, Tuple

import requests
from fastapi.concurrency import run_in_threadpool

from newsagent.config import FeedConfig, load_feeds
from newsagent.models import Article, FeedDocument, GenerationRequest, Length
from newsagent.services.feeds import FeedClient, FeedParseError
from newsagent.services.normalizer import normalize_document
from newsagent.services.scoring import RandomSource, matches_topic, score_article

__all__ = [
    "ArticleAggregator",
    "collect_articles",
    "merge_candidates",
    "rank_articles",
    "result_limit",
]

logger = logging.getLogger(__name__)

MIN_SUMMARY_LENGTH = 40
DEEP_RESULT_LIMIT = 8
DEFAULT_RESULT_LIMIT = 6

Clock = Callable[[], datetime]


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def result_limit(length: Length) -> int:
    return DEEP_RESULT_LIMIT if length == "deep" else DEFAULT_RESULT_LIMIT


def merge_candidates(candidates: Iterable[Tuple[Article, bool]], topic: str) -> Dict[str, Article]:
    """Merge scored ``(article, topic_match)`` pairs by canonical URL.

    A URL is admitted the first time it is seen with a topic match (or when the
    topic is empty). Once admitted, later copies replace it only on a strictly
    higher score; their own topic match is not consulted.
    """

    accept_all = not topic.strip()
    merged: Dict[str, Article] = {}
    for article, topic_match in candidates:
        existing = merged.get(article.id)
        if existing is None:
            if topic_match or accept_all:
                merged[article.id] = article
        elif article.score > existing.score:
            merged[article.id] = article
    return merged


def rank_articles(articles: Iterable[Article], length: Length) -> List[Article]:
    """Drop thin summaries, order by score and keep the top of the list."""

    eligible = [article for article in articles if len(article.summary) > MIN_SUMMARY_LENGTH]
    eligible.sort(key=lambda article: article.score, reverse=True)
    return eligible[: result_limit(length)]


class ArticleAggregator:
    """Collect articles for a request from an injected list of feeds."""

    def __init__(
        self,
        feeds: Sequence[FeedConfig],
        client: FeedClient | None = None,
        *,
        rng: RandomSource = random.random,
        clock: Clock = _utcnow,
    ) -> None:
        self.feeds = list(feeds)
        self._client = client or FeedClient()
        self._rng = rng
        self._clock = clock

    async def collect(self, request: GenerationRequest) -> List[Article]:
        """Return the ranked article list for ``request``."""

        documents = await self.fetch_all()
        now = self._clock()

        candidates: List[Tuple[Article, bool]] = []
        for feed, document in zip(self.feeds, documents):
            if document is None:
                continue
            for article in normalize_document(document, feed):
                topic_match = matches_topic(request.topic, article.title, article.summary)
                scored = score_article(article, request, topic_match, now=now, rng=self._rng)
                candidates.append((scored, topic_match))

        merged = merge_candidates(candidates, request.topic)
        ranked = rank_articles(merged.values(), request.length)
        logger.info(
            "Aggregated %d candidates into %d unique articles, returning %d",
            len(candidates),
            len(merged),
            len(ranked),
        )
        return ranked

    async def fetch_all(self) -> List[FeedDocument | None]:
        """Fetch every feed concurrently; failed feeds come back as ``None``."""

        results = await asyncio.gather(
            *(self._fetch_feed(feed) for feed in self.feeds), return_exceptions=True
        )

        documents: List[FeedDocument | None] = []
        for feed, result in zip(self.feeds, results):
            if isinstance(result, BaseException):
                logger.warning("Feed task for %s ended with %r", feed.url, result)
                documents.append(None)
            else:
                documents.append(result)
        return documents

    async def _fetch_feed(self, feed: FeedConfig) -> FeedDocument | None:
        url = str(feed.url)
        try:
            document = await run_in_threadpool(self._client.fetch, url)
        except (requests.RequestException, FeedParseError) as exc:
            logger.warning("Failed to parse feed %s: %s", url, exc)
            return None
        except Exception:  # noqa: BLE001 - broad catch keeps the other feeds running
            logger.exception("Unexpected error while fetching feed %s", url)
            return None

        logger.info("%s: %d items", feed.label or url, len(document.items))
        return document


async def collect_articles(
    request: GenerationRequest,
    feeds: Sequence[FeedConfig] | None = None,
    client: FeedClient | None = None,
) -> List[Article]:
    """Collect articles from ``feeds`` (the configured feeds by default)."""

    aggregator = ArticleAggregator(feeds if feeds is not None else load_feeds(), client)
    return await aggregator.collect(request)
