"""Top-level entry point tying aggregation and document assembly together."""

from __future__ import annotations

import logging
from datetime import datetime

from newsagent.config import load_feeds
from newsagent.models import GenerationRequest, GenerationResult
from newsagent.services.aggregator import ArticleAggregator
from newsagent.services.assembler import assemble

__all__ = ["NO_STORIES_MESSAGE", "NewsAgentError", "NoRelevantStoriesError", "run_agent"]

logger = logging.getLogger(__name__)

NO_STORIES_MESSAGE = "No relevant stories found for that topic just yet. Try broadening the search."


class NewsAgentError(RuntimeError):
    """Base class for failures surfaced to callers of :func:`run_agent`."""


class NoRelevantStoriesError(NewsAgentError):
    """Raised when no article survives aggregation for a request."""

    def __init__(self, message: str = NO_STORIES_MESSAGE) -> None:
        super().__init__(message)


async def run_agent(
    request: GenerationRequest,
    aggregator: ArticleAggregator | None = None,
    *,
    now: datetime | None = None,
) -> GenerationResult:
    """Collect articles for ``request`` and assemble the requested document.

    Either a complete document is returned or :class:`NoRelevantStoriesError`
    is raised; an empty document is never produced.
    """

    aggregator = aggregator or ArticleAggregator(load_feeds())
    articles = await aggregator.collect(request)

    if not articles:
        logger.info("No articles matched topic %r", request.topic)
        raise NoRelevantStoriesError()

    result = assemble(articles, request, now)
    logger.info(
        "Assembled %s with %d sections (%d words)",
        result.mode,
        len(result.sections),
        result.meta.word_count,
    )
    return result
