"""Service layer entry points for News Agent."""

from __future__ import annotations

from .agent import NoRelevantStoriesError, run_agent  # noqa: F401
from .aggregator import ArticleAggregator, collect_articles  # noqa: F401
from .feeds import FeedClient  # noqa: F401
from .markdown import render_markdown  # noqa: F401

__all__ = [
    "ArticleAggregator",
    "FeedClient",
    "NoRelevantStoriesError",
    "collect_articles",
    "render_markdown",
    "run_agent",
]
