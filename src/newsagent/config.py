"""Configuration models and helpers for the news feeds the agent aggregates."""

from __future__ import annotations

import json
import logging
import os
from pathlib import Path
from typing import Iterable, List
from urllib.parse import urlparse

from pydantic import BaseModel, Field, HttpUrl, ValidationError

__all__ = [
    "AppConfig",
    "FeedConfig",
    "DEFAULT_CONFIG_PATH",
    "FEEDS_FILE_ENV",
    "load_feeds",
]

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_PATH = Path(__file__).resolve().parents[2] / "data" / "feeds.json"

#: Environment variable that points the loader at an alternative feeds file.
FEEDS_FILE_ENV = "NEWSAGENT_FEEDS_FILE"


class FeedConfig(BaseModel):
    """Static descriptor for a single feed to aggregate."""

    url: HttpUrl = Field(..., description="RSS or Atom feed URL")
    label: str = Field(default="", description="Publisher name shown next to stories")
    tags: List[str] = Field(default_factory=list, description="Categories applied to every item")

    @property
    def host(self) -> str:
        """Return the network location of the feed URL."""

        return urlparse(str(self.url)).netloc


class AppConfig(BaseModel):
    """Collection of :class:`FeedConfig` entries for the aggregator."""

    feeds: List[FeedConfig] = Field(default_factory=list)

    @classmethod
    def from_file(cls, path: Path | str | None = None) -> "AppConfig":
        """Load configuration data from a JSON file."""

        config_path = _resolve_config_path(path)
        try:
            data = json.loads(config_path.read_text(encoding="utf-8"))
        except FileNotFoundError as exc:
            raise FileNotFoundError(f"Configuration file not found: {config_path}") from exc
        except json.JSONDecodeError as exc:
            raise ValueError(f"Invalid JSON in configuration file: {config_path}") from exc

        try:
            return cls.model_validate(data)
        except ValidationError as exc:
            raise ValueError(f"Configuration file is invalid: {config_path}\n{exc}") from exc

    @classmethod
    def default(cls) -> "AppConfig":
        """Return the built-in feed line-up."""

        return cls.model_validate({"feeds": _DEFAULT_FEEDS})

    def dump(self, path: Path | str | None = None) -> None:
        """Persist the configuration back to disk as JSON."""

        config_path = _resolve_config_path(path)
        config_path.parent.mkdir(parents=True, exist_ok=True)
        config_path.write_text(self.model_dump_json(indent=2), encoding="utf-8")

    def iter_feeds(self) -> Iterable[FeedConfig]:
        """Iterate over configured feeds."""

        return iter(self.feeds)

    def add_feed(self, feed: FeedConfig) -> None:
        """Append a new feed descriptor to the collection."""

        self.feeds.append(feed)


def _resolve_config_path(path: Path | str | None) -> Path:
    if path:
        return Path(path)
    env_path = os.environ.get(FEEDS_FILE_ENV)
    if env_path:
        return Path(env_path).expanduser()
    return DEFAULT_CONFIG_PATH


def load_feeds(path: Path | str | None = None) -> List[FeedConfig]:
    """Return the configured feeds, falling back to the built-in line-up.

    An explicitly requested ``path`` must exist; only the implicit default file
    may be missing.
    """

    try:
        return AppConfig.from_file(path).feeds
    except FileNotFoundError:
        if path:
            raise
        logger.info("No feeds file found, using the built-in feed line-up")
        return AppConfig.default().feeds


_DEFAULT_FEEDS = [
    {
        "url": "https://rss.nytimes.com/services/xml/rss/nyt/Technology.xml",
        "label": "NYTimes Technology",
        "tags": ["technology", "innovation", "business"],
    },
    {
        "url": "https://feeds.a.dj.com/rss/RSSWorldNews.xml",
        "label": "WSJ World News",
        "tags": ["world", "geopolitics", "economy"],
    },
    {
        "url": "https://www.theverge.com/rss/index.xml",
        "label": "The Verge",
        "tags": ["technology", "culture", "gadgets"],
    },
    {
        "url": "https://feeds.feedburner.com/TechCrunch/",
        "label": "TechCrunch",
        "tags": ["startups", "venture", "innovation"],
    },
    {
        "url": "https://www.reddit.com/r/worldnews/.rss",
        "label": "Reddit World News",
        "tags": ["world", "trending", "breaking"],
    },
    {
        "url": "https://hnrss.org/frontpage",
        "label": "Hacker News Front Page",
        "tags": ["technology", "startups", "engineering"],
    },
]
