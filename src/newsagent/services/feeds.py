"""HTTP feed client that downloads and parses RSS 2.0 and Atom documents."""

from __future__ import annotations

import logging
from typing import Iterable

import requests
from bs4 import BeautifulSoup, Tag

from newsagent.models import FeedDocument, RawFeedItem
from newsagent.services.normalizer import parse_timestamp, sanitize_text

__all__ = ["FeedClient", "FeedParseError", "parse_feed"]

logger = logging.getLogger(__name__)

FEED_REQUEST_TIMEOUT = 10
DEFAULT_HEADERS = {
    "User-Agent": (
        "Mozilla/5.0 (Windows NT 10.0; Win64; x64) "
        "AppleWebKit/537.36 (KHTML, like Gecko) "
        "Chrome/129.0.0.0 Safari/537.36"
    ),
    "Accept": (
        "application/rss+xml,application/atom+xml,application/xml;q=0.9,"
        "text/xml;q=0.8,*/*;q=0.5"
    ),
    "Accept-Language": "en-US,en;q=0.9",
}


class FeedParseError(ValueError):
    """Raised when a response body is neither an RSS nor an Atom document."""


def _text_of(node: Tag | None) -> str | None:
    if node is None:
        return None
    text = node.get_text().strip()
    return text or None


def _child_text(node: Tag, names: Iterable[str]) -> str | None:
    """Return the text of the first direct child matching one of ``names``."""

    for name in names:
        value = _text_of(node.find(name, recursive=False))
        if value:
            return value
    return None


def _plain_text(html: str | None) -> str | None:
    if not html:
        return None
    # no separator, "<b>12%</b>." reads "12%."
    text = sanitize_text(BeautifulSoup(html, "lxml").get_text())
    return text or None


def _iso_date(raw: str | None) -> str | None:
    parsed = parse_timestamp(raw)
    return parsed.isoformat() if parsed is not None else None


def _atom_link(entry: Tag) -> str | None:
    fallback: str | None = None
    for link in entry.find_all("link", recursive=False):
        href = (link.get("href") or "").strip()
        if not href:
            continue
        rel = link.get("rel") or "alternate"
        if rel == "alternate":
            return href
        fallback = fallback or href
    return fallback


def _parse_rss_item(item: Tag) -> RawFeedItem:
    pub_date = _child_text(item, ["pubDate", "dc:date", "date"])
    content = _child_text(item, ["description"])
    return RawFeedItem(
        title=_child_text(item, ["title"]),
        link=_child_text(item, ["link"]),
        guid=_child_text(item, ["guid"]),
        pub_date=pub_date,
        iso_date=_iso_date(pub_date),
        content_snippet=_plain_text(content),
        content=content,
        content_encoded=_child_text(item, ["content:encoded", "encoded"]),
    )


def _parse_atom_entry(entry: Tag) -> RawFeedItem:
    pub_date = _child_text(entry, ["published", "updated"])
    summary = _child_text(entry, ["summary"])
    full_content = _child_text(entry, ["content"])
    content = summary or full_content
    return RawFeedItem(
        title=_child_text(entry, ["title"]),
        link=_atom_link(entry),
        guid=_child_text(entry, ["id"]),
        pub_date=pub_date,
        iso_date=_iso_date(pub_date),
        content_snippet=_plain_text(content),
        content=content,
        content_encoded=full_content,
    )


def parse_feed(markup: str | bytes) -> FeedDocument:
    """Parse an RSS or Atom document into a :class:`FeedDocument`."""

    soup = BeautifulSoup(markup, "xml")

    channel = soup.find("channel")
    if channel is not None:
        items = [_parse_rss_item(item) for item in soup.find_all("item")]
        return FeedDocument(title=_child_text(channel, ["title"]), items=items)

    feed = soup.find("feed")
    if feed is not None:
        entries = [_parse_atom_entry(entry) for entry in feed.find_all("entry", recursive=False)]
        return FeedDocument(title=_child_text(feed, ["title"]), items=entries)

    raise FeedParseError("Document is neither an RSS channel nor an Atom feed")


class FeedClient:
    """Fetch feeds over HTTP using a shared :class:`requests.Session`."""

    def __init__(
        self, session: requests.Session | None = None, timeout: float = FEED_REQUEST_TIMEOUT
    ) -> None:
        self._session = session or requests.Session()
        self._session.headers.update(DEFAULT_HEADERS)
        self.timeout = timeout

    parse_feed = staticmethod(parse_feed)

    def fetch(self, url: str) -> FeedDocument:
        """Download ``url`` and parse it; raises on transport or parse failure."""

        response = self._session.get(url, timeout=self.timeout)
        response.raise_for_status()
        document = self.parse_feed(response.content)
        logger.debug("Parsed %d items from %s", len(document.items), url)
        return document
