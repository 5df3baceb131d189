"""Domain models used across the application."""

from __future__ import annotations

from datetime import datetime
from typing import List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

Mode = Literal["newsletter", "blog"]
Voice = Literal["analytical", "optimistic", "urgent", "casual", "visionary"]
Audience = Literal["executives", "builders", "investors", "general"]
Length = Literal["brief", "standard", "deep"]


class _CamelModel(BaseModel):
    """Base model serialised with camelCase keys for API consumers."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class GenerationRequest(_CamelModel):
    """Validated request describing the document to assemble."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        frozen=True,
        str_strip_whitespace=True,
    )

    topic: str = Field(..., max_length=120)
    mode: Mode
    voice: Voice
    audience: Audience
    length: Length
    include_sources: bool


class RawFeedItem(BaseModel):
    """A feed entry as parsed from RSS or Atom; every field may be missing."""

    model_config = ConfigDict(populate_by_name=True)

    title: Optional[str] = None
    link: Optional[str] = None
    guid: Optional[str] = None
    pub_date: Optional[str] = Field(default=None, alias="pubDate")
    iso_date: Optional[str] = Field(default=None, alias="isoDate")
    content_snippet: Optional[str] = Field(default=None, alias="contentSnippet")
    content: Optional[str] = None
    content_encoded: Optional[str] = Field(default=None, alias="content:encoded")


class FeedDocument(BaseModel):
    """Parsed feed: its own title plus the items it carries."""

    title: Optional[str] = None
    items: List[RawFeedItem] = Field(default_factory=list)


class Article(_CamelModel):
    """Canonical record for one story, keyed by its canonical URL."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)

    id: str
    title: str
    url: str
    publisher: str
    published_at: Optional[str] = None
    summary: str
    content: str
    categories: List[str] = Field(default_factory=list)
    score: float = 0.0


class SourceLink(_CamelModel):
    title: str
    url: str
    publisher: Optional[str] = None
    published_at: Optional[str] = None

    @classmethod
    def from_article(cls, article: Article) -> "SourceLink":
        return cls(
            title=article.title,
            url=article.url,
            publisher=article.publisher,
            published_at=article.published_at,
        )


class ContentSection(_CamelModel):
    """One assembled section of the document, built from a single article."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)

    title: str
    summary: str
    bullets: List[str]
    insight: str
    source: Optional[SourceLink] = None


class Hero(_CamelModel):
    kicker: str
    headline: str
    excerpt: str


class ResultMeta(_CamelModel):
    word_count: int
    reading_time_minutes: int


class GenerationResult(_CamelModel):
    """The complete newsletter or blog document."""

    mode: Mode
    topic: str
    audience: Audience
    voice: Voice
    length: Length
    generated_at: datetime
    highlights: List[str] = Field(default_factory=list)
    hero: Optional[Hero] = None
    introduction: Optional[str] = None
    sections: List[ContentSection] = Field(default_factory=list)
    conclusion: Optional[str] = None
    call_to_action: Optional[str] = None
    sources: List[SourceLink] = Field(default_factory=list)
    meta: ResultMeta
