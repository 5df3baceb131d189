"""API routes exposing the news agent."""

from __future__ import annotations

import logging
import re
from typing import Any, Dict, List

from fastapi import APIRouter, Body, HTTPException
from fastapi.responses import PlainTextResponse
from pydantic import BaseModel, Field, ValidationError

from newsagent.config import load_feeds
from newsagent.models import GenerationRequest, GenerationResult
from newsagent.services.agent import NoRelevantStoriesError, run_agent
from newsagent.services.aggregator import ArticleAggregator
from newsagent.services.markdown import render_markdown

logger = logging.getLogger(__name__)

router = APIRouter()

INVALID_REQUEST_DETAIL = "Invalid request. Please review the form inputs."
GENERIC_FAILURE_DETAIL = "We couldn't assemble anything fresh for that topic. Try again in a moment."


class FeedEntry(BaseModel):
    label: str
    slug: str
    host: str
    tags: List[str] = Field(default_factory=list)


class FeedsResponse(BaseModel):
    feeds: List[FeedEntry] = Field(default_factory=list)


def _slugify_source(name: str) -> str:
    """Return a slug suitable for use in DOM element IDs."""

    normalized = re.sub(r"[^a-z0-9]+", "-", name.strip().lower())
    slug = normalized.strip("-")
    return slug or "source"


def build_aggregator() -> ArticleAggregator:
    """Create an aggregator over the configured feeds."""

    try:
        feeds = load_feeds()
    except (FileNotFoundError, ValueError) as exc:
        raise HTTPException(status_code=500, detail=str(exc)) from exc
    return ArticleAggregator(feeds)


async def _generate(payload: Dict[str, Any]) -> GenerationResult:
    try:
        request = GenerationRequest.model_validate(payload)
    except ValidationError as exc:
        logger.info("Rejected generation request: %s", exc)
        raise HTTPException(status_code=400, detail=INVALID_REQUEST_DETAIL) from exc

    try:
        return await run_agent(request, build_aggregator())
    except NoRelevantStoriesError as exc:
        raise HTTPException(status_code=404, detail=str(exc)) from exc
    except HTTPException:
        raise
    except Exception as exc:  # pragma: no cover - unexpected agent failures
        logger.exception("Agent failure")
        raise HTTPException(status_code=500, detail=GENERIC_FAILURE_DETAIL) from exc


@router.post(
    "/generate",
    response_model=GenerationResult,
    response_model_exclude_none=True,
)
async def generate(payload: Dict[str, Any] = Body(...)) -> GenerationResult:
    """Assemble a newsletter or blog post for the requested topic."""

    return await _generate(payload)


@router.post("/generate/markdown", response_class=PlainTextResponse)
async def generate_markdown(payload: Dict[str, Any] = Body(...)) -> PlainTextResponse:
    """Assemble a document and return it rendered as Markdown."""

    result = await _generate(payload)
    return PlainTextResponse(render_markdown(result), media_type="text/markdown")


@router.get("/feeds", response_model=FeedsResponse)
async def list_feeds() -> FeedsResponse:
    """Return the configured set of feeds."""

    try:
        feeds = load_feeds()
    except (FileNotFoundError, ValueError) as exc:
        raise HTTPException(status_code=500, detail=str(exc)) from exc

    entries = [
        FeedEntry(
            label=feed.label,
            slug=_slugify_source(feed.label or feed.host),
            host=feed.host,
            tags=list(feed.tags),
        )
        for feed in feeds
    ]
    return FeedsResponse(feeds=entries)
