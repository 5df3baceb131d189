"""Tests for the HTTP routes in :mod:`newsagent.api.routes`."""

from __future__ import annotations

from unittest.mock import patch

from fastapi.testclient import TestClient

from newsagent.api.app import create_app
from newsagent.config import FeedConfig
from newsagent.models import Article, GenerationRequest

PAYLOAD = {
    "topic": "chips",
    "mode": "newsletter",
    "voice": "analytical",
    "audience": "executives",
    "length": "brief",
    "includeSources": True,
}


class StubAggregator:
    def __init__(self, articles: list[Article]) -> None:
        self.articles = articles

    async def collect(self, request: GenerationRequest) -> list[Article]:
        return self.articles


ARTICLE = Article(
    id="https://example.com/chips",
    title="Chipmaker unveils accelerator",
    url="https://example.com/chips",
    publisher="Example Wire",
    published_at="2024-10-05T10:00:00+00:00",
    summary="The company announced a new chip on Monday. It ships next year.",
    content="The company announced a new chip on Monday. It ships next year.",
    score=5.0,
)


def test_generate_returns_camel_case_document() -> None:
    client = TestClient(create_app())

    with patch("newsagent.api.routes.build_aggregator", return_value=StubAggregator([ARTICLE])):
        response = client.post("/api/generate", json=PAYLOAD)

    assert response.status_code == 200
    payload = response.json()
    assert payload["mode"] == "newsletter"
    assert payload["hero"]["headline"] == "Chipmaker unveils accelerator"
    assert payload["callToAction"].startswith("Share with your leadership team")
    assert payload["meta"]["readingTimeMinutes"] == 1
    assert payload["sources"][0]["publishedAt"] == "2024-10-05T10:00:00+00:00"
    assert "introduction" not in payload
    assert "generatedAt" in payload


def test_generate_without_sources_omits_section_sources() -> None:
    client = TestClient(create_app())

    with patch("newsagent.api.routes.build_aggregator", return_value=StubAggregator([ARTICLE])):
        response = client.post("/api/generate", json={**PAYLOAD, "includeSources": False})

    assert response.status_code == 200
    payload = response.json()
    assert payload["sources"] == []
    assert all("source" not in section for section in payload["sections"])


def test_generate_rejects_invalid_payload() -> None:
    client = TestClient(create_app())

    response = client.post("/api/generate", json={**PAYLOAD, "voice": "sarcastic"})

    assert response.status_code == 400
    assert response.json()["detail"] == "Invalid request. Please review the form inputs."


def test_generate_rejects_overlong_topic() -> None:
    client = TestClient(create_app())

    response = client.post("/api/generate", json={**PAYLOAD, "topic": "x" * 121})

    assert response.status_code == 400


def test_generate_reports_when_no_stories_match() -> None:
    client = TestClient(create_app())

    with patch("newsagent.api.routes.build_aggregator", return_value=StubAggregator([])):
        response = client.post("/api/generate", json=PAYLOAD)

    assert response.status_code == 404
    assert "Try broadening the search" in response.json()["detail"]


def test_generate_markdown_returns_text() -> None:
    client = TestClient(create_app())

    with patch("newsagent.api.routes.build_aggregator", return_value=StubAggregator([ARTICLE])):
        response = client.post("/api/generate/markdown", json=PAYLOAD)

    assert response.status_code == 200
    assert response.headers["content-type"].startswith("text/markdown")
    assert response.text.startswith("# Newsletter: chips")


def test_list_feeds_returns_configured_feeds() -> None:
    client = TestClient(create_app())
    feeds = [
        FeedConfig(url="https://alpha.example.com/rss", label="Alpha News", tags=["tech"]),
        FeedConfig(url="https://beta.example.com/feed"),
    ]

    with patch("newsagent.api.routes.load_feeds", return_value=feeds):
        response = client.get("/api/feeds")

    assert response.status_code == 200
    payload = response.json()["feeds"]
    assert [entry["slug"] for entry in payload] == ["alpha-news", "beta-example-com"]
    assert payload[0]["host"] == "alpha.example.com"
    assert payload[0]["tags"] == ["tech"]
