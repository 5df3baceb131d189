from __future__ import annotations

from datetime import datetime, timezone

import pytest

from newsagent.models import Article, GenerationRequest
from newsagent.services.assembler import (
    DEFAULT_CONCLUSION,
    VISIONARY_CONCLUSION,
    apply_source_policy,
    assemble,
    assemble_blog,
    assemble_newsletter,
    compute_word_count,
    estimate_reading_time,
)
from newsagent.services.composer import tone_modifier

NOW = datetime(2024, 10, 5, 12, 0, tzinfo=timezone.utc)


def _request(**overrides) -> GenerationRequest:
    values = {
        "topic": "markets",
        "mode": "newsletter",
        "voice": "analytical",
        "audience": "general",
        "length": "standard",
        "include_sources": True,
    }
    values.update(overrides)
    return GenerationRequest(**values)


def _articles(count: int) -> list[Article]:
    return [
        Article(
            id=f"https://example.com/{index}",
            title=f"Story {index}",
            url=f"https://example.com/{index}",
            publisher=f"Publisher {index}",
            published_at="2024-10-05T10:00:00+00:00",
            summary=f"Lead sentence {index}. Second sentence. Third sentence. Fourth sentence.",
            content=f"Body {index} one. Body two. Body three. Body four. Body five.",
            score=10.0 - index,
        )
        for index in range(count)
    ]


def test_brief_newsletter_has_three_sections_and_hero() -> None:
    result = assemble_newsletter(_articles(5), _request(length="brief"), NOW)

    assert len(result.sections) == 3
    assert result.hero is not None
    assert result.hero.kicker == "Publisher 0"
    assert result.hero.headline == "Story 0"
    assert result.hero.excerpt == "Lead sentence 0. Second sentence."
    assert all(len(section.bullets) <= 3 for section in result.sections)
    assert result.introduction is None
    assert result.conclusion is None
    assert result.generated_at == NOW


def test_newsletter_sections_mirror_sources() -> None:
    result = assemble_newsletter(_articles(5), _request(), NOW)

    assert len(result.sections) == 4
    assert [source.url for source in result.sources] == [f"https://example.com/{i}" for i in range(4)]
    assert [section.source.url for section in result.sections] == [source.url for source in result.sources]
    assert result.sections[0].summary == "Lead sentence 0. Second sentence. Third sentence."
    assert result.highlights == [f"Publisher {i}: Lead sentence {i}." for i in range(3)]


@pytest.mark.parametrize(
    ("audience", "expected"),
    [
        ("executives", "Share with your leadership team and align the next operating review."),
        ("investors", "Send to LPs with your perspective before the weekly update."),
        ("builders", "Forward to your community with a quick note on how to react."),
    ],
)
def test_newsletter_call_to_action_by_audience(audience: str, expected: str) -> None:
    result = assemble_newsletter(_articles(2), _request(audience=audience), NOW)

    assert result.call_to_action == expected


def test_deep_uses_six_sections_when_available() -> None:
    result = assemble_newsletter(_articles(8), _request(length="deep"), NOW)

    assert len(result.sections) == 6
    assert all(len(section.bullets) == 4 for section in result.sections)


def test_blog_layout() -> None:
    request = _request(mode="blog", voice="optimistic", audience="builders")

    result = assemble_blog(_articles(3), request, NOW)
    tone = tone_modifier("optimistic", "builders")

    assert result.hero is None
    assert result.introduction == f"Lead sentence 0. Lead sentence 1. {tone}"
    assert [section.title for section in result.sections] == [
        "Trend 1: Story 0",
        "Trend 2: Story 1",
        "Trend 3: Story 2",
    ]
    assert result.sections[0].summary == "Body 0 one. Body two. Body three. Body four."
    assert result.sections[0].insight == (
        f"{tone} Leverage this development by crafting a response plan within the next sprint."
    )
    assert result.call_to_action == "Invite readers to comment with the experiments they are running."


def test_blog_introduction_is_tone_only_without_articles() -> None:
    request = _request(mode="blog")

    result = assemble_blog([], request, NOW)

    assert result.introduction == tone_modifier("analytical", "general")
    assert result.sections == []


def test_blog_conclusion_depends_on_voice() -> None:
    visionary = assemble_blog(_articles(2), _request(mode="blog", voice="visionary"), NOW)
    analytical = assemble_blog(_articles(2), _request(mode="blog", voice="analytical"), NOW)

    assert visionary.conclusion == VISIONARY_CONCLUSION
    assert analytical.conclusion == DEFAULT_CONCLUSION


@pytest.mark.parametrize("mode", ["newsletter", "blog"])
def test_sources_are_stripped_when_not_requested(mode: str) -> None:
    result = assemble(_articles(4), _request(mode=mode, include_sources=False), NOW)

    assert result.sources == []
    assert all(section.source is None for section in result.sections)
    dumped = result.model_dump(by_alias=True, exclude_none=True)
    assert all("source" not in section for section in dumped["sections"])


def test_apply_source_policy_keeps_sources_when_requested() -> None:
    result = assemble_newsletter(_articles(2), _request(), NOW)

    assert apply_source_policy(result, True) is result


def test_word_count_spans_all_text_fields() -> None:
    result = assemble_newsletter(_articles(1), _request(length="brief"), NOW)
    section = result.sections[0]
    expected = len(
        " ".join(
            [
                result.hero.headline,
                result.hero.excerpt,
                section.title,
                section.summary,
                " ".join(section.bullets),
                section.insight,
                result.call_to_action,
            ]
        ).split()
    )

    assert result.meta.word_count == expected
    assert result.meta.reading_time_minutes == 1


def test_compute_word_count_ignores_missing_fields() -> None:
    assert compute_word_count([], introduction="two words", conclusion=None) == 2


def test_reading_time_rounds_half_up_with_floor_of_one() -> None:
    assert estimate_reading_time(0, 220) == 1
    assert estimate_reading_time(100, 220) == 1
    assert estimate_reading_time(550, 220) == 3
    assert estimate_reading_time(2100, 210) == 10
