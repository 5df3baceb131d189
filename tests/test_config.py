from __future__ import annotations

from pathlib import Path

import pytest

pytest.importorskip("pydantic")

from newsagent.config import FEEDS_FILE_ENV, AppConfig, FeedConfig, load_feeds


def test_round_trip(tmp_path: Path) -> None:
    config_path = tmp_path / "feeds.json"
    config = AppConfig(feeds=[FeedConfig(url="https://example.com/rss", label="Example", tags=["retail"])])
    config.dump(config_path)

    loaded = AppConfig.from_file(config_path)
    assert loaded.feeds[0].label == "Example"
    assert loaded.feeds[0].tags == ["retail"]
    assert loaded.feeds[0].host == "example.com"


def test_default_line_up_has_six_labelled_feeds() -> None:
    feeds = AppConfig.default().feeds

    assert len(feeds) == 6
    assert feeds[0].label == "NYTimes Technology"
    assert all(feed.tags for feed in feeds)


def test_add_feed_appends() -> None:
    config = AppConfig()
    config.add_feed(FeedConfig(url="https://example.com/rss", label="Example"))

    assert [feed.label for feed in config.iter_feeds()] == ["Example"]


def test_from_file_reports_missing_file(tmp_path: Path) -> None:
    with pytest.raises(FileNotFoundError) as excinfo:
        AppConfig.from_file(tmp_path / "missing.json")

    assert "missing.json" in str(excinfo.value)


def test_from_file_rejects_invalid_json(tmp_path: Path) -> None:
    config_path = tmp_path / "feeds.json"
    config_path.write_text("{not json", encoding="utf-8")

    with pytest.raises(ValueError, match="Invalid JSON"):
        AppConfig.from_file(config_path)


def test_from_file_rejects_invalid_feed(tmp_path: Path) -> None:
    config_path = tmp_path / "feeds.json"
    config_path.write_text('{"feeds": [{"url": "not a url"}]}', encoding="utf-8")

    with pytest.raises(ValueError, match="invalid"):
        AppConfig.from_file(config_path)


def test_load_feeds_honours_environment_override(tmp_path: Path, monkeypatch) -> None:
    config_path = tmp_path / "custom.json"
    AppConfig(feeds=[FeedConfig(url="https://custom.example.com/rss", label="Custom")]).dump(config_path)
    monkeypatch.setenv(FEEDS_FILE_ENV, str(config_path))

    feeds = load_feeds()

    assert [feed.label for feed in feeds] == ["Custom"]


def test_load_feeds_falls_back_to_default_line_up(tmp_path: Path, monkeypatch) -> None:
    monkeypatch.setenv(FEEDS_FILE_ENV, str(tmp_path / "absent.json"))

    feeds = load_feeds()

    assert [feed.label for feed in feeds] == [feed.label for feed in AppConfig.default().feeds]


def test_load_feeds_requires_explicit_path_to_exist(tmp_path: Path) -> None:
    with pytest.raises(FileNotFoundError):
        load_feeds(tmp_path / "absent.json")
