"""Convenience script for generating a newsletter or blog post locally."""

from __future__ import annotations

import asyncio
import json
import logging
import sys
from pathlib import Path
from typing import Optional

import typer
from pydantic import ValidationError

# Ensure the src directory is on the Python path so the newsagent package can be imported
SRC_PATH = Path(__file__).resolve().parent / "src"
if str(SRC_PATH) not in sys.path:
    sys.path.insert(0, str(SRC_PATH))

from newsagent.config import load_feeds  # noqa: E402  (import after path setup)
from newsagent.models import GenerationRequest  # noqa: E402
from newsagent.services.agent import NoRelevantStoriesError, run_agent  # noqa: E402
from newsagent.services.aggregator import ArticleAggregator  # noqa: E402
from newsagent.services.markdown import render_markdown  # noqa: E402

app = typer.Typer(help="Aggregate the configured news feeds into a newsletter or blog post.")


@app.command()
def main(
    topic: str = typer.Option("", help="Topic to filter stories by; empty keeps everything."),
    mode: str = typer.Option("newsletter", help="newsletter or blog"),
    voice: str = typer.Option("analytical", help="analytical, optimistic, urgent, casual or visionary"),
    audience: str = typer.Option("general", help="executives, builders, investors or general"),
    length: str = typer.Option("standard", help="brief, standard or deep"),
    include_sources: bool = typer.Option(True, "--include-sources/--no-sources"),
    feeds: Optional[Path] = typer.Option(None, help="JSON file with the feeds to aggregate."),
    markdown: bool = typer.Option(False, "--markdown", help="Print Markdown instead of JSON."),
) -> None:
    """Load the feed configuration, run the agent and print the document."""

    logging.basicConfig(level=logging.INFO, format="%(levelname)s: %(message)s")

    try:
        request = GenerationRequest(
            topic=topic,
            mode=mode,
            voice=voice,
            audience=audience,
            length=length,
            include_sources=include_sources,
        )
    except ValidationError as exc:
        raise typer.BadParameter(str(exc)) from exc

    try:
        feed_configs = load_feeds(feeds)
    except (FileNotFoundError, ValueError) as exc:
        logging.error("Could not load feed configuration: %s", exc)
        raise typer.Exit(code=1) from exc

    try:
        result = asyncio.run(run_agent(request, ArticleAggregator(feed_configs)))
    except NoRelevantStoriesError as exc:
        logging.error("%s", exc)
        raise typer.Exit(code=1) from exc

    if markdown:
        typer.echo(render_markdown(result))
    else:
        typer.echo(json.dumps(result.model_dump(mode="json", by_alias=True, exclude_none=True), indent=2))


if __name__ == "__main__":
    app()
