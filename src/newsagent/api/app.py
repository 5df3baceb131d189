"""FastAPI application entrypoint."""

from __future__ import annotations

from fastapi import FastAPI

from newsagent.api.routes import router


def create_app() -> FastAPI:
    app = FastAPI(
        title="News Agent",
        description="Turn live news feeds into newsletters and blog posts",
    )
    app.include_router(router, prefix="/api")
    return app


app = create_app()
