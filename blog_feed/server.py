"""
HTTP endpoint serving the feed.

The feed is rebuilt from the post sources on every request. Any failure while
loading or rendering posts surfaces as a generic 500 response.
"""

from __future__ import annotations

from pathlib import Path

from fastapi import FastAPI, Response

from .config import AppConfig
from .logging_utils import setup_logging
from .runner import generate_feed

RSS_MEDIA_TYPE = "application/xml"


def create_app(cfg: AppConfig | None = None, root: Path | None = None) -> FastAPI:
    cfg = cfg or AppConfig()
    setup_logging(cfg.logging, None)
    app = FastAPI(title=cfg.site.title, docs_url=None, redoc_url=None)

    @app.get("/rss.xml")
    @app.get("/feed")
    async def feed() -> Response:
        body = await generate_feed(cfg, root)
        return Response(content=body, media_type=RSS_MEDIA_TYPE)

    return app
