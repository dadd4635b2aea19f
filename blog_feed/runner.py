"""
Site build orchestration for the blog feed.

This module coordinates a feed build:
1. Load post sources
2. Resolve and sanitize content, build the feed document
3. Serialize and write the feed file

It is also the shared entry point for the HTTP endpoint, which builds the
feed fresh on every request through ``generate_feed``.
"""

from __future__ import annotations

import asyncio
import time
from pathlib import Path

from .config import AppConfig
from .core.feed import build_feed
from .core.sanitize import Sanitizer
from .input.posts import load_posts
from .logging_utils import log_event, setup_logging
from .output.rss import render_rss, write_rss


async def generate_feed(cfg: AppConfig, root: Path | None = None) -> bytes:
    """Load posts and return the serialized feed.

    Args:
        cfg: Application configuration
        root: Base directory for a relative posts directory

    Returns:
        The RSS document as UTF-8 bytes
    """
    posts = await asyncio.to_thread(load_posts, cfg.content, root)
    doc = await build_feed(posts, cfg.site, Sanitizer(cfg.sanitize))
    return await asyncio.to_thread(render_rss, doc, cfg.output.pretty)


def run_build(cfg: AppConfig, output_dir: Path, root: Path | None = None) -> Path:
    """Build the feed and write it into ``output_dir``.

    Args:
        cfg: Application configuration
        output_dir: Site output directory
        root: Base directory for a relative posts directory

    Returns:
        Path to the written feed file
    """
    run_logger = setup_logging(cfg.logging, output_dir)
    started = time.perf_counter()
    log_event(
        run_logger,
        "Build start",
        event="build_start",
        posts_dir=cfg.content.posts_dir,
        output=str(output_dir),
    )

    posts = load_posts(cfg.content, root)
    doc = asyncio.run(build_feed(posts, cfg.site, Sanitizer(cfg.sanitize)))
    output_path = write_rss(doc, output_dir / cfg.output.filename, pretty=cfg.output.pretty)

    log_event(
        run_logger,
        "Feed written",
        event="feed_written",
        path=str(output_path),
        items=len(doc.items),
        elapsed_s=round(time.perf_counter() - started, 3),
    )
    return output_path
