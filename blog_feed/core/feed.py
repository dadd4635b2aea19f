"""
Feed construction from post records.

``build_feed`` resolves every post's rendered HTML concurrently, sanitizes
it, and maps each post to a ``FeedItem``. Items keep the order of the input
collection; no sorting happens here. A single failed resolution fails the
whole build.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Sequence

from ..config import SiteConfig
from ..logging_utils import log_event
from .sanitize import Sanitizer
from .types import FeedDocument, FeedItem, Post

logger = logging.getLogger(__name__)


def to_feed_item(post: Post, content: str, sanitizer: Sanitizer) -> FeedItem:
    """Map a post and its rendered HTML to a feed item."""
    meta = post.frontmatter
    return FeedItem(
        link=post.url,
        content=sanitizer.sanitize(content),
        title=meta.title,
        description=meta.description,
        pub_date=meta.pub_date,
        tags=list(meta.tags),
    )


async def build_feed(
    posts: Sequence[Post],
    site: SiteConfig,
    sanitizer: Sanitizer | None = None,
) -> FeedDocument:
    """Build the feed document for ``posts``.

    Args:
        posts: Post records in the order they should appear in the feed
        site: Channel metadata
        sanitizer: HTML cleaner applied to every post body

    Returns:
        A FeedDocument with one item per post

    Raises:
        Exception: Whatever the first failing content resolution raised
    """
    sanitizer = sanitizer or Sanitizer()
    try:
        contents = await asyncio.gather(*(post.compiled_content() for post in posts))
    except Exception as exc:
        log_event(
            logger,
            "Feed build failed",
            level=logging.ERROR,
            event="feed_build_failed",
            posts=len(posts),
            error=str(exc),
        )
        raise

    items = [to_feed_item(post, content, sanitizer) for post, content in zip(posts, contents)]
    log_event(logger, "Feed built", event="feed_built", items=len(items))
    return FeedDocument(
        title=site.title,
        description=site.description,
        site=site.url,
        items=items,
        custom_data=site.custom_data,
    )
