"""
Core data types for the blog feed.

This module defines the data structures that flow through feed generation:
- Frontmatter: Parsed metadata header of a post source
- Post: A published article with a deferred HTML renderer
- FeedItem: One syndicated entry derived from a Post
- FeedDocument: The channel plus its ordered items
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Any, Awaitable, Callable


@dataclass(frozen=True)
class Frontmatter:
    """Metadata header of a post source.

    Attributes:
        title: The post headline
        description: Optional one-paragraph summary
        pub_date: Publication date (a bare date or a datetime)
        tags: Ordered list of tag names
        layout: Layout reference used by the page renderer
        extra: Any other front-matter keys, kept verbatim
    """
    title: str
    description: str | None = None
    pub_date: date | datetime | None = None
    tags: list[str] = field(default_factory=list)
    layout: str | None = None
    extra: dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class Post:
    """A published article known to the site at build time.

    The rendered HTML is not computed up front; ``render`` is called on
    demand and awaited by ``compiled_content``.

    Attributes:
        url: Unique site-relative (or absolute) locator of the post
        frontmatter: Parsed metadata header
        render: Coroutine factory producing the rendered HTML body
    """
    url: str
    frontmatter: Frontmatter
    render: Callable[[], Awaitable[str]] = field(repr=False, compare=False)

    async def compiled_content(self) -> str:
        return await self.render()


@dataclass(frozen=True)
class FeedItem:
    """One item of the feed.

    Attributes:
        link: The post URL
        content: Sanitized HTML body
        title: Post title
        description: Post summary from front-matter, if any
        pub_date: Publication date, if any
        tags: Ordered tag names, emitted as categories
    """
    link: str
    content: str
    title: str
    description: str | None = None
    pub_date: date | datetime | None = None
    tags: list[str] = field(default_factory=list)


@dataclass
class FeedDocument:
    """The aggregate feed: channel metadata and ordered items.

    Attributes:
        title: Channel title
        description: Channel description
        site: Base URL of the site
        items: Feed items in input order
        custom_data: Extra XML injected into the channel
    """
    title: str
    description: str
    site: str
    items: list[FeedItem] = field(default_factory=list)
    custom_data: str = ""
