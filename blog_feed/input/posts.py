"""Post source loader for markdown files with YAML front-matter.

Each post source looks like::

    ---
    layout: ../../layouts/PostLayout.astro
    title: Hello
    description: First post
    pubDate: 2023-01-01
    tags: ["intro", "meta"]
    ---
    Body in *markdown*.

Sources are enumerated under ``ContentConfig.posts_dir`` in sorted path
order. The markdown body is rendered lazily: nothing is converted until a
post's ``compiled_content()`` is awaited.
"""

from __future__ import annotations

import asyncio
import logging
from datetime import date, datetime
from pathlib import Path
from typing import Any, Awaitable, Callable

import frontmatter
import markdown
import yaml

from ..config import ContentConfig
from ..core.types import Frontmatter, Post
from ..logging_utils import log_event

logger = logging.getLogger(__name__)

_KNOWN_KEYS = {"title", "description", "pubDate", "pub_date", "tags", "layout"}


def load_posts(cfg: ContentConfig, root: Path | None = None) -> list[Post]:
    """Load every post source matched by ``cfg.glob``.

    Args:
        cfg: Content discovery settings
        root: Base directory for a relative ``cfg.posts_dir`` (defaults to cwd)

    Returns:
        Posts sorted by their source path

    Raises:
        FileNotFoundError: If the posts directory does not exist
        ValueError: If a source has unreadable front-matter or two sources
            map to the same URL
    """
    posts_dir = Path(cfg.posts_dir)
    if root is not None and not posts_dir.is_absolute():
        posts_dir = root / posts_dir
    if not posts_dir.is_dir():
        raise FileNotFoundError(f"Posts directory not found: {posts_dir}")

    posts: list[Post] = []
    seen: dict[str, Path] = {}
    for path in sorted(p for p in posts_dir.glob(cfg.glob) if p.is_file()):
        post = load_post(path, posts_dir, cfg)
        if post.url in seen:
            raise ValueError(
                f"Duplicate post URL {post.url!r}: {seen[post.url]} and {path}"
            )
        seen[post.url] = path
        posts.append(post)

    log_event(
        logger,
        "Posts loaded",
        event="posts_loaded",
        posts_dir=str(posts_dir),
        count=len(posts),
    )
    return posts


def load_post(path: Path, posts_dir: Path, cfg: ContentConfig) -> Post:
    """Parse a single post source into a ``Post``."""
    try:
        source = frontmatter.load(str(path))
    except yaml.YAMLError as exc:
        raise ValueError(f"Invalid front-matter in {path}: {exc}") from exc

    meta = parse_frontmatter(source.metadata, fallback_title=path.stem)
    return Post(
        url=post_url(path, posts_dir, cfg.url_prefix),
        frontmatter=meta,
        render=_markdown_renderer(source.content, cfg.markdown_extensions),
    )


def parse_frontmatter(metadata: dict[str, Any], fallback_title: str = "") -> Frontmatter:
    """Build a typed ``Frontmatter`` from raw front-matter keys.

    Only types are coerced; missing fields stay empty rather than failing.
    """
    title = metadata.get("title")
    description = metadata.get("description")
    pub_date = metadata.get("pubDate", metadata.get("pub_date"))
    layout = metadata.get("layout")
    return Frontmatter(
        title=str(title) if title is not None else fallback_title,
        description=str(description) if description is not None else None,
        pub_date=_coerce_date(pub_date),
        tags=_coerce_tags(metadata.get("tags")),
        layout=str(layout) if layout is not None else None,
        extra={k: v for k, v in metadata.items() if k not in _KNOWN_KEYS},
    )


def post_url(path: Path, posts_dir: Path, url_prefix: str) -> str:
    """Derive the site URL of a post from its source path.

    Examples:
        >>> post_url(Path("posts/hello.md"), Path("posts"), "/posts")
        '/posts/hello'
        >>> post_url(Path("posts/series/index.md"), Path("posts"), "/posts")
        '/posts/series'
    """
    parts = list(path.relative_to(posts_dir).with_suffix("").parts)
    if parts and parts[-1] == "index":
        parts.pop()
    prefix = url_prefix.rstrip("/")
    if not parts:
        return prefix or "/"
    return f"{prefix}/{'/'.join(parts)}"


def _markdown_renderer(body: str, extensions: list[str]) -> Callable[[], Awaitable[str]]:
    async def render() -> str:
        return await asyncio.to_thread(markdown.markdown, body, extensions=list(extensions))

    return render


def _coerce_date(value: Any) -> date | datetime | None:
    if value is None or value == "":
        return None
    if isinstance(value, (date, datetime)):
        return value
    text = str(value).strip()
    try:
        return date.fromisoformat(text)
    except ValueError:
        pass
    try:
        return datetime.fromisoformat(text.replace("Z", "+00:00"))
    except ValueError:
        logger.warning("Unparseable pubDate %r; leaving it empty", value)
        return None


def _coerce_tags(value: Any) -> list[str]:
    if value is None:
        return []
    if isinstance(value, str):
        return [tag.strip() for tag in value.split(",") if tag.strip()]
    return [str(tag) for tag in value]
