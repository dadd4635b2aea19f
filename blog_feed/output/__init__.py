"""Feed serialization."""

from .rss import render_rss, write_rss

__all__ = ["render_rss", "write_rss"]
