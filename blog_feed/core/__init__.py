"""
Core domain models and feed construction.

This package contains the data types, the HTML sanitizer, and the feed
builder. It does not touch the file system.
"""

from .types import FeedDocument, FeedItem, Frontmatter, Post
from .sanitize import Sanitizer, sanitize_html
from .feed import build_feed, to_feed_item

__all__ = [
    "Frontmatter",
    "Post",
    "FeedItem",
    "FeedDocument",
    "Sanitizer",
    "sanitize_html",
    "build_feed",
    "to_feed_item",
]
