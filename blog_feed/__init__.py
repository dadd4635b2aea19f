"""
Blog Feed - RSS feed generation for a markdown blog.

This package discovers markdown posts, renders and sanitizes their content,
and serializes an RSS 2.0 feed, either written at site build time or served
over HTTP.

Main entry point is the CLI via the `blog-feed build` command.

Example:
    $ blog-feed build -p src/pages/posts -o dist/
"""

__all__ = ["__version__", "build_feed", "load_posts", "render_rss", "Sanitizer"]
__version__ = "0.1.0"

from .core.feed import build_feed
from .core.sanitize import Sanitizer
from .input.posts import load_posts
from .output.rss import render_rss
