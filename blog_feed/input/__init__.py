"""Post source discovery and parsing."""

from .posts import load_post, load_posts, parse_frontmatter, post_url

__all__ = ["load_posts", "load_post", "parse_frontmatter", "post_url"]
