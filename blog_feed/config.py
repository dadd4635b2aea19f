"""
Configuration management using YAML files and dataclasses.

This module defines all configuration dataclasses and provides loading
from YAML files with defaults. Configuration sections:
- SiteConfig: Feed channel metadata
- ContentConfig: Post source discovery and markdown rendering
- SanitizeConfig: HTML allow-list for feed content
- OutputConfig: Feed file output settings
- LoggingConfig: Logging behavior
- ServerConfig: HTTP endpoint settings
- AppConfig: Root configuration container
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

import yaml


DEFAULT_ALLOWED_TAGS = [
    "address", "article", "aside", "footer", "header",
    "h1", "h2", "h3", "h4", "h5", "h6", "hgroup",
    "main", "nav", "section",
    "blockquote", "dd", "div", "dl", "dt", "figcaption", "figure",
    "hr", "li", "ol", "p", "pre", "ul",
    "a", "abbr", "b", "bdi", "bdo", "br", "cite", "code", "data", "dfn",
    "em", "i", "kbd", "mark", "q", "rb", "rp", "rt", "rtc", "ruby", "s",
    "samp", "small", "span", "strong", "sub", "sup", "time", "u", "var", "wbr",
    "caption", "col", "colgroup", "table", "tbody", "td", "tfoot", "th",
    "thead", "tr",
]


@dataclass
class SiteConfig:
    """Channel-level metadata for the generated feed.

    Attributes:
        url: Base URL of the deployed site; relative post links resolve against it
        title: Feed title
        description: Feed description
        custom_data: Extra XML injected verbatim into the RSS channel
    """

    url: str = "https://aphilas.top/"
    title: str = "Neville Omangi | Blog"
    description: str = "Musings on software development and technology."
    custom_data: str = "<language>en-us</language>"


@dataclass
class ContentConfig:
    """Configuration for post source discovery.

    Attributes:
        posts_dir: Directory containing markdown post sources
        glob: Pattern (relative to posts_dir) used to enumerate posts
        url_prefix: URL path prepended to each post's relative path
        markdown_extensions: Python-Markdown extensions used to render bodies
    """

    posts_dir: str = "src/pages/posts"
    glob: str = "**/*.md"
    url_prefix: str = "/posts"
    markdown_extensions: list[str] = field(default_factory=lambda: ["fenced_code", "tables"])


@dataclass
class SanitizeConfig:
    """Allow-list applied to rendered post HTML.

    Attributes:
        allowed_tags: Tags kept as-is; any other tag is unwrapped
        allowed_attributes: Per-tag attribute allow-list ("*" applies to every tag)
        allowed_schemes: URL schemes accepted in href/src-like attributes
        non_text_tags: Tags removed together with their content
    """

    allowed_tags: list[str] = field(default_factory=lambda: list(DEFAULT_ALLOWED_TAGS))
    allowed_attributes: dict[str, list[str]] = field(
        default_factory=lambda: {
            "a": ["href", "name", "target"],
            "img": ["src", "srcset", "alt", "title", "width", "height", "loading"],
        }
    )
    allowed_schemes: list[str] = field(
        default_factory=lambda: ["http", "https", "ftp", "mailto", "tel"]
    )
    non_text_tags: list[str] = field(
        default_factory=lambda: ["script", "style", "textarea", "option", "noscript"]
    )


@dataclass
class OutputConfig:
    """Configuration for the written feed file.

    Attributes:
        filename: Name of the feed file inside the output directory
        pretty: Whether to indent the serialized XML
    """

    filename: str = "rss.xml"
    pretty: bool = True


@dataclass
class LoggingConfig:
    """Configuration for logging behavior.

    Attributes:
        level: Logging level ("DEBUG", "INFO", "WARNING", "ERROR")
        console: Whether to log to console
        file: Whether to log to file
        format: Log file format ("jsonl" or "plain")
        filename: Name of the log file written next to the feed
    """

    level: str = "INFO"
    console: bool = True
    file: bool = False
    format: str = "jsonl"
    filename: str = "build.jsonl"


@dataclass
class ServerConfig:
    """Configuration for the feed HTTP endpoint."""

    host: str = "127.0.0.1"
    port: int = 4321


@dataclass
class AppConfig:
    """Root configuration container aggregating all config sections."""

    site: SiteConfig = field(default_factory=SiteConfig)
    content: ContentConfig = field(default_factory=ContentConfig)
    sanitize: SanitizeConfig = field(default_factory=SanitizeConfig)
    output: OutputConfig = field(default_factory=OutputConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)
    server: ServerConfig = field(default_factory=ServerConfig)


def load_config(path: str | None) -> AppConfig:
    """Load configuration from a YAML file with defaults."""
    if not path:
        return AppConfig()

    with open(path, "r", encoding="utf-8") as f:
        raw = yaml.safe_load(f) or {}

    if not isinstance(raw, dict):
        raise ValueError(f"Invalid config file {path}: top level must be a mapping")

    return _merge_config(AppConfig(), raw)


def _merge_config(base: AppConfig, raw: dict[str, Any]) -> AppConfig:
    """Merge raw YAML config into base AppConfig."""
    data = _asdict(base)
    for key, value in raw.items():
        if key not in data:
            continue
        if isinstance(value, dict) and isinstance(data[key], dict):
            data[key].update(value)
        else:
            data[key] = value
    return _fromdict(data)


def _asdict(cfg: AppConfig) -> dict[str, Any]:
    """Convert AppConfig to nested dictionary."""
    return {
        "site": {
            "url": cfg.site.url,
            "title": cfg.site.title,
            "description": cfg.site.description,
            "custom_data": cfg.site.custom_data,
        },
        "content": {
            "posts_dir": cfg.content.posts_dir,
            "glob": cfg.content.glob,
            "url_prefix": cfg.content.url_prefix,
            "markdown_extensions": list(cfg.content.markdown_extensions),
        },
        "sanitize": {
            "allowed_tags": list(cfg.sanitize.allowed_tags),
            "allowed_attributes": dict(cfg.sanitize.allowed_attributes),
            "allowed_schemes": list(cfg.sanitize.allowed_schemes),
            "non_text_tags": list(cfg.sanitize.non_text_tags),
        },
        "output": {
            "filename": cfg.output.filename,
            "pretty": cfg.output.pretty,
        },
        "logging": {
            "level": cfg.logging.level,
            "console": cfg.logging.console,
            "file": cfg.logging.file,
            "format": cfg.logging.format,
            "filename": cfg.logging.filename,
        },
        "server": {
            "host": cfg.server.host,
            "port": cfg.server.port,
        },
    }


def _fromdict(data: dict[str, Any]) -> AppConfig:
    """Reconstruct AppConfig from nested dictionary."""
    return AppConfig(
        site=SiteConfig(**data["site"]),
        content=ContentConfig(**data["content"]),
        sanitize=SanitizeConfig(**data["sanitize"]),
        output=OutputConfig(**data["output"]),
        logging=LoggingConfig(**data["logging"]),
        server=ServerConfig(**data["server"]),
    )
