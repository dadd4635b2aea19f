"""
Command-line interface for the blog feed.

Uses Typer to provide ``build`` (write the feed into the site output
directory) and ``serve`` (answer feed requests over HTTP).
"""

from __future__ import annotations

from pathlib import Path

import typer
import uvicorn
from rich.console import Console

from .config import AppConfig, load_config
from .runner import run_build
from .server import create_app

app = typer.Typer(add_completion=False)
console = Console()


def _load(config: Path | None, posts_dir: Path | None, site: str | None) -> AppConfig:
    cfg = load_config(str(config) if config else None)
    if posts_dir is not None:
        cfg.content.posts_dir = str(posts_dir)
    if site:
        cfg.site.url = site
    return cfg


@app.command()
def build(
    output: Path = typer.Option(Path("dist"), "--output", "-o"),
    config: Path | None = typer.Option(None, "--config", "-c", exists=True),
    posts_dir: Path | None = typer.Option(None, "--posts-dir", "-p", help="Post sources directory."),
    site: str | None = typer.Option(None, "--site", help="Base URL of the deployed site."),
    log_level: str | None = typer.Option(None, "--log-level", help="Logging level."),
    log_format: str | None = typer.Option(
        None, "--log-format", help="Log file format: jsonl or plain."
    ),
    log_file: bool | None = typer.Option(
        None, "--log-file/--no-log-file", help="Enable or disable file logging."
    ),
):
    """Build the RSS feed into the output directory.

    Args:
        output: Site output directory
        config: Optional path to YAML config file
        posts_dir: Override the post sources directory
        site: Override the site base URL
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR)
        log_format: Log file format (jsonl, plain)
        log_file: Enable/disable file logging
    """
    cfg = _load(config, posts_dir, site)
    if log_level:
        cfg.logging.level = log_level
    if log_format:
        cfg.logging.format = log_format
    if log_file is not None:
        cfg.logging.file = log_file

    output_path = run_build(cfg, output)
    console.print(f"Feed generated: {output_path}")


@app.command()
def serve(
    config: Path | None = typer.Option(None, "--config", "-c", exists=True),
    posts_dir: Path | None = typer.Option(None, "--posts-dir", "-p", help="Post sources directory."),
    site: str | None = typer.Option(None, "--site", help="Base URL of the deployed site."),
    host: str | None = typer.Option(None, "--host"),
    port: int | None = typer.Option(None, "--port"),
):
    """Serve the feed at /rss.xml and /feed."""
    cfg = _load(config, posts_dir, site)
    if host:
        cfg.server.host = host
    if port is not None:
        cfg.server.port = port

    console.print(f"Serving feed on http://{cfg.server.host}:{cfg.server.port}/rss.xml")
    uvicorn.run(create_app(cfg), host=cfg.server.host, port=cfg.server.port)


if __name__ == "__main__":
    app()
