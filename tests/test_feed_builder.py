"""Tests for building feed documents from post records."""

import asyncio
import logging
import xml.etree.ElementTree as ET
from datetime import date

import pytest

from blog_feed.config import SiteConfig
from blog_feed.core.feed import build_feed
from blog_feed.core.types import Frontmatter, Post
from blog_feed.output.rss import render_rss


def _post(url, title, pub_date=None, html="", *, description=None, tags=None, render=None):
    async def default_render():
        return html

    return Post(
        url=url,
        frontmatter=Frontmatter(
            title=title,
            description=description,
            pub_date=pub_date,
            tags=list(tags or []),
        ),
        render=render or default_render,
    )


def _scenario_posts():
    return [
        _post("/a", "A", date(2023, 1, 1), "<p>Hi</p><script>alert(1)</script>"),
        _post("/b", "B", date(2023, 2, 1), "<p>Bye</p>"),
    ]


def test_two_post_scenario():
    doc = asyncio.run(build_feed(_scenario_posts(), SiteConfig()))

    assert len(doc.items) == 2
    item_a, item_b = doc.items
    assert "<p>Hi</p>" in item_a.content
    assert "<script>" not in item_a.content
    assert item_b.content == "<p>Bye</p>"


def test_channel_metadata_comes_from_site_config():
    site = SiteConfig(url="https://example.com/", title="T", description="D", custom_data="<x>1</x>")
    doc = asyncio.run(build_feed([], site))

    assert doc.title == "T"
    assert doc.description == "D"
    assert doc.site == "https://example.com/"
    assert doc.custom_data == "<x>1</x>"
    assert doc.items == []


def test_one_item_per_post_with_matching_links():
    posts = [_post(f"/posts/{i}", f"Post {i}", html=f"<p>{i}</p>") for i in range(7)]
    doc = asyncio.run(build_feed(posts, SiteConfig()))

    assert len(doc.items) == len(posts)
    assert [item.link for item in doc.items] == [post.url for post in posts]


def test_items_keep_input_order_even_when_not_chronological():
    posts = [
        _post("/old", "Old", date(2020, 1, 1)),
        _post("/new", "New", date(2024, 1, 1)),
        _post("/mid", "Mid", date(2022, 1, 1)),
    ]
    doc = asyncio.run(build_feed(posts, SiteConfig()))

    assert [item.link for item in doc.items] == ["/old", "/new", "/mid"]


def test_frontmatter_fields_are_preserved():
    post = _post(
        "/c",
        "C",
        date(2023, 3, 1),
        "<p>c</p>",
        description="About C",
        tags=["python", "rss"],
    )
    doc = asyncio.run(build_feed([post], SiteConfig()))
    item = doc.items[0]

    assert item.title == "C"
    assert item.description == "About C"
    assert item.pub_date == date(2023, 3, 1)
    assert item.tags == ["python", "rss"]
    assert item.tags is not post.frontmatter.tags


def test_content_is_resolved_concurrently():
    async def scenario():
        first_started = asyncio.Event()

        async def first():
            first_started.set()
            return "<p>1</p>"

        async def second():
            await first_started.wait()
            return "<p>2</p>"

        # Awaiting these one at a time in list order would never finish.
        posts = [_post("/2", "2", render=second), _post("/1", "1", render=first)]
        return await asyncio.wait_for(build_feed(posts, SiteConfig()), timeout=5)

    doc = asyncio.run(scenario())
    assert [item.content for item in doc.items] == ["<p>2</p>", "<p>1</p>"]


def test_single_failed_resolution_fails_whole_build():
    async def broken():
        raise RuntimeError("render failed")

    posts = [_post("/ok", "Ok", html="<p>ok</p>"), _post("/bad", "Bad", render=broken)]

    with pytest.raises(RuntimeError, match="render failed"):
        asyncio.run(build_feed(posts, SiteConfig()))


def test_event_handlers_never_reach_items():
    post = _post("/x", "X", html='<p onclick="steal()">x</p><img src=x onerror=alert(1)>')
    doc = asyncio.run(build_feed([post], SiteConfig()))

    assert "onclick" not in doc.items[0].content
    assert "onerror" not in doc.items[0].content


def test_control_characters_in_content_are_dropped():
    post = _post("/f", "F", html="<p>form\x0cfeed</p>")
    doc = asyncio.run(build_feed([post], SiteConfig()))

    assert doc.items[0].content == "<p>formfeed</p>"
    channel = ET.fromstring(render_rss(doc)).find("channel")
    assert channel.find("item").findtext("description") == "<p>formfeed</p>"


def test_failed_build_emits_error_event():
    async def broken():
        raise RuntimeError("render failed")

    records = []

    class _Collect(logging.Handler):
        def emit(self, record):
            records.append(record)

    feed_logger = logging.getLogger("blog_feed.core.feed")
    handler = _Collect(level=logging.DEBUG)
    feed_logger.addHandler(handler)
    try:
        with pytest.raises(RuntimeError):
            asyncio.run(build_feed([_post("/bad", "Bad", render=broken)], SiteConfig()))
    finally:
        feed_logger.removeHandler(handler)

    failures = [r for r in records if getattr(r, "event", None) == "feed_build_failed"]
    assert len(failures) == 1
    assert failures[0].levelno == logging.ERROR
    assert failures[0].error == "render failed"
