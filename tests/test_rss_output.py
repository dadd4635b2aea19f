"""Tests for RSS serialization."""

import xml.etree.ElementTree as ET
from datetime import date, datetime, timezone
from pathlib import Path

import pytest

from blog_feed.core.types import FeedDocument, FeedItem
from blog_feed.output.rss import render_rss, write_rss


def _doc(items, custom_data="<language>en-us</language>"):
    return FeedDocument(
        title="Neville Omangi | Blog",
        description="Musings on software development and technology.",
        site="https://aphilas.top/",
        items=items,
        custom_data=custom_data,
    )


def _scenario_items():
    return [
        FeedItem(link="/a", content="<p>Hi</p>", title="A", pub_date=date(2023, 1, 1)),
        FeedItem(link="/b", content="<p>Bye</p>", title="B", pub_date=date(2023, 2, 1)),
    ]


def _channel(xml: bytes) -> ET.Element:
    root = ET.fromstring(xml)
    assert root.tag == "rss"
    assert root.get("version") == "2.0"
    return root.find("channel")


def test_scenario_items_serialize_with_descriptions():
    channel = _channel(render_rss(_doc(_scenario_items())))
    items = channel.findall("item")

    assert len(items) == 2
    assert "<p>Hi</p>" in items[0].findtext("description")
    assert "<script>" not in items[0].findtext("description")
    assert items[1].findtext("description") == "<p>Bye</p>"


def test_channel_metadata_and_language():
    channel = _channel(render_rss(_doc(_scenario_items())))

    assert channel.findtext("title") == "Neville Omangi | Blog"
    assert channel.findtext("description") == "Musings on software development and technology."
    assert channel.findtext("link") == "https://aphilas.top/"
    assert channel.findtext("language") == "en-us"

    children = [child.tag for child in channel]
    assert children.index("language") < children.index("item")


def test_item_links_are_absolute_and_used_as_guid():
    channel = _channel(render_rss(_doc(_scenario_items())))
    item = channel.find("item")

    assert item.findtext("link") == "https://aphilas.top/a"
    guid = item.find("guid")
    assert guid.text == "https://aphilas.top/a"
    assert guid.get("isPermaLink") == "true"


def test_absolute_item_links_are_kept():
    items = [FeedItem(link="https://other.example/x", content="<p>x</p>", title="X")]
    channel = _channel(render_rss(_doc(items)))

    assert channel.find("item").findtext("link") == "https://other.example/x"


def test_pub_date_and_categories():
    items = [
        FeedItem(
            link="/a",
            content="<p>a</p>",
            title="A",
            pub_date=date(2023, 1, 1),
            tags=["python", "web"],
        ),
        FeedItem(
            link="/b",
            content="<p>b</p>",
            title="B",
            pub_date=datetime(2023, 2, 1, 9, 30, tzinfo=timezone.utc),
        ),
    ]
    channel = _channel(render_rss(_doc(items)))
    first, second = channel.findall("item")

    assert first.findtext("pubDate") == "Sun, 01 Jan 2023 00:00:00 +0000"
    assert [c.text for c in first.findall("category")] == ["python", "web"]
    assert second.findtext("pubDate") == "Wed, 01 Feb 2023 09:30:00 +0000"
    assert second.findall("category") == []


def test_missing_pub_date_omits_element():
    items = [FeedItem(link="/a", content="<p>a</p>", title="A")]
    channel = _channel(render_rss(_doc(items)))

    assert channel.find("item").find("pubDate") is None


def test_items_keep_document_order():
    items = [FeedItem(link=f"/{n}", content="<p>x</p>", title=n) for n in ["c", "a", "b"]]
    channel = _channel(render_rss(_doc(items)))

    assert [item.findtext("title") for item in channel.findall("item")] == ["c", "a", "b"]


def test_empty_custom_data_adds_nothing():
    channel = _channel(render_rss(_doc(_scenario_items(), custom_data="")))

    assert channel.find("language") is None


def test_invalid_custom_data_raises():
    with pytest.raises(ValueError):
        render_rss(_doc(_scenario_items(), custom_data="<language>en-us"))


def test_unpretty_output_is_still_well_formed():
    channel = _channel(render_rss(_doc(_scenario_items()), pretty=False))

    assert len(channel.findall("item")) == 2


def test_write_rss_creates_parent_directories(tmp_path: Path):
    path = write_rss(_doc(_scenario_items()), tmp_path / "dist" / "rss.xml")

    assert path.exists()
    assert len(_channel(path.read_bytes()).findall("item")) == 2


def test_body_is_also_emitted_as_content_encoded():
    channel = _channel(render_rss(_doc(_scenario_items())))
    encoded = [
        item.findtext("{http://purl.org/rss/1.0/modules/content/}encoded")
        for item in channel.findall("item")
    ]

    assert encoded == ["<p>Hi</p>", "<p>Bye</p>"]


def test_xml_illegal_characters_do_not_break_serialization():
    items = [
        FeedItem(
            link="/a",
            content="<p>form\x0cfeed</p>",
            title="Ti\x01tle",
            tags=["ta\x0bg"],
            pub_date=date(2023, 1, 1),
        )
    ]
    channel = _channel(render_rss(_doc(items)))
    item = channel.find("item")

    assert item.findtext("title") == "Title"
    assert item.findtext("description") == "<p>formfeed</p>"
    assert [c.text for c in item.findall("category")] == ["tag"]
