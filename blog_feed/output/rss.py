"""
RSS 2.0 serialization of a ``FeedDocument``.

feedgen builds the channel and items. lxml then splices the document's
``custom_data`` into ``<channel>`` ahead of the first ``<item>`` and adds
each item's body as ``<content:encoded>``.
"""

from __future__ import annotations

from datetime import date, datetime, timezone
from pathlib import Path
from urllib.parse import urljoin

from feedgen.feed import FeedGenerator
from lxml import etree

from ..core.sanitize import strip_xml_illegal
from ..core.types import FeedDocument, FeedItem

CONTENT_NS = "http://purl.org/rss/1.0/modules/content/"


def render_rss(doc: FeedDocument, pretty: bool = True) -> bytes:
    """Serialize ``doc`` as RSS 2.0 XML.

    Args:
        doc: The feed document to serialize
        pretty: Whether to indent the output

    Returns:
        UTF-8 encoded XML, including the XML declaration

    Raises:
        ValueError: If ``doc.custom_data`` is not well-formed XML, or a
            required channel field is empty
    """
    fg = FeedGenerator()
    fg.title(strip_xml_illegal(doc.title))
    fg.link(href=strip_xml_illegal(doc.site), rel="alternate")
    fg.description(strip_xml_illegal(doc.description))

    for item in doc.items:
        _add_item(fg, item, doc.site)

    parser = etree.XMLParser(remove_blank_text=True)
    root = etree.fromstring(fg.rss_str(pretty=False), parser)
    channel = root.find("channel")
    if doc.custom_data.strip():
        _inject_custom_data(channel, doc.custom_data)
    _add_encoded_content(channel, doc.items)

    return etree.tostring(root, xml_declaration=True, encoding="UTF-8", pretty_print=pretty)


def write_rss(doc: FeedDocument, output_path: Path, pretty: bool = True) -> Path:
    """Render ``doc`` and write it to ``output_path``."""
    output_path.parent.mkdir(parents=True, exist_ok=True)
    output_path.write_bytes(render_rss(doc, pretty=pretty))
    return output_path


def _add_item(fg: FeedGenerator, item: FeedItem, site: str) -> None:
    link = strip_xml_illegal(urljoin(site, item.link))
    # feedgen prepends unless told otherwise; items must keep input order.
    entry = fg.add_entry(order="append")
    entry.title(strip_xml_illegal(item.title))
    entry.link(href=link)
    entry.guid(link, permalink=True)
    entry.description(strip_xml_illegal(item.content))
    if item.pub_date is not None:
        entry.pubDate(_as_utc_datetime(item.pub_date))
    for tag in item.tags:
        entry.category(term=strip_xml_illegal(tag))


def _as_utc_datetime(value: date | datetime) -> datetime:
    if isinstance(value, datetime):
        if value.tzinfo is None:
            return value.replace(tzinfo=timezone.utc)
        return value
    return datetime(value.year, value.month, value.day, tzinfo=timezone.utc)


def _inject_custom_data(channel: etree._Element, custom_data: str) -> None:
    try:
        fragment = etree.fromstring(f"<custom>{custom_data}</custom>")
    except etree.XMLSyntaxError as exc:
        raise ValueError(f"Invalid custom feed data: {exc}") from exc

    first_item = channel.find("item")
    index = channel.index(first_item) if first_item is not None else len(channel)
    for offset, element in enumerate(list(fragment)):
        channel.insert(index + offset, element)


def _add_encoded_content(channel: etree._Element, items: list[FeedItem]) -> None:
    for element, item in zip(channel.findall("item"), items):
        encoded = etree.SubElement(element, f"{{{CONTENT_NS}}}encoded")
        encoded.text = strip_xml_illegal(item.content)
