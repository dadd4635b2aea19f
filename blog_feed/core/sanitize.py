"""
Allow-list HTML sanitizer for feed content.

Rendered post HTML is cleaned before it is placed in the feed:
- tags outside the allow-list are unwrapped (their text is kept)
- script-like tags are removed together with their content
- comments, CDATA, processing instructions and doctypes are dropped
- attributes outside the allow-list, event handlers, and URLs with
  disallowed schemes are removed

The output of ``Sanitizer.sanitize`` is stable: feeding it back in returns
the same string.
"""

from __future__ import annotations

import logging
import re

from bs4 import BeautifulSoup, Comment, Tag
from bs4.element import CData, Declaration, Doctype, ProcessingInstruction

from ..config import SanitizeConfig

logger = logging.getLogger(__name__)

_NON_CONTENT_STRINGS = (Comment, CData, ProcessingInstruction, Doctype, Declaration)
_URL_ATTRIBUTES = {"href", "src", "cite", "action", "poster"}
_SCHEME_RE = re.compile(r"^([a-zA-Z][a-zA-Z0-9+.\-]*):")
# Browsers ignore whitespace and control characters inside a scheme.
_IGNORED_URL_CHARS_RE = re.compile(r"[\x00-\x20\x7f]+")
# Code points XML 1.0 cannot carry.
XML_ILLEGAL_RE = re.compile(r"[\x00-\x08\x0b\x0c\x0e-\x1f\ud800-\udfff\ufffe\uffff]")
# Whitespace the HTML tree builder collapses in whitespace-only strings.
_ASCII_SPACES = "\x20\x0a\x09\x0c\x0d"
_PRESERVE_WHITESPACE_TAGS = {"pre", "textarea"}


class Sanitizer:
    """HTML cleaner driven by a ``SanitizeConfig`` allow-list."""

    parser = "html.parser"

    def __init__(self, cfg: SanitizeConfig | None = None):
        cfg = cfg or SanitizeConfig()
        self.allowed_tags = {name.lower() for name in cfg.allowed_tags}
        self.non_text_tags = {name.lower() for name in cfg.non_text_tags}
        self.allowed_schemes = {scheme.lower() for scheme in cfg.allowed_schemes}
        self.allowed_attributes = {
            tag.lower(): {attr.lower() for attr in attrs}
            for tag, attrs in cfg.allowed_attributes.items()
        }

    def sanitize(self, html: str | None) -> str:
        """Return ``html`` with every disallowed construct removed.

        Args:
            html: Rendered HTML, possibly malformed or empty

        Returns:
            The cleaned HTML fragment (empty string for empty input)
        """
        html = strip_xml_illegal(html or "")
        if not html.strip():
            return ""
        soup = BeautifulSoup(html, self.parser)
        self._clean_children(soup)
        self._normalize_strings(soup)
        cleaned = str(soup)
        if not cleaned.strip():
            return ""
        if len(cleaned) != len(html):
            logger.debug("Sanitized HTML: %d -> %d chars", len(html), len(cleaned))
        return cleaned

    def _normalize_strings(self, soup: BeautifulSoup) -> None:
        # Removing nodes leaves neighbouring strings split apart. Rejoin them
        # and collapse whitespace-only runs the way the parser would on input.
        for string in list(soup.find_all(string=True)):
            cleaned = strip_xml_illegal(string)
            if not cleaned:
                string.extract()
            elif cleaned != string:
                string.replace_with(type(string)(cleaned))
        soup.smooth()
        for string in list(soup.find_all(string=True)):
            if string.strip(_ASCII_SPACES):
                continue
            if any(parent.name in _PRESERVE_WHITESPACE_TAGS for parent in string.parents):
                continue
            collapsed = "\n" if "\n" in string else " "
            if collapsed != string:
                string.replace_with(type(string)(collapsed))

    def _clean_children(self, node: Tag) -> None:
        for child in list(node.children):
            if isinstance(child, _NON_CONTENT_STRINGS):
                child.extract()
                continue
            if not isinstance(child, Tag):
                continue

            name = child.name.lower()
            if name in self.non_text_tags:
                child.decompose()
                continue

            self._clean_children(child)
            if name not in self.allowed_tags:
                child.unwrap()
                continue
            self._clean_attributes(child, name)

    def _clean_attributes(self, tag: Tag, name: str) -> None:
        allowed = self.allowed_attributes.get(name, set()) | self.allowed_attributes.get("*", set())
        for attr in list(tag.attrs):
            key = attr.lower()
            if key.startswith("on") or key not in allowed:
                del tag.attrs[attr]
                continue
            if key in _URL_ATTRIBUTES and not self._is_allowed_url(tag.attrs[attr]):
                del tag.attrs[attr]
                continue
            value = tag.attrs[attr]
            if isinstance(value, list):
                tag.attrs[attr] = [strip_xml_illegal(v) for v in value]
            else:
                tag.attrs[attr] = strip_xml_illegal(value)

    def _is_allowed_url(self, value: str | list[str]) -> bool:
        if isinstance(value, list):
            value = " ".join(value)
        compact = _IGNORED_URL_CHARS_RE.sub("", value)
        match = _SCHEME_RE.match(compact)
        if not match:
            return True
        return match.group(1).lower() in self.allowed_schemes


def strip_xml_illegal(text: str) -> str:
    """Remove characters that cannot appear in an XML 1.0 document."""
    return XML_ILLEGAL_RE.sub("", text)


def sanitize_html(html: str | None, cfg: SanitizeConfig | None = None) -> str:
    """Sanitize ``html`` with a one-off ``Sanitizer``."""
    return Sanitizer(cfg).sanitize(html)
