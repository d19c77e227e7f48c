"""
Title, author, site name and excerpt detection.

These run against the whole parsed document, not the chosen content node.
"""

from __future__ import annotations

import re
from typing import Optional, Sequence

from .dom import HtmlDocument, HtmlNode, text_content
from .models import BlockType, ContentBlock
from .normalizer import clean_text
from .selectors import query_selector, query_selector_all
from .site_rules import SiteRule, host_of

UNTITLED = "Untitled"

HEADLINE_SELECTORS = (
    "[itemprop=headline]",
    "meta[property=og:title]",
    ".article-title",
    ".post-title",
    ".entry-title",
)

AUTHOR_SELECTORS = (
    "[itemprop=author]",
    "[class*=author]",
    "[rel=author]",
    ".byline",
    ".meta-author",
)

SITE_NAME_SELECTORS = (
    "meta[property=og:site_name]",
    "meta[name=application-name]",
)

DESCRIPTION_SELECTORS = (
    "meta[name=description]",
    "meta[property=og:description]",
)

# Longer matches are bios or whole bylines rather than a name
MAX_AUTHOR_LENGTH = 100

_BY_PREFIX_RE = re.compile(r"^[Bb]y\s+")


def node_value(node: HtmlNode) -> str:
    """Cleaned text of an element, or its ``content`` attribute for ``<meta>``."""
    if node.tag == "meta":
        return clean_text(node.get("content", "") or "")
    return clean_text(text_content(node))


def first_value(document: HtmlDocument, selectors: Sequence[str]) -> Optional[str]:
    for selector in selectors:
        for node in query_selector_all(document.root, selector):
            value = node_value(node)
            if value:
                return value
    return None


class MetadataExtractor:
    """Finds article-level metadata in a parsed document."""

    def __init__(self, document: HtmlDocument, url: str, rule: Optional[SiteRule] = None) -> None:
        self.document = document
        self.url = url
        self.rule = rule

    def title(self) -> str:
        headline = first_value(self.document, HEADLINE_SELECTORS)
        if headline:
            return headline
        # Only the first <h1> and the first <title> are candidates
        for tag in ("h1", "title"):
            node = query_selector(self.document.root, tag)
            value = node_value(node) if node is not None else ""
            if value:
                return value
        return UNTITLED

    def author(self) -> Optional[str]:
        if self.rule and self.rule.author:
            return self.rule.author
        for selector in AUTHOR_SELECTORS + ("meta[name=author]",):
            for node in query_selector_all(self.document.root, selector):
                value = _BY_PREFIX_RE.sub("", node_value(node)).strip()
                if value and len(value) <= MAX_AUTHOR_LENGTH:
                    return value
        return None

    def site_name(self) -> Optional[str]:
        if self.rule and self.rule.site_name:
            return self.rule.site_name
        return first_value(self.document, SITE_NAME_SELECTORS) or host_of(self.url) or None

    def excerpt(self, blocks: Sequence[ContentBlock], max_words: int = 30) -> Optional[str]:
        description = first_value(self.document, DESCRIPTION_SELECTORS)
        if description:
            return description
        for block in blocks:
            if block.type is BlockType.PARAGRAPH:
                words = block.content.split()
                if len(words) > max_words:
                    return " ".join(words[:max_words]) + "..."
                return block.content
        return None
