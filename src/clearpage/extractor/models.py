"""
Data models for extraction results.
"""

from __future__ import annotations

import math
import re
from dataclasses import dataclass, field, replace
from enum import Enum
from typing import TYPE_CHECKING, Any, Dict, Optional, Tuple

if TYPE_CHECKING:
    from .dom import HtmlDocument, HtmlNode
    from .site_rules import SiteRule

LINE_BREAK = "\n"

_BLANK_LINES_RE = re.compile(r"\n{3,}")


class BlockType(str, Enum):
    """Kind of a content block."""

    PARAGRAPH = "paragraph"
    HEADING = "heading"
    QUOTE = "quote"
    LIST = "list"
    CODE = "code"
    IMAGE = "image"


@dataclass(frozen=True, slots=True)
class ContentBlock:
    """One semantic unit of extracted content.

    ``content`` is display text, or the image URL for ``IMAGE`` blocks.
    ``level`` is set for headings, ``ordered`` for list items, ``alt`` for images.
    """

    type: BlockType
    content: str
    metadata: Dict[str, bool] = field(default_factory=dict)
    level: Optional[int] = None
    ordered: Optional[bool] = None
    alt: Optional[str] = None
    # Bare text run outside any block element; merged with its neighbours later
    inline: bool = field(default=False, compare=False, repr=False)

    def __post_init__(self) -> None:
        if self.type is BlockType.HEADING and (self.level is None or not 1 <= self.level <= 6):
            raise ValueError("Heading level must be between 1 and 6")
        if self.type is BlockType.LIST and self.ordered is None:
            raise ValueError("List blocks must say whether they are ordered")
        if self.type is not BlockType.IMAGE and not self.content:
            raise ValueError(f"{self.type.value} block content must not be empty")

    # --- Constructors ---

    @classmethod
    def paragraph(cls, text: str, metadata: Optional[Dict[str, bool]] = None, *, inline: bool = False) -> ContentBlock:
        return cls(BlockType.PARAGRAPH, text, dict(metadata or {}), inline=inline)

    @classmethod
    def heading(cls, level: int, text: str, metadata: Optional[Dict[str, bool]] = None) -> ContentBlock:
        return cls(BlockType.HEADING, text, dict(metadata or {}), level=level)

    @classmethod
    def quote(cls, text: str, metadata: Optional[Dict[str, bool]] = None) -> ContentBlock:
        return cls(BlockType.QUOTE, text, dict(metadata or {}))

    @classmethod
    def list_item(cls, text: str, ordered: bool, metadata: Optional[Dict[str, bool]] = None) -> ContentBlock:
        return cls(BlockType.LIST, text, dict(metadata or {}), ordered=ordered)

    @classmethod
    def code(cls, text: str) -> ContentBlock:
        return cls(BlockType.CODE, text)

    @classmethod
    def image(cls, src: str, alt: Optional[str] = None) -> ContentBlock:
        return cls(BlockType.IMAGE, src, alt=alt)

    @classmethod
    def line_break(cls) -> ContentBlock:
        return cls(BlockType.PARAGRAPH, LINE_BREAK)

    @property
    def is_break(self) -> bool:
        return self.type is BlockType.PARAGRAPH and self.content == LINE_BREAK

    @property
    def is_text(self) -> bool:
        return self.type is not BlockType.IMAGE

    def with_content(self, content: str) -> ContentBlock:
        return replace(self, content=content)

    def to_text(self) -> str:
        if self.type is BlockType.HEADING:
            return f"\n{self.content}\n"
        if self.type is BlockType.QUOTE:
            return f'"{self.content}"'
        if self.type is BlockType.LIST:
            return f"• {self.content}"
        if self.type is BlockType.IMAGE:
            return self.alt or ""
        return self.content

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {"type": self.type.value, "content": self.content}
        if self.level is not None:
            data["level"] = self.level
        if self.ordered is not None:
            data["ordered"] = self.ordered
        if self.type is BlockType.IMAGE:
            data["alt"] = self.alt
        if self.metadata:
            data["metadata"] = dict(self.metadata)
        return data


class LocatorStage(str, Enum):
    """Which stage of the main-content locator chose the node."""

    SITE_RULE = "site_rule"
    SEMANTIC = "semantic"
    DENSITY = "density"
    DYNAMIC = "dynamic"
    BEST_EFFORT = "best_effort"


@dataclass(frozen=True)
class LocatorResult:
    """Chosen main-content node and the document that owns it.

    For site rules the document is a pruned clone, not the parsed input.
    """

    node: HtmlNode
    document: HtmlDocument
    stage: LocatorStage
    rule: Optional[SiteRule] = None

    @property
    def confident(self) -> bool:
        return self.stage in (LocatorStage.SITE_RULE, LocatorStage.SEMANTIC, LocatorStage.DYNAMIC)


@dataclass(frozen=True, slots=True)
class ExtractedArticle:
    """Final, caller-owned result of one extraction."""

    title: str
    blocks: Tuple[ContentBlock, ...]
    estimated_reading_seconds: float
    author: Optional[str] = None
    site_name: Optional[str] = None
    excerpt: Optional[str] = None
    source_url: Optional[str] = None
    strategy: str = LocatorStage.SEMANTIC.value

    def __post_init__(self) -> None:
        if not self.title:
            raise ValueError("Article title must not be empty")
        if self.estimated_reading_seconds < 0:
            raise ValueError("Reading time must not be negative")

    @property
    def word_count(self) -> int:
        return sum(len(block.content.split()) for block in self.blocks if block.is_text)

    @property
    def reading_minutes(self) -> int:
        return max(1, math.ceil(self.estimated_reading_seconds / 60))

    @property
    def text_content(self) -> str:
        text = "\n".join(block.to_text() for block in self.blocks)
        return _BLANK_LINES_RE.sub("\n\n", text).strip()

    def to_dict(self) -> Dict[str, Any]:
        return {
            "title": self.title,
            "author": self.author,
            "site_name": self.site_name,
            "excerpt": self.excerpt,
            "source_url": self.source_url,
            "strategy": self.strategy,
            "estimated_reading_seconds": self.estimated_reading_seconds,
            "blocks": [block.to_dict() for block in self.blocks],
        }
