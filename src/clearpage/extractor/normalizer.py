"""
Clean-up passes applied to extracted blocks.

Each pass is a separate method so it can be tested on its own; ``normalize``
runs them in order: fragment joining, entity decoding and whitespace collapse,
boilerplate filtering, duplicate suppression, title de-duplication.
"""

from __future__ import annotations

import html
import re
from typing import Dict, Iterable, List, Optional

import structlog

from ..config.config import NormalizerConfig
from ..observability import increment
from .dom import join_text
from .models import BlockType, ContentBlock

logger = structlog.get_logger(__name__)

_MARKUP_ONLY_RE = re.compile(r"^\s*<[^>]+>\s*$")


def decode_entities(text: str) -> str:
    """Decode HTML character references; ``&nbsp;`` becomes a plain space."""
    return html.unescape(text).replace("\xa0", " ")


def collapse_whitespace(text: str) -> str:
    return " ".join(text.split())


def clean_text(text: str) -> str:
    """Decode entities and collapse whitespace, for titles and other single-line values."""
    return collapse_whitespace(decode_entities(text))


class TextNormalizer:
    """Filters and cleans block sequences produced by the block extractor."""

    def __init__(self, config: Optional[NormalizerConfig] = None) -> None:
        self.config = config or NormalizerConfig()
        self.logger = logger.bind(component="TextNormalizer")

    # --- Passes ---

    def join_fragments(self, blocks: Iterable[ContentBlock]) -> List[ContentBlock]:
        """Merge runs of adjacent inline text fragments into paragraphs and drop line breaks."""
        result: List[ContentBlock] = []
        run: List[ContentBlock] = []

        def flush() -> None:
            if not run:
                return
            text = join_text([block.content for block in run])
            if text.strip():
                metadata: Dict[str, bool] = {}
                for block in run:
                    for flag, value in block.metadata.items():
                        metadata[flag] = metadata.get(flag, False) or value
                result.append(ContentBlock.paragraph(text, metadata))
            run.clear()

        for block in blocks:
            if block.inline:
                run.append(block)
                continue
            flush()
            if not block.is_break:
                result.append(block)
        flush()
        return result

    def clean(self, blocks: Iterable[ContentBlock]) -> List[ContentBlock]:
        """Decode entities, collapse whitespace and drop blocks left empty."""
        result: List[ContentBlock] = []
        for block in blocks:
            if block.type is BlockType.CODE:
                content = decode_entities(block.content)
                if not content.strip():
                    continue
                result.append(block.with_content(content))
            elif block.type is BlockType.IMAGE:
                alt = clean_text(block.alt) if block.alt else block.alt
                result.append(ContentBlock.image(decode_entities(block.content).strip(), alt))
            else:
                content = clean_text(block.content)
                if content:
                    result.append(block.with_content(content))
        return result

    def is_boilerplate(self, text: str) -> bool:
        lowered = text.strip().lower()
        if lowered in self.config.navigation_labels:
            return True
        if _MARKUP_ONLY_RE.match(lowered):
            return True
        return any(phrase in lowered for phrase in self.config.boilerplate_phrases)

    def filter_boilerplate(self, blocks: Iterable[ContentBlock]) -> List[ContentBlock]:
        return [block for block in blocks if not (block.is_text and self.is_boilerplate(block.content))]

    def suppress_duplicates(self, blocks: Iterable[ContentBlock]) -> List[ContentBlock]:
        """Keep only the first block for each distinct trimmed content string."""
        seen = set()
        result = []
        for block in blocks:
            key = block.content.strip()
            if key in seen:
                continue
            seen.add(key)
            result.append(block)
        return result

    def drop_title_heading(self, blocks: List[ContentBlock], title: str) -> List[ContentBlock]:
        for index, block in enumerate(blocks):
            if block.type is BlockType.HEADING and block.content == title:
                return blocks[:index] + blocks[index + 1 :]
        return blocks

    # --- Pipeline ---

    def normalize(self, blocks: Iterable[ContentBlock], title: Optional[str] = None) -> List[ContentBlock]:
        joined = self.join_fragments(blocks)
        cleaned = self.clean(joined)
        filtered = self.filter_boilerplate(cleaned)
        unique = self.suppress_duplicates(filtered)
        final = self.drop_title_heading(unique, title) if title else unique

        dropped = {
            "empty": len(joined) - len(cleaned),
            "boilerplate": len(cleaned) - len(filtered),
            "duplicate": len(filtered) - len(unique),
            "title": len(unique) - len(final),
        }
        for reason, count in dropped.items():
            if count:
                increment("blocks_dropped", count, labels={"reason": reason})
        self.logger.debug("Normalized blocks", kept=len(final), **{f"dropped_{k}": v for k, v in dropped.items()})
        return final

    # --- Reading time ---

    def word_count(self, blocks: Iterable[ContentBlock]) -> int:
        return sum(len(block.content.split()) for block in blocks if block.is_text)

    def reading_seconds(self, blocks: Iterable[ContentBlock]) -> float:
        """Reading time in seconds at ``words_per_minute`` (250 by default)."""
        return self.word_count(blocks) / self.config.words_per_minute * 60
