"""
Top-level extraction pipeline.

``html -> HtmlDocument -> main-content node -> blocks -> normalized article``.
The pipeline is a pure, synchronous function of its inputs; independent calls
share nothing but the process-wide metrics.
"""

from __future__ import annotations

import time
from typing import Optional, Sequence

import structlog

from ..config.config import EngineConfig
from ..errors import ExtractionError, InputTooLargeError
from ..observability import histogram, increment
from .blocks import BlockExtractor
from .dom import HtmlTreeBuilder
from .locator import MainContentLocator
from .metadata import MetadataExtractor
from .models import ExtractedArticle
from .normalizer import TextNormalizer
from .scorer import ContentScorer
from .site_rules import SITE_RULES, SiteRule

logger = structlog.get_logger(__name__)


class ReadabilityEngine:
    """
    Turns one rendered HTML document into an :class:`ExtractedArticle`.

    Raises :class:`~clearpage.errors.MalformedInputError`,
    :class:`~clearpage.errors.NoContentFoundError` or
    :class:`~clearpage.errors.InputTooLargeError`; no partial article is ever
    returned.
    """

    def __init__(self, config: Optional[EngineConfig] = None, rules: Sequence[SiteRule] = SITE_RULES) -> None:
        self.config = config or EngineConfig()
        self.builder = HtmlTreeBuilder(
            max_nodes=self.config.limits.max_nodes,
            max_depth=self.config.limits.max_depth,
        )
        self.scorer = ContentScorer(self.config.scoring, self.config.validation)
        self.locator = MainContentLocator(self.scorer, rules, self.config.validation)
        self.normalizer = TextNormalizer(self.config.normalizer)
        self.logger = logger.bind(component="ReadabilityEngine")

    def extract(self, html: str, source_url: str) -> ExtractedArticle:
        if not isinstance(html, str):
            raise TypeError(f"html must be str, not {type(html).__name__}")

        start_time = time.perf_counter()
        log = self.logger.bind(url=source_url)
        try:
            article = self._extract(html, source_url)
        except ExtractionError as e:
            e.url = e.url or source_url
            increment("extractions", labels={"outcome": e.kind})
            log.warning("Extraction failed", error=str(e), error_type=e.kind)
            raise

        duration = time.perf_counter() - start_time
        increment("extractions", labels={"outcome": "success"})
        increment("locator_stage", labels={"stage": article.strategy})
        histogram("extraction_duration_seconds", duration)
        log.info(
            "Extraction completed",
            title=article.title,
            strategy=article.strategy,
            blocks=len(article.blocks),
            words=article.word_count,
            extraction_time=duration,
        )
        return article

    def _extract(self, html: str, source_url: str) -> ExtractedArticle:
        max_chars = self.config.limits.max_input_chars
        if len(html) > max_chars:
            raise InputTooLargeError(f"HTML exceeds {max_chars} characters", limit=max_chars)

        document = self.builder.parse(html)
        located = self.locator.locate(document, source_url)

        metadata = MetadataExtractor(document, source_url, located.rule)
        title = metadata.title()

        raw_blocks = BlockExtractor(located.document, base_url=source_url).extract(located.node)
        blocks = self.normalizer.normalize(raw_blocks, title)

        return ExtractedArticle(
            title=title,
            blocks=tuple(blocks),
            estimated_reading_seconds=self.normalizer.reading_seconds(blocks),
            author=metadata.author(),
            site_name=metadata.site_name(),
            excerpt=metadata.excerpt(blocks, self.config.normalizer.excerpt_words),
            source_url=source_url,
            strategy=located.stage.value,
        )


def extract_article(html: str, source_url: str, *, config: Optional[EngineConfig] = None) -> ExtractedArticle:
    """Extract a structured article from fully rendered ``html`` fetched from ``source_url``."""
    return ReadabilityEngine(config).extract(html, source_url)
