"""
Readability content extraction.

Turns a fully rendered HTML document into a structured article:

1. HtmlTree: tolerant single-pass parser (``dom``)
2. Selector/Query: small CSS-like selector language (``selectors``)
3. ContentScorer: article-likelihood score and validity gates (``scorer``)
4. MainContentLocator: site rules, semantic selectors, density and dynamic-content fallbacks (``locator``)
5. BlockExtractor: typed blocks with formatting metadata (``blocks``)
6. TextNormalizer: entity decoding, whitespace, boilerplate and duplicate filtering (``normalizer``)
"""

from .async_extractor import AsyncArticleExtractor
from .blocks import BlockExtractor
from .dom import HtmlDocument, HtmlNode, HtmlTreeBuilder, parse
from .engine import ReadabilityEngine, extract_article
from .locator import MainContentLocator
from .metadata import MetadataExtractor
from .models import BlockType, ContentBlock, ExtractedArticle, LocatorResult, LocatorStage
from .normalizer import TextNormalizer
from .protocols import Extractor
from .scorer import ContentScorer
from .selectors import query_selector, query_selector_all
from .site_rules import SITE_RULES, SiteRule

__all__ = [
    "AsyncArticleExtractor",
    "BlockExtractor",
    "BlockType",
    "ContentBlock",
    "ContentScorer",
    "ExtractedArticle",
    "Extractor",
    "HtmlDocument",
    "HtmlNode",
    "HtmlTreeBuilder",
    "LocatorResult",
    "LocatorStage",
    "MainContentLocator",
    "MetadataExtractor",
    "ReadabilityEngine",
    "SITE_RULES",
    "SiteRule",
    "TextNormalizer",
    "extract_article",
    "parse",
    "query_selector",
    "query_selector_all",
]
