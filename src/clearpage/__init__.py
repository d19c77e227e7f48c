"""
clearpage - readability engine for rendered web pages.
"""

from __future__ import annotations

__version__ = "0.1.0"

from .config import EngineConfig
from .errors import ExtractionError, InputTooLargeError, MalformedInputError, NoContentFoundError
from .extractor import BlockType, ContentBlock, ExtractedArticle, ReadabilityEngine, extract_article

__all__ = [
    "__version__",
    "BlockType",
    "ContentBlock",
    "EngineConfig",
    "ExtractedArticle",
    "ExtractionError",
    "InputTooLargeError",
    "MalformedInputError",
    "NoContentFoundError",
    "ReadabilityEngine",
    "extract_article",
]
