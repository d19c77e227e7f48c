"""
Protocols for pluggable HTML extraction strategies.
"""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from .models import ExtractedArticle


@runtime_checkable
class Extractor(Protocol):
    """Asynchronous HTML-to-ExtractedArticle strategy."""

    name: str

    async def extract(self, html: str, *, url: str) -> ExtractedArticle:
        """Extract an article from an HTML string.

        Args:
            html: Fully rendered HTML document
            url: URL the document was fetched from

        Returns:
            ExtractedArticle with the structured content
        """
        ...
