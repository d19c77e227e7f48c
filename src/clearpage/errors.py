"""
Exceptions raised by the extraction engine.

Every failure of a single ``extract_article`` call surfaces as exactly one
subclass of :class:`ExtractionError`. None of them is recoverable by running
the same input again.
"""

from __future__ import annotations

from typing import Optional


class ExtractionError(Exception):
    """Base exception for extraction failures."""

    kind = "extraction_error"

    def __init__(self, message: str, *, url: Optional[str] = None) -> None:
        super().__init__(message)
        self.url = url


class MalformedInputError(ExtractionError):
    """Raised when the HTML reduces to nothing after script/style/comment stripping."""

    kind = "malformed_input"


class NoContentFoundError(ExtractionError):
    """Raised when no stage of the locator produced a content node."""

    kind = "no_content_found"


class InputTooLargeError(ExtractionError):
    """Raised when the input size, node count or nesting depth exceeds its cap."""

    kind = "input_too_large"

    def __init__(self, message: str, *, limit: int, url: Optional[str] = None) -> None:
        super().__init__(message, url=url)
        self.limit = limit
