"""
Exception types raised by the page extraction engine.

Only retrieval and parse failures are errors. Missing titles, images,
content or tags are reported as empty fields on the result.
"""

from __future__ import annotations

from typing import Optional


class PageClipError(Exception):
    """Base class for extraction failures tied to a single URL."""

    def __init__(self, message: str, *, url: str | None = None) -> None:
        super().__init__(message)
        self.url = url


class FetchError(PageClipError):
    """The target URL could not be retrieved."""

    def __init__(
        self,
        message: str,
        *,
        url: str | None = None,
        status: Optional[int] = None,
        attempts: int = 0,
    ) -> None:
        super().__init__(message, url=url)
        self.status = status
        self.attempts = attempts


class ParseError(PageClipError):
    """The retrieved body could not be parsed as HTML at all."""
