"""
Protocols for pluggable page retrieval.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Optional, Protocol, runtime_checkable

if TYPE_CHECKING:
    from pageclip.crawler.http_client import FetchedPage


@runtime_checkable
class HtmlFetcher(Protocol):
    """Anything that can turn a URL into a fetched page."""

    async def fetch(self, url: str, *, timeout: Optional[float] = None) -> FetchedPage:
        """Retrieve the page at ``url``.

        Raises:
            FetchError: when the page cannot be retrieved
        """
        ...
