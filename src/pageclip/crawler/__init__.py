"""Page retrieval over HTTP."""

from .http_client import FetchedPage, HttpClient

__all__ = ["FetchedPage", "HttpClient"]
