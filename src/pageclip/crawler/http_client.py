"""
HTTP client used to retrieve pages for extraction.
"""

from __future__ import annotations

import asyncio
import random
import time
from dataclasses import dataclass, field
from typing import Dict, Optional
from urllib.parse import urlparse

import aiohttp
import structlog

from pageclip.config.config import Config
from pageclip.exceptions import FetchError
from pageclip.observability.metrics import METRICS

logger = structlog.get_logger(__name__)

RETRYABLE_STATUSES = frozenset({429, 502, 503, 504})


@dataclass
class FetchedPage:
    """A retrieved response body with timing and attempt information."""

    url: str
    final_url: str
    status: int
    body: bytes
    headers: Dict[str, str] = field(default_factory=dict)
    encoding: Optional[str] = None
    attempts: int = 1
    start_ts: float = 0.0
    end_ts: float = 0.0

    @property
    def text(self) -> str:
        """Body decoded with the declared charset, or UTF-8 when none is usable."""
        if self.encoding:
            try:
                return self.body.decode(self.encoding, errors="replace")
            except LookupError:
                logger.debug("Unknown declared charset, using utf-8", url=self.url, encoding=self.encoding)
        return self.body.decode("utf-8", errors="replace")

    @property
    def ok(self) -> bool:
        return 200 <= self.status < 300


class HttpClient:
    """Single-GET page retriever with explicit timeout, redirect and retry policy."""

    def __init__(self, config: Config):
        self.config = config
        self.fetch_config = config.fetch
        self.session: Optional[aiohttp.ClientSession] = None
        self._in_flight_requests = 0

    async def initialize(self) -> None:
        """Initialize the HTTP client session."""
        if self.session is None:
            headers = {"User-Agent": self.fetch_config.user_agent} if self.fetch_config.user_agent else None
            self.session = aiohttp.ClientSession(headers=headers)
            logger.debug("HTTP client session initialized")

    async def close(self) -> None:
        """Close the HTTP client and release its connections."""
        if self.session:
            await self.session.close()
            self.session = None
            logger.debug("HTTP client closed")

    async def __aenter__(self) -> "HttpClient":
        await self.initialize()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.close()

    def _validate_url(self, url: str) -> None:
        try:
            parsed_url = urlparse(url)
            if not parsed_url.scheme or not parsed_url.netloc:
                raise ValueError("Missing scheme or netloc")
            # resolvers encode the host with the idna codec; empty or oversized labels fail there
            if parsed_url.hostname:
                parsed_url.hostname.encode("idna")
        except (ValueError, AttributeError, TypeError) as e:
            raise FetchError(f"Malformed URL: {e}", url=url) from e

        if parsed_url.scheme.lower() not in self.fetch_config.allowed_schemes:
            raise FetchError(f"Unsupported URL scheme: {parsed_url.scheme}", url=url)

    def _calculate_backoff_delay(self, attempt: int) -> float:
        """Calculate exponential backoff delay with jitter."""
        base_delay = self.fetch_config.backoff_factor * 2 ** (attempt - 1)
        jitter = random.uniform(0.8, 1.2)
        return base_delay * jitter

    def _track_in_flight(self, delta: int) -> None:
        self._in_flight_requests += delta
        METRICS["fetch_in_flight_requests"].inc(delta)

    async def fetch(self, url: str, *, timeout: Optional[float] = None, max_retries: Optional[int] = None) -> FetchedPage:
        """
        Fetch URL with a bounded number of attempts.

        Args:
            url: Absolute URL to fetch
            timeout: Per-attempt timeout in seconds (None = use config default)
            max_retries: Extra attempts after the first (None = use config default)

        Returns:
            FetchedPage with status, body and timing info

        Raises:
            FetchError: the URL is malformed, every attempt failed or timed out,
                or the final status is not 2xx while ``raise_for_status`` is set.
        """
        if self.session is None:
            raise RuntimeError("HTTP client not initialized. Call initialize() first.")

        self._validate_url(url)

        if timeout is None:
            timeout = self.fetch_config.timeout
        if max_retries is None:
            max_retries = self.fetch_config.max_retries

        start_time = time.time()
        attempt = 0
        last_error: Optional[BaseException] = None

        self._track_in_flight(1)
        try:
            while attempt < max_retries + 1:
                attempt += 1
                try:
                    async with asyncio.timeout(timeout):
                        async with self.session.get(
                            url,
                            allow_redirects=True,
                            max_redirects=self.fetch_config.max_redirects,
                        ) as response:
                            retry = response.status in RETRYABLE_STATUSES and attempt <= max_retries
                            if not retry:
                                body = await response.read()

                    if retry:
                        logger.info(
                            "Retrying request",
                            url=url,
                            status=response.status,
                            attempt=attempt,
                            max_retries=max_retries,
                        )
                        await asyncio.sleep(self._calculate_backoff_delay(attempt))
                        continue

                    end_time = time.time()
                    METRICS["fetch_responses_total"].labels(status_class=f"{response.status // 100}xx").inc()
                    METRICS["fetch_latency_seconds"].observe(end_time - start_time)

                    page = FetchedPage(
                        url=url,
                        final_url=str(response.url),
                        status=response.status,
                        body=body,
                        headers=dict(response.headers),
                        encoding=response.charset,
                        attempts=attempt,
                        start_ts=start_time,
                        end_ts=end_time,
                    )
                    if self.fetch_config.raise_for_status and not page.ok:
                        raise FetchError(
                            f"Non-success status {page.status}",
                            url=url,
                            status=page.status,
                            attempts=attempt,
                        )
                    return page

                except TimeoutError as e:
                    last_error = e
                    logger.warning("Request timed out", url=url, attempt=attempt, timeout=timeout)
                except (aiohttp.ClientError, ValueError) as e:
                    last_error = e
                    logger.warning("Request failed", url=url, attempt=attempt, error=str(e))

                if attempt < max_retries + 1:
                    await asyncio.sleep(self._calculate_backoff_delay(attempt))

            METRICS["fetch_latency_seconds"].observe(time.time() - start_time)
            if isinstance(last_error, TimeoutError):
                raise FetchError(f"Request timed out after {timeout}s", url=url, attempts=attempt) from last_error
            raise FetchError(f"Request failed: {last_error}", url=url, attempts=attempt) from last_error
        finally:
            self._track_in_flight(-1)
