"""
Page extractor: URL in, ExtractionResult out.

Retrieval and parsing failures abort the call with ``FetchError`` or
``ParseError``. Once a document parses, every field is best-effort and
falls back to its empty value.
"""

from __future__ import annotations

import asyncio
import time
from typing import Iterable, List, Optional, Union

import structlog
from bs4 import BeautifulSoup

from ..config.config import Config
from ..crawler.http_client import HttpClient
from ..exceptions import FetchError, PageClipError, ParseError
from ..observability.metrics import METRICS
from .content_processors import TagProcessor, TextProcessor
from .models import ExtractionResult
from .protocols import HtmlFetcher
from .rules import resolve_content, resolve_image, resolve_tags, resolve_title

logger = structlog.get_logger(__name__)


class PageExtractor:
    """
    Builds an ExtractionResult from a web page.

    The extractor holds no per-call state, so one instance can serve any
    number of concurrent ``extract`` calls.
    """

    name = "page"

    def __init__(self, config: Optional[Config] = None, fetcher: Optional[HtmlFetcher] = None) -> None:
        self.config = config if config is not None else Config()
        self.settings = self.config.extraction
        self.fetcher = fetcher
        self.text_processor = TextProcessor(preserve_paragraph_breaks=self.settings.preserve_paragraph_breaks)
        self.tag_processor = TagProcessor()
        self.logger = logger.bind(component="PageExtractor")

    def parse(self, markup: Union[str, bytes], *, url: Optional[str] = None) -> BeautifulSoup:
        """Parse markup permissively; only a total parser failure is an error."""
        try:
            return BeautifulSoup(markup, self.settings.parser)
        except Exception as e:
            raise ParseError(f"Could not parse HTML: {e}", url=url) from e

    def extract_html(self, markup: Union[str, bytes], url: str) -> ExtractionResult:
        """Run the field rules over already retrieved markup."""
        soup = self.parse(markup, url=url)
        return ExtractionResult(
            source_url=url,
            title=resolve_title(soup),
            content=resolve_content(
                soup,
                self.settings.content_selectors,
                self.settings.paragraph_fallback_count,
                self.text_processor,
            ),
            image_url=resolve_image(soup),
            tags=tuple(resolve_tags(soup, self.tag_processor)),
        )

    async def extract(self, url: str, *, timeout: Optional[float] = None) -> ExtractionResult:
        """
        Fetch ``url`` and extract its title, content, lead image and tags.

        Args:
            url: Absolute URL of the page
            timeout: Optional retrieval timeout in seconds; expiry is a FetchError

        Raises:
            FetchError: the page could not be retrieved
            ParseError: the body could not be parsed as HTML
        """
        if self.fetcher is None:
            raise RuntimeError("PageExtractor has no fetcher. Pass one or use pageclip.extract().")

        start_time = time.time()
        with structlog.contextvars.bound_contextvars(request_url=url):
            self.logger.info("Starting extraction")
            try:
                page = await self.fetcher.fetch(url, timeout=timeout)
                # Without a declared charset, let BeautifulSoup sniff <meta charset> from raw bytes.
                markup: Union[str, bytes] = page.text if page.encoding else page.body
                loop = asyncio.get_running_loop()
                result = await loop.run_in_executor(None, self.extract_html, markup, url)
            except FetchError as e:
                METRICS["extractions_total"].labels(outcome="fetch_error").inc()
                self.logger.warning("Extraction failed", reason="fetch", error=str(e), status=e.status)
                raise
            except ParseError as e:
                METRICS["extractions_total"].labels(outcome="parse_error").inc()
                self.logger.warning("Extraction failed", reason="parse", error=str(e))
                raise

            duration = time.time() - start_time
            METRICS["extractions_total"].labels(outcome="success").inc()
            METRICS["extraction_duration_seconds"].observe(duration)
            self.logger.info(
                "Extraction completed",
                has_title=bool(result.title),
                has_image=bool(result.image_url),
                content_length=len(result.content),
                tag_count=len(result.tags),
                duration=duration,
            )
            return result

    async def extract_many(
        self, urls: Iterable[str], *, timeout: Optional[float] = None
    ) -> List[Union[ExtractionResult, PageClipError]]:
        """
        Extract several URLs concurrently.

        Returns one entry per URL in input order: the result, or the
        FetchError/ParseError raised for that URL. Any other exception
        propagates.
        """
        outcomes = await asyncio.gather(*(self.extract(url, timeout=timeout) for url in urls), return_exceptions=True)
        for outcome in outcomes:
            if isinstance(outcome, BaseException) and not isinstance(outcome, PageClipError):
                raise outcome
        return outcomes  # type: ignore[return-value]


async def extract(url: str, *, config: Optional[Config] = None, timeout: Optional[float] = None) -> ExtractionResult:
    """One-shot extraction that opens and closes its own HTTP client."""
    config = config if config is not None else Config()
    async with HttpClient(config) as client:
        return await PageExtractor(config, fetcher=client).extract(url, timeout=timeout)
