"""
FastAPI application exposing the page extractor to the new-entry form.
"""

from __future__ import annotations

from contextlib import asynccontextmanager
from typing import Any, AsyncGenerator, Dict, Optional

import structlog
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse, Response
from pydantic import BaseModel, Field

from pageclip import __version__
from pageclip.config.config import Config, settings
from pageclip.crawler.http_client import HttpClient
from pageclip.exceptions import PageClipError
from pageclip.extractor.page_extractor import PageExtractor
from pageclip.extractor.protocols import HtmlFetcher
from pageclip.observability.metrics import export_prometheus

logger = structlog.get_logger(__name__)

SCRAPE_FAILED_MESSAGE = "Failed to scrape URL"


class ScrapeRequest(BaseModel):
    url: str = Field(min_length=1, description="Absolute URL of the page to extract.")


def create_app(config: Optional[Config] = None, fetcher: Optional[HtmlFetcher] = None) -> FastAPI:
    """
    Build the API app.

    When no fetcher is given, the app owns an HttpClient for its lifetime.
    """
    app_config: Config = config if config is not None else settings

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
        client: Optional[HttpClient] = None
        page_fetcher = fetcher
        if page_fetcher is None:
            client = HttpClient(app_config)
            await client.initialize()
            page_fetcher = client
        app.state.extractor = PageExtractor(app_config, fetcher=page_fetcher)
        logger.info("pageclip API started", version=__version__)

        yield

        if client is not None:
            await client.close()
        logger.info("pageclip API stopped")

    app = FastAPI(title="pageclip", version=__version__, lifespan=lifespan)

    @app.post("/api/scrape")
    async def scrape(payload: ScrapeRequest, request: Request) -> Any:
        """Extract a pre-filled entry from the given URL."""
        extractor: PageExtractor = request.app.state.extractor
        try:
            result = await extractor.extract(payload.url)
        except PageClipError as e:
            logger.error("Error scraping URL", url=payload.url, error=str(e), error_type=type(e).__name__)
            return JSONResponse(status_code=500, content={"error": SCRAPE_FAILED_MESSAGE})
        return result.to_dict()

    @app.get("/health")
    async def health() -> Dict[str, str]:
        return {"status": "ok"}

    @app.get("/metrics")
    async def metrics() -> Response:
        """Endpoint for Prometheus to scrape."""
        return Response(export_prometheus(), media_type="text/plain")

    return app


app = create_app()
