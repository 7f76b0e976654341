"""
Shared fixtures for pageclip tests.

Provides configuration, sample pages and a stub fetcher so extraction can
be tested without network access.
"""

from __future__ import annotations

from typing import AsyncGenerator

import pytest
import pytest_asyncio

from pageclip.config import Config
from pageclip.crawler.http_client import HttpClient

from tests.helpers import StubFetcher

# ============================================================================
# Pytest Configuration
# ============================================================================


def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line("markers", "unit: Unit tests for individual components")
    config.addinivalue_line("markers", "integration: Integration tests across modules")


# ============================================================================
# Core Test Fixtures
# ============================================================================


@pytest.fixture
def test_config() -> Config:
    """Configuration with no retry delay and console logging."""
    config = Config()
    config.fetch.backoff_factor = 0.0
    config.fetch.timeout = 5.0
    config.monitoring.log_file = None
    return config


@pytest.fixture
def stub_fetcher() -> StubFetcher:
    return StubFetcher()


@pytest_asyncio.fixture
async def http_client(test_config: Config) -> AsyncGenerator[HttpClient, None]:
    """Create and initialize an HTTP client."""
    client = HttpClient(test_config)
    await client.initialize()
    yield client
    await client.close()


@pytest.fixture
def sample_html() -> str:
    """A typical article page with every metadata signal present."""
    return """
<!DOCTYPE html>
<html>
<head>
    <title>Tag Title</title>
    <meta property="og:title" content="Og Title">
    <meta property="og:image" content="https://example.com/og.png">
    <meta property="twitter:image" content="https://example.com/twitter.png">
    <meta name="keywords" content="cooking,  , dessert ,,baking">
</head>
<body>
    <nav><p>Home</p></nav>
    <article>
        <h1>Chocolate   cake</h1>
        <p>Preheat the oven.</p>
    </article>
    <div class="content">Cont</div>
</body>
</html>
"""


@pytest.fixture
def minimal_html() -> str:
    return "<html><head></head><body><div>nothing here</div></body></html>"
