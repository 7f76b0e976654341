"""
pageclip - pre-fill bookmark entries from any web page.
"""

from __future__ import annotations

__version__ = "0.1.0"

from .config import Config
from .exceptions import FetchError, PageClipError, ParseError
from .extractor import ExtractionResult, PageExtractor, extract

__all__ = [
    "__version__",
    "Config",
    "ExtractionResult",
    "FetchError",
    "PageClipError",
    "PageExtractor",
    "ParseError",
    "extract",
]
