"""
Page content extraction.

Turns a URL into a best-effort record of title, main text, lead image and
keyword tags using an ordered list of selector rules per field.
"""

from .content_processors import TagProcessor, TextProcessor
from .models import ExtractionResult
from .page_extractor import PageExtractor, extract
from .protocols import HtmlFetcher
from .rules import FieldRule, IMAGE_RULES, TITLE_RULES

__all__ = [
    "ExtractionResult",
    "FieldRule",
    "HtmlFetcher",
    "IMAGE_RULES",
    "PageExtractor",
    "TITLE_RULES",
    "TagProcessor",
    "TextProcessor",
    "extract",
]
