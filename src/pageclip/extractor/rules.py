"""
Ordered field rules evaluated against a parsed page.

Each field is resolved by walking a list of selector/reader pairs and taking
the first non-empty value. Resolvers never raise: any failure degrades to the
field's empty default and is logged.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, List, Optional, Sequence

import structlog
from bs4 import BeautifulSoup, Tag

from .content_processors import TagProcessor, TextProcessor

logger = structlog.get_logger(__name__)

Reader = Callable[[Tag], Optional[str]]


def read_attribute(name: str) -> Reader:
    def _read(element: Tag) -> Optional[str]:
        value = element.get(name)
        if isinstance(value, list):
            return " ".join(value)
        return value

    return _read


def read_text(element: Tag) -> str:
    return element.get_text()


@dataclass(frozen=True)
class FieldRule:
    """A CSS selector paired with how to read a value off the matched element."""

    selector: str
    read: Reader


TITLE_RULES: Sequence[FieldRule] = (
    FieldRule('meta[property="og:title"]', read_attribute("content")),
    FieldRule("title", read_text),
)

IMAGE_RULES: Sequence[FieldRule] = (
    FieldRule('meta[property="og:image"]', read_attribute("content")),
    FieldRule('meta[property="twitter:image"]', read_attribute("content")),
)

KEYWORDS_RULE = FieldRule('meta[name="keywords"]', read_attribute("content"))


def first_match(soup: BeautifulSoup, rules: Sequence[FieldRule]) -> str:
    """Return the first non-empty value produced by ``rules``, or ``""``."""
    for rule in rules:
        element = soup.select_one(rule.selector)
        if element is None:
            continue
        value = rule.read(element)
        if value:
            return value
    return ""


def resolve_title(soup: BeautifulSoup) -> str:
    try:
        return first_match(soup, TITLE_RULES)
    except Exception as e:
        logger.debug("Title resolution failed", error=str(e))
        return ""


def resolve_image(soup: BeautifulSoup) -> str:
    try:
        return first_match(soup, IMAGE_RULES)
    except Exception as e:
        logger.debug("Image resolution failed", error=str(e))
        return ""


def resolve_content(
    soup: BeautifulSoup,
    selectors: Sequence[str],
    paragraph_count: int,
    processor: TextProcessor,
) -> str:
    """
    Pick the page's main text.

    The first selector that matches any element decides the content, even if
    that element's text is empty. Only when no selector matches does the
    leading-paragraphs fallback run.
    """
    try:
        raw = None
        for selector in selectors:
            element = soup.select_one(selector)
            if element is not None:
                logger.debug("Content container matched", selector=selector)
                raw = element.get_text().strip()
                break

        if raw is None:
            paragraphs: List[str] = []
            if paragraph_count > 0:
                paragraphs = [p.get_text().strip() for p in soup.select("p", limit=paragraph_count)]
            raw = processor.join_paragraphs(paragraphs)

        return processor.normalize(raw)
    except Exception as e:
        logger.debug("Content resolution failed", error=str(e))
        return ""


def resolve_tags(soup: BeautifulSoup, processor: TagProcessor) -> List[str]:
    try:
        return processor.split(first_match(soup, (KEYWORDS_RULE,)))
    except Exception as e:
        logger.debug("Tag resolution failed", error=str(e))
        return []
