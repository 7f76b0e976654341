"""
Text cleanup applied to extracted page fields.

- Text: whitespace normalization for the main content block
- Tags: keyword list splitting and trimming
"""

from __future__ import annotations

import re
from typing import List

WHITESPACE_RUN = re.compile(r"\s+")
BLANK_LINE_RUN = re.compile(r"\n\s*\n")
PARAGRAPH_SEPARATOR = "\n\n"


class TextProcessor:
    """
    Normalizes free text pulled out of the DOM.

    Runs two passes in a fixed order:

    1. every whitespace run collapses to a single space, except runs that hold
       a blank line, which become one paragraph break when
       ``preserve_paragraph_breaks`` is set;
    2. any newline, optional whitespace, newline sequence becomes exactly one
       blank line.

    With ``preserve_paragraph_breaks=False`` the first pass flattens
    everything and the second pass never matches.

    BeautifulSoup reduces whitespace-only strings that hold a newline to a
    single ``"\n"`` while building the tree, so blank lines between sibling
    elements never reach this processor. Breaks survive only when a text node
    carries them itself, or when paragraphs are joined with
    :meth:`join_paragraphs`.
    """

    def __init__(self, *, preserve_paragraph_breaks: bool = True) -> None:
        self.preserve_paragraph_breaks = preserve_paragraph_breaks

    def _collapse_run(self, match: re.Match[str]) -> str:
        if self.preserve_paragraph_breaks and match.group(0).count("\n") >= 2:
            return PARAGRAPH_SEPARATOR
        return " "

    def normalize(self, text: str) -> str:
        if not text:
            return ""
        text = WHITESPACE_RUN.sub(self._collapse_run, text)
        text = BLANK_LINE_RUN.sub(PARAGRAPH_SEPARATOR, text)
        return text.strip()

    @staticmethod
    def join_paragraphs(paragraphs: List[str]) -> str:
        """Join already-trimmed paragraph texts with a blank line between each pair."""
        return PARAGRAPH_SEPARATOR.join(paragraphs)


class TagProcessor:
    """Turns a comma separated keyword string into an ordered tag list."""

    separator = ","

    def split(self, raw: str | None) -> List[str]:
        """
        Split on commas, trim each candidate and drop empty ones.

        Order is preserved and duplicates are kept.
        """
        if not raw:
            return []
        return [tag for tag in (candidate.strip() for candidate in raw.split(self.separator)) if tag]
