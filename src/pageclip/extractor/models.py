"""
Data models for extraction results.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Tuple


@dataclass(slots=True, frozen=True)
class ExtractionResult:
    """Best-effort structured summary of a web page."""

    source_url: str
    title: str = ""
    content: str = ""
    image_url: str = ""
    tags: Tuple[str, ...] = field(default_factory=tuple)

    def __post_init__(self) -> None:
        """Store tags as a tuple so the result stays hashable and immutable."""
        if not isinstance(self.tags, tuple):
            object.__setattr__(self, "tags", tuple(self.tags))

    def to_dict(self) -> Dict[str, Any]:
        """Serialize to the wire shape consumed by the new-entry form."""
        return {
            "title": self.title,
            "content": self.content,
            "imageUrl": self.image_url,
            "url": self.source_url,
            "tags": list(self.tags),
        }
