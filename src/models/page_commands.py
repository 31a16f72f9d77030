"""
Render instructions produced by the pagination service.

Coordinates are millimetres with the origin at the top-left corner of the
page. A backend replays the commands in order; it never needs to know how
the layout was computed.
"""

from dataclasses import dataclass
from typing import Any, Dict, Union

from src.models.document_models import Alignment, DocumentMetadata, TextFormat


@dataclass(frozen=True)
class NewPage:
    """Start a clean page; the previous page is finished."""

    def to_dict(self) -> Dict[str, Any]:
        return {"type": "new_page"}


@dataclass(frozen=True)
class DrawHeader:
    """Paper header, drawn once at the top of the first page."""
    metadata: DocumentMetadata
    height: float

    def to_dict(self) -> Dict[str, Any]:
        return {"type": "draw_header", "metadata": self.metadata.to_dict(), "height": self.height}


@dataclass(frozen=True)
class DrawLine:
    """One displayed sub-line. ``x`` is the anchor for ``align``."""
    text: str
    x: float
    y: float
    align: Alignment
    format: TextFormat

    def to_dict(self) -> Dict[str, Any]:
        return {
            "type": "draw_line",
            "text": self.text,
            "x": round(self.x, 3),
            "y": round(self.y, 3),
            "align": self.align.value,
            "format": self.format.to_dict(),
        }


@dataclass(frozen=True)
class DrawFooter:
    """Page label and attribution at the bottom of a page."""
    page_number: int
    page_label: str
    attribution: str
    y: float

    def to_dict(self) -> Dict[str, Any]:
        return {
            "type": "draw_footer",
            "page_number": self.page_number,
            "page_label": self.page_label,
            "attribution": self.attribution,
            "y": round(self.y, 3),
        }


PageCommand = Union[NewPage, DrawHeader, DrawLine, DrawFooter]
