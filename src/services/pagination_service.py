"""
Pagination Service

Turns the block list of a paper into an ordered list of page commands:

- Header drawn once, on the first page
- One ``DrawLine`` per displayed sub-line, with long lines word-wrapped
- A page break whenever the cursor passes the bottom margin
- A footer on every page

``render`` is a pure function of its arguments. It never touches the
session, the blocks or the metadata it is given.
"""

import unicodedata
from dataclasses import replace
from typing import Callable, Dict, List, Optional, Sequence

from src.constants import (
    BLOCK_GAP_MM,
    BODY_LINE_STEP_MM,
    DEFAULT_FOOTER_ATTRIBUTION,
    FOOTER_PAGE_LABEL_OFFSET_MM,
    HEADER_HEIGHT_MM,
    HEADING_LINE_STEP_MM,
    INSTRUCTIONS_HEIGHT_MM,
    NEW_PAGE_TOP_OFFSET_MM,
    PAGE_HEIGHT_MM,
    PAGE_MARGIN_MM,
    PAGE_WIDTH_MM,
    POINTS_PER_MM,
    STUDENT_FIELDS_HEIGHT_MM,
    SUB_POINT_INDENT,
)
from src.i18n.labels import labels_for
from src.models.document_models import Alignment, DocumentMetadata, PageCursor, TextBlock, TextFormat
from src.models.page_commands import DrawFooter, DrawHeader, DrawLine, NewPage, PageCommand

# (text, font_size_pt, bold) -> width in millimetres
TextMeasure = Callable[[str, float, bool], float]

# Approximate Helvetica advance widths in 1/1000 em
_CHAR_WIDTHS: Dict[str, int] = {}
for _chars, _width in (
    ("'", 191),
    ("ijl", 222),
    ("|", 260),
    (" .,:;!/\\[]ftI", 278),
    ('r-()"`', 333),
    ("*^", 389),
    ("cksvxyz?J", 500),
    ("abdeghnopqu0123456789$#_~L", 556),
    ("+<=>", 584),
    ("FTZ", 611),
    ("ABEKPSVXY&", 667),
    ("wCDHNRU", 722),
    ("GOQ", 778),
    ("mM", 833),
    ("%", 889),
    ("W@", 944),
):
    for _char in _chars:
        _CHAR_WIDTHS[_char] = _width

_DEFAULT_CHAR_WIDTH = 556
_WIDE_CHAR_WIDTH = 1000
_BOLD_FACTOR = 1.08


def _char_width(char: str) -> int:
    width = _CHAR_WIDTHS.get(char)
    if width is not None:
        return width
    category = unicodedata.category(char)
    # Combining marks (Devanagari matras, virama) add no advance of their own
    if category in ("Mn", "Me", "Cf"):
        return 0
    if unicodedata.east_asian_width(char) in ("W", "F"):
        return _WIDE_CHAR_WIDTH
    return _DEFAULT_CHAR_WIDTH


def estimate_text_width(text: str, font_size: float, bold: bool = False) -> float:
    """Estimated rendered width of ``text`` in millimetres."""
    units = sum(_char_width(char) for char in text)
    if bold:
        units *= _BOLD_FACTOR
    return units / 1000.0 * font_size / POINTS_PER_MM


def _hard_break(word: str, fits: Callable[[str], bool]) -> List[str]:
    """Split a word that does not fit on a line of its own."""
    pieces = []
    current = ""
    for char in word:
        if current and not fits(current + char):
            pieces.append(current)
            current = char
        else:
            current += char
    if current:
        pieces.append(current)
    return pieces


def wrap_text(
    text: str,
    max_width: float,
    font_size: float,
    bold: bool = False,
    measure: TextMeasure = estimate_text_width,
) -> List[str]:
    """Greedy word wrap of ``text`` into sub-lines no wider than ``max_width``.

    Words wider than the limit are broken between characters. Text that
    already fits is returned unchanged as a single sub-line.
    """
    def fits(candidate: str) -> bool:
        return measure(candidate, font_size, bold) <= max_width

    if fits(text):
        return [text]

    sub_lines = []
    current = None
    for word in text.split(" "):
        candidate = word if current is None else f"{current} {word}"
        if fits(candidate):
            current = candidate
            continue

        if current is not None and current.strip():
            sub_lines.append(current.rstrip())
        current = None

        if fits(word):
            current = word
        else:
            pieces = _hard_break(word, fits)
            sub_lines.extend(pieces[:-1])
            current = pieces[-1] if pieces else None

    if current is not None and current.strip():
        sub_lines.append(current.rstrip())

    return sub_lines or [text]


def body_start(metadata: DocumentMetadata, margin: float = PAGE_MARGIN_MM) -> float:
    """Cursor position of the first line below the header region."""
    y = margin + HEADER_HEIGHT_MM
    if metadata.has_student_fields:
        y += STUDENT_FIELDS_HEIGHT_MM
    if labels_for(metadata.locale).instructions:
        y += INSTRUCTIONS_HEIGHT_MM
    return y


def display_text(block: TextBlock, line_index: int) -> str:
    """Line text as printed: heading label on line 0, indent on left-aligned sub-points."""
    line = block.lines[line_index]
    if line_index == 0:
        return f"{block.heading_label}{line.content}"
    if line.format.alignment is Alignment.LEFT:
        return f"{SUB_POINT_INDENT}{line.content}"
    return line.content


def wrap_line(
    block: TextBlock,
    line_index: int,
    max_width: float,
    measure: TextMeasure = estimate_text_width,
) -> List[str]:
    """Printed sub-lines of one line; every sub-line of an indented sub-point keeps the indent."""
    fmt = block.lines[line_index].format
    if line_index > 0 and fmt.alignment is Alignment.LEFT:
        indent_width = measure(SUB_POINT_INDENT, fmt.font_size, fmt.bold)
        sub_lines = wrap_text(
            block.lines[line_index].content, max_width - indent_width, fmt.font_size, fmt.bold, measure
        )
        return [f"{SUB_POINT_INDENT}{sub_line}" for sub_line in sub_lines]
    return wrap_text(display_text(block, line_index), max_width, fmt.font_size, fmt.bold, measure)


def anchor_x(alignment: Alignment, page_width: float, margin: float) -> float:
    if alignment is Alignment.CENTER:
        return page_width / 2
    if alignment is Alignment.RIGHT:
        return page_width - margin
    return margin


def render(
    blocks: Sequence[TextBlock],
    metadata: DocumentMetadata,
    page_height: float = PAGE_HEIGHT_MM,
    page_width: float = PAGE_WIDTH_MM,
    margin: float = PAGE_MARGIN_MM,
    measure: TextMeasure = estimate_text_width,
    attribution: str = DEFAULT_FOOTER_ATTRIBUTION,
) -> List[PageCommand]:
    """Lay out ``blocks`` as page commands.

    Args:
        blocks: Blocks in upload order
        metadata: Paper metadata for the header and footer labels
        page_height: Page height in millimetres
        page_width: Page width in millimetres
        margin: Margin on every side in millimetres
        measure: Width estimator used for wrapping
        attribution: Static text printed in every footer

    Returns:
        List of commands; the first page is implicit, later pages start with ``NewPage``
    """
    page_text = labels_for(metadata.locale).page_text
    max_width = page_width - 2 * margin
    bottom = page_height - margin
    footer_y = page_height - FOOTER_PAGE_LABEL_OFFSET_MM

    def footer(page_number: int) -> DrawFooter:
        return DrawFooter(
            page_number=page_number,
            page_label=f"{page_text} {page_number}",
            attribution=attribution,
            y=footer_y,
        )

    cursor = PageCursor(page_index=0, y=body_start(metadata, margin))
    commands: List[PageCommand] = [DrawHeader(metadata=replace(metadata), height=cursor.y - margin)]

    for block in blocks:
        for line_index, line in enumerate(block.lines):
            fmt: TextFormat = line.format
            step = HEADING_LINE_STEP_MM if line_index == 0 else BODY_LINE_STEP_MM
            x = anchor_x(fmt.alignment, page_width, margin)

            for sub_line in wrap_line(block, line_index, max_width, measure):
                if cursor.y > bottom:
                    commands.append(footer(cursor.page_index + 1))
                    commands.append(NewPage())
                    cursor.page_index += 1
                    cursor.y = margin + NEW_PAGE_TOP_OFFSET_MM

                commands.append(DrawLine(text=sub_line, x=x, y=cursor.y, align=fmt.alignment, format=fmt.copy()))
                cursor.y += step

        cursor.y += BLOCK_GAP_MM

    commands.append(footer(cursor.page_index + 1))
    return commands


def count_pages(commands: Sequence[PageCommand]) -> int:
    return sum(1 for command in commands if isinstance(command, DrawFooter))


class PaginationService:
    """Page geometry and footer text bound to the application configuration."""

    def __init__(
        self,
        page_height: float = PAGE_HEIGHT_MM,
        page_width: float = PAGE_WIDTH_MM,
        margin: float = PAGE_MARGIN_MM,
        attribution: Optional[str] = None,
        measure: TextMeasure = estimate_text_width,
    ):
        self.page_height = page_height
        self.page_width = page_width
        self.margin = margin
        self.attribution = attribution if attribution is not None else DEFAULT_FOOTER_ATTRIBUTION
        self.measure = measure

    def render(self, blocks: Sequence[TextBlock], metadata: DocumentMetadata) -> List[PageCommand]:
        return render(
            blocks,
            metadata,
            page_height=self.page_height,
            page_width=self.page_width,
            margin=self.margin,
            measure=self.measure,
            attribution=self.attribution,
        )
