"""
Structured-content adapter between text blocks and the rich-text editor.

The editor works on an HTML fragment per block: one ``<p>`` per line with the
line format written as inline style. The heading line carries its question
label inside a ``<strong>`` and the other lines are indented with non-breaking
spaces, which is how the preview shows them. ``deserialize`` undoes both.
"""

import html
import re
from typing import Dict, List, Optional

from bs4 import BeautifulSoup
from bs4.element import Tag

from src.exceptions import ContentParseError
from src.models.document_models import Alignment, TextBlock, TextFormat, TextLine
from utils.logger import logger

PARAGRAPH_TAGS = ["p", "h1", "h2", "h3", "h4", "h5", "h6", "li"]
BOLD_TAGS = ["strong", "b"]
ITALIC_TAGS = ["em", "i"]

BODY_INDENT = "&nbsp;" * 4

_ALIGN_CLASS = re.compile(r"^ql-align-(left|center|right|justify)$")
_SIZE_VALUE = re.compile(r"^\s*([0-9]*\.?[0-9]+)\s*(pt|px|em|rem)?\s*$", re.IGNORECASE)
_LINE_BREAKS = re.compile(r"[\r\n\x0b\x0c\x1c\x1d\x1e\x85\u2028\u2029]+")


def _format_size(size: float) -> str:
    return f"{size:g}"


def _parse_style(style: Optional[str]) -> Dict[str, str]:
    """Parse an inline ``style`` attribute into lower-cased declarations."""
    declarations = {}
    if not style:
        return declarations
    for part in style.split(";"):
        if ":" not in part:
            continue
        name, value = part.split(":", 1)
        name = name.strip().lower()
        value = value.strip().lower().replace("!important", "").strip()
        if name and value:
            declarations[name] = value
    return declarations


def _parse_font_size(value: str, default_font_size: float) -> Optional[float]:
    match = _SIZE_VALUE.match(value)
    if not match:
        return None
    number = float(match.group(1))
    unit = (match.group(2) or "pt").lower()
    if unit == "px":
        number *= 0.75
    elif unit in ("em", "rem"):
        number *= default_font_size
    if number <= 0:
        return None
    return int(number) if number.is_integer() else round(number, 2)


def _parse_font_weight(value: str) -> Optional[bool]:
    if value in ("bold", "bolder"):
        return True
    if value in ("normal", "lighter"):
        return False
    if value.isdigit():
        return int(value) >= 600
    return None


def _parse_font_style(value: str) -> Optional[bool]:
    if value.startswith("italic") or value.startswith("oblique"):
        return True
    if value == "normal":
        return False
    return None


def _parse_text_align(value: str) -> Optional[Alignment]:
    if value in ("left", "start", "justify"):
        return Alignment.LEFT
    if value == "center":
        return Alignment.CENTER
    if value in ("right", "end"):
        return Alignment.RIGHT
    return None


class RichTextAdapter:
    """Serialize blocks to editor HTML and parse the edited HTML back."""

    def serialize(self, block: TextBlock) -> str:
        """Render a block as editor content, one paragraph per line.

        Weight and style are written only when set, so emphasis markup added
        in the editor still applies on save. The heading's ``<strong>`` makes
        a saved heading bold.
        """
        paragraphs = []
        for index, line in enumerate(block.lines):
            fmt = line.format
            declarations = [f"font-size: {_format_size(fmt.font_size)}pt;"]
            if fmt.bold:
                declarations.append("font-weight: bold;")
            if fmt.italic:
                declarations.append("font-style: italic;")
            declarations.append(f"text-align: {fmt.alignment.value};")
            style = " ".join(declarations)
            text = html.escape(line.content, quote=False)
            if index == 0:
                body = f"<strong>{html.escape(block.heading_label, quote=False)}{text}</strong>"
            else:
                body = f"{BODY_INDENT}{text}"
            paragraphs.append(f'<p style="{style}">{body}</p>')
        return "".join(paragraphs)

    def serialize_all(self, blocks: List[TextBlock]) -> List[str]:
        return [self.serialize(block) for block in blocks]

    def deserialize(
        self, content: str, block: TextBlock, default_font_size: float = 11
    ) -> List[TextLine]:
        """Parse edited content back into lines for ``block``.

        Returns an empty list when the content has no non-blank paragraph.
        Raises ``ContentParseError`` when the content cannot be read as
        paragraphs at all.
        """
        if not isinstance(content, str):
            raise ContentParseError(
                f"Editor content must be a string, got {type(content).__name__}",
                block_index=block.source_index,
            )

        try:
            soup = BeautifulSoup(content, "html.parser")
        except Exception as e:
            raise ContentParseError(
                f"Could not parse editor content: {e}",
                block_index=block.source_index,
                original_error=e,
            )

        # Nested paragraph tags (e.g. <li><p>) are read once, at the innermost level
        elements = [
            element for element in soup.find_all(PARAGRAPH_TAGS)
            if not element.find(PARAGRAPH_TAGS)
        ]

        if not elements:
            if soup.get_text().strip():
                raise ContentParseError(
                    "Editor content has text but no paragraphs",
                    block_index=block.source_index,
                )
            return []

        lines = []
        heading_seen = False
        for element in elements:
            text = _LINE_BREAKS.sub(" ", element.get_text()).lstrip()
            if not text.strip():
                continue
            if not heading_seen:
                heading_seen = True
                text = self._strip_heading_label(text, block)
                if not text.strip():
                    continue
            lines.append(TextLine(content=text, format=self._derive_format(element, default_font_size)))

        logger.debug(
            f"Parsed {len(lines)} line(s) from editor content for block {block.source_index}"
        )
        return lines

    def _strip_heading_label(self, text: str, block: TextBlock) -> str:
        label = block.heading_label
        if text.startswith(label):
            return text[len(label):].lstrip()
        if text.rstrip() == label.rstrip():
            return ""
        return text

    def _derive_format(self, element: Tag, default_font_size: float) -> TextFormat:
        """Explicit inline style first, then emphasis markup, then defaults."""
        declarations = {}
        for styled in reversed(element.find_all(style=True)):
            declarations.update(_parse_style(styled.get("style")))
        declarations.update(_parse_style(element.get("style")))

        bold = None
        italic = None
        font_size = None
        alignment = None

        if "font-weight" in declarations:
            bold = _parse_font_weight(declarations["font-weight"])
        if "font-style" in declarations:
            italic = _parse_font_style(declarations["font-style"])
        if "font-size" in declarations:
            font_size = _parse_font_size(declarations["font-size"], default_font_size)
        if "text-align" in declarations:
            alignment = _parse_text_align(declarations["text-align"])

        if bold is None:
            bold = element.name in BOLD_TAGS or element.find(BOLD_TAGS) is not None
        if italic is None:
            italic = element.name in ITALIC_TAGS or element.find(ITALIC_TAGS) is not None
        if alignment is None:
            for css_class in element.get("class") or []:
                match = _ALIGN_CLASS.match(css_class)
                if match:
                    alignment = _parse_text_align(match.group(1))
                    break

        return TextFormat(
            bold=bold,
            italic=italic,
            font_size=font_size or default_font_size,
            alignment=alignment or Alignment.LEFT,
        )
