"""
Document models for the exam paper.

A paper is an ordered list of ``TextBlock`` objects, one per uploaded image,
each holding ``TextLine`` objects with their own ``TextFormat``. Line 0 of a
block is its heading line.
"""

from dataclasses import dataclass, field, fields, replace
from enum import Enum
from typing import Any, Dict, List, Optional

from src.exceptions import ValidationError
from src.i18n.labels import Locale


class Alignment(Enum):
    """Horizontal alignment of a line."""
    LEFT = "left"
    CENTER = "center"
    RIGHT = "right"


@dataclass
class TextFormat:
    """Typographic attributes of one line."""
    bold: bool = False
    italic: bool = False
    font_size: float = 11
    alignment: Alignment = Alignment.LEFT

    def __post_init__(self):
        if isinstance(self.alignment, str):
            self.alignment = _parse_alignment(self.alignment)
        if self.font_size is None or self.font_size <= 0:
            raise ValidationError(
                f"Font size must be positive, got {self.font_size}", field="font_size"
            )

    def copy(self) -> "TextFormat":
        return replace(self)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "bold": self.bold,
            "italic": self.italic,
            "font_size": self.font_size,
            "alignment": self.alignment.value,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any], base: Optional["TextFormat"] = None) -> "TextFormat":
        """Build a format from ``base`` with the keys in ``data`` applied."""
        return apply_format_changes(base or cls(), data)


@dataclass
class TextLine:
    """One renderable line; ``content`` never contains a newline."""
    content: str
    format: TextFormat = field(default_factory=TextFormat)

    def __post_init__(self):
        if "\n" in self.content or "\r" in self.content:
            raise ValidationError("Line content cannot contain line breaks", field="content")

    def to_dict(self) -> Dict[str, Any]:
        return {"content": self.content, "format": self.format.to_dict()}


@dataclass
class TextBlock:
    """Lines extracted from one uploaded image."""
    source_index: int
    lines: List[TextLine] = field(default_factory=list)

    @property
    def question_number(self) -> int:
        return self.source_index + 1

    @property
    def heading_label(self) -> str:
        return f"{self.question_number}. "

    def to_dict(self) -> Dict[str, Any]:
        return {
            "source_index": self.source_index,
            "question_number": self.question_number,
            "lines": [line.to_dict() for line in self.lines],
        }


@dataclass
class DocumentMetadata:
    """Paper-level attributes filled in by the wizard forms."""
    school_name: str = ""
    class_name: str = ""
    subject: str = ""
    exam_time: str = ""
    total_marks: str = ""
    exam_term: str = ""
    has_student_fields: bool = False
    locale: Locale = Locale.ENGLISH

    def update(self, **values) -> None:
        """Apply form values; unknown keys are rejected. ``language`` is accepted for ``locale``."""
        if "language" in values:
            values["locale"] = values.pop("language")
        known = {f.name for f in fields(self)}
        unknown = set(values) - known
        if unknown:
            raise ValidationError(
                f"Unknown metadata fields: {', '.join(sorted(unknown))}",
                details={"allowed": sorted(known)},
            )
        parsed = {}
        for name, value in values.items():
            if name == "locale":
                value = Locale.parse(value)
            elif name == "has_student_fields":
                value = _parse_bool(value)
            elif value is None:
                value = ""
            else:
                value = str(value).strip()
            parsed[name] = value

        for name, value in parsed.items():
            setattr(self, name, value)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "school_name": self.school_name,
            "class_name": self.class_name,
            "subject": self.subject,
            "exam_time": self.exam_time,
            "total_marks": self.total_marks,
            "exam_term": self.exam_term,
            "has_student_fields": self.has_student_fields,
            "language": self.locale.value,
        }


@dataclass
class PageCursor:
    """Render-time position; never stored on the session."""
    page_index: int = 0
    y: float = 0.0


@dataclass
class ImageUpload:
    """An uploaded question image."""
    filename: str
    content: bytes
    mime_type: str

    @property
    def size(self) -> int:
        return len(self.content)

    def to_dict(self) -> Dict[str, Any]:
        return {"filename": self.filename, "mime_type": self.mime_type, "size": self.size}


_FORMAT_KEYS = {"bold", "italic", "font_size", "alignment"}


def _parse_alignment(value: Any) -> Alignment:
    if isinstance(value, Alignment):
        return value
    try:
        return Alignment(str(value).strip().lower())
    except ValueError:
        raise ValidationError(
            f"Unknown alignment: {value!r}",
            field="alignment",
            details={"allowed": [a.value for a in Alignment]},
        )


def _parse_bool(value: Any) -> bool:
    if isinstance(value, str):
        return value.strip().lower() in ("1", "true", "yes", "on")
    return bool(value)


def apply_format_changes(current: TextFormat, changes: Dict[str, Any]) -> TextFormat:
    """Return a new format with ``changes`` applied; ``current`` is untouched."""
    unknown = set(changes) - _FORMAT_KEYS
    if unknown:
        raise ValidationError(
            f"Unknown format attributes: {', '.join(sorted(unknown))}",
            details={"allowed": sorted(_FORMAT_KEYS)},
        )

    values = {}
    if "bold" in changes:
        values["bold"] = _parse_bool(changes["bold"])
    if "italic" in changes:
        values["italic"] = _parse_bool(changes["italic"])
    if "font_size" in changes:
        try:
            values["font_size"] = float(changes["font_size"])
        except (TypeError, ValueError):
            raise ValidationError(
                f"Font size must be a number, got {changes['font_size']!r}", field="font_size"
            )
        if values["font_size"].is_integer():
            values["font_size"] = int(values["font_size"])
    if "alignment" in changes:
        values["alignment"] = _parse_alignment(changes["alignment"])

    return replace(current, **values)


def set_line_format(block: TextBlock, line_index: int, changes: Dict[str, Any]) -> bool:
    """Update the format of a single line in ``block``.

    Returns False without touching anything when ``line_index`` is outside
    the block, which happens after a rich-text save shortened it. Invalid
    attribute values raise ``ValidationError`` before any line is modified.
    """
    if line_index < 0 or line_index >= len(block.lines):
        return False

    line = block.lines[line_index]
    line.format = apply_format_changes(line.format, changes)
    return True
