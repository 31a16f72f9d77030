"""
PDF export of an exam paper.

The layout is decided entirely by the pagination service; this module only
replays the resulting page commands on a ReportLab canvas.
"""

import re
from pathlib import Path
from typing import List, Optional, Sequence, Union

from reportlab.lib.colors import Color, white
from reportlab.lib.units import mm
from reportlab.pdfbase import pdfmetrics
from reportlab.pdfbase.ttfonts import TTFont
from reportlab.pdfgen import canvas

from src.constants import FOOTER_ATTRIBUTION_OFFSET_MM, PAGE_HEIGHT_MM, PAGE_MARGIN_MM, PAGE_WIDTH_MM
from src.exceptions import ExportError
from src.i18n.labels import labels_for
from src.models.document_models import Alignment, DocumentMetadata, TextBlock, TextFormat
from src.models.page_commands import DrawFooter, DrawHeader, DrawLine, NewPage, PageCommand
from src.services.pagination_service import PaginationService, count_pages
from utils.logger import logger

LOGO_SIZE_MM = 18
LOGO_COLOR = Color(59 / 255, 130 / 255, 246 / 255)
RULE_COLOR = Color(200 / 255, 200 / 255, 200 / 255)
FOOTER_COLOR = Color(100 / 255, 100 / 255, 100 / 255)

_UNSAFE_FILENAME_CHARS = re.compile(r'[/\\:*?"<>|]')

_HELVETICA_FACES = {
    (False, False): "Helvetica",
    (True, False): "Helvetica-Bold",
    (False, True): "Helvetica-Oblique",
    (True, True): "Helvetica-BoldOblique",
}


def build_filename(metadata: DocumentMetadata) -> str:
    """``{school}_{class}_{subject}_ExamPaper.pdf`` with whitespace replaced; empty parts are left out."""
    parts = []
    for value in (metadata.school_name, metadata.class_name, metadata.subject):
        part = _UNSAFE_FILENAME_CHARS.sub("", re.sub(r"\s", "_", value or ""))
        if part.strip("_"):
            parts.append(part)
    parts.append("ExamPaper.pdf")
    return "_".join(parts)


def _register_font(font_path: Optional[str]) -> Optional[str]:
    """
    Register a TTF font (e.g. a Devanagari face) from configuration.
    Returns the registered font name, or None to fall back to Helvetica.
    """
    if not font_path:
        return None

    ttf_path = Path(font_path)
    if not ttf_path.exists():
        logger.warning(f"PDF font not found at {ttf_path}, falling back to Helvetica")
        return None

    font_name = ttf_path.stem
    try:
        if font_name not in pdfmetrics.getRegisteredFontNames():
            pdfmetrics.registerFont(TTFont(font_name, str(ttf_path)))
    except Exception as e:
        logger.warning(f"Could not register PDF font {ttf_path}: {e}")
        return None
    return font_name


class CanvasInterpreter:
    """Replays page commands on one ReportLab canvas."""

    def __init__(
        self,
        pdf: canvas.Canvas,
        page_height: float = PAGE_HEIGHT_MM,
        page_width: float = PAGE_WIDTH_MM,
        margin: float = PAGE_MARGIN_MM,
        font_name: Optional[str] = None,
    ):
        self.pdf = pdf
        self.page_height = page_height
        self.page_width = page_width
        self.margin = margin
        self.font_name = font_name

    def _font(self, bold: bool = False, italic: bool = False) -> str:
        # A registered TTF has a single face
        if self.font_name:
            return self.font_name
        return _HELVETICA_FACES[(bold, italic)]

    def _y(self, y_mm: float) -> float:
        return (self.page_height - y_mm) * mm

    def _text(self, text: str, x_mm: float, y_mm: float, align: Alignment = Alignment.LEFT) -> None:
        x, y = x_mm * mm, self._y(y_mm)
        if align is Alignment.CENTER:
            self.pdf.drawCentredString(x, y, text)
        elif align is Alignment.RIGHT:
            self.pdf.drawRightString(x, y, text)
        else:
            self.pdf.drawString(x, y, text)

    def _rule(self, y_mm: float) -> None:
        self.pdf.setStrokeColor(RULE_COLOR)
        self.pdf.setLineWidth(0.3 * mm)
        self.pdf.line(self.margin * mm, self._y(y_mm), (self.page_width - self.margin) * mm, self._y(y_mm))

    def _background(self) -> None:
        self.pdf.setFillColor(white)
        self.pdf.rect(0, 0, self.page_width * mm, self.page_height * mm, stroke=0, fill=1)

    def draw_header(self, command: DrawHeader) -> None:
        metadata = command.metadata
        labels = labels_for(metadata.locale)
        margin = self.margin

        self._background()

        # School name centred, with a round logo to its left
        name_font = self._font(bold=True)
        name_width_mm = pdfmetrics.stringWidth(metadata.school_name, name_font, 22) / mm
        name_x = (self.page_width - name_width_mm) / 2
        logo_center_x = name_x - 5 - LOGO_SIZE_MM / 2
        logo_center_y = margin + LOGO_SIZE_MM / 2

        self.pdf.setFillColor(LOGO_COLOR)
        self.pdf.circle(logo_center_x * mm, self._y(logo_center_y), LOGO_SIZE_MM / 2 * mm, stroke=0, fill=1)
        initial = metadata.school_name.strip()[:1].upper() or "S"
        self.pdf.setFillColor(white)
        self.pdf.setFont(name_font, 14)
        self._text(initial, logo_center_x, logo_center_y + 2, Alignment.CENTER)

        self.pdf.setFillColor(Color(0, 0, 0))
        self.pdf.setFont(name_font, 22)
        self._text(metadata.school_name, name_x, margin + 10)

        self._rule(margin + 20)

        left_text = f"{metadata.class_name} - {metadata.subject}"
        if metadata.exam_term:
            left_text += f" | {labels.exam_term}: {metadata.exam_term}"
        right_text = (
            f"{labels.exam_time}: {metadata.exam_time} | {labels.total_marks}: {metadata.total_marks}"
        )
        self.pdf.setFont(self._font(), 11)
        self._text(left_text, margin, margin + 30)
        self._text(right_text, self.page_width - margin, margin + 30, Alignment.RIGHT)

        self._rule(margin + 35)

        y = margin + 50
        if metadata.has_student_fields:
            self._text(f"{labels.student_name}: ____________________________", margin, y)
            self._text(f"{labels.student_roll}: ______________", self.page_width - margin - 80, y)
            y += 15

        if labels.instructions.strip():
            self.pdf.setFont(self._font(italic=True), 10)
            self._text(labels.instructions, margin, y)

    def draw_line(self, command: DrawLine) -> None:
        fmt: TextFormat = command.format
        self.pdf.setFillColor(Color(0, 0, 0))
        self.pdf.setFont(self._font(fmt.bold, fmt.italic), fmt.font_size)
        self._text(command.text, command.x, command.y, command.align)

    def draw_footer(self, command: DrawFooter) -> None:
        self.pdf.setFillColor(FOOTER_COLOR)
        self.pdf.setFont(self._font(), 9)
        center = self.page_width / 2
        self._text(command.page_label, center, command.y, Alignment.CENTER)
        self._text(command.attribution, center, self.page_height - FOOTER_ATTRIBUTION_OFFSET_MM, Alignment.CENTER)

    def new_page(self, command: NewPage) -> None:
        self.pdf.showPage()
        self._background()

    def replay(self, commands: Sequence[PageCommand]) -> None:
        handlers = {
            NewPage: self.new_page,
            DrawHeader: self.draw_header,
            DrawLine: self.draw_line,
            DrawFooter: self.draw_footer,
        }
        for command in commands:
            handlers[type(command)](command)
        self.pdf.showPage()


class PDFExportService:
    """Writes exam papers as A4 PDF files."""

    def __init__(
        self,
        output_dir: Union[str, Path],
        font_path: Optional[str] = None,
        pagination: Optional[PaginationService] = None,
    ):
        self.output_dir = Path(output_dir)
        self.font_path = font_path
        self.pagination = pagination or PaginationService()

    def export(
        self,
        blocks: List[TextBlock],
        metadata: DocumentMetadata,
        filename: Optional[str] = None,
    ) -> Path:
        """
        Render the paper and write it to the output directory.

        Args:
            blocks: Paper blocks in upload order
            metadata: Header metadata and language
            filename: Override for the generated file name

        Returns:
            Path: Location of the written PDF

        Raises:
            ExportError: If the file could not be written; no partial file is left
        """
        commands = self.pagination.render(blocks, metadata)
        pdf_path = self.output_dir / (filename or build_filename(metadata))

        try:
            self.output_dir.mkdir(parents=True, exist_ok=True)
            pdf = canvas.Canvas(
                str(pdf_path),
                pagesize=(self.pagination.page_width * mm, self.pagination.page_height * mm),
            )
            pdf.setTitle(f"{metadata.school_name} - {metadata.subject}")
            interpreter = CanvasInterpreter(
                pdf,
                page_height=self.pagination.page_height,
                page_width=self.pagination.page_width,
                margin=self.pagination.margin,
                font_name=_register_font(self.font_path),
            )
            interpreter.replay(commands)
            pdf.save()
        except Exception as e:
            logger.error(f"PDF generation failed: {e}")
            # Clean up partial file if it exists
            if pdf_path.exists():
                pdf_path.unlink()
                logger.log_file_operation("remove", str(pdf_path))
            raise ExportError(f"PDF generation failed: {e}", file_path=str(pdf_path), original_error=e)

        logger.log_export(pdf_path.name, count_pages(commands))
        return pdf_path
