"""
Service modules for the exam paper builder.
"""

# Import service classes only (no initialization)
from .edit_mode_controller import EditMode, EditModeController
from .ocr_service import BatchExtractionResult, GeminiOCRService
from .pagination_service import PaginationService, render
from .paper_session import PaperSession, SessionStore, WizardStep
from .pdf_export_service import PDFExportService
from .rich_text_adapter import RichTextAdapter

__all__ = [
    "EditMode",
    "EditModeController",
    "BatchExtractionResult",
    "GeminiOCRService",
    "PaginationService",
    "render",
    "PaperSession",
    "SessionStore",
    "WizardStep",
    "PDFExportService",
    "RichTextAdapter",
]
