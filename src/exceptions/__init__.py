"""Custom exception classes for the exam paper builder."""

from ..models.api_responses import ErrorCode
from .application_errors import (
    ApplicationError,
    ConfigurationError,
    ContentParseError,
    EditModeError,
    ErrorSeverity,
    ExportError,
    ExtractionError,
    NotFoundError,
    ValidationError,
    WizardStepError,
)

__all__ = [
    "ApplicationError",
    "ValidationError",
    "NotFoundError",
    "ExtractionError",
    "ExportError",
    "EditModeError",
    "WizardStepError",
    "ContentParseError",
    "ConfigurationError",
    "ErrorSeverity",
    "ErrorCode",
]
