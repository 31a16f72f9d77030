"""Application-specific exception classes with standardized error handling."""

import traceback
import uuid
from datetime import datetime
from enum import Enum
from typing import Any, Dict, List, Optional

from src.models.api_responses import ErrorCode


class ErrorSeverity(Enum):
    """Error severity levels."""

    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class ApplicationError(Exception):
    """Base application error class.

    Every error raised by the paper builder is local and recoverable at worst
    by returning to the previous wizard step, so ``recoverable`` defaults to
    True for all subclasses.
    """

    def __init__(
        self,
        message: str,
        error_code: ErrorCode = ErrorCode.INTERNAL_ERROR,
        user_message: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
        severity: ErrorSeverity = ErrorSeverity.MEDIUM,
        original_error: Optional[Exception] = None,
        field: Optional[str] = None,
        recoverable: bool = True,
    ):
        """Initialize application error.

        Args:
            message: Technical error message for developers
            error_code: Standardized error code
            user_message: User-friendly error message
            details: Additional error details
            severity: Error severity level
            original_error: Original exception that caused this error
            field: Field name for validation errors
            recoverable: Whether the user can retry the operation
        """
        super().__init__(message)

        self.message = message
        self.error_code = error_code
        self.user_message = user_message or self._get_default_user_message()
        self.details = details or {}
        self.severity = severity
        self.original_error = original_error
        self.field = field
        self.recoverable = recoverable

        self.timestamp = datetime.utcnow()
        self.error_id = f"ERR_{uuid.uuid4().hex[:8].upper()}"
        self.traceback_info = traceback.format_exc() if original_error else None

        if original_error:
            self.details["original_error"] = {
                "type": type(original_error).__name__,
                "message": str(original_error),
            }

    def _get_default_user_message(self) -> str:
        """Get default user-friendly message based on error code."""
        user_messages = {
            ErrorCode.VALIDATION_ERROR: "Please check your input and try again.",
            ErrorCode.NOT_FOUND: "The requested resource was not found.",
            ErrorCode.INVALID_STATE: "This action is not available right now.",
            ErrorCode.EXTRACTION_ERROR: "Error extracting text from images. Please try again.",
            ErrorCode.EXPORT_ERROR: "Error generating file. Please try again.",
            ErrorCode.SERVICE_UNAVAILABLE: "This service is temporarily unavailable. Please try again later.",
            ErrorCode.TIMEOUT_ERROR: "The request took too long to complete. Please try again.",
            ErrorCode.INTERNAL_ERROR: "An unexpected error occurred. Please try again later.",
        }
        return user_messages.get(
            self.error_code, "An error occurred. Please try again."
        )

    def to_dict(self) -> Dict[str, Any]:
        """Convert error to dictionary for logging and API responses."""
        return {
            "error_id": self.error_id,
            "timestamp": self.timestamp.isoformat(),
            "error_code": self.error_code.value,
            "message": self.message,
            "user_message": self.user_message,
            "severity": self.severity.value,
            "field": self.field,
            "recoverable": self.recoverable,
            "details": self.details,
        }

    def __str__(self) -> str:
        """String representation of the error."""
        return f"[{self.error_code.value}] {self.message} (ID: {self.error_id})"

    def __repr__(self) -> str:
        """Detailed representation of the error."""
        return (
            f"{self.__class__.__name__}("
            f"message='{self.message}', "
            f"error_code={self.error_code}, "
            f"severity={self.severity}, "
            f"error_id='{self.error_id}'"
            f")"
        )


class ValidationError(ApplicationError):
    """Validation error for input validation failures."""

    def __init__(
        self,
        message: str,
        field: Optional[str] = None,
        validation_errors: Optional[List[Dict[str, str]]] = None,
        **kwargs,
    ):
        """Initialize validation error.

        Args:
            message: Error message
            field: Field that failed validation
            validation_errors: List of validation error details
            **kwargs: Additional arguments for ApplicationError
        """
        details = kwargs.pop("details", {})
        if validation_errors:
            details["validation_errors"] = validation_errors

        super().__init__(
            message=message,
            error_code=ErrorCode.VALIDATION_ERROR,
            field=field,
            details=details,
            severity=ErrorSeverity.LOW,
            **kwargs,
        )


class NotFoundError(ApplicationError):
    """Not found error for missing resources."""

    def __init__(
        self,
        message: str,
        resource_type: Optional[str] = None,
        resource_id: Optional[str] = None,
        **kwargs,
    ):
        details = kwargs.pop("details", {})
        if resource_type:
            details["resource_type"] = resource_type
        if resource_id is not None:
            details["resource_id"] = resource_id

        super().__init__(
            message=message,
            error_code=ErrorCode.NOT_FOUND,
            details=details,
            severity=ErrorSeverity.LOW,
            **kwargs,
        )


class ExtractionError(ApplicationError):
    """Raised when the OCR model cannot produce text for an image."""

    def __init__(
        self,
        message: str,
        image_index: Optional[int] = None,
        status_code: Optional[int] = None,
        **kwargs,
    ):
        details = kwargs.pop("details", {})
        if image_index is not None:
            details["image_index"] = image_index
        if status_code is not None:
            details["status_code"] = status_code

        super().__init__(
            message=message,
            error_code=kwargs.pop("error_code", ErrorCode.EXTRACTION_ERROR),
            details=details,
            severity=ErrorSeverity.MEDIUM,
            **kwargs,
        )
        self.image_index = image_index
        self.status_code = status_code


class ExportError(ApplicationError):
    """Raised when the PDF writer fails; no partial file is left behind."""

    def __init__(self, message: str, file_path: Optional[str] = None, **kwargs):
        details = kwargs.pop("details", {})
        if file_path:
            details["file_path"] = file_path

        super().__init__(
            message=message,
            error_code=ErrorCode.EXPORT_ERROR,
            details=details,
            severity=ErrorSeverity.MEDIUM,
            **kwargs,
        )


class EditModeError(ApplicationError):
    """Invalid read-only/editing transition."""

    def __init__(self, message: str, current_mode: Optional[str] = None, **kwargs):
        details = kwargs.pop("details", {})
        if current_mode:
            details["current_mode"] = current_mode

        super().__init__(
            message=message,
            error_code=ErrorCode.INVALID_STATE,
            details=details,
            severity=ErrorSeverity.LOW,
            **kwargs,
        )


class WizardStepError(ApplicationError):
    """An operation was requested from the wrong wizard step."""

    def __init__(
        self,
        message: str,
        current_step: Optional[str] = None,
        required_step: Optional[str] = None,
        **kwargs,
    ):
        details = kwargs.pop("details", {})
        if current_step:
            details["current_step"] = current_step
        if required_step:
            details["required_step"] = required_step

        super().__init__(
            message=message,
            error_code=ErrorCode.INVALID_STATE,
            details=details,
            severity=ErrorSeverity.LOW,
            **kwargs,
        )


class ContentParseError(ApplicationError):
    """Structured editor content could not be turned back into lines."""

    def __init__(self, message: str, block_index: Optional[int] = None, **kwargs):
        details = kwargs.pop("details", {})
        if block_index is not None:
            details["block_index"] = block_index

        super().__init__(
            message=message,
            error_code=ErrorCode.CONTENT_PARSE_ERROR,
            details=details,
            severity=ErrorSeverity.LOW,
            **kwargs,
        )


class ConfigurationError(ApplicationError):
    """Configuration error for invalid or missing configuration."""

    def __init__(self, message: str, config_key: Optional[str] = None, **kwargs):
        details = kwargs.pop("details", {})
        if config_key:
            details["config_key"] = config_key

        super().__init__(
            message=message,
            error_code=ErrorCode.SERVICE_UNAVAILABLE,
            user_message="A configuration error occurred. Please contact support.",
            details=details,
            severity=ErrorSeverity.HIGH,
            recoverable=False,
            **kwargs,
        )
