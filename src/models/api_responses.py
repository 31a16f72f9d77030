"""Standardized API response models for consistent response formatting."""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Optional, Dict, Any, List

class ResponseStatus(Enum):
    """Standard response status codes."""
    SUCCESS = "success"
    ERROR = "error"
    PARTIAL = "partial"

class ErrorCode(Enum):
    """Standard error codes for consistent error handling."""
    VALIDATION_ERROR = "VALIDATION_ERROR"
    NOT_FOUND = "NOT_FOUND"
    INTERNAL_ERROR = "INTERNAL_ERROR"
    SERVICE_UNAVAILABLE = "SERVICE_UNAVAILABLE"
    INVALID_REQUEST = "INVALID_REQUEST"
    INVALID_STATE = "INVALID_STATE"
    EXTRACTION_ERROR = "EXTRACTION_ERROR"
    EXPORT_ERROR = "EXPORT_ERROR"
    CONTENT_PARSE_ERROR = "CONTENT_PARSE_ERROR"
    TIMEOUT_ERROR = "TIMEOUT_ERROR"

@dataclass
class APIMetadata:
    """Metadata for API responses."""
    timestamp: datetime = field(default_factory=datetime.utcnow)
    request_id: Optional[str] = None
    version: str = "1.0"
    warnings: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        """Convert metadata to dictionary."""
        return {
            "timestamp": self.timestamp.isoformat(),
            "request_id": self.request_id,
            "version": self.version,
            "warnings": self.warnings
        }

@dataclass
class ErrorDetail:
    """Detailed error information."""
    code: ErrorCode
    message: str
    field: Optional[str] = None
    details: Optional[Dict[str, Any]] = None

    def to_dict(self) -> Dict[str, Any]:
        """Convert error detail to dictionary."""
        result = {
            "code": self.code.value,
            "message": self.message
        }
        if self.field:
            result["field"] = self.field
        if self.details:
            result["details"] = self.details
        return result

@dataclass
class APIResponse:
    """Standardized API response format."""
    status: ResponseStatus
    data: Optional[Any] = None
    message: Optional[str] = None
    errors: List[ErrorDetail] = field(default_factory=list)
    metadata: APIMetadata = field(default_factory=APIMetadata)

    def to_dict(self) -> Dict[str, Any]:
        """Convert response to dictionary for JSON serialization."""
        result = {
            "status": self.status.value,
            "data": self.data,
            "metadata": self.metadata.to_dict()
        }

        if self.message:
            result["message"] = self.message

        if self.errors:
            result["errors"] = [error.to_dict() for error in self.errors]

        return result

    @classmethod
    def success(cls, data: Any = None, message: str = None, **kwargs) -> 'APIResponse':
        """Create a success response."""
        return cls(
            status=ResponseStatus.SUCCESS,
            data=data,
            message=message,
            **kwargs
        )

    @classmethod
    def partial(cls, data: Any = None, message: str = None, errors: List[ErrorDetail] = None, **kwargs) -> 'APIResponse':
        """Create a response for an operation that only partly succeeded."""
        return cls(
            status=ResponseStatus.PARTIAL,
            data=data,
            message=message,
            errors=errors or [],
            **kwargs
        )

@dataclass
class ErrorResponse(APIResponse):
    """Specialized error response."""

    def __init__(self, message: str, error_code: ErrorCode = ErrorCode.INTERNAL_ERROR,
                 field: str = None, details: Dict[str, Any] = None, **kwargs):
        """Initialize error response."""
        error_detail = ErrorDetail(
            code=error_code,
            message=message,
            field=field,
            details=details
        )

        super().__init__(
            status=ResponseStatus.ERROR,
            message=message,
            errors=[error_detail],
            **kwargs
        )

    @classmethod
    def not_found(cls, resource: str = "Resource") -> 'ErrorResponse':
        """Create a not found error response."""
        return cls(
            message=f"{resource} not found",
            error_code=ErrorCode.NOT_FOUND
        )
