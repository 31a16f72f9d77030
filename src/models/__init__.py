"""Models package for standardized data structures.

Only the response envelope is re-exported here; document and command models
are imported from their modules directly.
"""

from .api_responses import APIResponse, ErrorCode, ErrorResponse

__all__ = [
    "APIResponse",
    "ErrorCode",
    "ErrorResponse",
]
