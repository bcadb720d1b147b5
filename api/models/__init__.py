"""API models package."""

from .responses import ApiResponse, ErrorResponse, SessionStatus

__all__ = [
    "ApiResponse",
    "ErrorResponse",
    "SessionStatus",
]
