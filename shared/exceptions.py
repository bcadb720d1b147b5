"""
Base exception classes for the Module Hub backend.

Each module should define its own exceptions that inherit from these bases.
The API layer maps each base category to one HTTP status code, so the
category a module exception inherits from decides what the caller sees.
"""

from typing import Optional, Any


class ModuleHubError(Exception):
    """
    Base exception for all Module Hub errors.

    All custom exceptions should inherit from this class.
    """

    def __init__(
        self,
        message: str,
        code: Optional[str] = None,
        details: Optional[dict[str, Any]] = None,
    ):
        super().__init__(message)
        self.message = message
        self.code = code or self.__class__.__name__
        self.details = details or {}

    def to_dict(self) -> dict[str, Any]:
        """Convert exception to a dictionary for logs and internal APIs."""
        return {
            "error": self.code,
            "message": self.message,
            "details": self.details,
        }


class NotFoundError(ModuleHubError):
    """Resource not found."""

    pass


class ValidationError(ModuleHubError):
    """Input validation failed."""

    pass


class AuthenticationError(ModuleHubError):
    """Authentication failed (invalid or missing credentials)."""

    pass


class AuthorizationError(ModuleHubError):
    """Authorization failed (insufficient permissions)."""

    pass


class ExternalServiceError(ModuleHubError):
    """Error communicating with an external service."""

    def __init__(
        self,
        message: str,
        service: str,
        code: Optional[str] = None,
        details: Optional[dict[str, Any]] = None,
    ):
        super().__init__(message, code, details)
        self.service = service
        self.details["service"] = service
