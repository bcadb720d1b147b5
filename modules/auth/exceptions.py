"""
Authentication module exceptions.

Messages are fixed strings: whatever the identity provider reported stays in
the logs, so callers cannot fingerprint the provider from our responses.
"""

from shared.exceptions import AuthenticationError, AuthorizationError


class MissingCredentialError(AuthenticationError):
    """Raised when no usable ``Authorization: Bearer`` header is present."""

    def __init__(self, message: str = "Missing or invalid authorization header"):
        super().__init__(message, code="MISSING_CREDENTIAL")


class InvalidCredentialError(AuthenticationError):
    """Raised when the provider rejects a token, or could not be asked."""

    def __init__(self, message: str = "Invalid or expired token"):
        super().__init__(message, code="INVALID_CREDENTIAL")


class UnauthenticatedError(AuthenticationError):
    """Raised by the gate when an operation needs a profile and there is none."""

    def __init__(self, message: str = "Authentication required"):
        super().__init__(message, code="UNAUTHENTICATED")


class InsufficientPrivilegeError(AuthorizationError):
    """Raised when the caller's role does not allow the operation."""

    def __init__(self, message: str = "Admin privileges required"):
        super().__init__(message, code="INSUFFICIENT_PRIVILEGE")
