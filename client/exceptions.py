"""
Client runtime exceptions.

Like the server, these carry generic messages; provider detail is logged.
"""

from shared.exceptions import ExternalServiceError, ValidationError


class SignUpError(ValidationError):
    """Raised when the provider refuses a registration."""

    def __init__(self, message: str = "Could not create account"):
        super().__init__(message, code="SIGN_UP_FAILED")


class IdentityProviderError(ExternalServiceError):
    """Raised when a provider account operation fails."""

    def __init__(self, operation: str):
        super().__init__(
            f"Could not {operation}",
            service="supabase_auth",
            code="IDENTITY_PROVIDER_ERROR",
            details={"operation": operation},
        )
