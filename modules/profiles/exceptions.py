"""
Profiles module exceptions.
"""

from shared.exceptions import (
    ExternalServiceError,
    ModuleHubError,
    NotFoundError,
    ValidationError,
)


class ProfileStoreError(ExternalServiceError):
    """Raised when a profile write (upsert/update) fails at the store."""

    def __init__(self, operation: str, message: str):
        super().__init__(
            f"Profile store {operation} failed",
            service="supabase",
            code="PROFILE_STORE_ERROR",
            details={"operation": operation, "error": message},
        )


class ProfileFetchError(ProfileStoreError):
    """Raised when reading a profile fails for a reason other than absence."""

    def __init__(self, profile_id: str, message: str):
        super().__init__("fetch", message)
        self.code = "PROFILE_FETCH_FAILED"
        self.details["profile_id"] = profile_id


class ProfileReconciliationError(ModuleHubError):
    """Raised when no persisted profile could be obtained for an identity."""

    def __init__(self, user_id: str):
        super().__init__(
            "Failed to create user profile",
            code="PROFILE_RECONCILIATION_FAILED",
            details={"user_id": user_id},
        )


class ProfileNotFoundError(NotFoundError):
    """Raised when a profile targeted by an update does not exist."""

    def __init__(self, profile_id: str):
        super().__init__(
            "User not found",
            code="PROFILE_NOT_FOUND",
            details={"profile_id": profile_id},
        )


class InvalidRoleError(ValidationError):
    """Raised when a role value is missing or not one of the known roles."""

    def __init__(self, role: object = None):
        super().__init__(
            "Valid role (admin or user) is required",
            code="INVALID_ROLE",
            details={"role": role},
        )
