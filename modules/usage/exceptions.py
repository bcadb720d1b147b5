"""
Usage tracking module exceptions.
"""

from shared.exceptions import ExternalServiceError, ValidationError


class MissingModuleNameError(ValidationError):
    """Raised when a usage entry does not name its module."""

    def __init__(self):
        super().__init__("Module name is required", code="MISSING_MODULE_NAME")


class UsageStoreError(ExternalServiceError):
    """Raised when reading or writing ``module_usage`` fails."""

    def __init__(self, operation: str, message: str):
        super().__init__(
            f"Failed to {operation} usage data",
            service="supabase",
            code="USAGE_STORE_ERROR",
            details={"operation": operation, "error": message},
        )
