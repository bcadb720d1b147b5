"""
Shared infrastructure for the Module Hub backend.

This package contains cross-cutting concerns that are used by multiple modules:
- config: Centralized settings management
- database: Supabase client factory
- exceptions: Base exception classes
- models: The verified Identity handed between modules
- logging_config: Root logger setup

Note: Business logic should NOT go here. This is for infrastructure only.
"""

from .config import Settings, get_settings
from .database import get_supabase_client, reset_client_cache
from .exceptions import (
    ModuleHubError,
    NotFoundError,
    ValidationError,
    AuthenticationError,
    AuthorizationError,
    ExternalServiceError,
)
from .models import Identity

__all__ = [
    "Settings",
    "get_settings",
    "get_supabase_client",
    "reset_client_cache",
    "ModuleHubError",
    "NotFoundError",
    "ValidationError",
    "AuthenticationError",
    "AuthorizationError",
    "ExternalServiceError",
    "Identity",
]
