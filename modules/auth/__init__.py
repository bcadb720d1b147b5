"""
Authentication module.

Handles bearer-token verification and the authorization gate.

Public API:
- ICredentialVerifier: Interface for token verification
- SupabaseCredentialVerifier: Provider-backed implementation
- authorize / authorize_role_change: Pure authorization decisions
- Capability, DenyReason, AuthorizationDecision: Gate models
- Auth exceptions: MissingCredentialError, InvalidCredentialError, etc.
"""

from .interfaces import ICredentialVerifier
from .models import Capability, DenyReason, AuthorizationDecision
from .exceptions import (
    MissingCredentialError,
    InvalidCredentialError,
    UnauthenticatedError,
    InsufficientPrivilegeError,
)
from .gate import authorize, authorize_role_change
from .service import SupabaseCredentialVerifier

__all__ = [
    # Interface
    "ICredentialVerifier",
    # Models
    "Capability",
    "DenyReason",
    "AuthorizationDecision",
    # Exceptions
    "MissingCredentialError",
    "InvalidCredentialError",
    "UnauthenticatedError",
    "InsufficientPrivilegeError",
    # Gate
    "authorize",
    "authorize_role_change",
    # Service
    "SupabaseCredentialVerifier",
]
