"""
Authentication module data models.

The authorization contract is a closed set of capabilities and a decision
value, so it can be tested without storage or network.
"""

from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field

from .exceptions import InsufficientPrivilegeError, UnauthenticatedError


class Capability(str, Enum):
    """What a protected operation requires of the caller's profile."""

    ADMIN_ONLY = "admin_only"
    AUTHENTICATED_ONLY = "authenticated_only"
    OPTIONAL = "optional"


class DenyReason(str, Enum):
    """Why the gate refused an operation."""

    UNAUTHENTICATED = "unauthenticated"
    INSUFFICIENT_PRIVILEGE = "insufficient_privilege"
    SELF_ROLE_CHANGE = "self_role_change"


class AuthorizationDecision(BaseModel):
    """Outcome of an authorization check."""

    allowed: bool = Field(..., description="Whether the operation may proceed")
    reason: Optional[DenyReason] = Field(None, description="Set only on denial")

    model_config = {"frozen": True}

    @classmethod
    def allow(cls) -> "AuthorizationDecision":
        return cls(allowed=True)

    @classmethod
    def deny(cls, reason: DenyReason) -> "AuthorizationDecision":
        return cls(allowed=False, reason=reason)

    def raise_for_denial(self) -> None:
        """Raise the exception matching a denial; no-op when allowed."""
        if self.allowed:
            return
        if self.reason == DenyReason.UNAUTHENTICATED:
            raise UnauthenticatedError()
        if self.reason == DenyReason.SELF_ROLE_CHANGE:
            raise InsufficientPrivilegeError("You cannot change your own role")
        raise InsufficientPrivilegeError()
