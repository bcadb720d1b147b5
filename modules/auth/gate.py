"""
Authorization gate.

Pure decision functions over an already-reconciled profile. No I/O.
"""

from typing import TYPE_CHECKING, Optional

from .models import AuthorizationDecision, Capability, DenyReason

if TYPE_CHECKING:
    from modules.profiles.models import Profile


def authorize(profile: Optional["Profile"], capability: Capability) -> AuthorizationDecision:
    """
    Decide whether ``profile`` may perform an operation requiring ``capability``.

    ``OPTIONAL`` always allows; the caller adapts to a missing profile.
    """
    if capability == Capability.OPTIONAL:
        return AuthorizationDecision.allow()

    if profile is None:
        if capability == Capability.ADMIN_ONLY:
            return AuthorizationDecision.deny(DenyReason.INSUFFICIENT_PRIVILEGE)
        return AuthorizationDecision.deny(DenyReason.UNAUTHENTICATED)

    if capability == Capability.ADMIN_ONLY and not profile.is_admin:
        return AuthorizationDecision.deny(DenyReason.INSUFFICIENT_PRIVILEGE)

    return AuthorizationDecision.allow()


def authorize_role_change(actor: Optional["Profile"], target_id: str) -> AuthorizationDecision:
    """
    Decide whether ``actor`` may write the role of profile ``target_id``.

    The actor must be an admin, and may not target its own profile.
    """
    decision = authorize(actor, Capability.ADMIN_ONLY)
    if not decision.allowed:
        return decision
    if actor is not None and actor.id == target_id:
        return AuthorizationDecision.deny(DenyReason.SELF_ROLE_CHANGE)
    return AuthorizationDecision.allow()
