"""
Request authentication pipeline.

Every protected route runs the same steps, strictly in order:
extract bearer token -> verify with the identity provider -> reconcile the
profile -> authorize. A failure at any step ends the request before the
route body runs.
"""

import logging
from dataclasses import dataclass
from typing import Callable, Optional

from fastapi import Depends
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials

from modules.auth.exceptions import MissingCredentialError
from modules.auth.gate import authorize
from modules.auth.interfaces import ICredentialVerifier
from modules.auth.models import Capability
from modules.profiles.exceptions import ProfileReconciliationError
from modules.profiles.interfaces import IProfileReconciler
from modules.profiles.models import Profile
from shared.exceptions import AuthenticationError
from shared.models import Identity

from ..dependencies import get_credential_verifier, get_profile_reconciler

logger = logging.getLogger(__name__)

# Bearer token extractor. Missing header, another scheme ("Token abc") or an
# empty token all come back as None.
bearer_scheme = HTTPBearer(auto_error=False)


@dataclass(frozen=True)
class RequestContext:
    """The verified identity and reconciled profile of the caller, if any."""

    identity: Optional[Identity] = None
    profile: Optional[Profile] = None

    @property
    def is_authenticated(self) -> bool:
        return self.profile is not None


async def get_request_context(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    verifier: ICredentialVerifier = Depends(get_credential_verifier),
    reconciler: IProfileReconciler = Depends(get_profile_reconciler),
) -> RequestContext:
    """
    Dependency that verifies the caller and reconciles their profile.

    Raises:
        MissingCredentialError: No usable bearer header (provider not called)
        InvalidCredentialError: Provider rejected the token
        ProfileReconciliationError: No profile could be obtained
    """
    if credentials is None:
        raise MissingCredentialError()

    identity = await verifier.verify(credentials.credentials)
    profile = await reconciler.reconcile(identity)
    return RequestContext(identity=identity, profile=profile)


async def get_optional_context(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    verifier: ICredentialVerifier = Depends(get_credential_verifier),
    reconciler: IProfileReconciler = Depends(get_profile_reconciler),
) -> RequestContext:
    """
    Dependency that identifies the caller when it can, anonymous otherwise.

    Use this for endpoints that enrich their response for signed-in users
    but never refuse anonymous ones.
    """
    if credentials is None:
        return RequestContext()

    try:
        identity = await verifier.verify(credentials.credentials)
        profile = await reconciler.reconcile(identity)
    except (AuthenticationError, ProfileReconciliationError) as e:
        logger.debug("Optional authentication failed, continuing anonymously: %s", e.code)
        return RequestContext()

    return RequestContext(identity=identity, profile=profile)


def require(capability: Capability) -> Callable:
    """
    Build a dependency that runs the pipeline and then the authorization gate.

    Usage:
        @router.get("/admin-only")
        async def route(context: RequestContext = Depends(require(Capability.ADMIN_ONLY))):
            ...
    """

    async def dependency(
        context: RequestContext = Depends(get_request_context),
    ) -> RequestContext:
        authorize(context.profile, capability).raise_for_denial()
        return context

    return dependency


require_authenticated = require(Capability.AUTHENTICATED_ONLY)
require_admin = require(Capability.ADMIN_ONLY)

# Type aliases for cleaner route definitions
RequireAuth = Depends(require_authenticated)
RequireAdmin = Depends(require_admin)
OptionalAuth = Depends(get_optional_context)
