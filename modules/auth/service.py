"""
Credential verification service.

Delegates bearer-token validation to Supabase Auth. The tokens are opaque
to this system: no signature is checked locally, the provider is asked.
"""

import asyncio
import logging
from typing import Any, Optional

from pydantic import ValidationError

from shared.database import get_supabase_client
from shared.models import Identity

from .exceptions import InvalidCredentialError, MissingCredentialError
from .interfaces import ICredentialVerifier

logger = logging.getLogger(__name__)


class SupabaseCredentialVerifier(ICredentialVerifier):
    """
    Implementation of the credential verifier.

    Uses the service-role Supabase client's ``auth.get_user(token)`` call.
    Every provider failure, including transport errors and timeouts, maps to
    the same InvalidCredentialError.
    """

    def __init__(self, client: Optional[Any] = None):
        self._db = client if client is not None else get_supabase_client()

    async def verify(self, token: str) -> Identity:
        if not token:
            raise MissingCredentialError()

        try:
            response = await asyncio.to_thread(self._db.auth.get_user, token)
        except Exception as e:
            logger.warning("Token verification failed: %s", e)
            raise InvalidCredentialError() from e

        user = getattr(response, "user", None)
        if user is None:
            logger.warning("Token verification returned no user")
            raise InvalidCredentialError()

        try:
            return Identity.from_provider_user(user)
        except ValidationError as e:
            logger.warning("Token verification returned a malformed user: %s", e)
            raise InvalidCredentialError() from e

