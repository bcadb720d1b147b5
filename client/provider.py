"""
Supabase Auth adapter for the client runtime.

Wraps the public (anon-key) Supabase client. The same client carries the
user's session, so tables queried through it are subject to RLS.
"""

import logging
from typing import Any, Callable, Optional

from supabase import Client, create_client

from modules.auth.exceptions import InvalidCredentialError
from shared.models import Identity

from .config import ClientSettings, get_client_settings
from .exceptions import IdentityProviderError, SignUpError
from .interfaces import IIdentityProvider, SessionChangeCallback

logger = logging.getLogger(__name__)


def create_public_client(settings: Optional[ClientSettings] = None) -> Client:
    """
    Create an anon-key Supabase client.

    Raises:
        RuntimeError: If the public Supabase settings are missing
    """
    settings = settings or get_client_settings()
    if not settings.supabase_url or not settings.supabase_anon_key:
        raise RuntimeError(
            "Supabase configuration missing. "
            "Set PUBLIC_SUPABASE_URL and PUBLIC_SUPABASE_ANON_KEY environment variables."
        )
    return create_client(settings.supabase_url, settings.supabase_anon_key)


def _identity_from_session(session: Any) -> Optional[Identity]:
    user = getattr(session, "user", None) if session is not None else None
    if user is None:
        return None
    return Identity.from_provider_user(user)


class SupabaseIdentityProvider(IIdentityProvider):
    """IIdentityProvider over ``supabase.Client.auth``."""

    def __init__(self, client: Client):
        self._client = client

    @property
    def client(self) -> Client:
        return self._client

    def fetch_session(self) -> Optional[Identity]:
        return _identity_from_session(self._client.auth.get_session())

    def subscribe(self, callback: SessionChangeCallback) -> Callable[[], None]:
        def on_change(event: Any, session: Any) -> None:
            name = getattr(event, "value", None) or str(event)
            callback(name, _identity_from_session(session))

        subscription = self._client.auth.on_auth_state_change(on_change)
        return subscription.unsubscribe

    def invalidate_session(self) -> None:
        self._client.auth.sign_out()

    def sign_in_with_password(self, email: str, password: str) -> Identity:
        try:
            response = self._client.auth.sign_in_with_password(
                {"email": email, "password": password}
            )
        except Exception as e:
            logger.warning("Sign-in rejected: %s", e)
            raise InvalidCredentialError("Invalid email or password") from e

        identity = _identity_from_session(getattr(response, "session", None))
        if identity is None:
            raise InvalidCredentialError("Invalid email or password")
        return identity

    def sign_up(self, email: str, password: str, full_name: str = "") -> Optional[Identity]:
        try:
            response = self._client.auth.sign_up(
                {
                    "email": email,
                    "password": password,
                    "options": {"data": {"full_name": full_name}},
                }
            )
        except Exception as e:
            logger.warning("Sign-up rejected: %s", e)
            raise SignUpError() from e

        # No session until the address is confirmed, when confirmation is on.
        return _identity_from_session(getattr(response, "session", None))

    def reset_password(self, email: str) -> None:
        try:
            self._client.auth.reset_password_for_email(email)
        except Exception as e:
            logger.warning("Password reset request failed: %s", e)
            raise IdentityProviderError("send password reset email") from e

    def update_password(self, password: str) -> None:
        try:
            self._client.auth.update_user({"password": password})
        except Exception as e:
            logger.warning("Password update failed: %s", e)
            raise IdentityProviderError("update password") from e
