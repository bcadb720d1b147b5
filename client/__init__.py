"""
Client runtime for Module Hub.

Holds the signed-in session of a UI process. Everything here runs with
the public anon key; the database enforces RLS on every query.

Usage:
    from client import create_session_controller

    async with create_session_controller() as session:
        await session.sign_in(email, password)
"""

from typing import Optional

from modules.profiles.reconciler import ProfileReconciler
from modules.profiles.repository import ProfileRepository
from modules.usage.recorder import UsageRecorder
from modules.usage.repository import UsageRepository

from .config import ClientSettings, get_client_settings
from .exceptions import IdentityProviderError, SignUpError
from .interfaces import IIdentityProvider, SessionChangeCallback
from .provider import SupabaseIdentityProvider, create_public_client
from .session import Session, SessionController, SessionListener, SessionState


def create_session_controller(settings: Optional[ClientSettings] = None) -> SessionController:
    """Wire a SessionController over one anon-key Supabase client."""
    public_client = create_public_client(settings)
    profiles = ProfileRepository(public_client)
    return SessionController(
        provider=SupabaseIdentityProvider(public_client),
        reconciler=ProfileReconciler(profiles),
        recorder=UsageRecorder(UsageRepository(public_client)),
        profile_store=profiles,
    )


__all__ = [
    # Configuration
    "ClientSettings",
    "get_client_settings",
    # Interfaces
    "IIdentityProvider",
    "SessionChangeCallback",
    # Provider
    "SupabaseIdentityProvider",
    "create_public_client",
    # Session
    "Session",
    "SessionController",
    "SessionListener",
    "SessionState",
    "create_session_controller",
    # Exceptions
    "IdentityProviderError",
    "SignUpError",
]
