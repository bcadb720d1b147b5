"""
Client runtime interfaces.

The session controller talks to the identity provider only through
IIdentityProvider, so it can be driven by a fake in tests.
"""

from typing import Callable, Optional, Protocol, runtime_checkable

from shared.models import Identity

# (event name, identity or None when the session ended)
SessionChangeCallback = Callable[[str, Optional[Identity]], None]


@runtime_checkable
class IIdentityProvider(Protocol):
    """
    Session-holding side of the identity provider.

    All methods are synchronous and may block on the network; callers on an
    event loop run them through ``asyncio.to_thread``. Change callbacks may
    fire on any thread.
    """

    def fetch_session(self) -> Optional[Identity]:
        """Identity of the currently held session, None if signed out."""
        ...

    def subscribe(self, callback: SessionChangeCallback) -> Callable[[], None]:
        """
        Register for session change notifications.

        Returns:
            A function that cancels the subscription
        """
        ...

    def invalidate_session(self) -> None:
        """Sign out with the provider."""
        ...

    def sign_in_with_password(self, email: str, password: str) -> Identity:
        """
        Raises:
            InvalidCredentialError: If the provider rejects the credentials
        """
        ...

    def sign_up(self, email: str, password: str, full_name: str = "") -> Optional[Identity]:
        """
        Register a new account.

        Returns:
            The signed-in identity, or None while email confirmation is pending

        Raises:
            SignUpError: If the provider refuses the registration
        """
        ...

    def reset_password(self, email: str) -> None:
        """Send a password reset email."""
        ...

    def update_password(self, password: str) -> None:
        """Change the signed-in user's password."""
        ...
