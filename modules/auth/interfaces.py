"""
Authentication module interface.

Other modules should depend on ICredentialVerifier, not the concrete
implementation. This enables testing with fakes and swapping providers.
"""

from typing import Protocol, runtime_checkable

from shared.models import Identity


@runtime_checkable
class ICredentialVerifier(Protocol):
    """
    Exchanges an opaque bearer token for a verified identity.

    Implementations delegate validation to the identity provider; no key
    material is held locally.
    """

    async def verify(self, token: str) -> Identity:
        """
        Verify a bearer token.

        Args:
            token: Access token issued by the identity provider

        Returns:
            The verified Identity; its ``id`` is stable per principal

        Raises:
            MissingCredentialError: If the token is empty
            InvalidCredentialError: If the provider rejects the token or errors
        """
        ...
