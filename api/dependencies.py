"""
Dependency injection setup for FastAPI.

This module provides the "container" that wires together all module
implementations. Each module exposes its service through an interface,
and this file creates the concrete implementations on top of the
service-role Supabase client.
"""

from typing import TYPE_CHECKING

# Type checking imports for interfaces (avoids circular imports)
if TYPE_CHECKING:
    from modules.auth.interfaces import ICredentialVerifier
    from modules.profiles.interfaces import IProfileReconciler, IProfileStore
    from modules.profiles.service import ProfileService
    from modules.usage.interfaces import IUsageService, IUsageStore
    from modules.usage.recorder import UsageRecorder


class ServiceContainer:
    """
    Container for all service instances.

    Services are created lazily on first access and cached as singletons
    within the container. Use reset() to clear them for testing.
    """

    def __init__(self) -> None:
        self._credential_verifier: "ICredentialVerifier | None" = None
        self._profile_repository: "IProfileStore | None" = None
        self._profile_reconciler: "IProfileReconciler | None" = None
        self._profile_service: "ProfileService | None" = None
        self._usage_repository: "IUsageStore | None" = None
        self._usage_service: "IUsageService | None" = None
        self._usage_recorder: "UsageRecorder | None" = None

    @property
    def credential_verifier(self) -> "ICredentialVerifier":
        """Get the credential verifier instance."""
        if self._credential_verifier is None:
            from modules.auth.service import SupabaseCredentialVerifier
            self._credential_verifier = SupabaseCredentialVerifier()
        return self._credential_verifier

    @property
    def profile_repository(self) -> "IProfileStore":
        """Get the profile repository instance."""
        if self._profile_repository is None:
            from modules.profiles.repository import ProfileRepository
            from shared.database import get_supabase_client
            self._profile_repository = ProfileRepository(get_supabase_client())
        return self._profile_repository

    @property
    def profile_reconciler(self) -> "IProfileReconciler":
        """Get the profile reconciler instance."""
        if self._profile_reconciler is None:
            from modules.profiles.reconciler import ProfileReconciler
            self._profile_reconciler = ProfileReconciler(self.profile_repository)
        return self._profile_reconciler

    @property
    def profiles(self) -> "ProfileService":
        """Get the profile service instance."""
        if self._profile_service is None:
            from modules.profiles.service import ProfileService
            self._profile_service = ProfileService(
                store=self.profile_repository,
                usage=self.usage,
            )
        return self._profile_service

    @property
    def usage_repository(self) -> "IUsageStore":
        """Get the usage repository instance."""
        if self._usage_repository is None:
            from modules.usage.repository import UsageRepository
            from shared.database import get_supabase_client
            self._usage_repository = UsageRepository(get_supabase_client())
        return self._usage_repository

    @property
    def usage(self) -> "IUsageService":
        """Get the usage service instance."""
        if self._usage_service is None:
            from modules.usage.service import UsageService
            self._usage_service = UsageService(self.usage_repository)
        return self._usage_service

    @property
    def usage_recorder(self) -> "UsageRecorder":
        """Get the usage recorder instance."""
        if self._usage_recorder is None:
            from modules.usage.recorder import UsageRecorder
            from shared.config import get_settings
            self._usage_recorder = UsageRecorder(
                self.usage_repository,
                enabled=get_settings().enable_usage_tracking,
            )
        return self._usage_recorder

    async def drain_usage_recorder(self) -> None:
        """Wait for pending usage writes, if a recorder was ever created."""
        if self._usage_recorder is not None:
            await self._usage_recorder.drain()

    def reset(self) -> None:
        """
        Reset all cached services.

        This is primarily for testing - allows tests to get fresh
        service instances with different mock dependencies.
        """
        self._credential_verifier = None
        self._profile_repository = None
        self._profile_reconciler = None
        self._profile_service = None
        self._usage_repository = None
        self._usage_service = None
        self._usage_recorder = None


# Module-level container singleton
_container: ServiceContainer | None = None


def get_container() -> ServiceContainer:
    """Get the singleton service container."""
    global _container
    if _container is None:
        _container = ServiceContainer()
    return _container


def reset_container() -> None:
    """
    Reset the service container.

    This clears the cached container, so the next call to get_container()
    will create a fresh container with new service instances.

    Primarily used for testing.
    """
    global _container
    _container = None


# FastAPI dependency functions
# These are the functions that should be used in route Depends() calls


def get_credential_verifier() -> "ICredentialVerifier":
    """FastAPI dependency for the credential verifier."""
    return get_container().credential_verifier


def get_profile_reconciler() -> "IProfileReconciler":
    """FastAPI dependency for the profile reconciler."""
    return get_container().profile_reconciler


def get_profile_service() -> "ProfileService":
    """FastAPI dependency for the profile service."""
    return get_container().profiles


def get_usage_service() -> "IUsageService":
    """FastAPI dependency for the usage service."""
    return get_container().usage


def get_usage_recorder() -> "UsageRecorder":
    """FastAPI dependency for the usage recorder."""
    return get_container().usage_recorder
