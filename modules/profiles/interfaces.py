"""
Profiles module interfaces.

The server pipeline and the client session both depend on IProfileReconciler;
the reconciler depends only on IProfileStore, so either a service-role or an
anon-key (RLS-scoped) repository can sit behind it.
"""

from typing import Any, Optional, Protocol, runtime_checkable

from shared.models import Identity

from .models import Profile, ProfileDraft


@runtime_checkable
class IProfileStore(Protocol):
    """Synchronous access to the ``user_profiles`` table."""

    def get_by_id(self, profile_id: str) -> Optional[Profile]:
        """
        Fetch a profile by ID.

        Returns:
            The profile, or None when no row exists

        Raises:
            ProfileFetchError: If the store could not be queried
        """
        ...

    def upsert(self, draft: ProfileDraft) -> Optional[Profile]:
        """
        Insert a profile, tolerating a concurrent insert of the same ID.

        Returns:
            The inserted profile, or None when a row with the same ID
            already existed and was left untouched

        Raises:
            ProfileStoreError: If the write failed
        """
        ...

    def update(self, profile_id: str, fields: dict[str, Any]) -> Profile:
        """
        Update fields of an existing profile.

        Raises:
            ProfileNotFoundError: If no row has this ID
            ProfileStoreError: If the write failed
        """
        ...

    def list_profiles(self) -> list[Profile]:
        """List all profiles, newest first."""
        ...


@runtime_checkable
class IProfileReconciler(Protocol):
    """Turns a verified identity into its single persisted profile."""

    async def reconcile(self, identity: Identity) -> Profile:
        """
        Return the profile for ``identity``, creating it on first sight.

        Raises:
            ProfileReconciliationError: If no persisted profile could be obtained
        """
        ...
