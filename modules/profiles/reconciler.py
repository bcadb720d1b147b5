"""
Profile reconciliation.

Guarantees that every verified identity has exactly one persisted profile:

1. Fetch the profile by identity ID.
2. Found: return it unchanged. No write.
3. Missing (or the fetch errored): upsert a ``role=user`` draft, conflict
   key ``id``. A concurrent creator's row wins; ours is dropped.
4. Upsert failed or hit the conflict: one final fetch. Still nothing means
   ``ProfileReconciliationError``.

A profile is never fabricated locally: every successful path returns a row
read back from the store.
"""

import asyncio
import logging
from typing import Optional

from shared.models import Identity

from .exceptions import ProfileFetchError, ProfileReconciliationError, ProfileStoreError
from .interfaces import IProfileReconciler, IProfileStore
from .models import Profile, ProfileDraft, Role

logger = logging.getLogger(__name__)


class ProfileReconciler(IProfileReconciler):
    """
    Maps verified identities to their profile rows, creating on first sight.

    Store calls are synchronous Supabase requests, so each one is awaited
    through ``asyncio.to_thread``.
    """

    def __init__(self, store: IProfileStore):
        self._store = store

    async def reconcile(self, identity: Identity) -> Profile:
        existing = await self._fetch(identity.id)
        if existing is not None:
            return existing

        draft = ProfileDraft(
            id=identity.id,
            email=identity.email,
            full_name=identity.full_name,
            role=Role.USER,
        )

        try:
            created = await asyncio.to_thread(self._store.upsert, draft)
        except ProfileStoreError as e:
            # Usually a concurrent create for the same identity, rarely an outage.
            logger.warning(
                "Profile upsert for %s failed, retrying lookup: %s",
                identity.id,
                e.details.get("error", e.message),
            )
            created = None
        else:
            if created is not None:
                logger.info("Created profile for %s", identity.id)
                return created

        retried = await self._fetch(identity.id)
        if retried is None:
            logger.error("Could not reconcile a profile for %s", identity.id)
            raise ProfileReconciliationError(identity.id)

        logger.info("Profile for %s found on retry", identity.id)
        return retried

    async def _fetch(self, profile_id: str) -> Optional[Profile]:
        """Fetch by ID; a failed read counts as "not found"."""
        try:
            return await asyncio.to_thread(self._store.get_by_id, profile_id)
        except ProfileFetchError as e:
            logger.warning(
                "Profile fetch for %s failed: %s",
                profile_id,
                e.details.get("error", e.message),
            )
            return None
