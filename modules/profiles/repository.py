"""
Profile repository for database access.

Encapsulates all Supabase queries and data mapping for ``user_profiles``.
Works with either the service-role client (server) or an anon-key client
carrying the user's session (client runtime, subject to RLS).
"""

import logging
from datetime import datetime, timezone
from typing import Any, Optional

from shared.repository import BaseRepository

from .exceptions import ProfileFetchError, ProfileNotFoundError, ProfileStoreError
from .models import Profile, ProfileDraft

logger = logging.getLogger(__name__)

PROFILES_TABLE = "user_profiles"


class ProfileRepository(BaseRepository[Profile]):
    """
    Repository for profile data access.

    Provider errors are translated into module exceptions here so callers
    never see PostgREST or transport error types. An empty result is a
    legitimate "not found" and is returned as None, not raised.

    Note: This repository does NOT perform authorization checks.
    """

    table_name = PROFILES_TABLE

    def get_by_id(self, profile_id: str) -> Optional[Profile]:
        """Fetch a profile by ID, None if no row exists."""
        try:
            result = self._table().select("*").eq("id", profile_id).execute()
        except Exception as e:
            raise ProfileFetchError(profile_id, str(e)) from e

        if not result.data:
            return None
        return self._map_to_profile(result.data[0])

    def upsert(self, draft: ProfileDraft) -> Optional[Profile]:
        """
        Insert a profile keyed on ``id``; ON CONFLICT (id) DO NOTHING.

        A concurrent first-sight of the same identity makes this return None
        instead of raising or overwriting the existing row.
        """
        row = draft.model_dump(mode="json")
        try:
            result = (
                self._table()
                .upsert(row, on_conflict="id", ignore_duplicates=True)
                .execute()
            )
        except Exception as e:
            raise ProfileStoreError("upsert", str(e)) from e

        if not result.data:
            logger.debug("Profile %s already existed; upsert left it untouched", draft.id)
            return None
        return self._map_to_profile(result.data[0])

    def update(self, profile_id: str, fields: dict[str, Any]) -> Profile:
        """Update fields of an existing profile and return the new row."""
        data = dict(fields)
        data["updated_at"] = datetime.now(timezone.utc).isoformat()
        try:
            result = self._table().update(data).eq("id", profile_id).execute()
        except Exception as e:
            raise ProfileStoreError("update", str(e)) from e

        if not result.data:
            raise ProfileNotFoundError(profile_id)
        return self._map_to_profile(result.data[0])

    def list_profiles(self) -> list[Profile]:
        """List all profiles, newest first."""
        try:
            result = self._table().select("*").order("created_at", desc=True).execute()
        except Exception as e:
            raise ProfileStoreError("list", str(e)) from e
        return [self._map_to_profile(row) for row in result.data]

    # -------------------------------------------------------------------------
    # Mapping helpers
    # -------------------------------------------------------------------------

    def _map_to_profile(self, data: dict[str, Any]) -> Profile:
        """Map a database row to a Profile model."""
        return Profile(
            id=str(data["id"]),
            email=data.get("email") or "",
            full_name=data.get("full_name") or "",
            role=data.get("role") or "user",
            created_at=self._parse_timestamp(data.get("created_at")),
            updated_at=self._parse_timestamp(data.get("updated_at")),
        )
