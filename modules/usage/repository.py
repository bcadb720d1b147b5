"""
Usage repository for database access.

Encapsulates all Supabase queries and data mapping for ``module_usage``.
"""

from datetime import datetime
from typing import Any, Optional

from shared.repository import BaseRepository

from .exceptions import UsageStoreError
from .models import UsageEntry, UsageOwner, UsageRecord

USAGE_TABLE = "module_usage"


class UsageRepository(BaseRepository[UsageRecord]):
    """
    Repository for usage data access.

    Records are append-only: there is deliberately no update or delete.
    """

    table_name = USAGE_TABLE

    def insert(self, user_id: str, entry: UsageEntry) -> UsageRecord:
        """Append a usage record and return the stored row."""
        row = {
            "user_id": user_id,
            "module_name": entry.module_name,
            "input_data": entry.input_data,
            "output_data": entry.output_data,
            "processing_time_ms": entry.processing_time_ms,
            "status": entry.status.value,
        }
        try:
            result = self._table().insert(row).execute()
        except Exception as e:
            raise UsageStoreError("track", str(e)) from e

        if not result.data:
            raise UsageStoreError("track", "insert returned no row")
        return self._map_to_record(result.data[0])

    def list_for_user(
        self,
        user_id: str,
        limit: int = 10,
        since: Optional[datetime] = None,
        until: Optional[datetime] = None,
    ) -> list[UsageRecord]:
        """List one user's records, most recent first."""
        query = self._table().select("*").eq("user_id", user_id)
        if since:
            query = query.gte("created_at", since.isoformat())
        if until:
            query = query.lt("created_at", until.isoformat())

        try:
            result = query.order("created_at", desc=True).limit(limit).execute()
        except Exception as e:
            raise UsageStoreError("fetch", str(e)) from e
        return [self._map_to_record(row) for row in result.data]

    def list_all(self, limit: int = 100) -> list[UsageRecord]:
        """List every user's records with owner email/full_name joined in."""
        try:
            result = (
                self._table()
                .select("*, user_profiles(email, full_name)")
                .order("created_at", desc=True)
                .limit(limit)
                .execute()
            )
        except Exception as e:
            raise UsageStoreError("fetch", str(e)) from e
        return [self._map_to_record(row) for row in result.data]

    # -------------------------------------------------------------------------
    # Mapping helpers
    # -------------------------------------------------------------------------

    def _map_to_record(self, data: dict[str, Any]) -> UsageRecord:
        """Map a database row (optionally with a joined profile) to a UsageRecord."""
        owner = None
        joined = data.get("user_profiles")
        if isinstance(joined, dict):
            owner = UsageOwner(
                email=joined.get("email") or "",
                full_name=joined.get("full_name") or "",
            )

        return UsageRecord(
            id=str(data["id"]),
            user_id=str(data["user_id"]),
            module_name=data["module_name"],
            input_data=data.get("input_data"),
            output_data=data.get("output_data"),
            processing_time_ms=data.get("processing_time_ms") or 0,
            status=data.get("status") or "completed",
            created_at=self._parse_timestamp(data.get("created_at")),
            owner=owner,
        )
