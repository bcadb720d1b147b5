"""
Usage tracking module interfaces.

Other modules depend on IUsageService (reads and explicit tracking) or on
the UsageRecorder (best-effort recording around protected operations).
"""

from datetime import datetime
from typing import Optional, Protocol, runtime_checkable

from .models import UsageEntry, UsageRecord, UsageSummary


@runtime_checkable
class IUsageStore(Protocol):
    """Synchronous access to the ``module_usage`` table."""

    def insert(self, user_id: str, entry: UsageEntry) -> UsageRecord:
        """
        Append a usage record.

        Raises:
            UsageStoreError: If the insert failed
        """
        ...

    def list_for_user(
        self,
        user_id: str,
        limit: int = 10,
        since: Optional[datetime] = None,
        until: Optional[datetime] = None,
    ) -> list[UsageRecord]:
        """List one user's records, most recent first."""
        ...

    def list_all(self, limit: int = 100) -> list[UsageRecord]:
        """List every user's records with owner details, most recent first."""
        ...


@runtime_checkable
class IUsageService(Protocol):
    """Interface for usage reads and explicit tracking."""

    async def track_usage(self, user_id: str, entry: UsageEntry) -> UsageRecord:
        """
        Record usage on behalf of ``user_id`` and return the stored row.

        Unlike the recorder, failures propagate to the caller.

        Raises:
            MissingModuleNameError: If the entry has no module name
            UsageStoreError: If the insert failed
        """
        ...

    async def get_usage_history(self, user_id: str, limit: int = 10) -> list[UsageRecord]:
        """Get a user's most recent usage records."""
        ...

    async def list_all_usage(self, limit: int = 100) -> list[UsageRecord]:
        """Get the most recent usage records of all users."""
        ...

    async def get_usage_summary(self, user_id: str) -> UsageSummary:
        """Aggregate a user's usage for the current calendar month."""
        ...
