"""
Usage tracking service implementation.

Reads usage history and handles explicit tracking requests. Explicit
tracking surfaces store failures to the caller; best-effort recording
around other operations lives in recorder.py.
"""

import asyncio
from datetime import datetime, timezone
from typing import Optional

from dateutil.relativedelta import relativedelta

from .exceptions import MissingModuleNameError
from .interfaces import IUsageService, IUsageStore
from .models import ModuleUsageStats, UsageEntry, UsageRecord, UsageStatus, UsageSummary

# Upper bound on rows pulled for a monthly summary.
SUMMARY_ROW_LIMIT = 10000


class UsageService(IUsageService):
    """Usage reads and explicit tracking over an IUsageStore."""

    def __init__(self, store: IUsageStore):
        self._store = store

    def get_current_period(self) -> tuple[datetime, datetime]:
        """
        Get the current tracking period (calendar month, UTC).

        Returns:
            Tuple of (period_start, period_end) datetimes
        """
        now = datetime.now(timezone.utc)
        period_start = now.replace(day=1, hour=0, minute=0, second=0, microsecond=0)
        period_end = period_start + relativedelta(months=1)
        return period_start, period_end

    async def track_usage(self, user_id: str, entry: UsageEntry) -> UsageRecord:
        if not entry.module_name or not entry.module_name.strip():
            raise MissingModuleNameError()
        return await asyncio.to_thread(self._store.insert, user_id, entry)

    async def get_usage_history(self, user_id: str, limit: int = 10) -> list[UsageRecord]:
        return await asyncio.to_thread(self._store.list_for_user, user_id, limit)

    async def list_all_usage(self, limit: int = 100) -> list[UsageRecord]:
        return await asyncio.to_thread(self._store.list_all, limit)

    async def get_usage_summary(
        self,
        user_id: str,
        period_start: Optional[datetime] = None,
    ) -> UsageSummary:
        """Aggregate a user's usage for the month starting at ``period_start``."""
        if period_start is None:
            period_start, period_end = self.get_current_period()
        else:
            period_end = period_start + relativedelta(months=1)

        records = await asyncio.to_thread(
            self._store.list_for_user,
            user_id,
            SUMMARY_ROW_LIMIT,
            period_start,
            period_end,
        )

        summary = UsageSummary(
            user_id=user_id,
            period_start=period_start,
            period_end=period_end,
        )

        total_time = 0
        for record in records:
            summary.total_runs += 1
            total_time += record.processing_time_ms

            status = record.status.value
            summary.by_status[status] = summary.by_status.get(status, 0) + 1

            stats = summary.by_module.setdefault(record.module_name, ModuleUsageStats())
            stats.runs += 1
            stats.total_processing_time_ms += record.processing_time_ms
            if record.status == UsageStatus.COMPLETED:
                stats.completed += 1
            elif record.status == UsageStatus.FAILED:
                stats.failed += 1

        if summary.total_runs:
            summary.average_processing_time_ms = total_time / summary.total_runs

        return summary
