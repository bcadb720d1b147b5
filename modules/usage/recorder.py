"""
Best-effort usage recording.

The recorder is a side channel: a failed write is logged and dropped, and
recording never delays the operation it describes. Records are always
attributed to the verified identity; without one nothing is written.
"""

import asyncio
import logging
import time
from contextlib import asynccontextmanager
from dataclasses import dataclass
from typing import Any, AsyncIterator, Optional

from shared.models import Identity

from .interfaces import IUsageStore
from .models import UsageEntry, UsageStatus

logger = logging.getLogger(__name__)


@dataclass
class TrackedOperation:
    """Mutable handle yielded by ``UsageRecorder.track``; set ``output`` on success."""

    module_name: str
    input_data: Any = None
    output: Any = None

    def to_entry(self, status: UsageStatus, elapsed_ms: int) -> UsageEntry:
        return UsageEntry(
            module_name=self.module_name,
            input_data=self.input_data,
            output_data=self.output,
            processing_time_ms=elapsed_ms,
            status=status,
        )


class UsageRecorder:
    """
    Fire-and-forget writer for usage records.

    Each write runs as its own asyncio task. The recorder keeps a strong
    reference to pending tasks until they finish; ``drain()`` waits for them.
    """

    def __init__(self, store: IUsageStore, enabled: bool = True):
        self._store = store
        self._enabled = enabled
        self._pending: set[asyncio.Task] = set()

    @property
    def pending_count(self) -> int:
        return len(self._pending)

    def record(self, identity: Optional[Identity], entry: UsageEntry) -> None:
        """Schedule a write for ``entry`` and return immediately."""
        if not self._enabled:
            return
        if identity is None:
            logger.debug("Skipping usage record for %s: no identity", entry.module_name)
            return
        if not entry.module_name:
            logger.warning("Skipping usage record without a module name")
            return

        try:
            task = asyncio.get_running_loop().create_task(self._write(identity.id, entry))
        except RuntimeError:
            logger.warning("No running event loop; usage for %s not recorded", entry.module_name)
            return

        self._pending.add(task)
        task.add_done_callback(self._pending.discard)

    @asynccontextmanager
    async def track(
        self,
        identity: Optional[Identity],
        module_name: str,
        input_data: Any = None,
    ) -> AsyncIterator[TrackedOperation]:
        """
        Time the wrapped block and record it as completed or failed.

        Exceptions from the block propagate unchanged.

        Usage:
            async with recorder.track(identity, "summarizer", {"text": text}) as op:
                op.output = await run_module(text)
        """
        operation = TrackedOperation(module_name=module_name, input_data=input_data)
        started = time.perf_counter()
        try:
            yield operation
        except Exception:
            self.record(identity, operation.to_entry(UsageStatus.FAILED, _elapsed_ms(started)))
            raise
        self.record(identity, operation.to_entry(UsageStatus.COMPLETED, _elapsed_ms(started)))

    async def drain(self) -> None:
        """Wait until every scheduled write has finished."""
        while self._pending:
            await asyncio.gather(*list(self._pending), return_exceptions=True)

    async def _write(self, user_id: str, entry: UsageEntry) -> None:
        try:
            await asyncio.to_thread(self._store.insert, user_id, entry)
        except Exception:
            logger.exception(
                "Failed to record usage of %s for %s",
                entry.module_name,
                user_id,
            )


def _elapsed_ms(started: float) -> int:
    return int((time.perf_counter() - started) * 1000)
