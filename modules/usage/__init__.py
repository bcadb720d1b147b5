"""
Usage tracking module.

Handles module usage logging: best-effort recording around protected
operations, explicit tracking, history and monthly summaries.

Public API:
- IUsageService / IUsageStore: Interfaces
- UsageEntry, UsageRecord, UsageSummary, UsageStatus: Models
- UsageRecorder: Fire-and-forget recorder
- UsageService: Reads and explicit tracking
"""

from .interfaces import IUsageService, IUsageStore
from .models import (
    UsageStatus,
    UsageEntry,
    UsageOwner,
    UsageRecord,
    ModuleUsageStats,
    UsageSummary,
)
from .exceptions import (
    MissingModuleNameError,
    UsageStoreError,
)
from .repository import UsageRepository, USAGE_TABLE
from .recorder import UsageRecorder, TrackedOperation
from .service import UsageService

__all__ = [
    # Interfaces
    "IUsageService",
    "IUsageStore",
    # Models
    "UsageStatus",
    "UsageEntry",
    "UsageOwner",
    "UsageRecord",
    "ModuleUsageStats",
    "UsageSummary",
    # Exceptions
    "MissingModuleNameError",
    "UsageStoreError",
    # Implementations
    "UsageRepository",
    "USAGE_TABLE",
    "UsageRecorder",
    "TrackedOperation",
    "UsageService",
]
