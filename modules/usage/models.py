"""
Usage tracking module data models.

A usage record is an append-only log line describing one run of a module
(prompt template) or one protected operation: who ran it, with what input,
what came out, how long it took and how it ended.
"""

from datetime import datetime
from enum import Enum
from typing import Any, Optional

from pydantic import AliasChoices, BaseModel, Field


class UsageStatus(str, Enum):
    """Outcome of a tracked operation."""

    COMPLETED = "completed"
    FAILED = "failed"
    PROCESSING = "processing"


class UsageEntry(BaseModel):
    """
    What a caller reports about an operation.

    Has no id, owner or timestamp: the store assigns those, and the owner is
    always the verified identity, never a field the caller controls.
    """

    module_name: Optional[str] = Field(None, description="Module that was run")
    input_data: Any = Field(None, description="Module input (JSON)")
    output_data: Any = Field(None, description="Module output (JSON)")
    processing_time_ms: int = Field(
        default=0,
        ge=0,
        validation_alias=AliasChoices("processing_time_ms", "processing_time"),
        description="Wall-clock duration in milliseconds",
    )
    status: UsageStatus = Field(default=UsageStatus.COMPLETED, description="Outcome")

    model_config = {"populate_by_name": True}


class UsageOwner(BaseModel):
    """Owner details joined from ``user_profiles`` for admin listings."""

    email: str = ""
    full_name: str = ""


class UsageRecord(BaseModel):
    """A persisted row from ``module_usage``. Never updated after insert."""

    id: str = Field(..., description="Record ID")
    user_id: str = Field(..., description="Owner's profile ID")
    module_name: str = Field(..., description="Module that was run")
    input_data: Any = Field(None, description="Module input (JSON)")
    output_data: Any = Field(None, description="Module output (JSON)")
    processing_time_ms: int = Field(default=0, description="Duration in milliseconds")
    status: UsageStatus = Field(default=UsageStatus.COMPLETED, description="Outcome")
    created_at: Optional[datetime] = Field(None, description="Insert time")
    owner: Optional[UsageOwner] = Field(None, description="Joined owner details")

    model_config = {"frozen": True}


class ModuleUsageStats(BaseModel):
    """Per-module aggregate inside a summary."""

    runs: int = 0
    completed: int = 0
    failed: int = 0
    total_processing_time_ms: int = 0


class UsageSummary(BaseModel):
    """
    Aggregated usage for one user over a period.

    Used for the profile page's usage panel.
    """

    user_id: str = Field(..., description="User ID")
    period_start: datetime = Field(..., description="Start of period (inclusive)")
    period_end: datetime = Field(..., description="End of period (exclusive)")

    total_runs: int = Field(default=0, description="Records in the period")
    by_status: dict[str, int] = Field(default_factory=dict, description="Count per status")
    by_module: dict[str, ModuleUsageStats] = Field(
        default_factory=dict,
        description="Breakdown by module name",
    )
    average_processing_time_ms: float = Field(
        default=0.0,
        description="Mean duration across the period",
    )
