"""
Module usage endpoints.

Provides usage history, explicit usage tracking and monthly summaries.
"""

from typing import Optional

from fastapi import APIRouter, Depends, Query

from modules.usage.interfaces import IUsageService
from modules.usage.models import UsageEntry, UsageRecord, UsageSummary
from shared.config import Settings, get_settings

from ..dependencies import get_usage_service
from ..middleware.auth import RequestContext, RequireAdmin, RequireAuth
from ..models.responses import ApiResponse

router = APIRouter()


@router.get("", response_model=ApiResponse[list[UsageRecord]])
async def get_my_usage(
    limit: Optional[int] = Query(default=None, ge=1, le=1000, description="Max records"),
    context: RequestContext = RequireAuth,
    service: IUsageService = Depends(get_usage_service),
    settings: Settings = Depends(get_settings),
) -> ApiResponse[list[UsageRecord]]:
    """
    Get the current user's most recent module usage.

    Requires authentication.
    """
    records = await service.get_usage_history(
        context.profile.id,
        limit=limit or settings.usage_history_limit,
    )
    return ApiResponse(data=records)


@router.get("/all", response_model=ApiResponse[list[UsageRecord]])
async def get_all_usage(
    limit: Optional[int] = Query(default=None, ge=1, le=1000, description="Max records"),
    context: RequestContext = RequireAdmin,
    service: IUsageService = Depends(get_usage_service),
    settings: Settings = Depends(get_settings),
) -> ApiResponse[list[UsageRecord]]:
    """
    Get every user's most recent module usage, with owner email and name.

    Requires the admin role.
    """
    records = await service.list_all_usage(limit=limit or settings.usage_admin_limit)
    return ApiResponse(data=records)


@router.get("/summary", response_model=ApiResponse[UsageSummary])
async def get_usage_summary(
    context: RequestContext = RequireAuth,
    service: IUsageService = Depends(get_usage_service),
) -> ApiResponse[UsageSummary]:
    """
    Get the current user's usage for the current calendar month.

    Requires authentication.
    """
    return ApiResponse(data=await service.get_usage_summary(context.profile.id))


@router.post("", response_model=ApiResponse[UsageRecord], status_code=201)
async def track_usage(
    entry: UsageEntry,
    context: RequestContext = RequireAuth,
    service: IUsageService = Depends(get_usage_service),
) -> ApiResponse[UsageRecord]:
    """
    Record a module run for the current user.

    The record is always attributed to the caller. Requires authentication.
    """
    record = await service.track_usage(context.profile.id, entry)
    return ApiResponse(data=record)
