"""
Health check endpoints.

Provides endpoints for monitoring application health and readiness.
"""

from fastapi import APIRouter, Depends
from pydantic import BaseModel

from shared.config import Settings, get_settings

from ..models.responses import ApiResponse

router = APIRouter()


class HealthResponse(BaseModel):
    """Health check response model."""

    status: str
    version: str


class ReadinessResponse(BaseModel):
    """Readiness check response model."""

    status: str
    database: str
    usage_tracking: str


@router.get("/health", response_model=ApiResponse[HealthResponse])
async def health_check(
    settings: Settings = Depends(get_settings),
) -> ApiResponse[HealthResponse]:
    """
    Basic health check endpoint.

    Returns 200 if the API is running.
    """
    return ApiResponse(data=HealthResponse(status="healthy", version=settings.app_version))


@router.get("/ready", response_model=ApiResponse[ReadinessResponse])
async def readiness_check(
    settings: Settings = Depends(get_settings),
) -> ApiResponse[ReadinessResponse]:
    """
    Readiness check endpoint.

    Reports whether the Supabase connection settings are present.
    """
    configured = bool(settings.supabase_url and settings.supabase_service_role_key)
    return ApiResponse(
        data=ReadinessResponse(
            status="ready" if configured else "not_ready",
            database="configured" if configured else "unconfigured",
            usage_tracking="enabled" if settings.enable_usage_tracking else "disabled",
        )
    )
