"""
Profile and administration endpoints.

Provides the caller's own profile, the admin user list, role changes and
dashboard statistics.
"""

from fastapi import APIRouter, Depends

from modules.profiles.models import (
    DashboardStats,
    Profile,
    ProfileUpdateRequest,
    RoleUpdateRequest,
)
from modules.profiles.service import ProfileService
from modules.usage.recorder import UsageRecorder
from shared.config import Settings, get_settings

from ..dependencies import get_profile_service, get_usage_recorder
from ..middleware.auth import OptionalAuth, RequestContext, RequireAdmin, RequireAuth
from ..models.responses import ApiResponse, SessionStatus

router = APIRouter()


@router.get("/session", response_model=ApiResponse[SessionStatus])
async def get_session(context: RequestContext = OptionalAuth) -> ApiResponse[SessionStatus]:
    """
    Report whether the caller is signed in.

    Never fails on a bad or missing token; the caller is reported anonymous.
    """
    return ApiResponse(
        data=SessionStatus(
            authenticated=context.is_authenticated,
            profile=context.profile,
        )
    )


@router.get("/me", response_model=ApiResponse[Profile])
async def get_my_profile(context: RequestContext = RequireAuth) -> ApiResponse[Profile]:
    """
    Get the current user's profile.

    Creates the profile on the user's first authenticated request.
    """
    return ApiResponse(data=context.profile)


@router.patch("/me", response_model=ApiResponse[Profile])
async def update_my_profile(
    request: ProfileUpdateRequest,
    context: RequestContext = RequireAuth,
    service: ProfileService = Depends(get_profile_service),
    recorder: UsageRecorder = Depends(get_usage_recorder),
) -> ApiResponse[Profile]:
    """
    Update the current user's display name.

    The role cannot be changed through this endpoint.
    """
    async with recorder.track(
        context.identity,
        "profile.update",
        {"full_name": request.full_name},
    ) as operation:
        profile = await service.update_own_profile(context.profile, request)
        operation.output = profile.model_dump(mode="json")
    return ApiResponse(data=profile)


@router.get("/users", response_model=ApiResponse[list[Profile]])
async def list_users(
    context: RequestContext = RequireAdmin,
    service: ProfileService = Depends(get_profile_service),
) -> ApiResponse[list[Profile]]:
    """
    List all user profiles, newest first.

    Requires the admin role.
    """
    return ApiResponse(data=await service.list_profiles())


@router.put("/users/{user_id}/role", response_model=ApiResponse[Profile])
async def update_user_role(
    user_id: str,
    request: RoleUpdateRequest,
    context: RequestContext = RequireAdmin,
    service: ProfileService = Depends(get_profile_service),
    recorder: UsageRecorder = Depends(get_usage_recorder),
) -> ApiResponse[Profile]:
    """
    Set another user's role to 'admin' or 'user'.

    Requires the admin role. Admins cannot change their own role.
    """
    async with recorder.track(
        context.identity,
        "admin.update_role",
        {"target_id": user_id, "role": request.role},
    ) as operation:
        profile = await service.change_role(context.profile, user_id, request.role)
        operation.output = profile.model_dump(mode="json")
    return ApiResponse(data=profile)


@router.get("/stats", response_model=ApiResponse[DashboardStats])
async def get_dashboard_stats(
    context: RequestContext = RequireAdmin,
    service: ProfileService = Depends(get_profile_service),
    settings: Settings = Depends(get_settings),
) -> ApiResponse[DashboardStats]:
    """
    Get user and activity counts for the admin dashboard.

    Requires the admin role.
    """
    stats = await service.get_dashboard_stats(recent_hours=settings.recent_activity_hours)
    return ApiResponse(data=stats)
