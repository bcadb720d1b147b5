"""
Profile administration service.

Everything that changes a profile after creation goes through here. In
particular ``change_role`` is the only code path that writes the ``role``
column, and it runs the role-mutation gate before touching the store.
"""

import asyncio
import logging
from datetime import datetime, timedelta, timezone
from typing import TYPE_CHECKING, Optional

from modules.auth.gate import authorize_role_change

from .exceptions import InvalidRoleError
from .interfaces import IProfileStore
from .models import DashboardStats, Profile, ProfileUpdateRequest, Role

if TYPE_CHECKING:
    from modules.usage.interfaces import IUsageService

logger = logging.getLogger(__name__)


def parse_role(value: object) -> Role:
    """Parse a requested role, raising InvalidRoleError for anything unknown."""
    if not isinstance(value, str) or not value:
        raise InvalidRoleError(value)
    try:
        return Role(value)
    except ValueError:
        raise InvalidRoleError(value)


class ProfileService:
    """
    Profile reads and authorized profile mutations.

    Args:
        store: Profile store (service-role repository on the server)
        usage: Usage service, only needed for dashboard statistics
    """

    def __init__(self, store: IProfileStore, usage: Optional["IUsageService"] = None):
        self._store = store
        self._usage = usage

    async def list_profiles(self) -> list[Profile]:
        return await asyncio.to_thread(self._store.list_profiles)

    async def update_own_profile(
        self,
        actor: Profile,
        request: ProfileUpdateRequest,
    ) -> Profile:
        """Update the caller's own display name. Role is not writable here."""
        return await asyncio.to_thread(
            self._store.update,
            actor.id,
            {"full_name": request.full_name.strip()},
        )

    async def change_role(
        self,
        actor: Profile,
        target_id: str,
        role: object,
    ) -> Profile:
        """
        Set another profile's role.

        Raises:
            InsufficientPrivilegeError: If the actor is not an admin or targets itself
            InvalidRoleError: If ``role`` is not 'admin' or 'user'
            ProfileNotFoundError: If the target profile does not exist
        """
        authorize_role_change(actor, target_id).raise_for_denial()
        new_role = parse_role(role)

        updated = await asyncio.to_thread(
            self._store.update,
            target_id,
            {"role": new_role.value},
        )
        logger.info(
            "Role of %s set to %s by %s",
            target_id,
            new_role.value,
            actor.id,
            extra={"actor_id": actor.id, "target_id": target_id, "role": new_role.value},
        )
        return updated

    async def get_dashboard_stats(self, recent_hours: int = 24) -> DashboardStats:
        """Aggregate profile counts and recent usage for the admin dashboard."""
        profiles = await self.list_profiles()
        stats = DashboardStats(
            total_users=len(profiles),
            admin_users=sum(1 for p in profiles if p.role == Role.ADMIN),
        )

        if self._usage is None:
            return stats

        records = await self._usage.list_all_usage()
        cutoff = datetime.now(timezone.utc) - timedelta(hours=recent_hours)
        stats.total_usage = len(records)
        stats.recent_activity = sum(
            1 for r in records if r.created_at is not None and r.created_at > cutoff
        )
        return stats
