"""
Profiles module.

Owns the ``user_profiles`` table: the one-profile-per-identity reconciliation
and every later change to a profile.

Public API:
- IProfileStore / IProfileReconciler: Interfaces
- Profile, Role: Models
- ProfileReconciler: First-sight creation with race tolerance
- ProfileService: Role changes, self-service edits, dashboard stats
"""

from .models import (
    Role,
    Profile,
    ProfileDraft,
    ProfileUpdateRequest,
    RoleUpdateRequest,
    DashboardStats,
)
from .exceptions import (
    ProfileStoreError,
    ProfileFetchError,
    ProfileReconciliationError,
    ProfileNotFoundError,
    InvalidRoleError,
)
from .interfaces import IProfileStore, IProfileReconciler
from .repository import ProfileRepository, PROFILES_TABLE
from .reconciler import ProfileReconciler
from .service import ProfileService, parse_role

__all__ = [
    # Interfaces
    "IProfileStore",
    "IProfileReconciler",
    # Models
    "Role",
    "Profile",
    "ProfileDraft",
    "ProfileUpdateRequest",
    "RoleUpdateRequest",
    "DashboardStats",
    # Exceptions
    "ProfileStoreError",
    "ProfileFetchError",
    "ProfileReconciliationError",
    "ProfileNotFoundError",
    "InvalidRoleError",
    # Implementations
    "ProfileRepository",
    "PROFILES_TABLE",
    "ProfileReconciler",
    "ProfileService",
    "parse_role",
]
