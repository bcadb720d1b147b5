"""
Profiles module data models.

A profile is this system's own record of a verified identity, keyed 1:1 by
the identity's ID. Roles live here, never in the identity provider.
"""

from datetime import datetime
from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field


class Role(str, Enum):
    """Closed set of roles a profile can hold."""

    USER = "user"
    ADMIN = "admin"


class Profile(BaseModel):
    """A persisted profile row from ``user_profiles``."""

    id: str = Field(..., description="Profile ID (= identity ID, immutable)")
    email: str = Field(default="", description="Email synced from the identity at creation")
    full_name: str = Field(default="", description="Display name, editable by the owner")
    role: Role = Field(default=Role.USER, description="Authorization role")
    created_at: Optional[datetime] = Field(None, description="Row creation time")
    updated_at: Optional[datetime] = Field(None, description="Last update time")

    model_config = {"frozen": True}

    @property
    def is_admin(self) -> bool:
        return self.role == Role.ADMIN


class ProfileDraft(BaseModel):
    """Payload the reconciler writes for a first-seen identity."""

    id: str
    email: str = ""
    full_name: str = ""
    role: Role = Role.USER


class ProfileUpdateRequest(BaseModel):
    """Fields a user may change on their own profile."""

    full_name: str = Field(..., max_length=200, description="New display name")


class RoleUpdateRequest(BaseModel):
    """Request body for an admin role change."""

    role: Optional[str] = Field(None, description="Target role: 'admin' or 'user'")


class DashboardStats(BaseModel):
    """Aggregates shown on the admin dashboard."""

    total_users: int = Field(default=0, description="Number of profiles")
    admin_users: int = Field(default=0, description="Profiles with the admin role")
    total_usage: int = Field(default=0, description="Usage records considered")
    recent_activity: int = Field(default=0, description="Usage records in the recent window")
