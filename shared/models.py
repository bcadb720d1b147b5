"""
Shared data models used across modules.

These models are shared infrastructure, not business logic.
Module-specific models should stay in their respective module directories.
"""

from typing import Any
from pydantic import BaseModel, Field


class Identity(BaseModel):
    """
    A principal verified by the identity provider.

    Produced and owned entirely by Supabase Auth; this system only reads it.
    The ``id`` is stable across verifications of the same principal and is
    the key of the user's profile row.
    """

    id: str = Field(..., min_length=1, description="User ID (UUID from Supabase)")
    email: str = Field(default="", description="User's email address")
    metadata: dict[str, str] = Field(
        default_factory=dict,
        description="Provider-held user metadata (e.g. full_name)",
    )

    model_config = {
        "frozen": True,  # Make immutable for safety
        "extra": "ignore",
    }

    @property
    def full_name(self) -> str:
        """Display name from signup metadata, empty when absent."""
        return self.metadata.get("full_name", "")

    @classmethod
    def from_provider_user(cls, user: Any) -> "Identity":
        """
        Build an Identity from a Supabase ``User`` (or an equivalent dict).

        Metadata values are coerced to strings; null values are dropped.
        """
        if isinstance(user, dict):
            user_id = user.get("id")
            email = user.get("email")
            raw_metadata = user.get("user_metadata")
        else:
            user_id = getattr(user, "id", None)
            email = getattr(user, "email", None)
            raw_metadata = getattr(user, "user_metadata", None)

        metadata = {
            str(key): str(value)
            for key, value in (raw_metadata or {}).items()
            if value is not None
        }
        return cls(
            id="" if user_id is None else str(user_id),
            email=email or "",
            metadata=metadata,
        )
