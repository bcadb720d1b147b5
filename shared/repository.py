"""
Base repository class for database access.

Provides a common abstraction layer for all repositories, encapsulating
Supabase client access and providing shared utilities for data operations.
"""

from datetime import datetime
from typing import Any, Optional, TypeVar, Generic
from supabase import Client


T = TypeVar("T")


class BaseRepository(Generic[T]):
    """
    Base class for all repositories.

    Provides common functionality for database operations:
    - Supabase client access via self._db
    - Generic type parameter for model type hints
    - Timestamp parsing for rows returned by PostgREST

    Subclasses implement domain-specific data access methods and handle
    dict-to-Pydantic model mapping internally. Repository methods are
    synchronous; services run them off the event loop.

    Example:
        class ProfileRepository(BaseRepository[Profile]):
            def get_by_id(self, profile_id: str) -> Optional[Profile]:
                result = self._db.table("user_profiles").select("*").eq("id", profile_id).execute()
                if not result.data:
                    return None
                return self._map_to_profile(result.data[0])
    """

    table_name: str = ""

    def __init__(self, db: Client) -> None:
        """
        Initialize the repository with a Supabase client.

        Args:
            db: Supabase client instance for database operations.
        """
        self._db = db

    def _table(self) -> Any:
        """Start a query builder on this repository's table."""
        return self._db.table(self.table_name)

    @staticmethod
    def _parse_timestamp(value: Any) -> Optional[datetime]:
        """Parse a PostgREST timestamp (ISO-8601, possibly 'Z'-suffixed)."""
        if value is None or isinstance(value, datetime):
            return value
        return datetime.fromisoformat(str(value).replace("Z", "+00:00"))
