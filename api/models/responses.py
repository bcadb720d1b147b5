"""
Response envelope models.

Every response body has the same shape: ``{"success": true, "data": ...}``
on success, ``{"success": false, "error": "...", "code": "..."}`` on failure.
"""

from typing import Generic, Optional, TypeVar

from pydantic import BaseModel

from modules.profiles.models import Profile

T = TypeVar("T")


class ApiResponse(BaseModel, Generic[T]):
    """Successful response envelope."""

    success: bool = True
    data: T


class ErrorResponse(BaseModel):
    """Failed response envelope."""

    success: bool = False
    error: str
    code: Optional[str] = None


class SessionStatus(BaseModel):
    """Who the caller is, for endpoints where sign-in is optional."""

    authenticated: bool
    profile: Optional[Profile] = None
