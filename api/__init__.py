"""
Module Hub API package.

Provides the FastAPI application for authentication, role management and
module usage tracking.
"""

from .app import app, create_app

__all__ = ["app", "create_app"]
