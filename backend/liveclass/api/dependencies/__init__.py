# backend/liveclass/api/dependencies/__init__.py
"""
Central export point for all dependencies.

This module re-exports all dependencies from submodules
for convenient access throughout the application.
"""

from .auth import CurrentUser, get_current_user
from .authz import require_instructor, require_roles
from .database import get_db
from .services import (
    get_live_class_service,
    get_session_sync_service,
    get_session_usage_service,
    get_video_client,
)

__all__ = [
    # Auth
    "CurrentUser",
    "get_current_user",
    "require_instructor",
    "require_roles",
    # Database
    "get_db",
    # Services
    "get_live_class_service",
    "get_session_sync_service",
    "get_session_usage_service",
    "get_video_client",
]
