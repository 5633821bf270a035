# backend/liveclass/routes/v1/__init__.py
"""
API v1 Routes

Versioned API endpoints under /api/v1.
"""

from . import live_classes, sessions

__all__ = [
    "live_classes",
    "sessions",
]
