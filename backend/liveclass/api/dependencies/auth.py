# backend/liveclass/api/dependencies/auth.py
"""
Authentication dependencies.

The caller is resolved from the bearer token alone; no user row is loaded
on the request path.
"""

from ...auth import CurrentUser, get_current_user

__all__ = ["CurrentUser", "get_current_user"]
