# backend/liveclass/api/dependencies/authz.py
"""
Authorization helpers for API routes.

Role checks here gate whole endpoints. Per-action policy (who may start or
join a class) lives in the admission service.
"""

from __future__ import annotations

from collections.abc import Awaitable, Callable
import logging
from typing import Iterable

from fastapi import Depends, HTTPException, status

from ...core.enums import Role
from .auth import CurrentUser, get_current_user

logger = logging.getLogger(__name__)


def require_roles(roles: Iterable[Role]) -> Callable[..., Awaitable[CurrentUser]]:
    """Ensure the current user holds one of the provided roles."""

    required = frozenset(roles)

    async def checker(current_user: CurrentUser = Depends(get_current_user)) -> CurrentUser:
        if Role.parse(current_user.role) not in required:
            logger.info(
                "Role check failed for user %s (role=%r)",
                current_user.id,
                current_user.role,
            )
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail="Not allowed",
            )
        return current_user

    return checker


async def require_instructor(current_user: CurrentUser = Depends(get_current_user)) -> CurrentUser:
    if Role.parse(current_user.role) is not Role.INSTRUCTOR:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Not allowed",
        )
    return current_user
