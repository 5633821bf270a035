"""
Live class routes - API v1

Admission endpoints under /api/v1/live-classes.
All business logic delegated to LiveClassService.

Endpoints:
    POST /start → Open a class as host (instructor/tenant/admin/superadmin)
    POST /join  → Join an open class (any authenticated role)
"""

import asyncio
import logging
from typing import NoReturn

from fastapi import APIRouter, Depends, HTTPException, status

from ...api.dependencies.auth import CurrentUser, get_current_user
from ...api.dependencies.services import get_live_class_service
from ...core.exceptions import DomainException
from ...schemas.live_class import LiveClassAdmissionResponse, LiveClassRequest
from ...services.live_class_service import LiveClassService

logger = logging.getLogger(__name__)

# V1 router - no prefix here, will be added when mounting in main.py
router = APIRouter(tags=["live-classes-v1"])


def handle_domain_exception(exc: DomainException) -> NoReturn:
    """Convert domain exceptions to HTTP exceptions."""
    if hasattr(exc, "to_http_exception"):
        raise exc.to_http_exception()
    raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=str(exc))


@router.post(
    "/start",
    response_model=LiveClassAdmissionResponse,
    responses={503: {"description": "Video service unavailable"}},
)
async def start_class(
    payload: LiveClassRequest,
    current_user: CurrentUser = Depends(get_current_user),
    service: LiveClassService = Depends(get_live_class_service),
) -> LiveClassAdmissionResponse:
    """Start a live class.

    Creates the Dyte meeting on demand and returns a host token for the
    frontend meeting SDK.
    """
    try:
        result = await asyncio.to_thread(
            service.start_class,
            payload.batch_id,
            current_user.id,
            current_user.role,
        )
        return LiveClassAdmissionResponse(**result)
    except DomainException as exc:
        handle_domain_exception(exc)
    except HTTPException:
        raise
    except Exception as e:
        logger.error("Unexpected error in start_class: %s", e, exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to start class",
        )


@router.post(
    "/join",
    response_model=LiveClassAdmissionResponse,
    responses={503: {"description": "Video service unavailable"}},
)
async def join_class(
    payload: LiveClassRequest,
    current_user: CurrentUser = Depends(get_current_user),
    service: LiveClassService = Depends(get_live_class_service),
) -> LiveClassAdmissionResponse:
    """Join a live class that the schedule currently admits."""
    try:
        result = await asyncio.to_thread(
            service.join_class,
            payload.batch_id,
            current_user.id,
            current_user.role,
        )
        return LiveClassAdmissionResponse(**result)
    except DomainException as exc:
        handle_domain_exception(exc)
    except HTTPException:
        raise
    except Exception as e:
        logger.error("Unexpected error in join_class: %s", e, exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to join class",
        )
