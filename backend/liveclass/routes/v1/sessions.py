"""
Session routes - API v1

Reconciliation and usage reporting under /api/v1/sessions.

Endpoints:
    POST /sync                            → Run the provider session sweep now
    GET  /tenant/{tenant_id}/summary      → Tenant usage for a month
    GET  /tenant/{tenant_id}/instructors  → Per-instructor usage for a month
    GET  /tenant/{tenant_id}/logs         → Paged session log for a month
    GET  /instructor/summary              → Caller's own usage for a month
    GET  /instructor/logs                 → Caller's own paged session log
"""

import asyncio
from datetime import datetime, timezone
import logging
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status

from ...api.dependencies.auth import CurrentUser
from ...api.dependencies.authz import require_instructor, require_roles
from ...api.dependencies.services import get_session_sync_service, get_session_usage_service
from ...core.constants import DEFAULT_PAGE_SIZE, MAX_PAGE_SIZE
from ...core.enums import REPORTING_ROLES, Role
from ...core.exceptions import DomainException
from ...schemas.session import (
    InstructorBreakdownResponse,
    InstructorSummaryResponse,
    SessionLogsResponse,
    SessionSyncResponse,
    TenantSummaryResponse,
)
from ...services.session_sync_service import SessionSyncService
from ...services.session_usage_service import SessionUsageService
from .live_classes import handle_domain_exception

logger = logging.getLogger(__name__)

router = APIRouter(tags=["sessions-v1"])

require_reporting_role = require_roles(REPORTING_ROLES)


def _resolve_period(month: Optional[int], year: Optional[int]) -> tuple[int, int]:
    now = datetime.now(timezone.utc)
    return (year if year is not None else now.year, month if month is not None else now.month)


def _check_tenant_scope(current_user: CurrentUser, tenant_id: str) -> None:
    """Tenant owners may only read their own tenant; platform admins read any."""
    if Role.parse(current_user.role) is Role.TENANT and current_user.tenant_id != tenant_id:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Not allowed")


@router.post("/sync", response_model=SessionSyncResponse)
async def sync_sessions(
    current_user: CurrentUser = Depends(require_reporting_role),
    service: SessionSyncService = Depends(get_session_sync_service),
) -> SessionSyncResponse:
    """Pull ended sessions from Dyte for every batch with a meeting."""
    try:
        result = await asyncio.to_thread(service.sync_sessions)
        return SessionSyncResponse(message=result.message, **result.to_dict())
    except DomainException as exc:
        handle_domain_exception(exc)
    except HTTPException:
        raise
    except Exception as e:
        logger.error("Unexpected error in sync_sessions: %s", e, exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to sync sessions",
        )


@router.get("/tenant/{tenant_id}/summary", response_model=TenantSummaryResponse)
async def get_tenant_summary(
    tenant_id: str,
    month: Optional[int] = Query(default=None, description="Calendar month (1-12)"),
    year: Optional[int] = Query(default=None),
    current_user: CurrentUser = Depends(require_reporting_role),
    service: SessionUsageService = Depends(get_session_usage_service),
) -> TenantSummaryResponse:
    _check_tenant_scope(current_user, tenant_id)
    year, month = _resolve_period(month, year)
    try:
        result = await asyncio.to_thread(service.get_tenant_summary, tenant_id, year, month)
        return TenantSummaryResponse(**result)
    except DomainException as exc:
        handle_domain_exception(exc)


@router.get("/tenant/{tenant_id}/instructors", response_model=InstructorBreakdownResponse)
async def get_instructor_breakdown(
    tenant_id: str,
    month: Optional[int] = Query(default=None, description="Calendar month (1-12)"),
    year: Optional[int] = Query(default=None),
    current_user: CurrentUser = Depends(require_reporting_role),
    service: SessionUsageService = Depends(get_session_usage_service),
) -> InstructorBreakdownResponse:
    _check_tenant_scope(current_user, tenant_id)
    year, month = _resolve_period(month, year)
    try:
        result = await asyncio.to_thread(
            service.get_instructor_breakdown, tenant_id, year, month
        )
        return InstructorBreakdownResponse(**result)
    except DomainException as exc:
        handle_domain_exception(exc)


@router.get("/tenant/{tenant_id}/logs", response_model=SessionLogsResponse)
async def get_tenant_session_logs(
    tenant_id: str,
    month: Optional[int] = Query(default=None, description="Calendar month (1-12)"),
    year: Optional[int] = Query(default=None),
    instructor_id: Optional[str] = Query(default=None),
    page: int = Query(default=1, ge=1),
    limit: int = Query(default=DEFAULT_PAGE_SIZE, ge=1, le=MAX_PAGE_SIZE),
    current_user: CurrentUser = Depends(require_reporting_role),
    service: SessionUsageService = Depends(get_session_usage_service),
) -> SessionLogsResponse:
    _check_tenant_scope(current_user, tenant_id)
    year, month = _resolve_period(month, year)
    try:
        result = await asyncio.to_thread(
            service.get_session_logs,
            tenant_id,
            year,
            month,
            instructor_id=instructor_id,
            page=page,
            limit=limit,
        )
        return SessionLogsResponse(**result)
    except DomainException as exc:
        handle_domain_exception(exc)


@router.get("/instructor/summary", response_model=InstructorSummaryResponse)
async def get_my_summary(
    month: Optional[int] = Query(default=None, description="Calendar month (1-12)"),
    year: Optional[int] = Query(default=None),
    current_user: CurrentUser = Depends(require_instructor),
    service: SessionUsageService = Depends(get_session_usage_service),
) -> InstructorSummaryResponse:
    year, month = _resolve_period(month, year)
    try:
        result = await asyncio.to_thread(
            service.get_instructor_summary, current_user.id, year, month
        )
        return InstructorSummaryResponse(**result)
    except DomainException as exc:
        handle_domain_exception(exc)


@router.get("/instructor/logs", response_model=SessionLogsResponse)
async def get_my_session_logs(
    month: Optional[int] = Query(default=None, description="Calendar month (1-12)"),
    year: Optional[int] = Query(default=None),
    page: int = Query(default=1, ge=1),
    limit: int = Query(default=DEFAULT_PAGE_SIZE, ge=1, le=MAX_PAGE_SIZE),
    current_user: CurrentUser = Depends(require_instructor),
    service: SessionUsageService = Depends(get_session_usage_service),
) -> SessionLogsResponse:
    year, month = _resolve_period(month, year)
    try:
        result = await asyncio.to_thread(
            service.get_session_logs,
            None,
            year,
            month,
            instructor_id=current_user.id,
            page=page,
            limit=limit,
        )
        return SessionLogsResponse(**result)
    except DomainException as exc:
        handle_domain_exception(exc)
