"""Monthly usage reporting over materialized live sessions."""

from __future__ import annotations

import calendar
from datetime import datetime, timezone
import logging
import math
from typing import Any, Optional, Tuple

from sqlalchemy.orm import Session

from ..core.constants import DEFAULT_PAGE_SIZE, MAX_PAGE_SIZE
from ..core.exceptions import RepositoryException, ServiceException, ValidationException
from ..models.live_session import LiveSession
from ..repositories.factory import RepositoryFactory
from .base import BaseService

logger = logging.getLogger(__name__)


def month_bounds(year: int, month: int) -> Tuple[datetime, datetime]:
    """First and last instant (UTC, second precision) of a calendar month."""
    if not 1 <= month <= 12:
        raise ValidationException("Month must be between 1 and 12", details={"month": month})
    if not 1 <= year <= 9999:
        raise ValidationException("Year is out of range", details={"year": year})
    last_day = calendar.monthrange(year, month)[1]
    start = datetime(year, month, 1, tzinfo=timezone.utc)
    end = datetime(year, month, last_day, 23, 59, 59, tzinfo=timezone.utc)
    return start, end


def seconds_to_hours(seconds: int) -> float:
    return round(seconds / 3600, 2)


class SessionUsageService(BaseService):
    """Read-only reports for tenants and instructors."""

    def __init__(self, db: Session):
        super().__init__(db)
        self.live_session_repository = RepositoryFactory.create_live_session_repository(db)
        self.user_repository = RepositoryFactory.create_user_repository(db)

    @staticmethod
    def _period(year: int, month: int) -> dict[str, int]:
        return {"month": month, "year": year}

    @BaseService.measure_operation("get_tenant_summary")
    def get_tenant_summary(self, tenant_id: str, year: int, month: int) -> dict[str, Any]:
        start, end = month_bounds(year, month)
        try:
            totals = self.live_session_repository.get_usage_totals(start, end, tenant_id=tenant_id)
        except RepositoryException as e:
            logger.error("Tenant summary failed for %s: %s", tenant_id, e)
            raise ServiceException("Failed to fetch summary")

        return {
            "period": self._period(year, month),
            "usage": {
                "total_hours": seconds_to_hours(totals.total_seconds),
                "total_classes": totals.total_classes,
                "instructor_count": totals.instructor_count,
                "batch_count": totals.batch_count,
            },
        }

    @BaseService.measure_operation("get_instructor_breakdown")
    def get_instructor_breakdown(self, tenant_id: str, year: int, month: int) -> dict[str, Any]:
        """Every active instructor of the tenant with their usage; idle ones report zeros."""
        start, end = month_bounds(year, month)
        try:
            instructors = self.user_repository.list_active_instructors(tenant_id)
            usage = {
                row.instructor_id: row
                for row in self.live_session_repository.get_usage_by_instructor(
                    tenant_id, start, end
                )
            }
        except RepositoryException as e:
            logger.error("Instructor breakdown failed for %s: %s", tenant_id, e)
            raise ServiceException("Failed to fetch instructor analytics")

        rows = []
        for instructor in instructors:
            stats = usage.get(instructor.id)
            rows.append(
                {
                    "instructor_id": instructor.id,
                    "name": instructor.full_name or instructor.email,
                    "email": instructor.email,
                    "total_hours": seconds_to_hours(stats.total_seconds) if stats else 0.0,
                    "total_classes": stats.total_classes if stats else 0,
                    "active_batches": stats.batch_count if stats else 0,
                }
            )

        return {"period": self._period(year, month), "instructors": rows}

    @BaseService.measure_operation("get_session_logs")
    def get_session_logs(
        self,
        tenant_id: Optional[str],
        year: int,
        month: int,
        instructor_id: Optional[str] = None,
        page: int = 1,
        limit: int = DEFAULT_PAGE_SIZE,
    ) -> dict[str, Any]:
        """Newest-first page of completed sessions for a tenant or an instructor."""
        start, end = month_bounds(year, month)
        page = max(page, 1)
        limit = min(max(limit, 1), MAX_PAGE_SIZE)
        try:
            rows, total = self.live_session_repository.list_completed(
                start,
                end,
                tenant_id=tenant_id,
                instructor_id=instructor_id,
                offset=(page - 1) * limit,
                limit=limit,
            )
        except RepositoryException as e:
            logger.error("Session log listing failed for tenant %s: %s", tenant_id, e)
            raise ServiceException("Failed to fetch session logs")

        return {
            "logs": [self._serialize_log(session, batch_name) for session, batch_name in rows],
            "pagination": {
                "total": total,
                "page": page,
                "pages": math.ceil(total / limit) if total else 0,
            },
        }

    @BaseService.measure_operation("get_instructor_summary")
    def get_instructor_summary(self, instructor_id: str, year: int, month: int) -> dict[str, Any]:
        start, end = month_bounds(year, month)
        try:
            totals = self.live_session_repository.get_usage_totals(
                start, end, instructor_id=instructor_id
            )
        except RepositoryException as e:
            logger.error("Instructor summary failed for %s: %s", instructor_id, e)
            raise ServiceException("Failed to fetch earnings")

        return {
            "period": self._period(year, month),
            "stats": {
                "total_hours": seconds_to_hours(totals.total_seconds),
                "total_classes": totals.total_classes,
            },
        }

    @staticmethod
    def _serialize_log(session: LiveSession, batch_name: Optional[str]) -> dict[str, Any]:
        return {
            "id": session.id,
            "provider_session_id": session.provider_session_id,
            "batch_id": session.batch_id,
            "batch_name": batch_name,
            "instructor_id": session.instructor_id,
            "topic": session.topic,
            "actual_start_time": session.actual_start_time,
            "actual_end_time": session.actual_end_time,
            "duration_seconds": session.duration_seconds,
            "duration_minutes": session.duration_minutes,
            "participants_count": session.participants_count,
        }
