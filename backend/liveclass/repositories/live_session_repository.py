"""Data access for materialized live sessions and their usage aggregates."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Any, List, Optional, Tuple

from sqlalchemy import distinct, func
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Query, Session

from ..core.enums import SessionStatus
from ..core.exceptions import RepositoryException
from ..models.batch import Batch
from ..models.live_session import LiveSession
from .base_repository import BaseRepository


@dataclass(frozen=True)
class UsageTotals:
    total_seconds: int
    total_classes: int
    instructor_count: int
    batch_count: int


@dataclass(frozen=True)
class InstructorUsage:
    instructor_id: str
    total_seconds: int
    total_classes: int
    batch_count: int


class LiveSessionRepository(BaseRepository[LiveSession]):
    """Repository for LiveSession rows."""

    def __init__(self, db: Session):
        super().__init__(db, LiveSession)

    def exists_for_provider_session(self, provider_session_id: str) -> bool:
        return self.exists(provider_session_id=provider_session_id)

    def _completed_in_range(self, query: Query, start: datetime, end: datetime) -> Query:
        return query.filter(
            LiveSession.status == SessionStatus.COMPLETED.value,
            LiveSession.actual_start_time >= start,
            LiveSession.actual_start_time <= end,
        )

    def get_usage_totals(
        self,
        start: datetime,
        end: datetime,
        *,
        tenant_id: Optional[str] = None,
        instructor_id: Optional[str] = None,
    ) -> UsageTotals:
        """Sum completed session time in [start, end] for a tenant or instructor."""
        try:
            query = self.db.query(
                func.coalesce(func.sum(LiveSession.duration_seconds), 0),
                func.count(LiveSession.id),
                func.count(distinct(LiveSession.instructor_id)),
                func.count(distinct(LiveSession.batch_id)),
            )
            query = self._completed_in_range(query, start, end)
            if tenant_id is not None:
                query = query.filter(LiveSession.tenant_id == tenant_id)
            if instructor_id is not None:
                query = query.filter(LiveSession.instructor_id == instructor_id)
            seconds, classes, instructors, batches = query.one()
            return UsageTotals(
                total_seconds=int(seconds or 0),
                total_classes=int(classes or 0),
                instructor_count=int(instructors or 0),
                batch_count=int(batches or 0),
            )
        except SQLAlchemyError as e:
            self.logger.error("Error aggregating session usage: %s", e)
            raise RepositoryException(f"Failed to aggregate session usage: {e}") from e

    def get_usage_by_instructor(
        self, tenant_id: str, start: datetime, end: datetime
    ) -> List[InstructorUsage]:
        try:
            query = self.db.query(
                LiveSession.instructor_id,
                func.coalesce(func.sum(LiveSession.duration_seconds), 0),
                func.count(LiveSession.id),
                func.count(distinct(LiveSession.batch_id)),
            ).filter(LiveSession.tenant_id == tenant_id)
            rows = (
                self._completed_in_range(query, start, end)
                .group_by(LiveSession.instructor_id)
                .all()
            )
            return [
                InstructorUsage(
                    instructor_id=row[0],
                    total_seconds=int(row[1] or 0),
                    total_classes=int(row[2] or 0),
                    batch_count=int(row[3] or 0),
                )
                for row in rows
                if row[0] is not None
            ]
        except SQLAlchemyError as e:
            self.logger.error("Error aggregating usage by instructor: %s", e)
            raise RepositoryException(f"Failed to aggregate usage by instructor: {e}") from e

    def list_completed(
        self,
        start: datetime,
        end: datetime,
        *,
        tenant_id: Optional[str] = None,
        instructor_id: Optional[str] = None,
        offset: int = 0,
        limit: int = 20,
    ) -> Tuple[List[Tuple[LiveSession, Optional[str]]], int]:
        """Newest-first page of completed sessions with their batch name, plus total."""
        try:
            query: Query[Any] = self.db.query(LiveSession, Batch.batch_name).outerjoin(
                Batch, Batch.id == LiveSession.batch_id
            )
            query = self._completed_in_range(query, start, end)
            if tenant_id is not None:
                query = query.filter(LiveSession.tenant_id == tenant_id)
            if instructor_id is not None:
                query = query.filter(LiveSession.instructor_id == instructor_id)

            total = query.count()
            rows = (
                query.order_by(LiveSession.actual_start_time.desc())
                .offset(offset)
                .limit(limit)
                .all()
            )
            return [(row[0], row[1]) for row in rows], total
        except SQLAlchemyError as e:
            self.logger.error("Error listing session logs: %s", e)
            raise RepositoryException(f"Failed to list session logs: {e}") from e
