"""Batch model: a recurring scheduled live class."""

from __future__ import annotations

from typing import Optional

from sqlalchemy import JSON, Boolean, Column, Date, DateTime, String, func
import ulid

from ..core.enums import BatchStatus
from ..database import Base


class Batch(Base):
    """
    A schedulable live class.

    Attributes:
        batch_name: Display name, also used as the remote meeting title
        status: active | inactive | completed
        is_strict_schedule: Master switch; when false no time gating applies
        start_date / end_date: Inclusive calendar bounds (optional)
        recurring_days: Weekday names the class runs on, e.g. ["Monday"]
        batch_time: Daily window such as "10:00 AM-11:00 AM" or "18:00-19:30"
        meeting_id / meeting_platform: Current binding to a remote meeting
        last_class_start_time: When an instructor last opened the class
    """

    __tablename__ = "batches"

    id = Column(String(26), primary_key=True, default=lambda: str(ulid.ULID()))
    batch_name = Column(String(255), nullable=False)
    status = Column(String(20), nullable=False, default=BatchStatus.ACTIVE.value, index=True)

    is_strict_schedule = Column(Boolean, nullable=False, default=True)
    start_date = Column(Date, nullable=True)
    end_date = Column(Date, nullable=True)
    recurring_days = Column(JSON, nullable=True)
    batch_time = Column(String(50), nullable=True)

    # Remote meeting lease
    meeting_id = Column(String(100), nullable=True, index=True)
    meeting_platform = Column(String(50), nullable=True)
    meeting_link = Column(String(500), nullable=True)
    last_class_start_time = Column(DateTime(timezone=True), nullable=True)

    tenant_id = Column(String(26), nullable=True, index=True)
    instructor_id = Column(String(26), nullable=True, index=True)
    instructor_ids = Column(JSON, nullable=True)

    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())
    updated_at = Column(
        DateTime(timezone=True), nullable=False, server_default=func.now(), onupdate=func.now()
    )

    @property
    def primary_instructor_id(self) -> Optional[str]:
        """Owning instructor, falling back to the first co-instructor."""
        if self.instructor_id:
            return self.instructor_id
        if self.instructor_ids:
            return self.instructor_ids[0]
        return None

    def __repr__(self) -> str:
        return f"<Batch {self.id} {self.batch_name!r} meeting={self.meeting_id}>"
