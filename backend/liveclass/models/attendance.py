"""Attendance marks recorded when a student is admitted to a class."""

from __future__ import annotations

from sqlalchemy import Column, Date, DateTime, ForeignKey, Index, String, func
import ulid

from ..core.enums import AttendanceStatus
from ..database import Base


class Attendance(Base):
    """
    Evidence that a student joined a batch on a given day.

    One row is written per successful join; repeated joins on the same day
    produce repeated rows unless per-day dedupe is enabled in settings.
    """

    __tablename__ = "attendance"
    __table_args__ = (Index("ix_attendance_student_batch_date", "student_id", "batch_id", "date"),)

    id = Column(String(26), primary_key=True, default=lambda: str(ulid.ULID()))
    student_id = Column(String(26), nullable=False)
    batch_id = Column(String(26), ForeignKey("batches.id"), nullable=False, index=True)
    date = Column(Date, nullable=False)
    status = Column(String(20), nullable=False, default=AttendanceStatus.PRESENT.value)
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())

    def __repr__(self) -> str:
        return f"<Attendance student={self.student_id} batch={self.batch_id} date={self.date}>"
