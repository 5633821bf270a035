"""Data access for attendance marks."""

from __future__ import annotations

from datetime import date

from sqlalchemy.orm import Session

from ..core.enums import AttendanceStatus
from ..models.attendance import Attendance
from .base_repository import BaseRepository


class AttendanceRepository(BaseRepository[Attendance]):
    """Repository for Attendance rows."""

    def __init__(self, db: Session):
        super().__init__(db, Attendance)

    def record_present(self, *, student_id: str, batch_id: str, on_date: date) -> Attendance:
        return self.create(
            student_id=student_id,
            batch_id=batch_id,
            date=on_date,
            status=AttendanceStatus.PRESENT.value,
        )

    def exists_for_day(self, *, student_id: str, batch_id: str, on_date: date) -> bool:
        return self.exists(student_id=student_id, batch_id=batch_id, date=on_date)
