"""Schedule evaluator: is a batch open for admission at a given instant?

The evaluator is pure. Callers pass a timezone-aware ``now`` already expressed
in the timezone the batch schedule is written in (see ``class_local_now``).
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime, timedelta, timezone
from typing import Any, Optional, Sequence
from zoneinfo import ZoneInfo

from ..core.constants import DAYS_OF_WEEK, EARLY_ADMISSION_MINUTES
from ..core.enums import BatchStatus
from .time_of_day import parse_time_of_day, split_batch_time

BATCH_COMPLETED = "Batch is already completed"
BATCH_INACTIVE = "Batch is currently inactive"
BATCH_NOT_STARTED = "Batch has not started yet"
BATCH_ENDED = "Batch has ended"
NOT_A_CLASS_DAY = "Today is not a scheduled class day"
CLASS_NOT_STARTED = "Class has not started yet"
CLASS_OVER = "Class is over for today"


@dataclass(frozen=True)
class ScheduleDecision:
    admitted: bool
    reason: Optional[str] = None

    @classmethod
    def admit(cls) -> "ScheduleDecision":
        return cls(admitted=True)

    @classmethod
    def deny(cls, reason: str) -> "ScheduleDecision":
        return cls(admitted=False, reason=reason)


def _as_date(value: Any) -> Optional[date]:
    if value is None:
        return None
    if isinstance(value, datetime):
        return value.date()
    return value


def _at_minute(now: datetime, minute_of_day: int) -> datetime:
    return now.replace(
        hour=minute_of_day // 60, minute=minute_of_day % 60, second=0, microsecond=0
    )


def _status_value(status: Any) -> Optional[str]:
    if isinstance(status, BatchStatus):
        return status.value
    return status


def evaluate_schedule(batch: Any, now: datetime) -> ScheduleDecision:
    """Evaluate the batch's access window at ``now``.

    Checks run in a fixed order and the first failure wins. A batch with
    ``is_strict_schedule`` switched off is always admitted.
    """
    if batch.is_strict_schedule is False:
        return ScheduleDecision.admit()

    status = _status_value(batch.status)
    if status == BatchStatus.COMPLETED.value:
        return ScheduleDecision.deny(BATCH_COMPLETED)
    if status == BatchStatus.INACTIVE.value:
        return ScheduleDecision.deny(BATCH_INACTIVE)

    today = now.date()
    start_date = _as_date(batch.start_date)
    if start_date is not None and today < start_date:
        return ScheduleDecision.deny(BATCH_NOT_STARTED)

    end_date = _as_date(batch.end_date)
    if end_date is not None and today > end_date:
        return ScheduleDecision.deny(BATCH_ENDED)

    recurring_days: Sequence[str] = batch.recurring_days or ()
    if DAYS_OF_WEEK[now.weekday()] not in recurring_days:
        return ScheduleDecision.deny(NOT_A_CLASS_DAY)

    if batch.batch_time:
        start_text, end_text = split_batch_time(batch.batch_time)

        # An unparsable bound disables that half of the window check
        start_minute = parse_time_of_day(start_text)
        if start_minute is not None:
            opens_at = _at_minute(now, start_minute) - timedelta(minutes=EARLY_ADMISSION_MINUTES)
            if now < opens_at:
                return ScheduleDecision.deny(CLASS_NOT_STARTED)

        end_minute = parse_time_of_day(end_text)
        if end_minute is not None and now > _at_minute(now, end_minute):
            return ScheduleDecision.deny(CLASS_OVER)

    return ScheduleDecision.admit()


def class_local_now(timezone_name: str, now: Optional[datetime] = None) -> datetime:
    """Return ``now`` (default: current time) converted to the class timezone."""
    reference = now or datetime.now(timezone.utc)
    if reference.tzinfo is None:
        reference = reference.replace(tzinfo=timezone.utc)
    return reference.astimezone(ZoneInfo(timezone_name))
