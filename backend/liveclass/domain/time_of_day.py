"""Parsing of the free-form daily class windows stored on batches.

Batches carry windows such as "10:00 AM-11:00 AM", "9:30am - 10:15am" or
"18:00-19:30". Everything here normalizes to minute-of-day integers; anchoring
those minutes to a calendar date is the schedule evaluator's job.
"""

from __future__ import annotations

import re
from typing import Optional, Tuple

MINUTES_PER_DAY = 24 * 60

_TIME_RE = re.compile(
    r"^(?P<hour>\d{1,2})(?::(?P<minute>\d{2}))?\s*(?:(?P<meridiem>[ap])\.?\s*m?\.?)?$",
    re.IGNORECASE,
)


def parse_time_of_day(text: Optional[str]) -> Optional[int]:
    """Parse "h:mm AM/PM" or "H:mm" into minutes after midnight.

    Returns None when the text is empty or not a valid time.

    >>> parse_time_of_day("10:00 AM")
    600
    >>> parse_time_of_day("12:15 am")
    15
    >>> parse_time_of_day("21:30")
    1290
    """
    if not text:
        return None
    match = _TIME_RE.match(text.strip())
    if match is None:
        return None

    hour = int(match.group("hour"))
    minute = int(match.group("minute") or 0)
    meridiem = (match.group("meridiem") or "").lower()

    if minute > 59:
        return None
    if meridiem:
        if not 1 <= hour <= 12:
            return None
        hour = hour % 12
        if meridiem == "p":
            hour += 12
    elif hour > 23:
        return None

    return hour * 60 + minute


def split_batch_time(batch_time: Optional[str]) -> Tuple[Optional[str], Optional[str]]:
    """Split "start-end" into its trimmed halves; the end is optional."""
    if not batch_time:
        return None, None
    parts = [part.strip() for part in batch_time.split("-")]
    start = parts[0] or None
    end = parts[1] if len(parts) > 1 and parts[1] else None
    return start, end
