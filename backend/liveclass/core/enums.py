# backend/liveclass/core/enums.py
"""
Core enums for the live class gateway.

Role names arrive as plain strings in bearer tokens; everything past the
auth boundary works with these enums and the policy tables below instead
of comparing strings.
"""

from enum import Enum
from typing import FrozenSet, Optional


class Role(str, Enum):
    """Caller roles recognised by the admission controller."""

    STUDENT = "student"
    INSTRUCTOR = "instructor"
    TENANT = "tenant"
    ADMIN = "admin"
    SUPERADMIN = "superadmin"

    @classmethod
    def parse(cls, raw: Optional[str]) -> Optional["Role"]:
        """Return the matching role, or None for unknown/missing values."""
        if not raw:
            return None
        try:
            return cls(raw.strip().lower())
        except ValueError:
            return None


# Roles allowed to open a class session
START_ROLES: FrozenSet[Role] = frozenset(
    {Role.INSTRUCTOR, Role.TENANT, Role.ADMIN, Role.SUPERADMIN}
)

# Roles that receive the host preset when joining
JOIN_HOST_ROLES: FrozenSet[Role] = frozenset({Role.INSTRUCTOR, Role.TENANT})

# Roles allowed to trigger a reconciliation sweep and read tenant reports
REPORTING_ROLES: FrozenSet[Role] = frozenset({Role.TENANT, Role.ADMIN, Role.SUPERADMIN})


class BatchStatus(str, Enum):
    """Batch lifecycle statuses."""

    ACTIVE = "active"
    INACTIVE = "inactive"
    COMPLETED = "completed"


class SessionStatus(str, Enum):
    """Materialized live session statuses."""

    COMPLETED = "completed"


class AttendanceStatus(str, Enum):
    """Attendance marks."""

    PRESENT = "present"
    ABSENT = "absent"
