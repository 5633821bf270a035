"""
Database models for the live class gateway.

- Batch: schedulable class and its remote meeting lease
- LiveSession: ended provider sessions materialized by the sync sweep
- Attendance: student join marks
- User: accounts (display names, instructor reporting)
"""

from .attendance import Attendance
from .batch import Batch
from .live_session import LiveSession
from .user import User

__all__ = [
    "Attendance",
    "Batch",
    "LiveSession",
    "User",
]
