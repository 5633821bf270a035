"""
Repository layer.

Repositories own data access; services own transactions and business rules.
"""

from .attendance_repository import AttendanceRepository
from .base_repository import BaseRepository
from .batch_repository import BatchRepository
from .factory import RepositoryFactory
from .live_session_repository import LiveSessionRepository
from .user_repository import UserRepository

__all__ = [
    "AttendanceRepository",
    "BaseRepository",
    "BatchRepository",
    "LiveSessionRepository",
    "RepositoryFactory",
    "UserRepository",
]
