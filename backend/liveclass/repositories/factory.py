# backend/liveclass/repositories/factory.py
"""
Repository Factory

Provides centralized creation of repository instances,
ensuring consistent initialization and dependency injection.
"""

from typing import TYPE_CHECKING

from sqlalchemy.orm import Session

# Avoid circular imports
if TYPE_CHECKING:
    from .attendance_repository import AttendanceRepository
    from .batch_repository import BatchRepository
    from .live_session_repository import LiveSessionRepository
    from .user_repository import UserRepository


class RepositoryFactory:
    """
    Factory class for creating repository instances.

    Centralizes repository creation to ensure consistent initialization
    and makes it easy to swap implementations if needed.
    """

    @staticmethod
    def create_batch_repository(db: Session) -> "BatchRepository":
        """Create repository for batch and meeting lease operations."""
        from .batch_repository import BatchRepository

        return BatchRepository(db)

    @staticmethod
    def create_live_session_repository(db: Session) -> "LiveSessionRepository":
        """Create repository for materialized session operations."""
        from .live_session_repository import LiveSessionRepository

        return LiveSessionRepository(db)

    @staticmethod
    def create_attendance_repository(db: Session) -> "AttendanceRepository":
        """Create repository for attendance marks."""
        from .attendance_repository import AttendanceRepository

        return AttendanceRepository(db)

    @staticmethod
    def create_user_repository(db: Session) -> "UserRepository":
        """Create repository for user lookups."""
        from .user_repository import UserRepository

        return UserRepository(db)
