"""Data access for batches and their remote meeting lease."""

from __future__ import annotations

from datetime import datetime
from typing import List, Optional

from sqlalchemy import update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from ..core.exceptions import RepositoryException
from ..models.batch import Batch
from .base_repository import BaseRepository


class BatchRepository(BaseRepository[Batch]):
    """Repository for Batch rows."""

    def __init__(self, db: Session):
        super().__init__(db, Batch)

    def list_with_meeting(self) -> List[Batch]:
        """All batches that carry a remote meeting reference."""
        try:
            return (
                self.db.query(Batch)
                .filter(Batch.meeting_id.isnot(None))
                .order_by(Batch.created_at, Batch.id)
                .all()
            )
        except SQLAlchemyError as e:
            self.logger.error("Error listing batches with meetings: %s", e)
            raise RepositoryException(f"Failed to list batches with meetings: {e}") from e

    def compare_and_set_meeting(
        self,
        batch_id: str,
        *,
        expected_meeting_id: Optional[str],
        expected_platform: Optional[str],
        meeting_id: str,
        platform: str,
    ) -> bool:
        """Bind a new meeting only if the reference is still what the caller saw.

        Returns False when a concurrent writer changed the reference first.
        The caller owns the commit.
        """
        meeting_clause = (
            Batch.meeting_id.is_(None)
            if expected_meeting_id is None
            else Batch.meeting_id == expected_meeting_id
        )
        platform_clause = (
            Batch.meeting_platform.is_(None)
            if expected_platform is None
            else Batch.meeting_platform == expected_platform
        )
        try:
            result = self.db.execute(
                update(Batch)
                .where(Batch.id == batch_id, meeting_clause, platform_clause)
                .values(meeting_id=meeting_id, meeting_platform=platform)
                .execution_options(synchronize_session=False)
            )
            return bool(result.rowcount)
        except SQLAlchemyError as e:
            self.logger.error("Error updating meeting for batch %s: %s", batch_id, e)
            raise RepositoryException(f"Failed to update batch meeting: {e}") from e

    def stamp_class_start(self, batch: Batch, started_at: datetime) -> None:
        """Record that an instructor opened the class."""
        try:
            batch.last_class_start_time = started_at
            self.db.flush()
        except SQLAlchemyError as e:
            self.logger.error("Error stamping class start for batch %s: %s", batch.id, e)
            raise RepositoryException(f"Failed to update batch: {e}") from e
