"""Meeting lease: a batch's binding to a remote Dyte meeting.

A reference is reusable only when it was created on the currently configured
platform. Anything else is replaced with a freshly created meeting, persisted
with a compare-and-set so two concurrent starters converge on one reference.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Union

from sqlalchemy.orm import Session
from sqlalchemy.orm.attributes import set_committed_value

from ..core.config import Settings, settings as default_settings
from ..core.exceptions import ServiceException
from ..integrations.dyte_client import DyteClient, FakeDyteClient
from ..models.batch import Batch
from ..monitoring.prometheus_metrics import prometheus_metrics
from ..repositories.factory import RepositoryFactory
from .base import BaseService


@dataclass(frozen=True)
class MeetingLease:
    meeting_id: str
    reused: bool


class MeetingLeaseService(BaseService):
    """Ensures a batch carries a valid meeting reference."""

    def __init__(
        self,
        db: Session,
        video_client: Union[DyteClient, FakeDyteClient],
        config: Optional[Settings] = None,
    ) -> None:
        super().__init__(db)
        self.video_client = video_client
        self.config = config or default_settings
        self.batch_repository = RepositoryFactory.create_batch_repository(db)

    def has_valid_lease(self, batch: Batch) -> bool:
        return bool(batch.meeting_id) and batch.meeting_platform == self.config.meeting_platform

    @BaseService.measure_operation("ensure_meeting")
    def ensure_meeting(self, batch: Batch) -> MeetingLease:
        """Reuse the batch's meeting or create and bind a new one.

        The batch is updated in place; the caller owns the commit. Provider
        errors (DyteError) propagate unchanged.
        """
        if self.has_valid_lease(batch):
            return MeetingLease(meeting_id=batch.meeting_id, reused=True)

        observed_meeting_id = batch.meeting_id
        observed_platform = batch.meeting_platform
        if observed_meeting_id:
            self.logger.info(
                "Replacing meeting %s on batch %s (platform %r != %r)",
                observed_meeting_id,
                batch.id,
                observed_platform,
                self.config.meeting_platform,
            )

        meeting = self.video_client.create_meeting(title=batch.batch_name, record_on_start=True)
        meeting_id = meeting.get("id")
        if not isinstance(meeting_id, str) or not meeting_id:
            prometheus_metrics.record_meeting_created("invalid_response")
            raise ServiceException("Dyte meeting creation returned no meeting id")

        won = self.batch_repository.compare_and_set_meeting(
            batch.id,
            expected_meeting_id=observed_meeting_id,
            expected_platform=observed_platform,
            meeting_id=meeting_id,
            platform=self.config.meeting_platform,
        )
        if won:
            # Row already updated; keep the instance in sync without re-dirtying it
            set_committed_value(batch, "meeting_id", meeting_id)
            set_committed_value(batch, "meeting_platform", self.config.meeting_platform)
            prometheus_metrics.record_meeting_created("bound")
            self.log_operation("meeting_created", batch_id=batch.id, meeting_id=meeting_id)
            return MeetingLease(meeting_id=meeting_id, reused=False)

        # Lost the race: adopt whatever the winner stored
        self.batch_repository.refresh(batch)
        prometheus_metrics.record_meeting_created("orphaned")
        self.logger.warning(
            "Concurrent meeting creation for batch %s; orphaned meeting %s, adopting %s",
            batch.id,
            meeting_id,
            batch.meeting_id,
            extra={"batch_id": batch.id, "orphaned_meeting_id": meeting_id},
        )
        if not self.has_valid_lease(batch):
            raise ServiceException("Meeting reference changed concurrently")
        return MeetingLease(meeting_id=batch.meeting_id, reused=True)
