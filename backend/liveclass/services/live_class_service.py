"""LiveClassService: admission control for starting and joining live classes.

Start and join both run the schedule evaluator, make sure the batch holds a
valid Dyte meeting (see ``MeetingLeaseService``) and return a participant
token for the frontend SDK. Joins by students are recorded as attendance.
"""

from __future__ import annotations

from datetime import datetime, timezone
import logging
from typing import Any, Callable, Optional, Union

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from ..core.config import Settings, settings as default_settings
from ..core.enums import JOIN_HOST_ROLES, START_ROLES, Role
from ..core.exceptions import (
    ForbiddenException,
    NotFoundException,
    RepositoryException,
    ScheduleDeniedException,
    ServiceException,
    ValidationException,
)
from ..domain.schedule import class_local_now, evaluate_schedule
from ..integrations.dyte_client import DyteClient, DyteError, FakeDyteClient
from ..models.batch import Batch
from ..monitoring.prometheus_metrics import prometheus_metrics
from ..repositories.factory import RepositoryFactory
from .base import BaseService
from .identity_service import IdentityService
from .meeting_lease import MeetingLeaseService

logger = logging.getLogger(__name__)

NOT_STARTED_BY_INSTRUCTOR = "Instructor has not started the class yet"


class LiveClassService(BaseService):
    """Service layer for live class admission."""

    def __init__(
        self,
        db: Session,
        video_client: Union[DyteClient, FakeDyteClient],
        config: Optional[Settings] = None,
        clock: Optional[Callable[[], datetime]] = None,
    ) -> None:
        super().__init__(db)
        self.video_client = video_client
        self.config = config or default_settings
        self._clock = clock or (lambda: datetime.now(timezone.utc))
        self.batch_repository = RepositoryFactory.create_batch_repository(db)
        self.attendance_repository = RepositoryFactory.create_attendance_repository(db)
        self.meeting_lease = MeetingLeaseService(db, video_client, self.config)
        self.identity = IdentityService(db)

    def _load_admissible_batch(self, batch_id: str, action: str, now: datetime) -> Batch:
        batch = self.batch_repository.get_by_id(batch_id)
        if batch is None:
            prometheus_metrics.record_admission(action, "not_found")
            raise NotFoundException("Batch not found")

        decision = evaluate_schedule(batch, class_local_now(self.config.class_timezone, now))
        if not decision.admitted:
            prometheus_metrics.record_admission(action, "schedule_denied")
            raise ScheduleDeniedException(decision.reason or "Class is not available")
        return batch

    def _bind_meeting(self, batch: Batch, *, stamp_start: Optional[datetime], action: str) -> None:
        """Ensure the batch's meeting lease and persist it together with the start stamp."""
        try:
            self.meeting_lease.ensure_meeting(batch)
            if stamp_start is not None:
                self.batch_repository.stamp_class_start(batch, stamp_start)
            self.db.commit()
        except DyteError as e:
            self.db.rollback()
            prometheus_metrics.record_admission(action, "provider_error")
            logger.error(
                "Dyte meeting creation failed for batch %s: %s",
                batch.id,
                e.message,
                extra={"status_code": e.status_code},
            )
            raise ServiceException(f"Failed to {action} class", details={"status_code": e.status_code})
        except (RepositoryException, SQLAlchemyError, ServiceException) as e:
            self.db.rollback()
            prometheus_metrics.record_admission(action, "error")
            logger.error("Binding meeting for batch %s failed: %s", batch.id, e)
            raise ServiceException(f"Failed to {action} class")

    def _issue_token(
        self, batch: Batch, user_id: str, preset_name: str, action: str
    ) -> str:
        name = self.identity.resolve_display_name(user_id)
        try:
            participant = self.video_client.add_participant(
                meeting_id=batch.meeting_id,
                name=name,
                preset_name=preset_name,
                client_specific_id=user_id,
            )
        except DyteError as e:
            prometheus_metrics.record_admission(action, "provider_error")
            logger.error(
                "Dyte participant creation failed for batch %s user %s: %s",
                batch.id,
                user_id,
                e.message,
                extra={"status_code": e.status_code, "meeting_id": batch.meeting_id},
            )
            raise ServiceException(f"Failed to {action} class", details={"status_code": e.status_code})

        token = participant.get("token")
        if not isinstance(token, str) or not token:
            prometheus_metrics.record_admission(action, "provider_error")
            raise ServiceException(f"Failed to {action} class")
        return token

    @BaseService.measure_operation("start_class")
    def start_class(self, batch_id: Optional[str], user_id: str, role: Optional[str]) -> dict[str, Any]:
        """Open a class as its host.

        Any privileged role may start any batch; the caller always joins with
        the host preset.
        """
        if not batch_id:
            raise ValidationException("Batch ID required")

        caller_role = Role.parse(role)
        if caller_role not in START_ROLES:
            prometheus_metrics.record_admission("start", "forbidden")
            raise ForbiddenException("Not allowed")

        now = self._clock()
        batch = self._load_admissible_batch(batch_id, "start", now)
        self._bind_meeting(batch, stamp_start=now, action="start")

        token = self._issue_token(batch, user_id, self.config.host_preset_name, "start")
        prometheus_metrics.record_admission("start", "admitted")
        self.log_operation("start_class", batch_id=batch.id, user_id=user_id, role=caller_role.value)

        return {
            "meeting_id": batch.meeting_id,
            "auth_token": token,
            "role": Role.INSTRUCTOR.value,
        }

    @BaseService.measure_operation("join_class")
    def join_class(self, batch_id: Optional[str], user_id: str, role: Optional[str]) -> dict[str, Any]:
        """Join a class that is open for admission.

        Strict batches must already have been started; relaxed batches get a
        meeting on first join. Students are marked present.
        """
        if not batch_id:
            raise ValidationException("Batch ID required")

        caller_role = Role.parse(role)
        if caller_role is None:
            prometheus_metrics.record_admission("join", "forbidden")
            raise ForbiddenException("Not allowed")

        now = self._clock()
        batch = self._load_admissible_batch(batch_id, "join", now)

        if not self.meeting_lease.has_valid_lease(batch):
            # A missing flag counts as strict
            if batch.is_strict_schedule is False:
                self._bind_meeting(batch, stamp_start=None, action="join")
            else:
                prometheus_metrics.record_admission("join", "not_started")
                raise ScheduleDeniedException(NOT_STARTED_BY_INSTRUCTOR)

        preset = (
            self.config.host_preset_name
            if caller_role in JOIN_HOST_ROLES
            else self.config.participant_preset_name
        )
        token = self._issue_token(batch, user_id, preset, "join")

        if caller_role is Role.STUDENT:
            self._mark_attendance(batch, user_id, now)

        prometheus_metrics.record_admission("join", "admitted")
        self.log_operation("join_class", batch_id=batch.id, user_id=user_id, role=caller_role.value)

        return {
            "meeting_id": batch.meeting_id,
            "auth_token": token,
            "role": caller_role.value,
        }

    def _mark_attendance(self, batch: Batch, student_id: str, now: datetime) -> None:
        on_date = class_local_now(self.config.class_timezone, now).date()
        try:
            if self.config.attendance_dedupe_per_day and self.attendance_repository.exists_for_day(
                student_id=student_id, batch_id=batch.id, on_date=on_date
            ):
                return
            self.attendance_repository.record_present(
                student_id=student_id, batch_id=batch.id, on_date=on_date
            )
            self.db.commit()
        except (RepositoryException, SQLAlchemyError) as e:
            self.db.rollback()
            prometheus_metrics.record_admission("join", "error")
            logger.error(
                "Recording attendance failed for batch %s student %s: %s",
                batch.id,
                student_id,
                e,
            )
            raise ServiceException("Failed to join class")
