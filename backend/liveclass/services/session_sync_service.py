"""SessionSyncService: reconcile ended Dyte sessions into local LiveSession rows.

The sweep is idempotent: a provider session id is materialized at most once
(existence check plus a unique constraint). Failures for one batch never
abort the sweep for the others.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass
from datetime import datetime, timezone
import logging
from typing import Any, Optional, Union

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from ..core.config import Settings, settings as default_settings
from ..core.constants import PROVIDER_SESSION_ENDED, SYNCED_AGENDA, SYNCED_TOPIC_SUFFIX
from ..core.enums import SessionStatus
from ..core.exceptions import RepositoryException, ServiceException
from ..integrations.dyte_client import DyteClient, DyteError, FakeDyteClient
from ..models.batch import Batch
from ..monitoring.prometheus_metrics import prometheus_metrics
from ..repositories.factory import RepositoryFactory
from .base import BaseService

logger = logging.getLogger(__name__)


@dataclass
class SessionSyncResult:
    synced: int = 0
    skipped_existing: int = 0
    skipped_short: int = 0
    skipped_active: int = 0
    skipped_invalid: int = 0
    failed_batches: int = 0

    def to_dict(self) -> dict[str, int]:
        return asdict(self)

    @property
    def message(self) -> str:
        return f"Synced {self.synced} historical sessions successfully."


def parse_provider_timestamp(value: Any) -> Optional[datetime]:
    """Parse an ISO-8601 provider timestamp into an aware UTC datetime."""
    if not isinstance(value, str) or not value.strip():
        return None
    text = value.strip()
    if text.endswith(("Z", "z")):
        text = text[:-1] + "+00:00"
    try:
        parsed = datetime.fromisoformat(text)
    except ValueError:
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed.astimezone(timezone.utc)


def session_duration_seconds(
    session: dict[str, Any], started_at: datetime, ended_at: Optional[datetime]
) -> int:
    """Provider-reported duration when present, else the timestamp difference."""
    reported = session.get("duration")
    if reported:
        try:
            return int(round(float(reported)))
        except (TypeError, ValueError):
            pass
    if ended_at is None:
        return 0
    return int(round((ended_at - started_at).total_seconds()))


class SessionSyncService(BaseService):
    """Reconciliation sweep over every batch that holds a meeting reference."""

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
        self.live_session_repository = RepositoryFactory.create_live_session_repository(db)

    @BaseService.measure_operation("sync_sessions")
    def sync_sessions(self) -> SessionSyncResult:
        try:
            batches = self.batch_repository.list_with_meeting()
        except RepositoryException as e:
            logger.error("Listing batches for session sync failed: %s", e)
            raise ServiceException("Failed to sync sessions")

        result = SessionSyncResult()
        logger.info("Starting Dyte session sync over %d batches", len(batches))

        for batch in batches:
            batch_name, meeting_id = batch.batch_name, batch.meeting_id
            try:
                created = self._sync_batch(batch, result)
                self.db.commit()
                result.synced += created
            except DyteError as e:
                self.db.rollback()
                result.failed_batches += 1
                logger.error(
                    "Session sync failed for batch %s (%s): %s",
                    batch_name,
                    meeting_id,
                    e.message,
                    extra={"status_code": e.status_code, "details": e.details},
                )
            except (RepositoryException, SQLAlchemyError) as e:
                self.db.rollback()
                result.failed_batches += 1
                logger.error(
                    "Session sync failed for batch %s (%s): %s",
                    batch_name,
                    meeting_id,
                    e,
                )
            except Exception as e:
                self.db.rollback()
                result.failed_batches += 1
                logger.error(
                    "Unexpected error syncing batch %s (%s): %s",
                    batch_name,
                    meeting_id,
                    e,
                    exc_info=True,
                )

        prometheus_metrics.record_session_sync("synced", result.synced)
        prometheus_metrics.record_session_sync("skipped_existing", result.skipped_existing)
        prometheus_metrics.record_session_sync("skipped_short", result.skipped_short)
        prometheus_metrics.record_session_sync("failed_batch", result.failed_batches)
        self.log_operation("sync_sessions", **result.to_dict())
        return result

    def _sync_batch(self, batch: Batch, result: SessionSyncResult) -> int:
        """Stage new sessions for one batch; returns how many were added."""
        batch_name = batch.batch_name
        meeting_id = batch.meeting_id
        sessions = self.video_client.list_sessions(meeting_id)
        created = 0

        for session in sessions:
            if not isinstance(session, dict):
                result.skipped_invalid += 1
                continue

            if str(session.get("status") or "").upper() != PROVIDER_SESSION_ENDED:
                result.skipped_active += 1
                continue

            provider_session_id = session.get("id")
            started_at = parse_provider_timestamp(session.get("created_at"))
            if not provider_session_id or started_at is None:
                result.skipped_invalid += 1
                continue

            if self.live_session_repository.exists_for_provider_session(provider_session_id):
                result.skipped_existing += 1
                continue

            ended_at = parse_provider_timestamp(session.get("updated_at"))
            duration_seconds = session_duration_seconds(session, started_at, ended_at)
            if duration_seconds < self.config.min_session_seconds:
                result.skipped_short += 1
                continue

            self.live_session_repository.create(
                provider_session_id=provider_session_id,
                batch_id=batch.id,
                tenant_id=batch.tenant_id,
                instructor_id=batch.primary_instructor_id,
                actual_start_time=started_at,
                actual_end_time=ended_at,
                scheduled_start_time=started_at,
                scheduled_end_time=ended_at,
                duration_seconds=duration_seconds,
                duration_minutes=round(duration_seconds / 60, 2),
                status=SessionStatus.COMPLETED.value,
                participants_count=session.get("participants_count") or 0,
                topic=f"{batch_name}{SYNCED_TOPIC_SUFFIX}",
                agenda=SYNCED_AGENDA,
                join_url=batch.meeting_link,
            )
            created += 1

        return created
