"""Celery task for the periodic Dyte session reconciliation sweep."""

from __future__ import annotations

from datetime import datetime, timezone
import logging
from typing import Optional, TypedDict, cast

from sqlalchemy.orm import Session

from liveclass.core.config import settings
from liveclass.database import get_db
from liveclass.integrations.dyte_client import build_dyte_client
from liveclass.services.session_sync_service import SessionSyncService
from liveclass.tasks.celery_app import celery_app

logger = logging.getLogger(__name__)


class SessionSyncResults(TypedDict, total=False):
    status: str
    synced: int
    skipped_existing: int
    skipped_short: int
    skipped_active: int
    skipped_invalid: int
    failed_batches: int
    processed_at: str


@celery_app.task(name="liveclass.tasks.session_sync_tasks.sync_provider_sessions")  # type: ignore[misc]
def sync_provider_sessions() -> SessionSyncResults:
    """Materialize ended Dyte sessions for every batch with a meeting.

    No-op when the real provider is disabled or not configured.
    """
    now = datetime.now(timezone.utc)
    if not settings.video_provider_enabled:
        return {"status": "disabled", "processed_at": now.isoformat()}

    missing = settings.dyte_missing_fields()
    if missing:
        logger.error(
            "Skipping session sync; missing Dyte configuration: %s",
            ", ".join(missing),
            extra={"missing_fields": missing},
        )
        return {"status": "unconfigured", "processed_at": now.isoformat()}

    db: Optional[Session] = None
    try:
        db = cast(Session, next(get_db()))
        service = SessionSyncService(db, build_dyte_client(settings))
        result = service.sync_sessions()
        results = cast(SessionSyncResults, {"status": "ok", **result.to_dict()})
        results["processed_at"] = now.isoformat()
        return results
    finally:
        if db is not None:
            db.close()
