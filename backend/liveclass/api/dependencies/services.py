# backend/liveclass/api/dependencies/services.py
"""
Service layer dependencies for dependency injection.

This module provides factory functions that create service instances
with their required dependencies properly injected.
"""

import logging
from typing import Union

from fastapi import Depends, HTTPException, status
from sqlalchemy.orm import Session

from ...core.config import settings
from ...integrations.dyte_client import DyteClient, FakeDyteClient, build_dyte_client
from ...services.live_class_service import LiveClassService
from ...services.session_sync_service import SessionSyncService
from ...services.session_usage_service import SessionUsageService
from .database import get_db

logger = logging.getLogger(__name__)


def get_video_client() -> Union[DyteClient, FakeDyteClient]:
    """Real Dyte client when enabled, otherwise the in-memory fake."""
    if not settings.video_provider_enabled:
        return FakeDyteClient()

    missing = settings.dyte_missing_fields()
    if missing:
        logger.error(
            "Video service unavailable due to missing Dyte configuration: %s",
            ", ".join(missing),
            extra={"missing_fields": missing},
        )
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Video service is temporarily unavailable",
        )
    return build_dyte_client(settings)


def get_live_class_service(
    db: Session = Depends(get_db),
    video_client: Union[DyteClient, FakeDyteClient] = Depends(get_video_client),
) -> LiveClassService:
    """Get LiveClassService instance with proper dependencies."""
    return LiveClassService(db, video_client)


def get_session_sync_service(
    db: Session = Depends(get_db),
    video_client: Union[DyteClient, FakeDyteClient] = Depends(get_video_client),
) -> SessionSyncService:
    return SessionSyncService(db, video_client)


def get_session_usage_service(db: Session = Depends(get_db)) -> SessionUsageService:
    return SessionUsageService(db)
