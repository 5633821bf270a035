"""
Health check endpoint for monitoring and load balancer probes.
"""

from __future__ import annotations

from datetime import datetime, timezone

from fastapi import APIRouter

from ..core.config import settings
from ..core.constants import API_VERSION
from ..schemas.main_responses import HealthResponse

router = APIRouter(tags=["health"])


@router.get("/health", response_model=HealthResponse)
async def health_check() -> HealthResponse:
    return HealthResponse(
        status="healthy",
        service="liveclass-api",
        version=API_VERSION,
        environment=settings.environment,
        video_provider="dyte" if settings.video_provider_enabled else "fake",
        timestamp=datetime.now(timezone.utc).isoformat().replace("+00:00", "Z"),
    )
