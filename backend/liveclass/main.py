# backend/liveclass/main.py
from __future__ import annotations

from contextlib import asynccontextmanager
import logging
from typing import AsyncGenerator

from fastapi import APIRouter, FastAPI

from .core.config import is_running_tests, settings
from .core.constants import API_DESCRIPTION, API_TITLE, API_VERSION
from .database import init_db
from .errors import register_error_handlers
from .routes import health, prometheus
from .routes.v1 import live_classes as live_classes_v1, sessions as sessions_v1

logging.basicConfig(
    level=logging.INFO, format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)


logger = logging.getLogger(__name__)


@asynccontextmanager
async def app_lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Handle application startup/shutdown without deprecated events."""
    logger.info("Live class gateway starting up...")
    logger.info(f"Environment: {settings.environment}")

    if settings.auto_create_tables:
        init_db()
        logger.info("Database tables ensured")

    if settings.video_provider_enabled:
        missing = settings.dyte_missing_fields()
        if missing:
            logger.error("Dyte is enabled but not configured: %s", ", ".join(missing))
    else:
        logger.warning("VIDEO_PROVIDER_ENABLED is off; using the in-memory Dyte fake")

    if is_running_tests():
        logger.info("Running under pytest (test mode active)")

    yield

    logger.info("Live class gateway shutting down...")


app = FastAPI(
    title=API_TITLE,
    description=API_DESCRIPTION,
    version=API_VERSION,
    docs_url="/docs",
    redoc_url="/redoc",
    lifespan=app_lifespan,
)
# Register unified error envelope handlers
register_error_handlers(app)

# Create API v1 router
api_v1 = APIRouter(prefix="/api/v1")

# Mount v1 routes
api_v1.include_router(live_classes_v1.router, prefix="/live-classes")
api_v1.include_router(sessions_v1.router, prefix="/sessions")

app.include_router(api_v1)

# Infrastructure routes (unversioned)
app.include_router(health.router)
app.include_router(prometheus.router)

fastapi_app = app

# Export what's needed
__all__ = ["app", "fastapi_app"]
