# backend/liveclass/core/config.py
import logging
import os
from pathlib import Path
from typing import Literal, Optional

from dotenv import load_dotenv
from pydantic import Field, SecretStr, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from .constants import DEFAULT_MEETING_PLATFORM


def is_running_tests() -> bool:
    """
    Detect if code is running under pytest.

    PYTEST_CURRENT_TEST is set automatically by pytest during test runs, and is
    not expected to be present in production environments.
    """
    return os.getenv("PYTEST_CURRENT_TEST") is not None


logger = logging.getLogger(__name__)

# Load .env file only if not in CI
if not os.getenv("CI"):
    env_path = Path(__file__).parent.parent.parent / ".env"  # Goes up to backend/.env
    logger.info(f"[CONFIG] Looking for .env at: {env_path}")
    load_dotenv(env_path)


_DEFAULT_SECRET_KEY = SecretStr("dev-only-secret-key-change-me-in-production")


class Settings(BaseSettings):
    environment: Literal["development", "staging", "production", "test"] = Field(
        default="development",
        alias="ENVIRONMENT",
    )

    # Auth (bearer tokens are issued elsewhere; we only decode them)
    secret_key: SecretStr = Field(
        default=_DEFAULT_SECRET_KEY,
        alias="SECRET_KEY",
        description="Secret key for JWT tokens",
    )
    algorithm: str = Field(default="HS256", alias="ALGORITHM")

    database_url: str = Field(
        default="sqlite:///./liveclass.db",
        alias="DATABASE_URL",
        description="SQLAlchemy database URL",
    )
    auto_create_tables: bool = Field(
        default=False,
        alias="AUTO_CREATE_TABLES",
        description="Create missing tables on startup (local development only)",
    )

    # Dyte video provider
    video_provider_enabled: bool = Field(
        default=False,
        alias="VIDEO_PROVIDER_ENABLED",
        description="Use the real Dyte API; when false an in-memory fake client is used",
    )
    dyte_org_id: Optional[str] = Field(default=None, alias="DYTE_ORG_ID")
    dyte_api_key: Optional[SecretStr] = Field(default=None, alias="DYTE_API_KEY")
    dyte_api_base_url: str = Field(default="https://api.dyte.io/v2", alias="DYTE_API_BASE_URL")
    dyte_timeout_seconds: float = Field(default=10.0, alias="DYTE_TIMEOUT_SECONDS")
    meeting_platform: str = Field(
        default=DEFAULT_MEETING_PLATFORM,
        alias="MEETING_PLATFORM",
        description="Platform tag stamped on batches whose meeting reference we own",
    )
    host_preset_name: str = Field(default="group_call_host", alias="HOST_PRESET_NAME")
    participant_preset_name: str = Field(
        default="group_call_participant", alias="PARTICIPANT_PRESET_NAME"
    )

    # Scheduling / attendance policy
    class_timezone: str = Field(
        default="UTC",
        alias="CLASS_TIMEZONE",
        description="IANA timezone that batch_time and recurring_days are expressed in",
    )
    attendance_dedupe_per_day: bool = Field(
        default=False,
        alias="ATTENDANCE_DEDUPE_PER_DAY",
        description="Record at most one attendance row per student, batch and day",
    )
    min_session_seconds: int = Field(
        default=60,
        alias="MIN_SESSION_SECONDS",
        description="Remote sessions shorter than this are treated as test calls",
    )

    # Celery / Redis
    redis_url: str = Field(default="redis://localhost:6379", alias="REDIS_URL")
    session_sync_interval_minutes: int = Field(
        default=60,
        alias="SESSION_SYNC_INTERVAL_MINUTES",
        description="How often the provider session reconciliation sweep runs",
    )

    # Use ConfigDict instead of Config class (Pydantic V2 style)
    model_config = SettingsConfigDict(
        env_file=".env" if not os.getenv("CI") else None,
        case_sensitive=False,
        extra="ignore",
        populate_by_name=True,
    )

    @field_validator("session_sync_interval_minutes", "min_session_seconds")
    @classmethod
    def _non_negative(cls, value: int) -> int:
        if value < 0:
            raise ValueError("must be >= 0")
        return value

    def dyte_missing_fields(self) -> list[str]:
        """Names of required Dyte settings that are unset or blank."""
        missing: list[str] = []
        if not (self.dyte_org_id or "").strip():
            missing.append("DYTE_ORG_ID")
        if self.dyte_api_key is None or not self.dyte_api_key.get_secret_value().strip():
            missing.append("DYTE_API_KEY")
        return missing


settings = Settings()
