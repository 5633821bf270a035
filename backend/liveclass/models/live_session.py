"""Materialized record of a class meeting that took place on the provider."""

from __future__ import annotations

from sqlalchemy import Column, DateTime, Float, ForeignKey, Integer, String, func
import ulid

from ..core.enums import SessionStatus
from ..database import Base


class LiveSession(Base):
    """One ended remote session, keyed by the provider's session id."""

    __tablename__ = "live_sessions"

    id = Column(String(26), primary_key=True, default=lambda: str(ulid.ULID()))
    # Idempotency key for the reconciliation sweep
    provider_session_id = Column(String(100), nullable=False, unique=True)

    batch_id = Column(String(26), ForeignKey("batches.id"), nullable=False, index=True)
    tenant_id = Column(String(26), nullable=True, index=True)
    instructor_id = Column(String(26), nullable=True, index=True)

    actual_start_time = Column(DateTime(timezone=True), nullable=False, index=True)
    actual_end_time = Column(DateTime(timezone=True), nullable=True)
    scheduled_start_time = Column(DateTime(timezone=True), nullable=True)
    scheduled_end_time = Column(DateTime(timezone=True), nullable=True)
    duration_seconds = Column(Integer, nullable=False)
    duration_minutes = Column(Float, nullable=False)

    status = Column(String(20), nullable=False, default=SessionStatus.COMPLETED.value, index=True)
    participants_count = Column(Integer, nullable=False, default=0)

    topic = Column(String(300), nullable=True)
    agenda = Column(String(255), nullable=True)
    join_url = Column(String(500), nullable=True)

    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())

    def __repr__(self) -> str:
        return f"<LiveSession {self.provider_session_id} batch={self.batch_id}>"
