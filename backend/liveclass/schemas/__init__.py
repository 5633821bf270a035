# backend/liveclass/schemas/__init__.py
"""
Pydantic schemas for the live class gateway.
"""

from .live_class import LiveClassAdmissionResponse, LiveClassRequest
from .session import (
    InstructorBreakdownResponse,
    InstructorSummaryResponse,
    SessionLogsResponse,
    SessionSyncResponse,
    TenantSummaryResponse,
)

__all__ = [
    "InstructorBreakdownResponse",
    "InstructorSummaryResponse",
    "LiveClassAdmissionResponse",
    "LiveClassRequest",
    "SessionLogsResponse",
    "SessionSyncResponse",
    "TenantSummaryResponse",
]
