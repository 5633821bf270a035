"""Session reconciliation and usage report schemas."""

from __future__ import annotations

from datetime import datetime
from typing import List, Optional

from ._strict_base import StrictModel


class SessionSyncResponse(StrictModel):
    """Response from POST /api/v1/sessions/sync."""

    success: bool = True
    message: str
    synced: int
    skipped_existing: int
    skipped_short: int
    skipped_active: int
    skipped_invalid: int
    failed_batches: int


class ReportPeriod(StrictModel):
    month: int
    year: int


class TenantUsage(StrictModel):
    total_hours: float
    total_classes: int
    instructor_count: int
    batch_count: int


class TenantSummaryResponse(StrictModel):
    success: bool = True
    period: ReportPeriod
    usage: TenantUsage


class InstructorUsageRow(StrictModel):
    instructor_id: str
    name: Optional[str] = None
    email: Optional[str] = None
    total_hours: float
    total_classes: int
    active_batches: int


class InstructorBreakdownResponse(StrictModel):
    success: bool = True
    period: ReportPeriod
    instructors: List[InstructorUsageRow]


class SessionLogEntry(StrictModel):
    id: str
    provider_session_id: str
    batch_id: str
    batch_name: Optional[str] = None
    instructor_id: Optional[str] = None
    topic: Optional[str] = None
    actual_start_time: datetime
    actual_end_time: Optional[datetime] = None
    duration_seconds: int
    duration_minutes: float
    participants_count: int


class Pagination(StrictModel):
    total: int
    page: int
    pages: int


class SessionLogsResponse(StrictModel):
    success: bool = True
    logs: List[SessionLogEntry]
    pagination: Pagination


class InstructorStats(StrictModel):
    total_hours: float
    total_classes: int


class InstructorSummaryResponse(StrictModel):
    success: bool = True
    period: ReportPeriod
    stats: InstructorStats
