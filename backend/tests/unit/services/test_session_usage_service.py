"""Tests for monthly usage reports."""

from __future__ import annotations

from datetime import datetime, timezone
import itertools

import pytest

from liveclass.core.exceptions import ValidationException
from liveclass.models.live_session import LiveSession
from liveclass.services.session_usage_service import (
    SessionUsageService,
    month_bounds,
    seconds_to_hours,
)

from tests.conftest import TENANT_ID

_session_ids = itertools.count(1)


@pytest.fixture
def add_session(db):
    def _add(batch, instructor_id, started_at, seconds, *, status="completed", tenant_id=TENANT_ID):
        session = LiveSession(
            provider_session_id=f"sess_{next(_session_ids)}",
            batch_id=batch.id,
            tenant_id=tenant_id,
            instructor_id=instructor_id,
            actual_start_time=started_at,
            duration_seconds=seconds,
            duration_minutes=round(seconds / 60, 2),
            status=status,
            topic=f"{batch.batch_name} (Synced)",
        )
        db.add(session)
        db.commit()
        return session

    return _add


def _jan(day, hour=10):
    return datetime(2024, 1, day, hour, 0, tzinfo=timezone.utc)


class TestMonthBounds:
    def test_leap_february(self):
        start, end = month_bounds(2024, 2)
        assert start == datetime(2024, 2, 1, tzinfo=timezone.utc)
        assert end == datetime(2024, 2, 29, 23, 59, 59, tzinfo=timezone.utc)

    @pytest.mark.parametrize("month", [0, 13, -1])
    def test_invalid_month(self, month):
        with pytest.raises(ValidationException):
            month_bounds(2024, month)

    def test_hours_are_rounded(self):
        assert seconds_to_hours(5400) == 1.5
        assert seconds_to_hours(61) == 0.02


class TestTenantSummary:
    def test_totals_for_the_month(self, db, make_batch, add_session):
        physics = make_batch(batch_name="Physics")
        maths = make_batch(batch_name="Maths")
        add_session(physics, "inst_a", _jan(3), 3600)
        add_session(maths, "inst_b", _jan(4), 1800)
        add_session(maths, "inst_b", datetime(2024, 2, 1, 0, 0, 1, tzinfo=timezone.utc), 3600)
        add_session(physics, "inst_a", _jan(5), 3600, status="cancelled")
        add_session(physics, "inst_x", _jan(6), 3600, tenant_id="other-tenant")

        summary = SessionUsageService(db).get_tenant_summary(TENANT_ID, 2024, 1)

        assert summary["period"] == {"month": 1, "year": 2024}
        assert summary["usage"] == {
            "total_hours": 1.5,
            "total_classes": 2,
            "instructor_count": 2,
            "batch_count": 2,
        }

    def test_empty_month(self, db):
        summary = SessionUsageService(db).get_tenant_summary(TENANT_ID, 2023, 7)

        assert summary["usage"]["total_hours"] == 0
        assert summary["usage"]["total_classes"] == 0

    def test_rejects_bad_month(self, db):
        with pytest.raises(ValidationException):
            SessionUsageService(db).get_tenant_summary(TENANT_ID, 2024, 13)


class TestInstructorBreakdown:
    def test_idle_instructors_report_zeros(self, db, make_user, make_batch, add_session):
        busy = make_user("instructor", first_name="Ada", last_name="Lovelace")
        idle = make_user("instructor", first_name="Bob", last_name="Idle")
        make_user("instructor", first_name="Zed", is_active=False)
        make_user("student")
        batch = make_batch()
        add_session(batch, busy.id, _jan(3), 7200)

        report = SessionUsageService(db).get_instructor_breakdown(TENANT_ID, 2024, 1)

        rows = {row["instructor_id"]: row for row in report["instructors"]}
        assert set(rows) == {busy.id, idle.id}
        assert rows[busy.id]["name"] == "Ada Lovelace"
        assert rows[busy.id]["total_hours"] == 2.0
        assert rows[busy.id]["total_classes"] == 1
        assert rows[busy.id]["active_batches"] == 1
        assert rows[idle.id]["total_hours"] == 0.0
        assert rows[idle.id]["total_classes"] == 0
        assert rows[idle.id]["active_batches"] == 0


class TestSessionLogs:
    def test_newest_first_with_pagination(self, db, make_batch, add_session):
        batch = make_batch(batch_name="Physics")
        for day in range(1, 6):
            add_session(batch, "inst_a", _jan(day), 600)

        service = SessionUsageService(db)
        first = service.get_session_logs(TENANT_ID, 2024, 1, page=1, limit=2)
        last = service.get_session_logs(TENANT_ID, 2024, 1, page=3, limit=2)

        assert first["pagination"] == {"total": 5, "page": 1, "pages": 3}
        assert [log["actual_start_time"].day for log in first["logs"]] == [5, 4]
        assert first["logs"][0]["batch_name"] == "Physics"
        assert len(last["logs"]) == 1

    def test_filters_by_instructor(self, db, make_batch, add_session):
        batch = make_batch()
        add_session(batch, "inst_a", _jan(3), 600)
        add_session(batch, "inst_b", _jan(4), 600)

        logs = SessionUsageService(db).get_session_logs(
            None, 2024, 1, instructor_id="inst_b"
        )

        assert [log["instructor_id"] for log in logs["logs"]] == ["inst_b"]

    def test_limit_is_clamped(self, db):
        logs = SessionUsageService(db).get_session_logs(TENANT_ID, 2024, 1, page=0, limit=10_000)

        assert logs["pagination"] == {"total": 0, "page": 1, "pages": 0}


class TestInstructorSummary:
    def test_only_own_sessions(self, db, make_batch, add_session):
        batch = make_batch()
        add_session(batch, "inst_a", _jan(3), 3600)
        add_session(batch, "inst_a", _jan(4), 900)
        add_session(batch, "inst_b", _jan(4), 900)

        summary = SessionUsageService(db).get_instructor_summary("inst_a", 2024, 1)

        assert summary == {
            "period": {"month": 1, "year": 2024},
            "stats": {"total_hours": 1.25, "total_classes": 2},
        }
