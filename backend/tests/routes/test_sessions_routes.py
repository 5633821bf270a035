"""HTTP tests for /api/v1/sessions plus the operational endpoints."""

from datetime import datetime, timezone

import pytest

from liveclass.models.live_session import LiveSession

from tests.conftest import TENANT_ID

SYNC_URL = "/api/v1/sessions/sync"


@pytest.fixture
def seeded_session(db, make_batch):
    batch = make_batch(batch_name="Physics", meeting_id="mtg_1", meeting_platform="Dyte")
    session = LiveSession(
        provider_session_id="sess_seed",
        batch_id=batch.id,
        tenant_id=TENANT_ID,
        instructor_id="inst_1",
        actual_start_time=datetime(2024, 3, 5, 10, 0, tzinfo=timezone.utc),
        duration_seconds=5400,
        duration_minutes=90.0,
        status="completed",
        topic="Physics (Synced)",
    )
    db.add(session)
    db.commit()
    return session


class TestSync:
    @pytest.mark.parametrize("role", ["tenant", "admin", "superadmin"])
    def test_reporting_roles_can_sync(self, client, make_batch, auth_headers_for, fake_dyte, role):
        make_batch(meeting_id="mtg_1", meeting_platform="Dyte")
        fake_dyte.sessions["mtg_1"] = [
            {
                "id": "sess_1",
                "status": "ENDED",
                "created_at": "2024-01-10T10:00:00Z",
                "updated_at": "2024-01-10T11:00:00Z",
            }
        ]

        response = client.post(SYNC_URL, headers=auth_headers_for("staff_1", role))

        assert response.status_code == 200
        body = response.json()
        assert body["success"] is True
        assert body["synced"] == 1
        assert body["message"] == "Synced 1 historical sessions successfully."

    @pytest.mark.parametrize("role", ["student", "instructor"])
    def test_other_roles_cannot_sync(self, client, auth_headers_for, role):
        response = client.post(SYNC_URL, headers=auth_headers_for("u1", role))

        assert response.status_code == 403

    def test_sync_requires_token(self, client):
        assert client.post(SYNC_URL).status_code == 401


class TestTenantReports:
    def test_summary(self, client, auth_headers_for, seeded_session):
        response = client.get(
            f"/api/v1/sessions/tenant/{TENANT_ID}/summary",
            params={"month": 3, "year": 2024},
            headers=auth_headers_for("admin_1", "admin"),
        )

        assert response.status_code == 200
        body = response.json()
        assert body["period"] == {"month": 3, "year": 2024}
        assert body["usage"]["total_hours"] == 1.5
        assert body["usage"]["total_classes"] == 1

    def test_invalid_month_is_bad_request(self, client, auth_headers_for):
        response = client.get(
            f"/api/v1/sessions/tenant/{TENANT_ID}/summary",
            params={"month": 13, "year": 2024},
            headers=auth_headers_for("admin_1", "admin"),
        )

        assert response.status_code == 400

    @pytest.mark.parametrize("report", ["summary", "instructors", "logs"])
    def test_tenant_cannot_read_other_tenant(self, client, auth_headers_for, report):
        response = client.get(
            f"/api/v1/sessions/tenant/{TENANT_ID}/{report}",
            headers=auth_headers_for("owner_2", "tenant", tenant_id="another-tenant"),
        )

        assert response.status_code == 403

    @pytest.mark.parametrize("report", ["summary", "instructors", "logs"])
    def test_tenant_token_without_tenant_claim_is_forbidden(self, client, auth_headers_for, report):
        response = client.get(
            f"/api/v1/sessions/tenant/{TENANT_ID}/{report}",
            headers=auth_headers_for("owner_3", "tenant"),
        )

        assert response.status_code == 403

    def test_tenant_reads_own_instructors(self, client, make_user, auth_headers_for):
        instructor = make_user("instructor")

        response = client.get(
            f"/api/v1/sessions/tenant/{TENANT_ID}/instructors",
            params={"month": 3, "year": 2024},
            headers=auth_headers_for("owner_1", "tenant", tenant_id=TENANT_ID),
        )

        assert response.status_code == 200
        rows = response.json()["instructors"]
        assert [row["instructor_id"] for row in rows] == [instructor.id]
        assert rows[0]["total_classes"] == 0

    def test_logs(self, client, auth_headers_for, seeded_session):
        response = client.get(
            f"/api/v1/sessions/tenant/{TENANT_ID}/logs",
            params={"month": 3, "year": 2024, "limit": 10},
            headers=auth_headers_for("admin_1", "superadmin"),
        )

        assert response.status_code == 200
        body = response.json()
        assert body["pagination"] == {"total": 1, "page": 1, "pages": 1}
        assert body["logs"][0]["provider_session_id"] == "sess_seed"
        assert body["logs"][0]["batch_name"] == "Physics"

    def test_instructor_cannot_read_tenant_reports(self, client, auth_headers_for):
        response = client.get(
            f"/api/v1/sessions/tenant/{TENANT_ID}/summary",
            headers=auth_headers_for("inst_1", "instructor"),
        )

        assert response.status_code == 403


class TestInstructorReports:
    def test_own_summary(self, client, auth_headers_for, seeded_session):
        response = client.get(
            "/api/v1/sessions/instructor/summary",
            params={"month": 3, "year": 2024},
            headers=auth_headers_for("inst_1", "instructor"),
        )

        assert response.status_code == 200
        assert response.json()["stats"] == {"total_hours": 1.5, "total_classes": 1}

    def test_own_logs_exclude_others(self, client, auth_headers_for, seeded_session):
        response = client.get(
            "/api/v1/sessions/instructor/logs",
            params={"month": 3, "year": 2024},
            headers=auth_headers_for("inst_2", "instructor"),
        )

        assert response.status_code == 200
        assert response.json()["logs"] == []

    def test_students_are_refused(self, client, auth_headers_for):
        response = client.get(
            "/api/v1/sessions/instructor/summary",
            headers=auth_headers_for("stu_1", "student"),
        )

        assert response.status_code == 403


class TestOperationalEndpoints:
    def test_health(self, client):
        response = client.get("/health")

        assert response.status_code == 200
        body = response.json()
        assert body["status"] == "healthy"
        assert body["video_provider"] == "fake"
        assert body["timestamp"].endswith("Z")

    def test_metrics_exposition(self, client):
        response = client.get("/metrics")

        assert response.status_code == 200
        assert response.headers["content-type"].startswith("text/plain")
        assert "liveclass_prometheus_scrapes_total" in response.text
