# backend/tests/conftest.py
"""
Pytest configuration for the live class gateway.

Every test gets a fresh in-memory SQLite database; nothing touches a real
database or the real Dyte API.
"""

import os

# Set test configuration BEFORE any liveclass imports
os.environ["DATABASE_URL"] = "sqlite+pysqlite:///:memory:"
os.environ["VIDEO_PROVIDER_ENABLED"] = "false"
os.environ["ATTENDANCE_DEDUPE_PER_DAY"] = "false"
os.environ["CLASS_TIMEZONE"] = "UTC"

from datetime import date
from typing import Any, Callable, Iterator

from fastapi.testclient import TestClient
import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from liveclass.api.dependencies.database import get_db
from liveclass.api.dependencies.services import get_video_client
from liveclass.auth import create_access_token
from liveclass.core.constants import DAYS_OF_WEEK
from liveclass.database import Base
from liveclass.integrations.dyte_client import FakeDyteClient
from liveclass.main import fastapi_app as app

# Import models so Base.metadata is populated for create_all
import liveclass.models  # noqa: F401
from liveclass.models.batch import Batch
from liveclass.models.user import User

TENANT_ID = "01HTENANT000000000000000AA"


@pytest.fixture
def engine() -> Iterator[Any]:
    engine = create_engine(
        "sqlite+pysqlite:///:memory:",
        future=True,
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    Base.metadata.create_all(engine)
    yield engine
    Base.metadata.drop_all(engine)
    engine.dispose()


@pytest.fixture
def db(engine) -> Iterator[Session]:
    """Session bound to the per-test in-memory database."""
    TestingSession = sessionmaker(bind=engine, expire_on_commit=False, future=True)
    session = TestingSession()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def fake_dyte() -> FakeDyteClient:
    return FakeDyteClient()


@pytest.fixture
def client(db: Session, fake_dyte: FakeDyteClient) -> Iterator[TestClient]:
    """Create a test client wired to the test database and the fake Dyte client."""

    def override_get_db():
        try:
            yield db
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_video_client] = lambda: fake_dyte

    # Don't use context manager - lifespan is not needed for route tests
    test_client = TestClient(app)

    yield test_client

    app.dependency_overrides.clear()


@pytest.fixture
def make_user(db: Session) -> Callable[..., User]:
    counter = {"n": 0}

    def _make_user(role: str = "student", **overrides: Any) -> User:
        counter["n"] += 1
        fields: dict[str, Any] = {
            "email": f"{role}{counter['n']}@example.com",
            "first_name": role.capitalize(),
            "last_name": str(counter["n"]),
            "role": role,
            "tenant_id": TENANT_ID,
            "is_active": True,
        }
        fields.update(overrides)
        user = User(**fields)
        db.add(user)
        db.commit()
        return user

    return _make_user


@pytest.fixture
def make_batch(db: Session) -> Callable[..., Batch]:
    """Batch factory; defaults to a strict batch that is open every day, all day."""

    def _make_batch(**overrides: Any) -> Batch:
        fields: dict[str, Any] = {
            "batch_name": "Physics 101",
            "status": "active",
            "is_strict_schedule": True,
            "start_date": date(2020, 1, 1),
            "end_date": date(2099, 12, 31),
            "recurring_days": list(DAYS_OF_WEEK),
            "batch_time": None,
            "tenant_id": TENANT_ID,
            "meeting_link": "https://app.dyte.io/meeting",
        }
        fields.update(overrides)
        batch = Batch(**fields)
        db.add(batch)
        db.commit()
        return batch

    return _make_batch


@pytest.fixture
def auth_headers_for() -> Callable[..., dict[str, str]]:
    """Build bearer headers for an arbitrary caller."""

    def _headers(user_id: str, role: str, **claims: Any) -> dict[str, str]:
        token = create_access_token(data={"sub": user_id, "role": role, **claims})
        return {"Authorization": f"Bearer {token}"}

    return _headers
