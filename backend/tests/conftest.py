"""
Pytest configuration and shared fixtures.

Every test runs against a fresh in-memory SQLite schema built from the models.
"""

import os

# must be set before app.db is imported
os.environ["DATABASE_URL"] = "sqlite://"
os.environ.setdefault("APP_TZ", "Asia/Seoul")

import pytest
from fastapi.testclient import TestClient

from app.db import Base, SessionLocal, engine
from app.main import app
from app.models import Hospital, Mission, SubMission, Submission
from app.services.action_types import seed_system_action_types
from app.services.review import stats_cache


SUPERADMIN = {"X-User-Id": "1", "X-Member-Type": "superadmin"}
ADMIN = {"X-User-Id": "2", "X-Member-Type": "admin"}


def hospital_admin(hospital_id, user_id=10):
    headers = {"X-User-Id": str(user_id), "X-Member-Type": "hospital_admin"}
    if hospital_id is not None:
        headers["X-Hospital-Id"] = str(hospital_id)
    return headers


def member(user_id=100, hospital_id=None):
    headers = {"X-User-Id": str(user_id), "X-Member-Type": "member"}
    if hospital_id is not None:
        headers["X-Hospital-Id"] = str(hospital_id)
    return headers


@pytest.fixture(autouse=True)
def schema():
    """Create all tables before each test and drop them after."""
    Base.metadata.create_all(bind=engine)
    stats_cache.clear()
    yield
    stats_cache.clear()
    Base.metadata.drop_all(bind=engine)


@pytest.fixture
def client():
    """Create test client."""
    return TestClient(app)


@pytest.fixture
def db():
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def hospitals(db):
    """Two hospitals, ids 1 and 2."""
    rows = [Hospital(name="Seoul Women's"), Hospital(name="Busan Maternity")]
    db.add_all(rows)
    db.commit()
    return rows


@pytest.fixture
def system_action_types(db):
    seed_system_action_types(db)


@pytest.fixture
def make_mission(db):
    """Insert a mission directly; keyword arguments override the defaults."""
    def _make(title="Mission", **kwargs):
        kwargs.setdefault("visibility", "public")
        row = Mission(title=title, **kwargs)
        db.add(row)
        db.commit()
        return row

    return _make


@pytest.fixture
def make_sub_mission(db):
    def _make(mission, title="Step", **kwargs):
        kwargs.setdefault("submission_types", ["text"])
        row = SubMission(mission_id=mission.id, title=title, **kwargs)
        db.add(row)
        db.commit()
        return row

    return _make


@pytest.fixture
def make_submission(db):
    def _make(sub_mission, user_id=100, status="submitted", **kwargs):
        row = Submission(
            user_id=user_id,
            sub_mission_id=sub_mission.id,
            slots=[{"index": 0, "type": "text", "content": "hello"}],
            status=status,
            is_locked=(status == "approved"),
            **kwargs,
        )
        db.add(row)
        db.commit()
        return row

    return _make
