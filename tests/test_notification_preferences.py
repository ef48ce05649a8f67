import os
import sys
from types import SimpleNamespace

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

os.environ.setdefault("DATABASE_URL", "sqlite:///:memory:")

# Ensure project root is on sys.path for 'app' imports
PROJECT_ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
if PROJECT_ROOT not in sys.path:
    sys.path.insert(0, PROJECT_ROOT)

from app.db.base_class import Base
from app.db import base as models_import  # noqa: F401 - ensure models are imported
from app.db.models.notification_preference import NotificationPreference
from app.db.models.user import User
from app.api.dependencies.database import get_db
from app.api.dependencies.auth import get_current_user


@pytest.fixture
def env(tmp_path, monkeypatch):
    engine = create_engine(
        f"sqlite:///{tmp_path / 'prefs.db'}",
        connect_args={"check_same_thread": False},
    )
    TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)
    Base.metadata.create_all(bind=engine)
    monkeypatch.setattr("app.core.observability.SessionLocal", TestingSessionLocal)

    from main import app

    def _override_get_db():
        db = TestingSessionLocal()
        try:
            yield db
        finally:
            db.close()

    app.dependency_overrides[get_db] = _override_get_db
    app.dependency_overrides[get_current_user] = lambda: SimpleNamespace(id=1, name="Alex")

    with TestingSessionLocal() as db:
        db.add(User(id=1, email="alex@example.com", name="Alex", hashed_password="x"))
        db.commit()

    yield SimpleNamespace(client=TestClient(app), Session=TestingSessionLocal)

    app.dependency_overrides.clear()
    engine.dispose()


def test_defaults_when_nothing_saved(env):
    resp = env.client.get("/notifications/preferences")
    assert resp.status_code == 200
    assert resp.json() == {
        "daysBeforeDue": [1],
        "notifyOnPaid": True,
        "notifyOnOverdue": True,
        "userId": 1,
    }


def test_save_twice_keeps_one_record(env):
    first = env.client.put("/notifications/preferences", json={
        "daysBeforeDue": [3, 1, 3],
        "notifyOnPaid": False,
        "notifyOnOverdue": True,
    })
    assert first.status_code == 200
    assert first.json()["daysBeforeDue"] == [1, 3]

    second = env.client.put("/notifications/preferences", json={
        "daysBeforeDue": [7],
        "notifyOnPaid": True,
        "notifyOnOverdue": False,
    })
    assert second.json()["daysBeforeDue"] == [7]

    stored = env.client.get("/notifications/preferences").json()
    assert stored["notifyOnOverdue"] is False
    with env.Session() as db:
        assert db.query(NotificationPreference).filter(NotificationPreference.user_id == 1).count() == 1


def test_negative_offsets_rejected(env):
    resp = env.client.put("/notifications/preferences", json={"daysBeforeDue": [-1]})
    assert resp.status_code == 422
