import os
import sys
from datetime import date
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
from app.db.models.bill_activity import BillActivity
from app.db.models.user import User
from app.api.dependencies.database import get_db
from app.api.dependencies.auth import get_current_user

ALEX = SimpleNamespace(id=1, name="Alex")
BLAIR = SimpleNamespace(id=2, name="Blair")


@pytest.fixture
def env(tmp_path, monkeypatch):
    engine = create_engine(
        f"sqlite:///{tmp_path / 'activity.db'}",
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

    current = {"user": ALEX}
    app.dependency_overrides[get_db] = _override_get_db
    app.dependency_overrides[get_current_user] = lambda: current["user"]

    with TestingSessionLocal() as db:
        db.add(User(id=1, email="alex@example.com", name="Alex", hashed_password="x"))
        db.add(User(id=2, email="blair@example.com", name="Blair", hashed_password="x"))
        db.commit()

    client = TestClient(app)
    yield SimpleNamespace(client=client, current=current, Session=TestingSessionLocal)

    app.dependency_overrides.clear()
    engine.dispose()


def _act_as(env, user):
    env.current["user"] = user


def _pair(env):
    _act_as(env, ALEX)
    code = env.client.post("/connections/codes").json()["code"]
    _act_as(env, BLAIR)
    assert env.client.post("/connections/join", json={"code": code}).status_code == 201
    assert env.client.post("/connections/accept").json()["status"] == "active"
    _act_as(env, ALEX)


def _create_bill(env, **overrides):
    payload = {"name": "Rent", "amount": "100.00", "dueDate": date.today().isoformat(), "frequency": "monthly"}
    payload.update(overrides)
    resp = env.client.post("/bills", json=payload)
    assert resp.status_code == 201, resp.text
    return resp.json()


def _types(env, bill_id):
    resp = env.client.get(f"/bills/{bill_id}/activities")
    assert resp.status_code == 200
    return [entry["type"] for entry in resp.json()]


def test_create_logs_one_created_entry(env):
    bill = _create_bill(env)

    assert bill["status"] == "due"
    assert bill["formattedAmount"] == "$100.00"
    assert bill["paidByUser1"] is False and bill["paidByUser2"] is False

    entries = env.client.get(f"/bills/{bill['id']}/activities").json()
    assert [e["type"] for e in entries] == ["created"]
    assert entries[0]["userName"] == "Alex"
    assert entries[0]["description"] == "Alex created Rent"


def test_paid_classification_follows_both_flags(env):
    _pair(env)
    bill = _create_bill(env)

    # Counterpart pays their side: {false, true}
    _act_as(env, BLAIR)
    resp = env.client.post(f"/bills/{bill['id']}/toggle-paid")
    assert resp.json()["paidByUser2"] is True
    assert resp.json()["isPaidByCurrentUser"] is True
    baseline = len(_types(env, bill["id"]))

    # Creator pays: {true, true} logs paid
    _act_as(env, ALEX)
    resp = env.client.post(f"/bills/{bill['id']}/toggle-paid")
    assert resp.json()["status"] == "paid"
    types = _types(env, bill["id"])
    assert len(types) == baseline + 1
    assert types[0] == "paid"

    # Creator un-pays: {false, true} logs unpaid though the counterpart's flag never moved
    resp = env.client.post(f"/bills/{bill['id']}/toggle-paid")
    body = resp.json()
    assert body["paidByUser1"] is False and body["paidByUser2"] is True
    types = _types(env, bill["id"])
    assert len(types) == baseline + 2
    assert types[:2] == ["unpaid", "paid"]


def test_plain_edit_is_not_logged(env):
    bill = _create_bill(env)

    resp = env.client.patch(f"/bills/{bill['id']}", json={"name": "Rent (March)", "amount": "120.00"})
    assert resp.status_code == 200
    assert resp.json()["name"] == "Rent (March)"
    assert resp.json()["formattedAmount"] == "$120.00"

    assert _types(env, bill["id"]) == ["created"]


def test_delete_keeps_trail_with_last_known_name(env):
    bill = _create_bill(env, name="Internet")
    env.client.patch(f"/bills/{bill['id']}", json={"name": "Fiber"})

    assert env.client.delete(f"/bills/{bill['id']}").status_code == 204
    assert env.client.get(f"/bills/{bill['id']}").status_code == 404

    entries = env.client.get(f"/bills/{bill['id']}/activities").json()
    assert entries[0]["type"] == "deleted"
    assert entries[0]["description"] == "Alex deleted Fiber"

    with env.Session() as db:
        assert db.query(BillActivity).filter(BillActivity.bill_id == bill["id"]).count() == 2


def test_comment_appears_in_activity_feed(env):
    bill = _create_bill(env)

    resp = env.client.post(f"/bills/{bill['id']}/comments", json={"text": "  paid via transfer "})
    assert resp.status_code == 201
    assert resp.json()["type"] == "commented"
    assert resp.json()["description"] == "paid via transfer"

    feed = env.client.get("/activities").json()
    assert [e["type"] for e in feed][:2] == ["commented", "created"]


def test_activity_failure_does_not_undo_bill_write(env, monkeypatch):
    from app.repositories.bill_activity import BillActivityRepository
    from sqlalchemy.exc import OperationalError

    def _boom(self, **kwargs):
        raise OperationalError("INSERT", {}, Exception("disk full"))

    monkeypatch.setattr(BillActivityRepository, "add", _boom)
    bill = _create_bill(env)

    assert env.client.get(f"/bills/{bill['id']}").status_code == 200


def test_counterpart_cannot_set_creator_flag(env):
    _pair(env)
    bill = _create_bill(env)

    _act_as(env, BLAIR)
    resp = env.client.patch(f"/bills/{bill['id']}", json={"paidByUser1": True, "paidByUser2": True})
    assert resp.status_code == 400
    assert resp.json()["error_code"] == "VALIDATION_ERROR"

    body = env.client.get(f"/bills/{bill['id']}").json()
    assert body["paidByUser1"] is False and body["paidByUser2"] is False
    assert body["status"] != "paid"
    assert _types(env, bill["id"]) == ["created"]

    # Setting only their own flag is allowed
    resp = env.client.patch(f"/bills/{bill['id']}", json={"paidByUser2": True})
    assert resp.status_code == 200
    assert resp.json()["paidByUser2"] is True
