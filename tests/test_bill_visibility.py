import os
import sys
from datetime import date, timedelta
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
from app.db.models.bill import Bill
from app.db.models.user import User
from app.api.dependencies.database import get_db
from app.api.dependencies.auth import get_current_user

ALEX = SimpleNamespace(id=1, name="Alex")
BLAIR = SimpleNamespace(id=2, name="Blair")
CASEY = SimpleNamespace(id=3, name="Casey")


@pytest.fixture
def env(tmp_path, monkeypatch):
    engine = create_engine(
        f"sqlite:///{tmp_path / 'visibility.db'}",
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
        for user in (ALEX, BLAIR, CASEY):
            db.add(User(id=user.id, email=f"{user.name.lower()}@example.com", name=user.name, hashed_password="x"))
        db.commit()

    yield SimpleNamespace(client=TestClient(app), current=current, Session=TestingSessionLocal)

    app.dependency_overrides.clear()
    engine.dispose()


def _as(env, user):
    env.current["user"] = user
    return env.client


def _bill(client, name, days=3):
    resp = client.post("/bills", json={
        "name": name,
        "amount": "40.00",
        "dueDate": (date.today() + timedelta(days=days)).isoformat(),
    })
    assert resp.status_code == 201, resp.text
    return resp.json()


def _names(client):
    resp = client.get("/bills")
    assert resp.status_code == 200
    return sorted(bill["name"] for bill in resp.json())


def test_users_see_only_their_own_bills_without_connection(env):
    _bill(_as(env, ALEX), "Rent")
    _bill(_as(env, BLAIR), "Gym")

    assert _names(_as(env, ALEX)) == ["Rent"]
    assert _names(_as(env, BLAIR)) == ["Gym"]

    alex_bill = _as(env, ALEX).get("/bills").json()[0]
    assert alex_bill["isShared"] is False
    assert alex_bill["status"] == "upcoming"
    assert _as(env, BLAIR).get(f"/bills/{alex_bill['id']}").status_code == 404


def test_pending_connection_grants_no_shared_visibility(env):
    _bill(_as(env, ALEX), "Rent")
    code = _as(env, ALEX).post("/connections/codes").json()["code"]
    joined = _as(env, BLAIR).post("/connections/join", json={"code": code})
    assert joined.json()["status"] == "pending"

    assert _names(_as(env, BLAIR)) == []
    assert all(not bill["isShared"] for bill in _as(env, ALEX).get("/bills").json())


def test_active_connection_shares_bills_both_ways(env):
    _bill(_as(env, ALEX), "Rent")
    _bill(_as(env, BLAIR), "Gym")
    code = _as(env, ALEX).post("/connections/codes").json()["code"]
    _as(env, BLAIR).post("/connections/join", json={"code": code})
    accepted = _as(env, BLAIR).post("/connections/accept").json()
    assert accepted["status"] == "active"
    assert accepted["partnerName"] == "Alex"

    for user in (ALEX, BLAIR):
        bills = _as(env, user).get("/bills").json()
        assert sorted(b["name"] for b in bills) == ["Gym", "Rent"]
        assert all(b["isShared"] for b in bills)

    assert _names(_as(env, CASEY)) == []


def test_disconnect_restores_private_views(env):
    code = _as(env, ALEX).post("/connections/codes").json()["code"]
    _as(env, BLAIR).post("/connections/join", json={"code": code})
    _as(env, BLAIR).post("/connections/accept")
    shared = _bill(_as(env, ALEX), "Utilities")
    assert shared["sharedConnectionId"] is not None

    split = _as(env, BLAIR).put(
        f"/bills/{shared['id']}/split",
        json={"user1Percentage": "60", "user2Percentage": "40"},
    )
    assert split.status_code == 200
    assert split.json()["shareAmounts"] == ["24.00", "16.00"]

    assert _as(env, BLAIR).delete("/connections").status_code == 204

    assert _as(env, ALEX).get("/connections/me").json() is None
    assert _as(env, BLAIR).get("/connections/me").json() is None
    assert _names(_as(env, BLAIR)) == []
    assert _names(_as(env, ALEX)) == ["Utilities"]
    assert _as(env, ALEX).get(f"/bills/{shared['id']}/split").json() is None

    with env.Session() as db:
        assert db.get(Bill, shared["id"]).shared_connection_id is None


def test_split_requires_active_connection_and_full_total(env):
    bill = _bill(_as(env, ALEX), "Rent")

    resp = _as(env, ALEX).put(f"/bills/{bill['id']}/split", json={"user1Percentage": "50", "user2Percentage": "50"})
    assert resp.status_code == 400
    assert resp.json()["error_code"] == "CONNECTION_NOT_ACTIVE"

    resp = _as(env, ALEX).put(f"/bills/{bill['id']}/split", json={"user1Percentage": "70", "user2Percentage": "20"})
    assert resp.status_code == 400
    assert resp.json()["error_code"] == "INVALID_SPLIT"


def test_invalid_code_reports_reason(env):
    resp = _as(env, BLAIR).post("/connections/join", json={"code": "zzzzzz"})
    assert resp.status_code == 400
    assert resp.json()["error_code"] == "CONNECTION_CODE_INVALID"
    assert resp.json()["reason"] == "not_found"

    check = _as(env, BLAIR).get("/connections/codes/ZZZZZZ")
    assert check.status_code == 200
    assert check.json()["status"] == "not_found"
    assert check.json()["code"] is None


def test_dashboard_reflects_shared_state(env):
    code = _as(env, ALEX).post("/connections/codes").json()["code"]
    _as(env, BLAIR).post("/connections/join", json={"code": code})
    _as(env, BLAIR).post("/connections/accept")
    _bill(_as(env, BLAIR), "Gym")

    resp = _as(env, ALEX).get("/dashboard")
    assert resp.status_code == 200
    body = resp.json()
    assert body["currentUser"]["name"] == "Alex"
    assert body["isShared"] is True
    assert body["connection"]["partnerName"] == "Blair"
    assert [b["name"] for b in body["bills"]] == ["Gym"]
    assert body["activities"][0]["type"] == "created"


def test_dashboard_mutations_return_refreshed_snapshot(env):
    code = _as(env, ALEX).post("/connections/codes").json()["code"]

    assert _as(env, BLAIR).post("/dashboard/connection/join", json={"code": "ZZZZZZ"}).status_code == 400
    joined = _as(env, BLAIR).post("/dashboard/connection/join", json={"code": code})
    assert joined.status_code == 200
    assert joined.json()["connection"]["status"] == "pending"
    assert joined.json()["isShared"] is False

    accepted = _as(env, BLAIR).post("/dashboard/connection/accept").json()
    assert accepted["isShared"] is True

    created = _as(env, ALEX).post("/dashboard/bills", json={
        "name": "Power",
        "amount": "60.00",
        "dueDate": (date.today() + timedelta(days=3)).isoformat(),
    })
    assert created.status_code == 201
    body = created.json()
    assert [b["name"] for b in body["bills"]] == ["Power"]
    assert body["activities"][0]["type"] == "created"
    bill_id = body["bills"][0]["id"]

    toggled = _as(env, BLAIR).post(f"/dashboard/bills/{bill_id}/toggle-paid").json()
    assert toggled["bills"][0]["paidByUser2"] is True
    assert toggled["bills"][0]["isPaidByCurrentUser"] is True

    renamed = _as(env, ALEX).patch("/dashboard/profile", json={"name": "Alexandra"}).json()
    assert renamed["currentUser"]["name"] == "Alexandra"

    left = _as(env, ALEX).delete("/dashboard/connection").json()
    assert left["connection"] is None
    assert left["isShared"] is False
    assert [b["name"] for b in left["bills"]] == ["Power"]

    removed = _as(env, ALEX).delete(f"/dashboard/bills/{bill_id}").json()
    assert removed["bills"] == []
    assert removed["activities"][0]["type"] == "deleted"
