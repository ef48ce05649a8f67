import os
import sys

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
from app.api.dependencies.database import get_db


@pytest.fixture
def client(tmp_path, monkeypatch):
    engine = create_engine(
        f"sqlite:///{tmp_path / 'auth.db'}",
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
    yield TestClient(app)
    app.dependency_overrides.clear()
    engine.dispose()


def _register(client, email="Alex@Example.com"):
    return client.post("/auth/register", json={"email": email, "name": " Alex ", "password": "correct-horse"})


def _login(client, password="correct-horse"):
    return client.post("/auth/login", data={"username": "alex@example.com", "password": password})


def test_register_creates_unverified_account(client):
    resp = _register(client)
    assert resp.status_code == 201
    body = resp.json()
    assert body["email"] == "alex@example.com"
    assert body["name"] == "Alex"
    assert body["isVerified"] is False


def test_duplicate_email_is_a_conflict(client):
    _register(client)

    resp = _register(client, email="alex@example.com")
    assert resp.status_code == 409
    body = resp.json()
    assert body["error_code"] == "EMAIL_EXISTS"
    assert body["http_status"] == 409


def test_login_me_update_and_logout(client):
    _register(client)
    assert _login(client, "wrong-password").status_code == 401

    token = _login(client).json()["access_token"]
    headers = {"Authorization": f"Bearer {token}"}

    me = client.get("/users/me", headers=headers)
    assert me.status_code == 200
    assert me.json()["name"] == "Alex"

    renamed = client.patch("/users/me", headers=headers, json={"name": "Alexandra"})
    assert renamed.json()["name"] == "Alexandra"

    assert client.post("/auth/logout", headers=headers).status_code == 204
    assert client.get("/users/me", headers=headers).status_code == 401


def test_missing_or_garbage_token_is_unauthorized(client):
    assert client.get("/bills").status_code == 401
    assert client.get("/bills", headers={"Authorization": "Bearer not-a-jwt"}).status_code == 401
