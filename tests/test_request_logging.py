import os
import sys

from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

os.environ.setdefault("DATABASE_URL", "sqlite:///:memory:")

# Ensure project root on sys.path
PROJECT_ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
if PROJECT_ROOT not in sys.path:
    sys.path.insert(0, PROJECT_ROOT)


def test_correlation_id_header_present_on_404(monkeypatch):
    from app.core.config import settings
    from main import app

    monkeypatch.setattr(settings, "ENABLE_REQUEST_LOGGING", False)

    client = TestClient(app)

    resp = client.get("/this-path-does-not-exist")
    assert resp.status_code == 404
    assert "X-Correlation-ID" in resp.headers


def test_incoming_correlation_id_is_echoed_and_persisted(tmp_path, monkeypatch):
    from main import app
    from app.db.base_class import Base
    from app.db import base as models_import  # noqa: F401 - ensure models are imported
    from app.repositories.request_log import RequestLogRepository

    engine = create_engine(f"sqlite:///{tmp_path / 'logs.db'}", connect_args={"check_same_thread": False})
    TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)
    Base.metadata.create_all(bind=engine)
    monkeypatch.setattr("app.core.observability.SessionLocal", TestingSessionLocal)

    client = TestClient(app)
    resp = client.get("/bills", headers={"X-Correlation-ID": "trace-abc-123"})

    assert resp.status_code == 401
    assert resp.headers["X-Correlation-ID"] == "trace-abc-123"
    with TestingSessionLocal() as db:
        assert RequestLogRepository(db).count_for_correlation("trace-abc-123") == 1
    engine.dispose()
