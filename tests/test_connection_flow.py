import os
import sys
from datetime import datetime, timedelta, timezone

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

os.environ.setdefault("DATABASE_URL", "sqlite:///:memory:")

# Ensure project root is on sys.path for 'app' imports
PROJECT_ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
if PROJECT_ROOT not in sys.path:
    sys.path.insert(0, PROJECT_ROOT)

from app.db.base_class import Base
from app.db import base as models_import  # noqa: F401 - ensure models are imported
from app.db.models.user import User
from app.repositories.bill import BillRepository
from app.repositories.bill_split import BillSplitRepository
from app.repositories.connection_code import ConnectionCodeRepository
from app.repositories.shared_connection import SharedConnectionRepository
from app.repositories.user import UserRepository
from app.schemas.connection import CodeValidity, ConnectionStatus
from app.services.connection_services import ConnectionService
from app.services.exceptions import (
    AlreadyConnectedError,
    ConnectionCodeInvalidError,
    ConnectionNotFoundError,
    SelfConnectionError,
)

T0 = datetime(2025, 3, 5, 12, 0, tzinfo=timezone.utc)


class FakeClock:
    def __init__(self, now):
        self.now = now

    def __call__(self):
        return self.now


@pytest.fixture
def db(tmp_path):
    engine = create_engine(f"sqlite:///{tmp_path / 'connections.db'}")
    TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)
    Base.metadata.create_all(bind=engine)
    session = TestingSessionLocal()
    for user_id, name in ((1, "Alex"), (2, "Blair"), (3, "Casey")):
        session.add(User(id=user_id, email=f"u{user_id}@example.com", name=name, hashed_password="x"))
    session.commit()
    yield session
    session.close()
    engine.dispose()


@pytest.fixture
def clock():
    return FakeClock(T0)


@pytest.fixture
def service(db, clock):
    return ConnectionService(
        clock=clock,
        code_repo=ConnectionCodeRepository(db),
        connection_repo=SharedConnectionRepository(db),
        bill_repo=BillRepository(db),
        split_repo=BillSplitRepository(db),
        user_repo=UserRepository(db),
    )


def test_generated_code_is_uppercase_alphanumeric_and_expires_in_a_day(service, db):
    issued = service.generate_code(1, db)

    assert len(issued.code) == 6
    assert issued.code.isalnum() and issued.code == issued.code.upper()
    assert issued.used is False
    assert issued.expires_at.replace(tzinfo=timezone.utc) - T0 == timedelta(hours=24)
    assert service.validate_code(issued.code).status == CodeValidity.VALID


def test_code_is_single_use(service, db):
    issued = service.generate_code(1, db)

    connection = service.connect_with_code(issued.code, 2, db)
    assert connection.status == ConnectionStatus.PENDING

    result = service.validate_code(issued.code)
    assert result.status == CodeValidity.ALREADY_USED
    assert result.code.used_by == 2

    with pytest.raises(ConnectionCodeInvalidError) as exc:
        service.connect_with_code(issued.code, 3, db)
    assert exc.value.reason == "already_used"


def test_code_expires_after_ttl_even_if_never_used(service, db, clock):
    issued = service.generate_code(1, db)

    clock.now = T0 + timedelta(hours=25)
    assert service.validate_code(issued.code).status == CodeValidity.EXPIRED

    with pytest.raises(ConnectionCodeInvalidError) as exc:
        service.connect_with_code(issued.code, 2, db)
    assert exc.value.reason == "expired"
    assert service.get_connection(2) is None


def test_expiry_wins_over_consumption(service, db, clock):
    issued = service.generate_code(1, db)
    service.connect_with_code(issued.code, 2, db)

    clock.now = T0 + timedelta(hours=24, seconds=1)
    assert service.validate_code(issued.code).status == CodeValidity.EXPIRED


def test_unknown_code_is_not_found(service):
    assert service.validate_code("NOPE42").status == CodeValidity.NOT_FOUND


def test_lowercase_code_is_accepted(service, db):
    issued = service.generate_code(1, db)
    connection = service.connect_with_code(issued.code.lower(), 2, db)
    assert connection.user_id_1 == 1
    assert connection.user_id_2 == 2


def test_pending_until_both_sides_accept(service, db):
    issued = service.generate_code(1, db)
    connection = service.connect_with_code(issued.code, 2, db)

    assert connection.user_1_accepted is True
    assert connection.user_2_accepted is False
    assert connection.partner_name == "Alex"
    assert service.get_connection(1).partner_name == "Blair"
    assert service.get_active_connection(1) is None

    # Re-accepting the already accepted side changes nothing
    again = service.accept_connection(1, db)
    assert again.status == ConnectionStatus.PENDING

    active = service.accept_connection(2, db)
    assert active.status == ConnectionStatus.ACTIVE
    assert active.user_1_accepted and active.user_2_accepted
    assert active.partner_name == "Alex"
    assert service.get_active_connection(1) is not None


def test_disconnect_is_symmetric(service, db):
    issued = service.generate_code(1, db)
    service.connect_with_code(issued.code, 2, db)
    service.accept_connection(2, db)

    assert service.disconnect(2, db) is True

    assert service.get_connection(1) is None
    assert service.get_connection(2) is None
    assert service.disconnect(1, db) is False


def test_cannot_redeem_own_code(service, db):
    issued = service.generate_code(1, db)

    with pytest.raises(SelfConnectionError):
        service.connect_with_code(issued.code, 1, db)
    # The rejected join left the code redeemable
    assert service.validate_code(issued.code).status == CodeValidity.VALID


def test_one_connection_per_user(service, db):
    first = service.generate_code(1, db)
    service.connect_with_code(first.code, 2, db)

    second = service.generate_code(3, db)
    with pytest.raises(AlreadyConnectedError):
        service.connect_with_code(second.code, 2, db)


def test_accept_without_connection_raises(service, db):
    with pytest.raises(ConnectionNotFoundError):
        service.accept_connection(3, db)


def test_code_collision_is_rerolled(service, db, monkeypatch):
    taken = service.generate_code(1, db).code
    candidates = iter([taken, "FRESH1"])
    monkeypatch.setattr(
        "app.services.connection_services.generate_connection_code",
        lambda: next(candidates),
    )

    issued = service.generate_code(3, db)
    assert issued.code == "FRESH1"
