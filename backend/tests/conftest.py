# backend/tests/conftest.py

import json
from datetime import date
from itertools import count

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine, event
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from roombook.database import enable_sqlite_fk, get_db
from roombook.models import Base
from roombook.services.scheduler import (
    Booking,
    BookingStatus,
    BookingTemplate,
    SchedulerConfig,
)


class FakeRedis:
    """Records rpush calls instead of talking to a server."""

    def __init__(self):
        self.queues: dict[str, list[str]] = {}

    def rpush(self, key, value):
        self.queues.setdefault(key, []).append(value)
        return len(self.queues[key])

    def ping(self):
        return True

    def events(self, key="events:p2p") -> list[dict]:
        return [json.loads(v) for v in self.queues.get(key, [])]


@pytest.fixture
def config():
    return SchedulerConfig(horizon_months=6, max_occurrences=400)


@pytest.fixture
def ids():
    """Deterministic id factory: id-1, id-2, ..."""
    counter = count(1)
    return lambda: f"id-{next(counter)}"


@pytest.fixture
def template():
    return BookingTemplate(
        room_ids=(1,),
        requester_id="u-1",
        start_time="09:00",
        end_time="10:00",
        event_name="Standup",
    )


def _make_booking(
    id="b-1",
    room_id=1,
    on_date=date(2025, 1, 6),
    start="09:00",
    end="10:00",
    status=BookingStatus.PENDING,
    group_id=None,
    parent_id=None,
) -> Booking:
    return Booking(
        id=id,
        room_id=room_id,
        date=on_date,
        start_time=start,
        end_time=end,
        requester_id="u-1",
        event_name="Existing",
        status=status,
        booking_group_id=group_id,
        parent_booking_id=parent_id,
    )


@pytest.fixture
def make_booking():
    return _make_booking


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    event.listen(engine, "connect", enable_sqlite_fk)
    Base.metadata.create_all(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture
def db_session(session_factory):
    db = session_factory()
    yield db
    db.close()


@pytest.fixture
def fake_redis(monkeypatch):
    fake = FakeRedis()
    monkeypatch.setattr("roombook.services.events.redis_client", fake)
    return fake


@pytest.fixture
def client(session_factory, fake_redis, monkeypatch):
    from roombook.main import app

    monkeypatch.setattr("roombook.main.redis_client", fake_redis)

    def override_get_db():
        db = session_factory()
        try:
            yield db
        finally:
            db.close()

    app.dependency_overrides[get_db] = override_get_db
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()
