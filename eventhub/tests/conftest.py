import os

# Must be set before the app is imported
os.environ["STORAGE_BACKEND"] = "memory"

import fakeredis
import pytest
from fastapi.testclient import TestClient
from sqlalchemy import Engine, StaticPool, create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.orm.session import Session

from eventhub.database.db import Base
from eventhub.database.memory_store import InMemoryEventStore
from eventhub.database.sql_store import SqlEventStore
from eventhub.database.store import get_store
from eventhub.main import app

# Import models so that they register with Base.metadata
from eventhub.models import attendees, events  # noqa: F401

# Use an in-memory SQLite database for testing
SQLALCHEMY_DATABASE_URL = "sqlite:///:memory:"


@pytest.fixture
def engine():
    """Fresh schema for every test."""
    engine: Engine = create_engine(
        SQLALCHEMY_DATABASE_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    yield engine
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(autoflush=False, bind=engine)


@pytest.fixture
def db_session(session_factory):
    db: Session = session_factory()
    try:
        yield db
    finally:
        db.close()


@pytest.fixture
def fake_redis():
    return fakeredis.FakeRedis(server=fakeredis.FakeServer(), decode_responses=True)


@pytest.fixture
def memory_store():
    return InMemoryEventStore()


@pytest.fixture
def sql_store(session_factory, fake_redis):
    return SqlEventStore(session_factory, fake_redis)


@pytest.fixture(params=["memory", "sql"])
def store(request):
    """Run the test against both storage backends."""
    return request.getfixturevalue(f"{request.param}_store")


@pytest.fixture
def client(store):
    app.dependency_overrides[get_store] = lambda: store
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides = {}


@pytest.fixture
def event_payload():
    return {
        "activity": "Morning Run",
        "date": "2024-05-01T10:00:00Z",
        "location": "Central Park",
        "instagramUsername": "runner_host",
    }
