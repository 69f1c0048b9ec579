# ============================================================================
# FILE: test/conftest.py
# Shared fixtures for ALL test suites
# ============================================================================

import os
import sys
from pathlib import Path

# Add project root to Python path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

# Keep test runs from writing log files into the repo
os.environ.setdefault("LOG_TO_FILE", "false")

import pytest
from sqlalchemy.orm import sessionmaker
from fastapi.testclient import TestClient

TEST_DATABASE_URL = os.getenv("TEST_DATABASE_URL", "sqlite://")

from api.app import create_app
from companion_policy.gate import (
    RegenerationGate,
    InMemoryGenerationStateStore,
    SqlGenerationStateStore,
)
from db.db import build_engine, get_db
from db.models.base import Base
import db.models  # noqa: F401

START_MS = 1_735_689_600_000  # 2025-01-01T00:00:00Z
MINUTE_MS = 60 * 1000


class FakeClock:
    """Controllable epoch-millis clock."""

    def __init__(self, start_ms: int = START_MS):
        self.now = start_ms

    def __call__(self) -> int:
        return self.now

    def advance(self, ms: int = 0, minutes: float = 0, seconds: float = 0) -> int:
        self.now += int(ms + minutes * MINUTE_MS + seconds * 1000)
        return self.now


@pytest.fixture
def clock():
    """Fresh fake clock starting at 2025-01-01."""
    return FakeClock()


@pytest.fixture
def memory_store(clock):
    """Isolated in-memory store sharing the fake clock."""
    return InMemoryGenerationStateStore(clock=clock)


@pytest.fixture
def gate(memory_store, clock):
    """Gate with default thresholds (5 minutes / 10 messages)."""
    return RegenerationGate(store=memory_store, clock=clock)


@pytest.fixture(scope="session")
def test_engine():
    """Create test database engine (session-scoped, reused)."""
    return build_engine(TEST_DATABASE_URL)


@pytest.fixture(scope="session")
def setup_test_database(test_engine):
    """Setup test database schema once per test session."""
    Base.metadata.drop_all(bind=test_engine)
    Base.metadata.create_all(bind=test_engine)

    yield

    Base.metadata.drop_all(bind=test_engine)


@pytest.fixture
def session_factory(test_engine, setup_test_database):
    """Session factory on the test engine; table emptied after each test."""
    factory = sessionmaker(bind=test_engine, autocommit=False, autoflush=False)

    yield factory

    with test_engine.begin() as connection:
        for table in reversed(Base.metadata.sorted_tables):
            connection.execute(table.delete())


@pytest.fixture
def sql_store(session_factory, clock):
    """Database-backed store on the test engine."""
    return SqlGenerationStateStore(session_factory, ttl_seconds=3600, clock=clock)


@pytest.fixture
def app(gate, session_factory):
    """FastAPI app serving the test gate, with get_db bound to the test engine."""
    application = create_app(gate=gate)

    def override_get_db():
        db = session_factory()
        try:
            yield db
        finally:
            db.close()

    application.dependency_overrides[get_db] = override_get_db
    return application


@pytest.fixture
def client(app):
    """Provide FastAPI test client."""
    with TestClient(app) as test_client:
        yield test_client
