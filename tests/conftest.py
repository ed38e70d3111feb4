"""
Shared test fixtures.

Sets up an isolated test database so tests never touch
the real database. Every test starts with freshly created
tables, which are dropped again afterwards.
"""

from datetime import datetime, timezone

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

from ledger_core.context import UseCaseContext
from ledger_core.main import app
from ledger_core.models.base import Base, get_db
from ledger_core.ports import Clock
from ledger_core.wiring import build_accounting_application


# SQLite test database, no external server needed.
TEST_DATABASE_URL = "sqlite:///./test.db"

engine = create_engine(
    TEST_DATABASE_URL,
    connect_args={"check_same_thread": False},
)

TestSessionLocal = sessionmaker(
    bind=engine,
    autocommit=False,
    autoflush=False,
)

FIXED_NOW = datetime(2025, 3, 15, 12, 0, tzinfo=timezone.utc)


class FixedClock(Clock):
    """Clock that always answers the same instant."""

    def __init__(self, now: datetime = FIXED_NOW):
        self._now = now

    def now(self) -> datetime:
        return self._now


@pytest.fixture(autouse=True)
def setup_database():
    """
    Create all tables before each test, drop them after.

    autouse=True means every test gets this automatically.
    """
    Base.metadata.create_all(bind=engine)
    yield
    Base.metadata.drop_all(bind=engine)


@pytest.fixture
def db_session():
    """Provide a database session for direct service testing."""
    session = TestSessionLocal()
    try:
        yield session
    finally:
        session.rollback()
        session.close()


@pytest.fixture
def clock():
    return FixedClock()


@pytest.fixture
def app_service(db_session, clock):
    """AccountingApplication over the test session, with a fixed clock."""
    return build_accounting_application(db_session, clock=clock)


@pytest.fixture
def ctx():
    return UseCaseContext(tenant_id="tenant-a", user_id="user-1")


@pytest.fixture
def other_ctx():
    return UseCaseContext(tenant_id="tenant-b", user_id="user-2")


@pytest.fixture
def client(db_session):
    """
    Provide a test client with the test database.

    We override the get_db dependency so the FastAPI app
    uses our test session instead of the real database.
    """
    def override_get_db():
        try:
            yield db_session
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def open_session():
    """
    Open extra sessions on the test database, each with its own
    connection. Used to run two requests against each other.
    """
    sessions = []

    def factory():
        session = TestSessionLocal()
        sessions.append(session)
        return session

    yield factory
    for session in sessions:
        session.rollback()
        session.close()
