"""Pytest configuration and fixtures for backend tests.

Database Handling:
- The relational stores run against an in-memory SQLite database (aiosqlite)
  sharing one connection through StaticPool, fresh for every test
- Store contract tests run once per backend (in-memory and SQL)
- Time is controlled through FakeClock so expiry can be tested without sleeping
"""

import os
from collections.abc import AsyncGenerator
from datetime import UTC, datetime, timedelta

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

# Set test environment variables before importing app modules
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite://")
os.environ.setdefault("ENABLE_METRICS", "false")

TEST_DATABASE_URL = "sqlite+aiosqlite://"


class FakeClock:
    """A controllable UTC clock. Call it to read, ``advance`` to move it."""

    def __init__(self, start: datetime | None = None):
        self.now = start or datetime(2026, 1, 1, 12, 0, tzinfo=UTC)

    def __call__(self) -> datetime:
        return self.now

    def advance(self, delta: timedelta) -> None:
        self.now += delta


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


# --- Database Fixtures ---


@pytest_asyncio.fixture(scope="function")
async def db_engine():
    """Create an in-memory SQLite engine with all tables."""
    from sessionstore.core import Base
    from sessionstore.models import SessionRecord, UserRecord  # noqa: F401

    engine = create_async_engine(TEST_DATABASE_URL, poolclass=StaticPool, echo=False)

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)

    await engine.dispose()


@pytest.fixture
def session_maker(db_engine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(db_engine, class_=AsyncSession, expire_on_commit=False)


# --- Store Fixtures ---


@pytest.fixture(params=["memory", "sql"])
def session_store(request, clock, session_maker):
    """Each contract test runs against both SessionStore implementations."""
    from sessionstore.stores import InMemorySessionStore, SQLSessionStore

    if request.param == "memory":
        return InMemorySessionStore(clock=clock)
    return SQLSessionStore(session_maker, clock=clock)


@pytest.fixture(params=["memory", "sql"])
def user_store(request, session_maker):
    from sessionstore.stores import InMemoryUserStore, SQLUserStore

    if request.param == "memory":
        return InMemoryUserStore()
    return SQLUserStore(session_maker)


@pytest.fixture
def session_factory(clock):
    """Build unsaved sessions relative to the fake clock."""
    from sessionstore.domain import Session

    def _make(
        idle: timedelta = timedelta(hours=1),
        lifetime: timedelta = timedelta(hours=24),
        credentials: bytes = b"\x00encrypted\xff",
    ) -> Session:
        return Session.new(credentials, idle_timeout=idle, max_lifetime=lifetime, now=clock())

    return _make


# --- Application Fixtures ---


@pytest.fixture
def test_settings():
    from sessionstore.core import Settings

    return Settings(
        database_url=TEST_DATABASE_URL,
        enable_metrics=False,
        log_format="dev",
        session_idle_timeout_minutes=60,
        session_max_lifetime_hours=24,
    )


@pytest.fixture
def app(test_settings, session_maker, clock):
    """Application wired to the test database and clock.

    ASGITransport does not run the lifespan, so state is configured here and
    the reaper is never started.
    """
    from sessionstore.main import configure_state, create_app

    application = create_app(test_settings)
    configure_state(application, session_maker, clock=clock)
    return application


@pytest_asyncio.fixture(scope="function")
async def async_client(app) -> AsyncGenerator[AsyncClient, None]:
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client


@pytest_asyncio.fixture(scope="function")
async def logged_in(async_client) -> dict[str, str]:
    """Headers carrying a fresh session id."""
    response = await async_client.post(
        "/login/", json={"encrypted_credentials": "c2VjcmV0LWJsb2I="}
    )
    assert response.status_code == 201
    return {"X-Session-ID": str(response.json()["session_id"])}
