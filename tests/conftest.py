"""Pytest configuration and fixtures for donorcrm.

Uses donorcrm.main:app for HTTP tests and
donorcrm.infrastructure.persistence.database for DB-dependent fixtures.
Engine unit tests use the in-memory fakes in tests/fakes.py.
"""

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession

from donorcrm.infrastructure.persistence.database import get_session_factory
from donorcrm.main import app
from tests.fakes import EngineHarness, FakeClock


@pytest.fixture
async def client() -> AsyncClient:
    """Async HTTP client against the FastAPI app (ASGI).

    ASGITransport does not run the lifespan, so app.state.automation_engine
    is unset; tests override dependencies they need.
    """
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
    app.dependency_overrides.clear()


@pytest.fixture
async def db_session() -> AsyncSession:
    """Database session for repository/integration tests. Rolls back after test.

    Requires DATABASE_URL. Skips (pytest.skip) when Postgres is not
    configured. Use @pytest.mark.requires_db to mark tests that need this
    fixture; run without DB via: pytest -m 'not requires_db'.
    """
    factory = get_session_factory()
    if factory is None:
        pytest.skip(
            "Postgres not configured: set DATABASE_URL, then run: alembic upgrade head"
        )
    async with factory() as session:
        yield session
        await session.rollback()


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def harness(clock: FakeClock) -> EngineHarness:
    """Engine wired to in-memory stores, recording providers and a fake clock."""
    return EngineHarness(clock)
