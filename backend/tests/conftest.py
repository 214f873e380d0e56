"""Root conftest — shared test configuration and fixtures.

Invariants:
    - Every test gets a fresh in-memory SQLite database
    - Route tests override get_user_repository; the app lifespan never runs
    - Tests never reach a real PostgreSQL instance

Design Decisions:
    - SQLite in-memory: fast, no external dependency, enforces UNIQUE and RETURNING
      like the production store (ADR: PostgreSQL-specific features not exercised)
    - Two clients: `client` (SQL-backed) and `fake_client` (InMemoryUserRepository)
"""

import os

# Ensure tests don't accidentally use a real database
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///test.db")
os.environ.setdefault("LOG_FORMAT", "text")

import pytest  # noqa: E402
from httpx import ASGITransport, AsyncClient  # noqa: E402
from sqlalchemy.ext.asyncio import create_async_engine  # noqa: E402

from app.api.dependencies import get_user_repository  # noqa: E402
from app.db.base import Base  # noqa: E402
from app.infrastructure.database import DatabaseSessionManager  # noqa: E402
from app.infrastructure.user_repository import SqlUserRepository  # noqa: E402
from app.main import app  # noqa: E402
from tests.fakes import InMemoryUserRepository  # noqa: E402


@pytest.fixture
async def test_engine():
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:", echo=False,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    await engine.dispose()


@pytest.fixture
def db_manager(test_engine):
    return DatabaseSessionManager.from_engine(test_engine)


@pytest.fixture
def repository(db_manager):
    return SqlUserRepository(db_manager)


@pytest.fixture
def fake_repository():
    return InMemoryUserRepository()


async def _client_for(repo):
    app.dependency_overrides[get_user_repository] = lambda: repo
    try:
        async with AsyncClient(
            transport=ASGITransport(app=app), base_url="http://test",
        ) as c:
            yield c
    finally:
        app.dependency_overrides.clear()


@pytest.fixture
async def client(repository):
    """FastAPI test client backed by the SQLite repository."""
    async for c in _client_for(repository):
        yield c


@pytest.fixture
async def fake_client(fake_repository):
    """FastAPI test client backed by the in-memory repository."""
    async for c in _client_for(fake_repository):
        yield c
