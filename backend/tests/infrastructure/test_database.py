"""Database session manager — error translation, pool bounds, health checks.

Invariants:
    - Driver/SQLAlchemy errors never escape session(); they become domain kinds
    - Unreachable store → StoreUnavailableError; health_check() → False, never raises
    - A waiter gets a connection as soon as a holder releases one
    - Pool acquisition past pool_timeout → StoreUnavailableError (no unbounded wait)
    - PostgreSQL statement_timeout cancellation → StoreUnavailableError
    - create_schema() is idempotent
"""

import asyncio

import pytest
from sqlalchemy import text
from sqlalchemy.exc import DBAPIError

from app.core.errors import (
    StoreUnavailableError, UnclassifiedFailureError, UserNotFoundError,
)
from app.infrastructure.database import DatabaseSessionManager, build_connect_args
from app.infrastructure.user_repository import SqlUserRepository

UNREACHABLE_URL = "sqlite+aiosqlite:////nonexistent-dir/missing/users.db"
INSERT_DUPLICATE = text(
    "INSERT INTO users (name, email) VALUES ('A', 'dup@example.com')",
)


async def test_session_executes_queries(db_manager):
    async with db_manager.session() as session:
        assert await session.scalar(text("SELECT 1")) == 1


async def test_domain_errors_pass_through_unchanged(db_manager):
    with pytest.raises(UserNotFoundError):
        async with db_manager.session():
            raise UserNotFoundError(1)


async def test_raw_integrity_errors_become_unclassified(db_manager):
    async with db_manager.session() as session:
        await session.execute(INSERT_DUPLICATE)
        await session.commit()

    with pytest.raises(UnclassifiedFailureError) as exc_info:
        async with db_manager.session() as session:
            await session.execute(INSERT_DUPLICATE)
    assert exc_info.value.http_status == 500


async def test_session_usable_after_failure(db_manager):
    with pytest.raises(UnclassifiedFailureError):
        async with db_manager.session() as session:
            await session.execute(text("SELECT :missing"))

    assert await db_manager.health_check() is True


async def test_unreachable_store_is_unavailable():
    manager = DatabaseSessionManager(UNREACHABLE_URL, connect_timeout=0.5)
    try:
        with pytest.raises(StoreUnavailableError):
            async with manager.session() as session:
                await session.execute(text("SELECT 1"))
    finally:
        await manager.close()


async def test_health_check_false_when_unreachable():
    manager = DatabaseSessionManager(UNREACHABLE_URL, connect_timeout=0.5)
    try:
        assert await manager.health_check() is False
    finally:
        await manager.close()


async def test_pool_exhaustion_surfaces_as_unavailable(tmp_path):
    manager = DatabaseSessionManager(
        f"sqlite+aiosqlite:///{tmp_path / 'pool.db'}",
        pool_size=1, pool_timeout=0.2,
    )
    try:
        async with manager.session() as holder:
            await holder.execute(text("SELECT 1"))
            with pytest.raises(StoreUnavailableError) as exc_info:
                async with manager.session() as waiter:
                    await waiter.execute(text("SELECT 1"))
            assert exc_info.value.operation == "acquire"
        # connection returned: pool usable again
        assert await manager.health_check() is True
    finally:
        await manager.close()


async def test_create_schema_is_idempotent(tmp_path):
    manager = DatabaseSessionManager(f"sqlite+aiosqlite:///{tmp_path / 'schema.db'}")
    try:
        await manager.create_schema()
        await manager.create_schema()
        async with manager.session() as session:
            assert await session.scalar(text("SELECT count(*) FROM users")) == 0
    finally:
        await manager.close()


async def test_create_schema_unreachable_raises_unavailable():
    manager = DatabaseSessionManager(UNREACHABLE_URL, connect_timeout=0.5)
    try:
        with pytest.raises(StoreUnavailableError):
            await manager.create_schema()
    finally:
        await manager.close()


def test_connect_args_carry_postgres_timeouts():
    args = build_connect_args("postgresql+asyncpg://u:p@h/db", 10.0, 5.0)
    assert args["timeout"] == 5.0
    assert args["command_timeout"] == 10.0
    assert args["server_settings"] == {"statement_timeout": "10000"}


def test_connect_args_for_sqlite():
    assert build_connect_args("sqlite+aiosqlite:///x.db", 10.0, 2.0) == {"timeout": 2.0}


async def test_waiter_gets_connection_once_holder_releases(tmp_path):
    manager = DatabaseSessionManager(
        f"sqlite+aiosqlite:///{tmp_path / 'wait.db'}",
        pool_size=1, pool_timeout=2.0,
    )
    holding = asyncio.Event()

    async def hold():
        async with manager.session() as session:
            await session.execute(text("SELECT 1"))
            holding.set()
            await asyncio.sleep(0.2)

    async def wait():
        await holding.wait()
        async with manager.session() as session:
            return await session.scalar(text("SELECT 1"))

    try:
        _, result = await asyncio.gather(hold(), wait())
        assert result == 1
    finally:
        await manager.close()


async def test_more_concurrent_requests_than_pool_size_all_succeed(tmp_path):
    manager = DatabaseSessionManager(
        f"sqlite+aiosqlite:///{tmp_path / 'burst.db'}",
        pool_size=3, pool_timeout=5.0,
    )
    try:
        await manager.create_schema()
        repo = SqlUserRepository(manager)

        created = await asyncio.gather(*(
            repo.create_user(f"User {i}", f"user{i}@example.com")
            for i in range(12)
        ))
        listings = await asyncio.gather(*(repo.list_users() for _ in range(6)))

        assert len({u.id for u in created}) == 12
        for users in listings:
            assert [u.id for u in users] == sorted(u.id for u in created)
    finally:
        await manager.close()


class _DriverError(Exception):
    def __init__(self, message: str, sqlstate: str):
        super().__init__(message)
        self.sqlstate = sqlstate


async def test_statement_timeout_is_unavailable(db_manager):
    canceled = _DriverError("canceling statement due to statement timeout", "57014")

    with pytest.raises(StoreUnavailableError) as exc_info:
        async with db_manager.session():
            raise DBAPIError("SELECT pg_sleep(60)", None, canceled)

    assert exc_info.value.operation == "query"
    assert exc_info.value.http_status == 503


async def test_other_driver_errors_stay_unclassified(db_manager):
    missing = _DriverError('relation "users" does not exist', "42P01")

    with pytest.raises(UnclassifiedFailureError):
        async with db_manager.session():
            raise DBAPIError("SELECT * FROM users", None, missing)
