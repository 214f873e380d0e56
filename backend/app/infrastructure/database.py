"""Database Session Manager — bounded async connection pool with error translation and health checks.

Invariants:
    - At most pool_size connections exist (max_overflow=0); waiters suspend, never spin
    - Every session rolls back on failure and is closed on every exit path (no leaked connections)
    - No SQLAlchemy/driver/socket exception escapes session(): all become UserServiceError kinds
    - health_check() never raises

Design Decisions:
    - Owned by the app lifespan and stored on app.state, not a module singleton
      (ADR: injectable pool, testable handlers)
    - Timeouts bound every wait: pool_timeout for acquisition, connect timeout for
      connection setup, statement_timeout/command_timeout for queries
    - expire_on_commit=False: prevents lazy-load issues in async context
"""

import logging
from contextlib import asynccontextmanager
from typing import AsyncGenerator

from sqlalchemy import text
from sqlalchemy.exc import (
    DBAPIError,
    IntegrityError,
    InterfaceError,
    OperationalError,
    SQLAlchemyError,
    TimeoutError as PoolTimeoutError,
)
from sqlalchemy.ext.asyncio import (
    AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine,
)

from app.core.errors import (
    StoreUnavailableError, UnclassifiedFailureError, UserServiceError,
)
from app.db.base import Base
from app.models import User  # noqa: F401  (populates Base.metadata)

logger = logging.getLogger(__name__)

QUERY_CANCELED_SQLSTATE = "57014"


def build_connect_args(
    database_url: str, query_timeout: float, connect_timeout: float,
) -> dict:
    """Driver-specific connection arguments carrying the timeout bounds."""
    if database_url.startswith("postgresql+asyncpg"):
        return {
            "timeout": connect_timeout,
            "command_timeout": query_timeout,
            "server_settings": {
                "statement_timeout": str(int(query_timeout * 1000)),
            },
        }
    if database_url.startswith("sqlite"):
        return {"timeout": connect_timeout}
    return {}


class DatabaseSessionManager:
    """Manages async database sessions with pooling, rollback, and health checks."""

    def __init__(
        self,
        database_url: str,
        pool_size: int = 10,
        pool_timeout: float = 5.0,
        query_timeout: float = 10.0,
        connect_timeout: float = 5.0,
    ):
        engine = create_async_engine(
            database_url,
            pool_size=pool_size,
            max_overflow=0,
            pool_timeout=pool_timeout,
            pool_pre_ping=True,
            pool_recycle=3600,
            connect_args=build_connect_args(
                database_url, query_timeout, connect_timeout,
            ),
        )
        self._bind(engine)

    @classmethod
    def from_engine(cls, engine: AsyncEngine) -> "DatabaseSessionManager":
        """Wrap an engine built elsewhere (tests, scripts)."""
        manager = cls.__new__(cls)
        manager._bind(engine)
        return manager

    def _bind(self, engine: AsyncEngine) -> None:
        self.engine = engine
        self._session_factory = async_sessionmaker(
            engine,
            class_=AsyncSession,
            expire_on_commit=False,
        )

    @asynccontextmanager
    async def session(self) -> AsyncGenerator[AsyncSession, None]:
        """Provide session with auto-rollback and error translation."""
        session = self._session_factory()
        try:
            yield session
        except UserServiceError:
            await _rollback(session)
            raise
        except PoolTimeoutError as e:
            logger.error(f"DB pool exhausted: {e}", extra={"operation": "acquire"})
            raise StoreUnavailableError("acquire", "Database connection pool exhausted") from e
        except (OperationalError, InterfaceError) as e:
            await _rollback(session)
            logger.error(f"DB operational error: {e}", extra={"operation": "execute"})
            raise StoreUnavailableError("execute") from e
        except IntegrityError as e:
            await _rollback(session)
            logger.error(f"DB integrity error: {e}", extra={"operation": "commit"})
            raise UnclassifiedFailureError("commit", str(e)) from e
        except DBAPIError as e:
            await _rollback(session)
            if _is_statement_timeout(e):
                logger.error(f"DB query timed out: {e}", extra={"operation": "query"})
                raise StoreUnavailableError("query", "Database query timed out") from e
            logger.error(f"DB driver error: {e}", extra={"operation": "query"})
            raise UnclassifiedFailureError("query", str(e)) from e
        except SQLAlchemyError as e:
            await _rollback(session)
            logger.error(f"SQLAlchemy error: {e}", extra={"operation": "unknown"})
            raise UnclassifiedFailureError("unknown", str(e)) from e
        except (OSError, TimeoutError) as e:
            # asyncpg surfaces refused connections and timeouts unwrapped
            logger.error(f"DB unreachable: {e!r}", extra={"operation": "connect"})
            raise StoreUnavailableError("connect") from e
        finally:
            await session.close()

    async def health_check(self) -> bool:
        """Check database connectivity (for readiness checks)."""
        try:
            async with self.session() as db:
                await db.execute(text("SELECT 1"))
            return True
        except Exception as e:
            logger.error(f"DB health check failed: {e}")
            return False

    async def create_schema(self) -> None:
        """Create missing tables. Bootstrap only — not a migration system."""
        try:
            async with self.engine.begin() as conn:
                await conn.run_sync(Base.metadata.create_all)
        except (SQLAlchemyError, OSError, TimeoutError) as e:
            raise StoreUnavailableError("create_schema") from e

    async def close(self) -> None:
        """Dispose the pool. Checked-out connections are closed on return."""
        await self.engine.dispose()


def _is_statement_timeout(error: DBAPIError) -> bool:
    """PostgreSQL query_canceled (statement_timeout), which asyncpg reports as a generic Error."""
    return getattr(error.orig, "sqlstate", None) == QUERY_CANCELED_SQLSTATE


async def _rollback(session: AsyncSession) -> None:
    """Roll back, keeping the original failure as the one reported."""
    try:
        await session.rollback()
    except (SQLAlchemyError, OSError) as e:
        logger.warning(f"DB rollback failed: {e}")
