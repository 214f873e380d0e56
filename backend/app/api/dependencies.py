"""Dependency Injection — hands the pooled repository to route handlers.

Invariants:
    - The DatabaseSessionManager lives on app.state (set by the lifespan), never a module global
    - Routes receive a UserRepository, so tests swap it via app.dependency_overrides

Design Decisions:
    - app.state + request lookup over a singleton (ADR: explicit ownership of the pool)
    - Missing manager reports Unavailable (503): the process is up but has no store
"""

from typing import Annotated

from fastapi import Depends, Request

from app.core.errors import StoreUnavailableError
from app.core.repository_protocols import UserRepository
from app.infrastructure.database import DatabaseSessionManager
from app.infrastructure.user_repository import SqlUserRepository


def get_db_manager(request: Request) -> DatabaseSessionManager:
    """Session manager from app.state."""
    manager = getattr(request.app.state, "db_manager", None)
    if manager is None:
        raise StoreUnavailableError("dependency", "Database not initialized")
    return manager


def get_user_repository(
    db: Annotated[DatabaseSessionManager, Depends(get_db_manager)],
) -> UserRepository:
    return SqlUserRepository(db)


UserRepositoryDep = Annotated[UserRepository, Depends(get_user_repository)]
