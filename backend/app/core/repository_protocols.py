"""Boundary Protocols — contract between the request handlers and the data store.

Invariants:
    - Routes depend on UserRepository, never on SQLAlchemy types
    - Each method raises only the error kinds listed in its docstring
    - No implementation caches User state between calls

Design Decisions:
    - Protocol over ABC: structural subtyping, so the in-memory test fake needs no
      inheritance (ADR: testable core)
    - Async methods: implementations do IO on a shared pool
"""

from typing import Protocol

from app.core.domain_types import UserId, UserRecord


class UserRepository(Protocol):
    """Contract for user persistence — implemented by infrastructure."""

    async def list_users(self) -> list[UserRecord]:
        """All users ordered by id ascending. Raises: Unavailable, Unclassified."""
        ...

    async def get_user(self, user_id: UserId) -> UserRecord:
        """Raises: NotFound, Unavailable, Unclassified."""
        ...

    async def create_user(self, name: str, email: str) -> UserRecord:
        """Raises: Validation, Conflict, Unavailable, Unclassified."""
        ...

    async def update_user(
        self, user_id: UserId, name: str, email: str,
    ) -> UserRecord:
        """Raises: NotFound, Validation, Conflict, Unavailable, Unclassified."""
        ...

    async def delete_user(self, user_id: UserId) -> None:
        """Raises: NotFound, Unavailable, Unclassified."""
        ...

    async def health_check(self) -> bool:
        """True when the store answers a trivial query. Never raises."""
        ...
