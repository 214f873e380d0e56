"""SQL User Repository — UserRepository over the pooled async session manager.

Invariants:
    - Fields are checked before a connection is acquired (no wasted round-trip)
    - Each write is a single statement (INSERT/UPDATE/DELETE ... RETURNING); no read-then-write
    - Unique-violation on email surfaces as EmailConflictError; the store decides
    - Returns UserRecord values only; ORM objects never escape this module

Design Decisions:
    - No application-level locking: concurrent writers to one row get whatever the
      store commits (ADR: row-level last-committed-wins)
    - No retries: conflicts and outages are reported, the caller decides
"""

import logging

from sqlalchemy import delete, insert, select, update
from sqlalchemy.exc import IntegrityError

from app.core.domain_types import UserId, UserRecord
from app.core.enforce_user_fields import check_user_fields
from app.core.errors import EmailConflictError, UserNotFoundError
from app.infrastructure.database import DatabaseSessionManager
from app.models.user import User

logger = logging.getLogger(__name__)


class SqlUserRepository:
    """User persistence backed by the relational store."""

    def __init__(self, db: DatabaseSessionManager):
        self._db = db

    async def list_users(self) -> list[UserRecord]:
        async with self._db.session() as session:
            result = await session.scalars(select(User).order_by(User.id.asc()))
            return [user.to_record() for user in result.all()]

    async def get_user(self, user_id: UserId) -> UserRecord:
        async with self._db.session() as session:
            user = await session.get(User, user_id)
            if user is None:
                raise UserNotFoundError(user_id)
            return user.to_record()

    async def create_user(self, name: str, email: str) -> UserRecord:
        check_user_fields(name, email)
        async with self._db.session() as session:
            try:
                result = await session.scalars(
                    insert(User).returning(User),
                    [{"name": name, "email": email}],
                )
                user = result.one()
                await session.commit()
            except IntegrityError as e:
                raise EmailConflictError(email) from e
            logger.info("User created", extra={"user_id": user.id})
            return user.to_record()

    async def update_user(
        self, user_id: UserId, name: str, email: str,
    ) -> UserRecord:
        check_user_fields(name, email)
        stmt = (
            update(User)
            .where(User.id == user_id)
            .values(name=name, email=email)
            .returning(User)
        )
        async with self._db.session() as session:
            try:
                result = await session.scalars(stmt)
                user = result.one_or_none()
                if user is None:
                    raise UserNotFoundError(user_id)
                await session.commit()
            except IntegrityError as e:
                raise EmailConflictError(email) from e
            logger.info("User updated", extra={"user_id": user.id})
            return user.to_record()

    async def delete_user(self, user_id: UserId) -> None:
        async with self._db.session() as session:
            result = await session.execute(
                delete(User).where(User.id == user_id).returning(User.id),
            )
            if result.scalar_one_or_none() is None:
                raise UserNotFoundError(user_id)
            await session.commit()
        logger.info("User deleted", extra={"user_id": user_id})

    async def health_check(self) -> bool:
        return await self._db.health_check()
