"""User ORM — the single persisted resource.

Invariants:
    - id is an autoincrement integer primary key, never reused after deletion
    - email carries a UNIQUE constraint: the store is the authority on duplicates
    - created_at is assigned by the store at insertion and never updated

Design Decisions:
    - server_default=now() over a Python default: timestamp comes from the store
    - sqlite_autoincrement: SQLite otherwise recycles the highest deleted rowid
"""

from datetime import datetime

from sqlalchemy import DateTime, Integer, String, func
from sqlalchemy.orm import Mapped, mapped_column

from app.core.domain_types import EMAIL_MAX_LENGTH, NAME_MAX_LENGTH, UserId, UserRecord
from app.db.base import Base


class User(Base):
    """User row."""
    __tablename__ = "users"
    __table_args__ = {"sqlite_autoincrement": True}

    id: Mapped[int] = mapped_column(
        Integer, primary_key=True, autoincrement=True,
    )
    name: Mapped[str] = mapped_column(String(NAME_MAX_LENGTH), nullable=False)
    email: Mapped[str] = mapped_column(
        String(EMAIL_MAX_LENGTH), nullable=False, unique=True,
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
    )

    def to_record(self) -> UserRecord:
        return UserRecord(
            id=UserId(self.id),
            name=self.name,
            email=self.email,
            created_at=self.created_at,
        )
