"""Domain Types — identity and value types for the user resource.

Invariants:
    - UserId wraps the store-assigned integer key — never reused after deletion
    - UserRecord is immutable; ORM rows never leave the data access layer
    - ErrorKind is the closed set of non-success outcomes

Design Decisions:
    - NewType over dataclass wrapper for ids: zero runtime cost (ADR: simplicity)
    - Frozen dataclass for UserRecord: the in-memory fake and the SQL repository
      return the same type, so routes never depend on SQLAlchemy
"""

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import NewType


# ─── Identity Types ──────────────────────────────────────────────

UserId = NewType("UserId", int)


# ─── Limits ──────────────────────────────────────────────────────

NAME_MAX_LENGTH = 100
EMAIL_MAX_LENGTH = 100
USER_ID_MAX = 2**31 - 1  # users.id is INTEGER (int4)


# ─── Values ──────────────────────────────────────────────────────

@dataclass(frozen=True)
class UserRecord:
    """A persisted user as read back from the store."""
    id: UserId
    name: str
    email: str
    created_at: datetime


# ─── Enums ───────────────────────────────────────────────────────

class ErrorKind(str, Enum):
    """Domain error kinds — everything the data access layer may report besides success."""
    VALIDATION = "validation"
    CONFLICT = "conflict"
    NOT_FOUND = "not_found"
    UNAVAILABLE = "unavailable"
    UNCLASSIFIED = "unclassified"
