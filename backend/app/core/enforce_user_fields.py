"""User Field Enforcement — pure checks on user input before any store round-trip.

Invariants:
    - name and email must both be present and non-blank
    - name and email are at most NAME_MAX_LENGTH / EMAIL_MAX_LENGTH characters
    - path ids must be positive integers within the INTEGER column range; anything
      else is "not found", never a 500

Design Decisions:
    - Shared by routes and repository: shape is checked twice (ADR: defense in depth)
    - Over-long values are validation errors, not store errors (ADR: consistent 400s)
    - Values are stored exactly as given; blank-only strings count as empty
"""

from app.core.domain_types import (
    EMAIL_MAX_LENGTH, NAME_MAX_LENGTH, USER_ID_MAX, UserId,
)
from app.core.errors import UserNotFoundError, UserValidationError

REQUIRED_MESSAGE = "Name and email are required"


def check_user_fields(name: str | None, email: str | None) -> None:
    """Raise UserValidationError unless name/email are acceptable."""
    if not _is_present(name) or not _is_present(email):
        missing = "name" if not _is_present(name) else "email"
        raise UserValidationError(REQUIRED_MESSAGE, missing)
    if len(name) > NAME_MAX_LENGTH:
        raise UserValidationError(
            f"Name must be at most {NAME_MAX_LENGTH} characters", "name",
        )
    if len(email) > EMAIL_MAX_LENGTH:
        raise UserValidationError(
            f"Email must be at most {EMAIL_MAX_LENGTH} characters", "email",
        )


def parse_user_id(raw: str) -> UserId:
    """Parse a path segment into a UserId, or raise UserNotFoundError."""
    if not raw.isascii() or not raw.isdigit():
        raise UserNotFoundError(raw)
    value = int(raw)
    if value <= 0 or value > USER_ID_MAX:
        raise UserNotFoundError(raw)
    return UserId(value)


def _is_present(value: str | None) -> bool:
    return isinstance(value, str) and bool(value.strip())
