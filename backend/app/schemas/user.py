"""User Schemas — Pydantic models for the /api/users wire contract.

Invariants:
    - UserPayload accepts missing fields (None) so emptiness is reported as a 400 with
      a domain message, not a framework-shaped error
    - Non-string name/email values are rejected by Pydantic (no int → str coercion)
    - UserResponse.created_at serializes as ISO-8601

Design Decisions:
    - Presence/length rules live in core/enforce_user_fields.py, shared with the
      repository (ADR: single source of validation rules)
"""

from datetime import datetime

from pydantic import BaseModel, ConfigDict

from app.core.domain_types import UserRecord


class UserPayload(BaseModel):
    """Create/update body."""
    name: str | None = None
    email: str | None = None


class UserResponse(BaseModel):
    """Public user representation."""
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    email: str
    created_at: datetime

    @classmethod
    def from_record(cls, record: UserRecord) -> "UserResponse":
        return cls.model_validate(record)


class MessageResponse(BaseModel):
    message: str


class HealthResponse(BaseModel):
    status: str
    message: str
