"""SQLAlchemy Declarative Base — shared base class and metadata for ORM models.

Invariants:
    - All models inherit from Base
    - Constraint names are deterministic (uq_users_email, pk_users) across PostgreSQL and SQLite

Design Decisions:
    - Separate file for Base: avoids circular imports between models (ADR: SQLAlchemy best practice)
"""

from sqlalchemy import MetaData
from sqlalchemy.orm import DeclarativeBase

NAMING_CONVENTION = {
    "ix": "ix_%(column_0_label)s",
    "uq": "uq_%(table_name)s_%(column_0_name)s",
    "ck": "ck_%(table_name)s_%(constraint_name)s",
    "pk": "pk_%(table_name)s",
}


class Base(DeclarativeBase):
    """Base class for all user service ORM models."""
    metadata = MetaData(naming_convention=NAMING_CONVENTION)
