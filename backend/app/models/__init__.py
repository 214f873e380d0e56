"""ORM Models — SQLAlchemy declarative models.

Invariants:
    - All models inherit from Base (db/base.py)
    - ORM objects stay inside infrastructure/; callers receive UserRecord values

Design Decisions:
    - Models imported here so Base.metadata is complete before create_all runs
"""

from app.models.user import User  # noqa: F401
