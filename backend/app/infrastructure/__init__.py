"""Infrastructure Layer — store access and cross-cutting concerns.

Invariants:
    - All store calls go through DatabaseSessionManager (bounded pool, error mapping)
    - Nothing here raises a SQLAlchemy exception to callers

Design Decisions:
    - Repository implements the core UserRepository protocol (ADR: dependency arrows point inward)
"""
