"""Health Check — liveness plus store reachability for orchestrators and load tests.

Invariants:
    - GET /api/health returns 200 {"status": "OK", "message": "Server is running"} when
      the store answers a trivial query
    - Store unreachable → 503 via StoreUnavailableError (never 500, never hangs past timeouts)

Design Decisions:
    - Single check with a store round-trip: an instance without a store should be
      routed around by the load balancer (ADR: production readiness)
"""

import logging

from fastapi import APIRouter, status

from app.api.dependencies import UserRepositoryDep
from app.core.errors import StoreUnavailableError
from app.schemas.user import HealthResponse

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/health", tags=["health"])


@router.get(
    "", response_model=HealthResponse, status_code=status.HTTP_200_OK,
)
async def health_check(repo: UserRepositoryDep):
    """Readiness check — includes database connectivity."""
    if not await repo.health_check():
        raise StoreUnavailableError("health_check", "Database unavailable")
    return HealthResponse(status="OK", message="Server is running")
