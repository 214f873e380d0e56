"""User Routes — the five CRUD operations over /api/users.

Invariants:
    - Body shape checked here before the repository is called (no store round-trip on 400)
    - Path ids that are not positive integers are 404, not 422/500
    - Routes hold no state; every call re-queries the store through the repository
    - Errors raised as UserServiceError; error_handlers.py owns the status mapping

Design Decisions:
    - Path id typed as str and parsed by core: FastAPI int coercion would yield 400 for
      "/api/users/abc" (ADR: non-numeric id means "no such user")
    - Thin routes delegate to the repository (ADR: impureim sandwich)
"""

import logging

from fastapi import APIRouter, status

from app.api.dependencies import UserRepositoryDep
from app.core.enforce_user_fields import check_user_fields, parse_user_id
from app.schemas.user import MessageResponse, UserPayload, UserResponse

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/users", tags=["users"])


@router.get("", response_model=list[UserResponse])
async def list_users(repo: UserRepositoryDep):
    """All users, ascending id."""
    users = await repo.list_users()
    return [UserResponse.from_record(u) for u in users]


@router.get("/{user_id}", response_model=UserResponse)
async def get_user(user_id: str, repo: UserRepositoryDep):
    record = await repo.get_user(parse_user_id(user_id))
    return UserResponse.from_record(record)


@router.post(
    "", response_model=UserResponse, status_code=status.HTTP_201_CREATED,
)
async def create_user(body: UserPayload, repo: UserRepositoryDep):
    """Create a user. Duplicate email → 409."""
    check_user_fields(body.name, body.email)
    record = await repo.create_user(body.name, body.email)
    return UserResponse.from_record(record)


@router.put("/{user_id}", response_model=UserResponse)
async def update_user(
    user_id: str, body: UserPayload, repo: UserRepositoryDep,
):
    """Replace name and email. created_at is left untouched."""
    uid = parse_user_id(user_id)
    check_user_fields(body.name, body.email)
    record = await repo.update_user(uid, body.name, body.email)
    return UserResponse.from_record(record)


@router.delete("/{user_id}", response_model=MessageResponse)
async def delete_user(user_id: str, repo: UserRepositoryDep):
    """Delete a user. Repeating the call reports 404."""
    await repo.delete_user(parse_user_id(user_id))
    return MessageResponse(message="User deleted successfully")
