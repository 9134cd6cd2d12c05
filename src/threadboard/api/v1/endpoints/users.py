"""User presence and profile endpoints."""

from __future__ import annotations

from fastapi import APIRouter

from threadboard.api.v1.dependencies import CurrentUserDep, SessionDep
from threadboard.models import User
from threadboard.schemas.user import CountResponse, ProfileUpdateRequest, UserProfile
from threadboard.services import accounts

router = APIRouter(prefix="/users", tags=["users"])


@router.get("/online", response_model=CountResponse)
async def online_users(db: SessionDep) -> CountResponse:
    """Return how many users are currently online."""
    return CountResponse(count=accounts.count_online_users(db))


@router.get("/count", response_model=CountResponse)
async def total_users(db: SessionDep) -> CountResponse:
    """Return how many accounts exist."""
    return CountResponse(count=accounts.count_users(db))


@router.get("/me", response_model=UserProfile)
async def get_profile(current_user: CurrentUserDep) -> User:
    """Return the caller's own profile."""
    return current_user


@router.patch("/me", response_model=UserProfile)
async def update_profile(
    payload: ProfileUpdateRequest,
    current_user: CurrentUserDep,
    db: SessionDep,
) -> User:
    """Change the caller's email address or email-notification preference."""
    return accounts.update_profile(db, current_user.id, payload)
