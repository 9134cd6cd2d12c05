"""Authentication endpoints for the Threadboard API."""

from __future__ import annotations

from fastapi import APIRouter, status

from threadboard.api.v1.dependencies import CurrentUserDep, SessionDep
from threadboard.core.security import create_access_token
from threadboard.models import User
from threadboard.schemas.user import (
    LoginRequest,
    LoginResponse,
    RegisterRequest,
    UserProfile,
)
from threadboard.services import accounts

router = APIRouter(prefix="/auth", tags=["authentication"])


@router.post("/register", response_model=UserProfile, status_code=status.HTTP_201_CREATED)
async def register(payload: RegisterRequest, db: SessionDep) -> User:
    """Create an account. The response never includes the credential."""
    return accounts.register_user(db, payload)


@router.post("/login", response_model=LoginResponse)
async def login(payload: LoginRequest, db: SessionDep) -> LoginResponse:
    """Exchange a username and password for a bearer token and mark the user online."""
    user = accounts.authenticate(db, payload.username, payload.password)
    return LoginResponse(
        access_token=create_access_token(user.id),
        user=UserProfile.model_validate(user),
    )


@router.post("/logout")
async def logout(current_user: CurrentUserDep, db: SessionDep) -> dict[str, str]:
    """Mark the caller offline."""
    accounts.logout(db, current_user)
    return {"message": "Logged out successfully"}
