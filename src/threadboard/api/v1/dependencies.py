"""Shared API dependencies for authentication and common functionality."""

from typing import Annotated

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session

from threadboard.core.security import decode_access_token
from threadboard.db.session import get_db
from threadboard.models import User
from threadboard.services.notifications import NotificationService, get_notification_service
from threadboard.services.realtime import ConnectionHub, get_connection_hub

# HTTP Bearer scheme for JWT authentication
bearer_scheme = HTTPBearer()
optional_bearer_scheme = HTTPBearer(auto_error=False)

# Type alias for database session dependency
SessionDep = Annotated[Session, Depends(get_db)]


def resolve_token_user(db: Session, token: str) -> User | None:
    """Return the user a bearer token identifies, if any."""
    user_id = decode_access_token(token)
    if user_id is None:
        return None
    return db.get(User, user_id)


def get_current_user(
    credentials: Annotated[HTTPAuthorizationCredentials, Depends(bearer_scheme)],
    db: SessionDep,
) -> User:
    """Get the current authenticated user from JWT token.

    Raises:
        HTTPException: If the token is invalid or the user no longer exists.
    """
    user = resolve_token_user(db, credentials.credentials)
    if user is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Could not validate credentials",
        )
    return user


def get_optional_user(
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(optional_bearer_scheme)],
    db: SessionDep,
) -> User | None:
    """Return the caller when a valid token is supplied, otherwise None."""
    if credentials is None:
        return None
    return resolve_token_user(db, credentials.credentials)


# Type alias for current user dependency
CurrentUserDep = Annotated[User, Depends(get_current_user)]
OptionalUserDep = Annotated[User | None, Depends(get_optional_user)]
NotifierDep = Annotated[NotificationService, Depends(get_notification_service)]
HubDep = Annotated[ConnectionHub, Depends(get_connection_hub)]
