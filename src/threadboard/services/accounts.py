"""Account helpers: registration, login, presence and profile preferences."""
from __future__ import annotations

import logging

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from threadboard.core import security
from threadboard.core.errors import AuthenticationError, ConflictError, NotFoundError
from threadboard.db.time import utcnow
from threadboard.models.user import User
from threadboard.repositories import UserRepository
from threadboard.schemas.user import ProfileUpdateRequest, RegisterRequest

__all__ = [
    "register_user",
    "authenticate",
    "logout",
    "set_presence",
    "count_users",
    "count_online_users",
    "update_profile",
]

logger = logging.getLogger(__name__)


def register_user(db: Session, payload: RegisterRequest) -> User:
    """Create an account with a hashed password.

    Raises:
        ConflictError: If the username is already taken.
    """
    repo = UserRepository(db)
    if repo.get_by_username(payload.username) is not None:
        raise ConflictError("Username already exists")
    try:
        user = repo.create(
            username=payload.username,
            password_hash=security.hash_password(payload.password),
            email=payload.email,
            email_notifications=payload.email_notifications,
        )
        db.commit()
    except IntegrityError as exc:
        db.rollback()
        raise ConflictError("Username already exists") from exc
    db.refresh(user)
    logger.info("Registered user %s", user.id)
    return user


def authenticate(db: Session, username: str, password: str) -> User:
    """Verify credentials and mark the user online.

    Raises:
        AuthenticationError: If the username or password is wrong.
    """
    user = UserRepository(db).get_by_username(username)
    if user is None or not security.verify_password(password, user.password_hash):
        raise AuthenticationError("Invalid username or password")
    set_presence(db, user, online=True)
    return user


def set_presence(db: Session, user: User, *, online: bool) -> User:
    """Record whether the user is online and refresh ``last_seen``."""
    user.is_online = online
    user.last_seen = utcnow()
    db.commit()
    db.refresh(user)
    return user


def logout(db: Session, user: User) -> User:
    """Mark the user offline."""
    return set_presence(db, user, online=False)


def count_users(db: Session) -> int:
    return UserRepository(db).count()


def count_online_users(db: Session) -> int:
    return UserRepository(db).count_online()


def update_profile(db: Session, user_id: int, payload: ProfileUpdateRequest) -> User:
    """Change email and email-notification preferences.

    Only fields present in the request are applied; an explicit empty email
    clears the address.
    """
    user = UserRepository(db).get_by_id(user_id)
    if user is None:
        raise NotFoundError("User not found")
    fields = payload.model_fields_set
    if "email" in fields:
        user.email = payload.email
    if "email_notifications" in fields and payload.email_notifications is not None:
        user.email_notifications = payload.email_notifications
    db.commit()
    db.refresh(user)
    return user
