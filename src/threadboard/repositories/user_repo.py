"""Data access helpers for user accounts."""
from __future__ import annotations

from collections.abc import Iterable

from sqlalchemy import func, select
from sqlalchemy.orm import Session

from threadboard.models.user import User

__all__ = ["UserRepository"]


class UserRepository:
    """Thin wrapper around database access for users."""

    def __init__(self, session: Session) -> None:
        """Initialize the repository with a SQLAlchemy session."""
        self.session = session

    def get_by_id(self, user_id: int) -> User | None:
        """Return a user by identifier."""
        return self.session.get(User, user_id)

    def get_by_username(self, username: str) -> User | None:
        """Return the user holding a username, if any."""
        result = self.session.execute(select(User).where(User.username == username))
        return result.scalars().first()

    def get_many(self, user_ids: Iterable[int]) -> dict[int, User]:
        """Return the users among ``user_ids`` that exist, keyed by id."""
        ids = set(user_ids)
        if not ids:
            return {}
        result = self.session.execute(select(User).where(User.id.in_(ids)))
        return {user.id: user for user in result.scalars()}

    def create(
        self,
        *,
        username: str,
        password_hash: str,
        email: str | None,
        email_notifications: bool,
    ) -> User:
        """Insert a user and flush so the id is assigned."""
        user = User(
            username=username,
            password_hash=password_hash,
            email=email,
            email_notifications=email_notifications,
        )
        self.session.add(user)
        self.session.flush()
        return user

    def count(self) -> int:
        """Return the number of registered users."""
        return int(self.session.scalar(select(func.count()).select_from(User)) or 0)

    def count_online(self) -> int:
        """Return the number of users currently flagged online."""
        stmt = select(func.count()).select_from(User).where(User.is_online.is_(True))
        return int(self.session.scalar(stmt) or 0)
