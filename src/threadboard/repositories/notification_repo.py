"""Data access helpers for notifications."""
from __future__ import annotations

from sqlalchemy import func, select, update
from sqlalchemy.orm import Session

from threadboard.models.notification import Notification

__all__ = ["NotificationRepository"]


class NotificationRepository:
    """Thin wrapper around database access for a recipient's inbox."""

    def __init__(self, session: Session) -> None:
        """Initialize the repository with a SQLAlchemy session."""
        self.session = session

    def get_by_id(self, notification_id: int) -> Notification | None:
        """Return a notification by identifier."""
        return self.session.get(Notification, notification_id)

    def create(
        self,
        *,
        user_id: int,
        triggered_by_user_id: int,
        type_: str,
        message: str,
        discussion_id: int | None = None,
        reply_id: int | None = None,
    ) -> Notification:
        """Insert a notification and flush so the id is assigned."""
        notification = Notification(
            user_id=user_id,
            triggered_by_user_id=triggered_by_user_id,
            discussion_id=discussion_id,
            reply_id=reply_id,
            type=type_,
            message=message,
            is_read=False,
            email_sent=False,
        )
        self.session.add(notification)
        self.session.flush()
        return notification

    def list_for_user(self, user_id: int, *, limit: int, offset: int = 0) -> list[Notification]:
        """Return a recipient's notifications, newest first."""
        stmt = (
            select(Notification)
            .where(Notification.user_id == user_id)
            .order_by(Notification.created_at.desc(), Notification.id.desc())
            .limit(limit)
            .offset(offset)
        )
        return list(self.session.execute(stmt).scalars())

    def count_unread(self, user_id: int) -> int:
        stmt = (
            select(func.count())
            .select_from(Notification)
            .where(Notification.user_id == user_id, Notification.is_read.is_(False))
        )
        return int(self.session.scalar(stmt) or 0)

    def mark_all_read(self, user_id: int) -> int:
        """Flag every unread notification of a recipient as read."""
        result = self.session.execute(
            update(Notification)
            .where(Notification.user_id == user_id, Notification.is_read.is_(False))
            .values(is_read=True)
            .execution_options(synchronize_session=False)
        )
        self.session.expire_all()
        return int(result.rowcount or 0)

    def list_pending_email(self, *, limit: int) -> list[Notification]:
        """Return notifications that were never emailed and are still unread."""
        stmt = (
            select(Notification)
            .where(Notification.email_sent.is_(False), Notification.is_read.is_(False))
            .order_by(Notification.created_at.asc(), Notification.id.asc())
            .limit(limit)
        )
        return list(self.session.execute(stmt).scalars())

    def delete(self, notification: Notification) -> None:
        self.session.delete(notification)
        self.session.flush()
