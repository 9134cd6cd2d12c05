# src/threadboard/models/notification.py
"""Notification records derived from replies and helpful marks."""

from __future__ import annotations

from datetime import datetime

from sqlalchemy import Boolean, CheckConstraint, DateTime, ForeignKey, Index, Integer, Text
from sqlalchemy.orm import Mapped, mapped_column

from threadboard.db.session import Base
from threadboard.db.time import utcnow

NOTIFICATION_TYPE_REPLY = "reply"
NOTIFICATION_TYPE_HELPFUL = "helpful"


class Notification(Base):
    """Event telling a recipient that someone acted on their content.

    ``is_read`` and ``email_sent`` are independent flags; each only ever
    flips from False to True.
    """

    __tablename__ = "notifications"
    __table_args__ = (
        CheckConstraint("type IN ('reply', 'helpful')", name="ck_notifications_type"),
        Index("ix_notifications_user_id", "user_id"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    # Recipient.
    user_id: Mapped[int] = mapped_column(Integer, ForeignKey("users.id"), nullable=False)
    # Actor; never equal to the recipient.
    triggered_by_user_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("users.id"),
        nullable=False,
    )
    discussion_id: Mapped[int | None] = mapped_column(
        Integer,
        ForeignKey("discussions.id"),
        nullable=True,
    )
    reply_id: Mapped[int | None] = mapped_column(
        Integer,
        ForeignKey("replies.id"),
        nullable=True,
    )
    type: Mapped[str] = mapped_column(Text, nullable=False)
    message: Mapped[str] = mapped_column(Text, nullable=False)
    is_read: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    email_sent: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=utcnow,
    )
