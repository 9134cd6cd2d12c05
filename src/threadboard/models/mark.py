# src/threadboard/models/mark.py
"""Models capturing per-user membership records: helpful marks and bookmarks."""

from __future__ import annotations

import enum
from datetime import datetime

from sqlalchemy import (
    CheckConstraint,
    DateTime,
    Enum,
    ForeignKey,
    Index,
    Integer,
    UniqueConstraint,
)
from sqlalchemy.orm import Mapped, mapped_column

from threadboard.db.session import Base
from threadboard.db.time import utcnow


class SaveMode(str, enum.Enum):
    """How a bookmark follows its discussion."""

    # Keep the thread as it was when saved.
    SNAPSHOT = "current"
    # Keep following new replies.
    TRACK = "updates"


class HelpfulMark(Base):
    """One user's "helpful" toggle on exactly one discussion or reply."""

    __tablename__ = "helpful_marks"
    __table_args__ = (
        CheckConstraint(
            "(discussion_id IS NULL) <> (reply_id IS NULL)",
            name="ck_helpful_marks_single_target",
        ),
        # NULLs never collide, so each constraint only bites for its own target kind.
        UniqueConstraint("user_id", "discussion_id", name="uq_helpful_marks_user_discussion"),
        UniqueConstraint("user_id", "reply_id", name="uq_helpful_marks_user_reply"),
        Index("ix_helpful_marks_discussion_id", "discussion_id"),
        Index("ix_helpful_marks_reply_id", "reply_id"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    user_id: Mapped[int] = mapped_column(Integer, ForeignKey("users.id"), nullable=False)
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
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=utcnow,
    )


class Bookmark(Base):
    """A user's saved reference to a discussion."""

    __tablename__ = "bookmarks"
    __table_args__ = (
        UniqueConstraint("user_id", "discussion_id", name="uq_bookmarks_user_discussion"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    user_id: Mapped[int] = mapped_column(Integer, ForeignKey("users.id"), nullable=False)
    discussion_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("discussions.id"),
        nullable=False,
    )
    save_mode: Mapped[SaveMode] = mapped_column(
        Enum(SaveMode, native_enum=False, length=16, values_callable=lambda e: [m.value for m in e]),
        nullable=False,
        default=SaveMode.TRACK,
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=utcnow,
    )
