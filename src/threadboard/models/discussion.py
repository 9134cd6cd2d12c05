# src/threadboard/models/discussion.py
"""SQLAlchemy models for discussions and their replies."""

from __future__ import annotations

from datetime import datetime

from sqlalchemy import JSON, DateTime, ForeignKey, Index, Integer, Text
from sqlalchemy.orm import Mapped, mapped_column

from threadboard.db.session import Base
from threadboard.db.time import utcnow


class Discussion(Base):
    """Top-level forum post anchoring a reply thread."""

    __tablename__ = "discussions"
    __table_args__ = (
        Index("ix_discussions_user_id", "user_id"),
        Index("ix_discussions_created_at", "created_at"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    title: Mapped[str] = mapped_column(Text, nullable=False)
    content: Mapped[str] = mapped_column(Text, nullable=False)
    user_id: Mapped[int] = mapped_column(Integer, ForeignKey("users.id"), nullable=False)
    # Positionally paired: captions[i] describes image_paths[i].
    image_paths: Mapped[list[str]] = mapped_column(JSON, nullable=False, default=list)
    captions: Mapped[list[str]] = mapped_column(JSON, nullable=False, default=list)
    helpful_count: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=utcnow,
    )


class Reply(Base):
    """Comment on a discussion, optionally nested under another reply.

    Parent links are plain ids; the thread is rebuilt from the flat rows on
    every read by ``threadboard.services.reply_tree``.
    """

    __tablename__ = "replies"
    __table_args__ = (
        Index("ix_replies_discussion_id", "discussion_id"),
        Index("ix_replies_parent_id", "parent_id"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    content: Mapped[str] = mapped_column(Text, nullable=False)
    user_id: Mapped[int] = mapped_column(Integer, ForeignKey("users.id"), nullable=False)
    discussion_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("discussions.id"),
        nullable=False,
    )
    # NULL for top-level replies; otherwise a reply of the same discussion.
    parent_id: Mapped[int | None] = mapped_column(
        Integer,
        ForeignKey("replies.id"),
        nullable=True,
    )
    image_paths: Mapped[list[str]] = mapped_column(JSON, nullable=False, default=list)
    captions: Mapped[list[str]] = mapped_column(JSON, nullable=False, default=list)
    helpful_count: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=utcnow,
    )
