"""Data access helpers for discussions and replies."""
from __future__ import annotations

from collections.abc import Iterable

from sqlalchemy import delete, select, update
from sqlalchemy.orm import Session

from threadboard.models.discussion import Discussion, Reply
from threadboard.models.mark import Bookmark, HelpfulMark
from threadboard.models.notification import Notification

__all__ = ["DiscussionRepository", "ReplyRepository"]


class DiscussionRepository:
    """Thin wrapper around database access for discussions."""

    def __init__(self, session: Session) -> None:
        """Initialize the repository with a SQLAlchemy session."""
        self.session = session

    def get_by_id(self, discussion_id: int) -> Discussion | None:
        """Return a discussion by identifier."""
        return self.session.get(Discussion, discussion_id)

    def list_recent(
        self,
        *,
        limit: int,
        offset: int = 0,
        owner_id: int | None = None,
    ) -> list[Discussion]:
        """Return discussions newest first, optionally limited to one owner."""
        stmt = select(Discussion)
        if owner_id is not None:
            stmt = stmt.where(Discussion.user_id == owner_id)
        stmt = stmt.order_by(Discussion.created_at.desc(), Discussion.id.asc())
        result = self.session.execute(stmt.limit(limit).offset(offset))
        return list(result.scalars())

    def list_most_helpful(self, *, limit: int, offset: int = 0) -> list[Discussion]:
        """Return discussions by descending helpful count."""
        stmt = (
            select(Discussion)
            .order_by(Discussion.helpful_count.desc(), Discussion.id.asc())
            .limit(limit)
            .offset(offset)
        )
        return list(self.session.execute(stmt).scalars())

    def list_bookmarked(self, user_id: int, *, limit: int, offset: int = 0) -> list[Discussion]:
        """Return discussions bookmarked by ``user_id``, newest first."""
        stmt = (
            select(Discussion)
            .join(Bookmark, Bookmark.discussion_id == Discussion.id)
            .where(Bookmark.user_id == user_id)
            .order_by(Discussion.created_at.desc(), Discussion.id.asc())
            .limit(limit)
            .offset(offset)
        )
        return list(self.session.execute(stmt).scalars())

    def create(
        self,
        *,
        user_id: int,
        title: str,
        content: str,
        image_paths: list[str],
        captions: list[str],
    ) -> Discussion:
        """Insert a new discussion and flush so the id is assigned."""
        discussion = Discussion(
            user_id=user_id,
            title=title,
            content=content,
            image_paths=image_paths,
            captions=captions,
            helpful_count=0,
        )
        self.session.add(discussion)
        self.session.flush()
        return discussion

    def delete_cascade(self, discussion: Discussion) -> None:
        """Delete a discussion with its replies, marks and bookmarks.

        Notifications pointing at any removed row keep their text but lose
        the reference.
        """
        reply_ids = list(
            self.session.execute(
                select(Reply.id).where(Reply.discussion_id == discussion.id)
            ).scalars()
        )
        replies = ReplyRepository(self.session)
        replies.clear_notification_refs(reply_ids)
        self.session.execute(
            update(Notification)
            .where(Notification.discussion_id == discussion.id)
            .values(discussion_id=None)
            .execution_options(synchronize_session=False)
        )
        self.session.execute(
            delete(HelpfulMark)
            .where(HelpfulMark.discussion_id == discussion.id)
            .execution_options(synchronize_session=False)
        )
        self.session.execute(
            delete(Bookmark)
            .where(Bookmark.discussion_id == discussion.id)
            .execution_options(synchronize_session=False)
        )
        replies.delete_many(reply_ids)
        self.session.delete(discussion)
        self.session.flush()


class ReplyRepository:
    """Thin wrapper around database access for replies."""

    def __init__(self, session: Session) -> None:
        """Initialize the repository with a SQLAlchemy session."""
        self.session = session

    def get_by_id(self, reply_id: int) -> Reply | None:
        """Return a reply by identifier."""
        return self.session.get(Reply, reply_id)

    def list_for_discussion(self, discussion_id: int) -> list[Reply]:
        """Return every reply of a discussion as flat rows."""
        stmt = (
            select(Reply)
            .where(Reply.discussion_id == discussion_id)
            .order_by(Reply.created_at.asc(), Reply.id.asc())
        )
        return list(self.session.execute(stmt).scalars())

    def create(
        self,
        *,
        user_id: int,
        discussion_id: int,
        parent_id: int | None,
        content: str,
        image_paths: list[str],
        captions: list[str],
    ) -> Reply:
        """Insert a new reply and flush so the id is assigned."""
        reply = Reply(
            user_id=user_id,
            discussion_id=discussion_id,
            parent_id=parent_id,
            content=content,
            image_paths=image_paths,
            captions=captions,
            helpful_count=0,
        )
        self.session.add(reply)
        self.session.flush()
        return reply

    def clear_notification_refs(self, reply_ids: Iterable[int]) -> None:
        """Detach notifications from replies that are about to be removed."""
        ids = list(reply_ids)
        if not ids:
            return
        self.session.execute(
            update(Notification)
            .where(Notification.reply_id.in_(ids))
            .values(reply_id=None)
            .execution_options(synchronize_session=False)
        )

    def delete_many(self, reply_ids: Iterable[int]) -> int:
        """Delete replies and the helpful marks on them; return rows removed."""
        ids = list(reply_ids)
        if not ids:
            return 0
        self.session.execute(
            delete(HelpfulMark)
            .where(HelpfulMark.reply_id.in_(ids))
            .execution_options(synchronize_session=False)
        )
        # Unlink first; the self-referencing foreign key would block the delete.
        self.session.execute(
            update(Reply)
            .where(Reply.id.in_(ids))
            .values(parent_id=None)
            .execution_options(synchronize_session=False)
        )
        result = self.session.execute(
            delete(Reply)
            .where(Reply.id.in_(ids))
            .execution_options(synchronize_session=False)
        )
        # Bulk statements bypass the identity map.
        self.session.expire_all()
        return int(result.rowcount or 0)
