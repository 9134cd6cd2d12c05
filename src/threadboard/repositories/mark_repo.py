"""Data access helpers for helpful marks, bookmarks and helpful counters."""
from __future__ import annotations

from typing import Any

from sqlalchemy import case, select, update
from sqlalchemy.orm import InstrumentedAttribute, Session

from threadboard.models.mark import Bookmark, HelpfulMark, SaveMode

__all__ = ["MarkRepository"]


class MarkRepository:
    """Membership rows and the counters they feed.

    Counter changes are issued as single ``UPDATE`` statements so concurrent
    marks never lose an increment.
    """

    def __init__(self, session: Session) -> None:
        """Initialize the repository with a SQLAlchemy session."""
        self.session = session

    def find_mark(
        self,
        user_id: int,
        column: InstrumentedAttribute[Any],
        target_id: int,
    ) -> HelpfulMark | None:
        """Return the user's mark on the target addressed by ``column``."""
        stmt = select(HelpfulMark).where(HelpfulMark.user_id == user_id, column == target_id)
        return self.session.execute(stmt).scalars().first()

    def insert_mark(self, user_id: int, column: InstrumentedAttribute[Any], target_id: int) -> HelpfulMark:
        """Insert a mark and flush; raises ``IntegrityError`` on a duplicate."""
        mark = HelpfulMark(user_id=user_id, **{column.key: target_id})
        self.session.add(mark)
        self.session.flush()
        return mark

    def delete_mark(self, mark: HelpfulMark) -> None:
        self.session.delete(mark)
        self.session.flush()

    def increment_helpful(self, model: type[Any], target_id: int) -> None:
        """Add one to ``model.helpful_count`` in a single statement."""
        self.session.execute(
            update(model)
            .where(model.id == target_id)
            .values(helpful_count=model.helpful_count + 1)
            .execution_options(synchronize_session=False)
        )

    def decrement_helpful(self, model: type[Any], target_id: int) -> None:
        """Subtract one from ``model.helpful_count``, never going below zero."""
        self.session.execute(
            update(model)
            .where(model.id == target_id)
            .values(
                helpful_count=case(
                    (model.helpful_count > 0, model.helpful_count - 1),
                    else_=0,
                )
            )
            .execution_options(synchronize_session=False)
        )

    def get_bookmark(self, user_id: int, discussion_id: int) -> Bookmark | None:
        stmt = select(Bookmark).where(
            Bookmark.user_id == user_id,
            Bookmark.discussion_id == discussion_id,
        )
        return self.session.execute(stmt).scalars().first()

    def insert_bookmark(self, user_id: int, discussion_id: int, save_mode: SaveMode) -> Bookmark:
        """Insert a bookmark and flush; raises ``IntegrityError`` on a duplicate."""
        bookmark = Bookmark(user_id=user_id, discussion_id=discussion_id, save_mode=save_mode)
        self.session.add(bookmark)
        self.session.flush()
        return bookmark

    def delete_bookmark(self, bookmark: Bookmark) -> None:
        self.session.delete(bookmark)
        self.session.flush()
