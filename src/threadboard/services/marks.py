"""Helpful marks and bookmarks, and the counters they maintain.

A mark target is either a discussion or a reply. Both kinds are handled by
the same code path through ``_TARGETS``, which maps a kind to the model that
carries ``helpful_count`` and the ``HelpfulMark`` column that points at it.
"""

from __future__ import annotations

import enum
import logging
from dataclasses import dataclass
from typing import Any

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import InstrumentedAttribute, Session

from threadboard.core.errors import NotFoundError, ValidationError
from threadboard.models import Bookmark, Discussion, HelpfulMark, Reply, SaveMode
from threadboard.repositories import MarkRepository

logger = logging.getLogger(__name__)


class TargetKind(str, enum.Enum):
    """What a helpful mark points at."""

    DISCUSSION = "discussion"
    REPLY = "reply"


class MarkKind(str, enum.Enum):
    """Kind of mark a user can leave. Only "helpful" exists today."""

    HELPFUL = "helpful"


@dataclass(frozen=True)
class MarkTarget:
    """A discussion or a reply, addressed by id."""

    kind: TargetKind
    id: int

    @classmethod
    def discussion(cls, discussion_id: int) -> MarkTarget:
        return cls(TargetKind.DISCUSSION, discussion_id)

    @classmethod
    def reply(cls, reply_id: int) -> MarkTarget:
        return cls(TargetKind.REPLY, reply_id)

    @classmethod
    def from_fields(cls, discussion_id: int | None, reply_id: int | None) -> MarkTarget:
        """Build a target from the two nullable request fields.

        Raises:
            ValidationError: Unless exactly one of the ids is given.
        """
        if discussion_id is not None and reply_id is None:
            return cls.discussion(discussion_id)
        if reply_id is not None and discussion_id is None:
            return cls.reply(reply_id)
        raise ValidationError("Provide exactly one of discussion_id or reply_id")


@dataclass(frozen=True)
class _TargetBinding:
    model: type[Any]
    column: InstrumentedAttribute[Any]
    label: str


_TARGETS: dict[TargetKind, _TargetBinding] = {
    TargetKind.DISCUSSION: _TargetBinding(Discussion, HelpfulMark.discussion_id, "Discussion"),
    TargetKind.REPLY: _TargetBinding(Reply, HelpfulMark.reply_id, "Reply"),
}


def _require_mark_kind(kind: MarkKind | str) -> None:
    try:
        MarkKind(kind)
    except ValueError as exc:
        raise ValidationError(f"Unsupported mark kind: {kind}") from exc


def load_target(db: Session, target: MarkTarget) -> Discussion | Reply:
    """Return the record a target points at.

    Raises:
        NotFoundError: If the discussion or reply does not exist.
    """
    binding = _TARGETS[target.kind]
    record = db.get(binding.model, target.id)
    if record is None:
        raise NotFoundError(f"{binding.label} not found")
    return record


def apply_mark(
    db: Session,
    actor_id: int,
    target: MarkTarget,
    kind: MarkKind = MarkKind.HELPFUL,
) -> tuple[HelpfulMark, bool]:
    """Mark a target as helpful on behalf of ``actor_id``.

    Marking is idempotent: when the actor already marked the target the
    existing mark is returned and the counter is left alone.

    Returns:
        The mark and whether this call created it.
    """
    _require_mark_kind(kind)
    load_target(db, target)
    binding = _TARGETS[target.kind]
    repo = MarkRepository(db)

    existing = repo.find_mark(actor_id, binding.column, target.id)
    if existing is not None:
        return existing, False

    try:
        mark = repo.insert_mark(actor_id, binding.column, target.id)
    except IntegrityError:
        # A concurrent request won the unique constraint.
        db.rollback()
        winner = repo.find_mark(actor_id, binding.column, target.id)
        if winner is None:
            raise
        logger.info("Concurrent helpful mark by user %s on %s %s", actor_id, target.kind.value, target.id)
        return winner, False

    repo.increment_helpful(binding.model, target.id)
    db.commit()
    db.refresh(mark)
    return mark, True


def remove_mark(
    db: Session,
    actor_id: int,
    target: MarkTarget,
    kind: MarkKind = MarkKind.HELPFUL,
) -> None:
    """Withdraw the actor's mark and decrement the target's counter.

    Raises:
        NotFoundError: If the actor has no mark on the target.
    """
    _require_mark_kind(kind)
    binding = _TARGETS[target.kind]
    repo = MarkRepository(db)
    mark = repo.find_mark(actor_id, binding.column, target.id)
    if mark is None:
        raise NotFoundError("Helpful mark not found")
    repo.delete_mark(mark)
    repo.decrement_helpful(binding.model, target.id)
    db.commit()


def is_marked(db: Session, actor_id: int, target: MarkTarget) -> bool:
    """Return True when the actor has marked the target as helpful."""
    binding = _TARGETS[target.kind]
    return MarkRepository(db).find_mark(actor_id, binding.column, target.id) is not None


def upsert_bookmark(
    db: Session,
    user_id: int,
    discussion_id: int,
    save_mode: SaveMode = SaveMode.TRACK,
) -> Bookmark:
    """Bookmark a discussion, or update the mode of an existing bookmark."""
    load_target(db, MarkTarget.discussion(discussion_id))
    repo = MarkRepository(db)

    bookmark = repo.get_bookmark(user_id, discussion_id)
    if bookmark is None:
        try:
            bookmark = repo.insert_bookmark(user_id, discussion_id, save_mode)
        except IntegrityError:
            db.rollback()
            bookmark = repo.get_bookmark(user_id, discussion_id)
            if bookmark is None:
                raise
            bookmark.save_mode = save_mode
    else:
        bookmark.save_mode = save_mode

    db.commit()
    db.refresh(bookmark)
    return bookmark


def remove_bookmark(db: Session, user_id: int, discussion_id: int) -> None:
    """Delete a bookmark.

    Raises:
        NotFoundError: If the user has not bookmarked the discussion.
    """
    repo = MarkRepository(db)
    bookmark = repo.get_bookmark(user_id, discussion_id)
    if bookmark is None:
        raise NotFoundError("Bookmark not found")
    repo.delete_bookmark(bookmark)
    db.commit()


def is_bookmarked(db: Session, user_id: int, discussion_id: int) -> Bookmark | None:
    """Return the user's bookmark on the discussion, if any."""
    return MarkRepository(db).get_bookmark(user_id, discussion_id)
