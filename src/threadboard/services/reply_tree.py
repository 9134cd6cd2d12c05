"""Reconstruct nested reply threads from flat reply rows.

Replies are stored with a plain ``parent_id`` link. Every read rebuilds the
forest from a fresh snapshot, so the builder has to cope with rows that
reference parents or authors which vanished in the meantime: such replies
are dropped together with everything beneath them. The builder walks the
thread with an explicit stack and never recurses, so arbitrarily deep
chains are safe.
"""

from __future__ import annotations

import logging
from collections import defaultdict
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from datetime import datetime

from sqlalchemy.orm import Session

from threadboard.db.time import as_utc
from threadboard.models import Reply, User
from threadboard.repositories import ReplyRepository, UserRepository
from threadboard.schemas.user import UserPublic

logger = logging.getLogger(__name__)


@dataclass
class ReplyNode:
    """One reply in a thread, with its author and ordered children."""

    id: int
    content: str
    user_id: int
    discussion_id: int
    parent_id: int | None
    image_paths: list[str]
    captions: list[str]
    helpful_count: int
    created_at: datetime
    author: UserPublic
    children: list[ReplyNode] = field(default_factory=list)


def _sort_key(reply: Reply) -> tuple[datetime, int]:
    return as_utc(reply.created_at), reply.id


def _index_children(replies: Iterable[Reply]) -> dict[int | None, list[Reply]]:
    by_id: dict[int, Reply] = {}
    for reply in replies:
        if reply.id is None or reply.id in by_id:
            continue
        by_id[reply.id] = reply

    children: dict[int | None, list[Reply]] = defaultdict(list)
    for reply in by_id.values():
        parent_id = reply.parent_id
        if parent_id is not None and parent_id not in by_id:
            logger.debug("Skipping orphaned reply %s (parent %s missing)", reply.id, parent_id)
            continue
        children[parent_id].append(reply)
    return children


def _to_node(reply: Reply, author: User) -> ReplyNode:
    return ReplyNode(
        id=reply.id,
        content=reply.content,
        user_id=reply.user_id,
        discussion_id=reply.discussion_id,
        parent_id=reply.parent_id,
        image_paths=list(reply.image_paths or []),
        captions=list(reply.captions or []),
        helpful_count=reply.helpful_count or 0,
        created_at=reply.created_at,
        author=UserPublic.model_validate(author),
    )


def build_reply_tree(replies: Iterable[Reply], users: Mapping[int, User]) -> list[ReplyNode]:
    """Build the ordered reply forest of one discussion.

    Args:
        replies: Flat reply rows of a single discussion, in any order.
        users: Authors keyed by user id.

    Returns:
        Top-level replies, each carrying its nested children. Siblings are
        ordered by creation time, then id. Replies whose parent is absent,
        whose parent chain loops, or whose author is unknown are left out
        along with their subtrees.
    """
    children = _index_children(replies)

    forest: list[ReplyNode] = []
    roots = sorted(children.get(None, ()), key=_sort_key)
    stack: list[tuple[Reply, list[ReplyNode]]] = [(root, forest) for root in reversed(roots)]
    visited: set[int] = set()

    while stack:
        reply, siblings = stack.pop()
        if reply.id in visited:
            continue
        visited.add(reply.id)

        author = users.get(reply.user_id)
        if author is None:
            logger.warning("Skipping reply %s: author %s not found", reply.id, reply.user_id)
            continue

        node = _to_node(reply, author)
        siblings.append(node)
        kids = sorted(children.get(reply.id, ()), key=_sort_key)
        stack.extend((kid, node.children) for kid in reversed(kids))

    return forest


def collect_descendant_ids(replies: Iterable[Reply], root_id: int) -> list[int]:
    """Return the ids of every reply nested under ``root_id``, excluding it."""
    children = _index_children(replies)
    found: list[int] = []
    seen = {root_id}
    pending = [root_id]
    while pending:
        current = pending.pop()
        for child in children.get(current, ()):
            if child.id in seen:
                continue
            seen.add(child.id)
            found.append(child.id)
            pending.append(child.id)
    return found


def get_reply_tree(db: Session, discussion_id: int) -> list[ReplyNode]:
    """Load a discussion's replies and their authors, then build the forest."""
    replies = ReplyRepository(db).list_for_discussion(discussion_id)
    users = UserRepository(db).get_many(reply.user_id for reply in replies)
    return build_reply_tree(replies, users)
