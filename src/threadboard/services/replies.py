"""Reply lifecycle: post, edit and delete with descendants."""

from __future__ import annotations

import logging

from sqlalchemy.orm import Session

from threadboard.core.errors import AuthorizationError, NotFoundError, ValidationError
from threadboard.models import Reply
from threadboard.repositories import ReplyRepository
from threadboard.schemas.discussion import ReplyCreate, ReplyUpdate
from threadboard.services.discussions import get_discussion
from threadboard.services.images import merge_images, validate_images
from threadboard.services.notifications import NotificationService
from threadboard.services.realtime import ConnectionHub
from threadboard.services.reply_tree import collect_descendant_ids

logger = logging.getLogger(__name__)

THREAD_EVENT = "reply"


def get_reply(db: Session, reply_id: int) -> Reply:
    """Return a reply or raise ``NotFoundError``."""
    reply = ReplyRepository(db).get_by_id(reply_id)
    if reply is None:
        raise NotFoundError("Reply not found")
    return reply


def _owned_reply(db: Session, actor_id: int, reply_id: int, action: str) -> Reply:
    reply = get_reply(db, reply_id)
    if reply.user_id != actor_id:
        raise AuthorizationError(f"You can only {action} your own replies")
    return reply


async def create_reply(
    db: Session,
    actor_id: int,
    payload: ReplyCreate,
    notifier: NotificationService | None = None,
    hub: ConnectionHub | None = None,
) -> Reply:
    """Post a reply and notify the people it answers.

    Raises:
        NotFoundError: If the discussion does not exist.
        ValidationError: If the parent reply is missing or belongs to another discussion.
    """
    discussion = get_discussion(db, payload.discussion_id)
    repo = ReplyRepository(db)
    if payload.parent_id is not None:
        parent = repo.get_by_id(payload.parent_id)
        if parent is None or parent.discussion_id != discussion.id:
            raise ValidationError("Parent reply must belong to the same discussion")

    image_paths, captions = validate_images(payload.image_paths, payload.captions)
    reply = repo.create(
        user_id=actor_id,
        discussion_id=discussion.id,
        parent_id=payload.parent_id,
        content=payload.content,
        image_paths=image_paths,
        captions=captions,
    )
    db.commit()
    db.refresh(reply)
    logger.info("User %s replied %s in discussion %s", actor_id, reply.id, discussion.id)

    if notifier is not None:
        await notifier.notify_on_reply(db, reply)
    if hub is not None:
        await hub.announce(THREAD_EVENT, discussion.id)
    return reply


async def update_reply(
    db: Session,
    actor_id: int,
    reply_id: int,
    payload: ReplyUpdate,
    hub: ConnectionHub | None = None,
) -> Reply:
    """Apply an owner's edit; omitted fields keep their value."""
    reply = _owned_reply(db, actor_id, reply_id, "edit")
    if payload.content is not None:
        reply.content = payload.content
    if payload.image_paths is not None or payload.captions is not None:
        reply.image_paths, reply.captions = merge_images(
            reply.image_paths or [],
            reply.captions or [],
            payload.image_paths,
            payload.captions,
        )
    db.commit()
    db.refresh(reply)
    if hub is not None:
        await hub.announce(THREAD_EVENT, reply.discussion_id)
    return reply


async def delete_reply(
    db: Session,
    actor_id: int,
    reply_id: int,
    hub: ConnectionHub | None = None,
) -> list[int]:
    """Delete an owner's reply and every reply beneath it.

    Returns:
        Ids of all removed replies, the requested one first.
    """
    reply = _owned_reply(db, actor_id, reply_id, "delete")
    discussion_id = reply.discussion_id
    repo = ReplyRepository(db)
    removed = [reply.id, *collect_descendant_ids(repo.list_for_discussion(discussion_id), reply.id)]
    repo.clear_notification_refs(removed)
    repo.delete_many(removed)
    db.commit()
    logger.info("User %s deleted reply %s (%s in subtree)", actor_id, reply_id, len(removed))
    if hub is not None:
        await hub.announce(THREAD_EVENT, discussion_id)
    return removed
