"""Discussion lifecycle: create, read with its thread, edit and delete."""

from __future__ import annotations

import logging

from sqlalchemy.orm import Session

from threadboard.core.errors import AuthorizationError, NotFoundError
from threadboard.core.settings import settings
from threadboard.models import Discussion
from threadboard.repositories import DiscussionRepository, UserRepository
from threadboard.schemas.discussion import (
    DiscussionCreate,
    DiscussionDetail,
    DiscussionUpdate,
    ReplyNodeResponse,
)
from threadboard.services.feed import to_discussion_view
from threadboard.services.images import merge_images, validate_images
from threadboard.services.realtime import ConnectionHub
from threadboard.services.reply_tree import get_reply_tree

logger = logging.getLogger(__name__)

THREAD_EVENT = "discussion"


def get_discussion(db: Session, discussion_id: int) -> Discussion:
    """Return a discussion or raise ``NotFoundError``."""
    discussion = DiscussionRepository(db).get_by_id(discussion_id)
    if discussion is None:
        raise NotFoundError("Discussion not found")
    return discussion


def _owned_discussion(db: Session, actor_id: int, discussion_id: int, action: str) -> Discussion:
    discussion = get_discussion(db, discussion_id)
    if discussion.user_id != actor_id:
        raise AuthorizationError(f"You can only {action} your own discussions")
    return discussion


def get_discussion_detail(db: Session, discussion_id: int) -> DiscussionDetail:
    """Return a discussion with its author and full reply forest.

    Raises:
        NotFoundError: If the discussion or its author is missing.
    """
    discussion = get_discussion(db, discussion_id)
    author = UserRepository(db).get_by_id(discussion.user_id)
    if author is None:
        logger.warning("Discussion %s has no resolvable author %s", discussion.id, discussion.user_id)
        raise NotFoundError("Discussion author not found")

    view = to_discussion_view(discussion, author)
    replies = [ReplyNodeResponse.model_validate(node) for node in get_reply_tree(db, discussion.id)]
    return DiscussionDetail(
        **view.model_dump(exclude={"author"}),
        author=view.author,
        replies=replies,
        max_reply_depth=settings.max_reply_depth,
    )


async def create_discussion(
    db: Session,
    actor_id: int,
    payload: DiscussionCreate,
    hub: ConnectionHub | None = None,
) -> Discussion:
    """Start a discussion owned by ``actor_id``."""
    image_paths, captions = validate_images(payload.image_paths, payload.captions)
    discussion = DiscussionRepository(db).create(
        user_id=actor_id,
        title=payload.title,
        content=payload.content,
        image_paths=image_paths,
        captions=captions,
    )
    db.commit()
    db.refresh(discussion)
    logger.info("User %s created discussion %s", actor_id, discussion.id)
    if hub is not None:
        await hub.announce(THREAD_EVENT, discussion.id)
    return discussion


async def update_discussion(
    db: Session,
    actor_id: int,
    discussion_id: int,
    payload: DiscussionUpdate,
    hub: ConnectionHub | None = None,
) -> Discussion:
    """Apply an owner's edit; omitted fields keep their value."""
    discussion = _owned_discussion(db, actor_id, discussion_id, "edit")
    if payload.title is not None:
        discussion.title = payload.title
    if payload.content is not None:
        discussion.content = payload.content
    if payload.image_paths is not None or payload.captions is not None:
        discussion.image_paths, discussion.captions = merge_images(
            discussion.image_paths or [],
            discussion.captions or [],
            payload.image_paths,
            payload.captions,
        )
    db.commit()
    db.refresh(discussion)
    if hub is not None:
        await hub.announce(THREAD_EVENT, discussion.id)
    return discussion


async def delete_discussion(
    db: Session,
    actor_id: int,
    discussion_id: int,
    hub: ConnectionHub | None = None,
) -> None:
    """Delete an owner's discussion together with its replies, marks and bookmarks."""
    discussion = _owned_discussion(db, actor_id, discussion_id, "delete")
    DiscussionRepository(db).delete_cascade(discussion)
    db.commit()
    logger.info("User %s deleted discussion %s", actor_id, discussion_id)
    if hub is not None:
        await hub.announce(THREAD_EVENT, discussion_id)
