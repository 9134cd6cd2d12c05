"""Discussion endpoints for the Threadboard API."""

from __future__ import annotations

from fastapi import APIRouter, Query, status

from threadboard.api.v1.dependencies import CurrentUserDep, HubDep, OptionalUserDep, SessionDep
from threadboard.models import Discussion
from threadboard.schemas.discussion import (
    DiscussionCreate,
    DiscussionDetail,
    DiscussionResponse,
    DiscussionUpdate,
    DiscussionView,
    ReplyNodeResponse,
)
from threadboard.services import discussions as discussion_service
from threadboard.services.feed import FeedFilter, list_discussions as compose_feed
from threadboard.services.reply_tree import get_reply_tree

router = APIRouter(prefix="/discussions", tags=["discussions"])


@router.get("/", response_model=list[DiscussionView])
async def list_discussions(
    db: SessionDep,
    current_user: OptionalUserDep,
    feed_filter: FeedFilter = Query(FeedFilter.RECENT, alias="filter"),
    limit: int = Query(50, ge=1, le=100, description="Maximum number of discussions to return"),
    offset: int = Query(0, ge=0),
) -> list[DiscussionView]:
    """List discussions by recency, helpfulness, ownership or bookmarks.

    ``my`` and ``bookmarks`` return an empty list for anonymous callers.
    """
    acting_user_id = current_user.id if current_user is not None else None
    return compose_feed(db, feed_filter, acting_user_id, limit=limit, offset=offset)


@router.get("/{discussion_id}", response_model=DiscussionDetail)
async def get_discussion(discussion_id: int, db: SessionDep) -> DiscussionDetail:
    """Return a discussion with its author and nested replies."""
    return discussion_service.get_discussion_detail(db, discussion_id)


@router.get("/{discussion_id}/replies", response_model=list[ReplyNodeResponse])
async def get_discussion_replies(discussion_id: int, db: SessionDep) -> list[ReplyNodeResponse]:
    """Return only the reply forest of a discussion."""
    discussion_service.get_discussion(db, discussion_id)
    return [ReplyNodeResponse.model_validate(node) for node in get_reply_tree(db, discussion_id)]


@router.post("/", response_model=DiscussionResponse, status_code=status.HTTP_201_CREATED)
async def create_discussion(
    payload: DiscussionCreate,
    current_user: CurrentUserDep,
    db: SessionDep,
    hub: HubDep,
) -> Discussion:
    """Start a discussion as the caller."""
    return await discussion_service.create_discussion(db, current_user.id, payload, hub)


@router.patch("/{discussion_id}", response_model=DiscussionResponse)
async def update_discussion(
    discussion_id: int,
    payload: DiscussionUpdate,
    current_user: CurrentUserDep,
    db: SessionDep,
    hub: HubDep,
) -> Discussion:
    """Edit one of the caller's discussions."""
    return await discussion_service.update_discussion(db, current_user.id, discussion_id, payload, hub)


@router.delete("/{discussion_id}")
async def delete_discussion(
    discussion_id: int,
    current_user: CurrentUserDep,
    db: SessionDep,
    hub: HubDep,
) -> dict[str, str]:
    """Delete one of the caller's discussions with everything attached to it."""
    await discussion_service.delete_discussion(db, current_user.id, discussion_id, hub)
    return {"message": "Discussion deleted successfully"}
