"""Reply endpoints for the Threadboard API."""

from __future__ import annotations

from fastapi import APIRouter, status

from threadboard.api.v1.dependencies import CurrentUserDep, HubDep, NotifierDep, SessionDep
from threadboard.models import Reply
from threadboard.schemas.discussion import ReplyCreate, ReplyResponse, ReplyUpdate
from threadboard.services import replies as reply_service

router = APIRouter(prefix="/replies", tags=["replies"])


@router.post("/", response_model=ReplyResponse, status_code=status.HTTP_201_CREATED)
async def create_reply(
    payload: ReplyCreate,
    current_user: CurrentUserDep,
    db: SessionDep,
    notifier: NotifierDep,
    hub: HubDep,
) -> Reply:
    """Reply to a discussion, or to another reply when ``parent_id`` is set."""
    return await reply_service.create_reply(db, current_user.id, payload, notifier, hub)


@router.patch("/{reply_id}", response_model=ReplyResponse)
async def update_reply(
    reply_id: int,
    payload: ReplyUpdate,
    current_user: CurrentUserDep,
    db: SessionDep,
    hub: HubDep,
) -> Reply:
    """Edit one of the caller's replies."""
    return await reply_service.update_reply(db, current_user.id, reply_id, payload, hub)


@router.delete("/{reply_id}")
async def delete_reply(
    reply_id: int,
    current_user: CurrentUserDep,
    db: SessionDep,
    hub: HubDep,
) -> dict[str, object]:
    """Delete one of the caller's replies and everything nested under it."""
    removed = await reply_service.delete_reply(db, current_user.id, reply_id, hub)
    return {"message": "Reply deleted successfully", "deleted_ids": removed}
