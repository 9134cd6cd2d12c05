"""Notification inbox endpoints."""

from __future__ import annotations

from fastapi import APIRouter, Query

from threadboard.api.v1.dependencies import CurrentUserDep, SessionDep
from threadboard.models import Notification
from threadboard.schemas.notification import NotificationResponse, NotificationWithActor
from threadboard.schemas.user import CountResponse
from threadboard.services import notifications as inbox

router = APIRouter(prefix="/notifications", tags=["notifications"])


@router.get("/", response_model=list[NotificationWithActor])
async def list_notifications(
    current_user: CurrentUserDep,
    db: SessionDep,
    limit: int = Query(50, ge=1, le=200),
    offset: int = Query(0, ge=0),
) -> list[NotificationWithActor]:
    """Return the caller's notifications, newest first."""
    return inbox.list_notifications(db, current_user.id, limit=limit, offset=offset)


@router.get("/unread-count", response_model=CountResponse)
async def unread_count(current_user: CurrentUserDep, db: SessionDep) -> CountResponse:
    return CountResponse(count=inbox.count_unread(db, current_user.id))


@router.patch("/read-all", response_model=CountResponse)
async def read_all(current_user: CurrentUserDep, db: SessionDep) -> CountResponse:
    """Mark every notification of the caller as read; returns how many changed."""
    return CountResponse(count=inbox.mark_all_read(db, current_user.id))


@router.patch("/{notification_id}/read", response_model=NotificationResponse)
async def read_notification(
    notification_id: int,
    current_user: CurrentUserDep,
    db: SessionDep,
) -> Notification:
    """Mark one of the caller's notifications as read."""
    return inbox.mark_read(db, current_user.id, notification_id)


@router.delete("/{notification_id}")
async def delete_notification(
    notification_id: int,
    current_user: CurrentUserDep,
    db: SessionDep,
) -> dict[str, str]:
    """Delete one of the caller's notifications."""
    inbox.delete_notification(db, current_user.id, notification_id)
    return {"message": "Notification deleted"}
