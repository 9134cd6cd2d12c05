"""Notification Pydantic schemas."""

from datetime import datetime
from typing import Literal

from pydantic import BaseModel, ConfigDict

from .user import UserPublic


class NotificationResponse(BaseModel):
    """Notification fields as stored."""

    id: int
    user_id: int
    triggered_by_user_id: int
    discussion_id: int | None
    reply_id: int | None
    type: Literal["reply", "helpful"]
    message: str
    is_read: bool
    email_sent: bool
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class NotificationTargetSummary(BaseModel):
    """Short description of the discussion or reply a notification refers to."""

    id: int
    title: str | None = None
    content: str

    model_config = ConfigDict(from_attributes=True)


class NotificationWithActor(NotificationResponse):
    """Inbox entry with the actor and related content resolved."""

    triggered_by_user: UserPublic
    discussion: NotificationTargetSummary | None = None
    reply: NotificationTargetSummary | None = None
