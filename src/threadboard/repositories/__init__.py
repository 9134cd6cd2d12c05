"""Data access helpers over the relational record store."""

from .discussion_repo import DiscussionRepository, ReplyRepository
from .mark_repo import MarkRepository
from .notification_repo import NotificationRepository
from .user_repo import UserRepository

__all__ = [
    "DiscussionRepository",
    "ReplyRepository",
    "MarkRepository",
    "NotificationRepository",
    "UserRepository",
]
