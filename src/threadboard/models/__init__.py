# src/threadboard/models/__init__.py
"""SQLAlchemy models for the Threadboard forum."""

from .discussion import Discussion, Reply
from .mark import Bookmark, HelpfulMark, SaveMode
from .notification import (
    NOTIFICATION_TYPE_HELPFUL,
    NOTIFICATION_TYPE_REPLY,
    Notification,
)
from .user import User

__all__ = [
    "Discussion", "Reply",
    "Bookmark", "HelpfulMark", "SaveMode",
    "Notification", "NOTIFICATION_TYPE_HELPFUL", "NOTIFICATION_TYPE_REPLY",
    "User",
]
