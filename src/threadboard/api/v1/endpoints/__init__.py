"""API endpoint modules for version 1."""

from .auth import router as auth_router
from .bookmarks import router as bookmarks_router
from .discussions import router as discussions_router
from .helpful import router as helpful_router
from .notifications import router as notifications_router
from .realtime import router as realtime_router
from .replies import router as replies_router
from .users import router as users_router

__all__ = [
    "auth_router",
    "bookmarks_router",
    "discussions_router",
    "helpful_router",
    "notifications_router",
    "realtime_router",
    "replies_router",
    "users_router",
]
