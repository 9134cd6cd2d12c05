"""Version 1 API endpoints."""

from .endpoints import (
    auth_router,
    bookmarks_router,
    discussions_router,
    helpful_router,
    notifications_router,
    realtime_router,
    replies_router,
    users_router,
)

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
