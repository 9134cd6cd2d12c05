"""
Pydantic schemas for API request/response models.

These schemas define the structure of API data for serialization and validation.
"""

from .discussion import (
    DiscussionCreate,
    DiscussionDetail,
    DiscussionResponse,
    DiscussionUpdate,
    DiscussionView,
    ReplyCreate,
    ReplyNodeResponse,
    ReplyResponse,
    ReplyUpdate,
)
from .mark import (
    BookmarkRequest,
    BookmarkResponse,
    BookmarkStatusResponse,
    HelpfulMarkRequest,
    HelpfulMarkResponse,
    MarkStatusResponse,
)
from .notification import NotificationResponse, NotificationWithActor
from .user import (
    CountResponse,
    LoginRequest,
    LoginResponse,
    ProfileUpdateRequest,
    RegisterRequest,
    UserProfile,
    UserPublic,
)

__all__ = [
    "DiscussionCreate", "DiscussionDetail", "DiscussionResponse", "DiscussionUpdate",
    "DiscussionView",
    "ReplyCreate", "ReplyNodeResponse", "ReplyResponse", "ReplyUpdate",
    "BookmarkRequest", "BookmarkResponse", "BookmarkStatusResponse",
    "HelpfulMarkRequest", "HelpfulMarkResponse", "MarkStatusResponse",
    "NotificationResponse", "NotificationWithActor",
    "CountResponse", "LoginRequest", "LoginResponse", "ProfileUpdateRequest",
    "RegisterRequest", "UserProfile", "UserPublic",
]
