"""Business logic services for the Threadboard forum."""

from .feed import FeedFilter, list_discussions
from .mailer import DispatchResult, EmailClient, get_email_client
from .marks import MarkKind, MarkTarget, TargetKind, apply_mark, remove_mark, upsert_bookmark
from .notifications import NotificationService, get_notification_service
from .realtime import ConnectionHub, get_connection_hub
from .reply_tree import ReplyNode, build_reply_tree, get_reply_tree

__all__ = [
    "ConnectionHub",
    "DispatchResult",
    "EmailClient",
    "FeedFilter",
    "MarkKind",
    "MarkTarget",
    "NotificationService",
    "ReplyNode",
    "TargetKind",
    "apply_mark",
    "build_reply_tree",
    "get_connection_hub",
    "get_email_client",
    "get_notification_service",
    "get_reply_tree",
    "list_discussions",
    "remove_mark",
    "upsert_bookmark",
]
