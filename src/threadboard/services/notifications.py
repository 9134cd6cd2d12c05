"""Notification fan-out and the recipient's inbox.

Writes that concern someone else's content (a reply, a helpful mark) are
turned into notification rows here. Each new row is then offered to two
best-effort channels: an email, when the recipient opted in and has an
address, and a push signal to any socket the recipient holds open. Neither
channel can fail the write that triggered it.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any

from sqlalchemy.orm import Session

from threadboard.core.errors import AuthorizationError, NotFoundError
from threadboard.core.settings import settings
from threadboard.models import (
    NOTIFICATION_TYPE_HELPFUL,
    NOTIFICATION_TYPE_REPLY,
    Discussion,
    HelpfulMark,
    Notification,
    Reply,
    User,
)
from threadboard.repositories import NotificationRepository, UserRepository
from threadboard.schemas.notification import NotificationResponse, NotificationWithActor
from threadboard.schemas.user import UserPublic
from threadboard.services.mailer import (
    DispatchResult,
    EmailClient,
    EmailContent,
    get_email_client,
    render_helpful_email,
    render_reply_email,
)
from threadboard.services.realtime import ConnectionHub, get_connection_hub

logger = logging.getLogger(__name__)

EXCERPT_LENGTH = 60
PENDING_EMAIL_BATCH = 100


def _excerpt(text: str) -> str:
    text = " ".join(text.split())
    if len(text) <= EXCERPT_LENGTH:
        return text
    return text[: EXCERPT_LENGTH - 3].rstrip() + "..."


def _display_name(user: User | None) -> str:
    return user.username if user is not None else "Someone"


@dataclass(frozen=True)
class _Recipient:
    user_id: int
    message: str


class NotificationService:
    """Create notifications for replies and helpful marks and deliver them."""

    def __init__(self, mailer: EmailClient | None = None, hub: ConnectionHub | None = None) -> None:
        self.mailer = mailer
        self.hub = hub

    async def notify_on_reply(self, db: Session, reply: Reply) -> list[Notification]:
        """Notify the people a new reply answers.

        A top-level reply reaches the discussion owner. A nested reply
        reaches the owner of the reply it answers and, when
        ``notify_owner_on_nested_replies`` is enabled, the discussion owner
        as well. The replier is never notified and nobody is notified twice.

        The owner setting is off by default so that a side conversation deep
        in a busy thread reaches only the person being answered instead of
        also pinging the discussion owner for every nested exchange.
        """
        discussion = db.get(Discussion, reply.discussion_id)
        if discussion is None:
            logger.warning("Reply %s references missing discussion %s", reply.id, reply.discussion_id)
            return []
        actor_name = _display_name(db.get(User, reply.user_id))
        owner_message = f'{actor_name} replied to your discussion "{discussion.title}"'

        candidates: list[_Recipient] = []
        if reply.parent_id is None:
            candidates.append(_Recipient(discussion.user_id, owner_message))
        else:
            parent = db.get(Reply, reply.parent_id)
            if parent is not None:
                candidates.append(_Recipient(parent.user_id, f"{actor_name} replied to your comment"))
            if settings.notify_owner_on_nested_replies:
                candidates.append(_Recipient(discussion.user_id, owner_message))

        recipients: list[_Recipient] = []
        seen: set[int] = {reply.user_id}
        for candidate in candidates:
            if candidate.user_id in seen:
                continue
            seen.add(candidate.user_id)
            recipients.append(candidate)

        repo = NotificationRepository(db)
        created = [
            repo.create(
                user_id=recipient.user_id,
                triggered_by_user_id=reply.user_id,
                type_=NOTIFICATION_TYPE_REPLY,
                message=recipient.message,
                discussion_id=discussion.id,
                reply_id=reply.id,
            )
            for recipient in recipients
        ]
        db.commit()

        for notification in created:
            await self.dispatch(db, notification)
        return created

    async def notify_on_helpful_mark(self, db: Session, mark: HelpfulMark) -> Notification | None:
        """Notify the owner of the marked content unless they marked it themselves."""
        actor_name = _display_name(db.get(User, mark.user_id))
        if mark.discussion_id is not None:
            discussion = db.get(Discussion, mark.discussion_id)
            if discussion is None:
                return None
            owner_id = discussion.user_id
            message = f'{actor_name} marked your discussion "{discussion.title}" as helpful'
            discussion_id, reply_id = discussion.id, None
        else:
            reply = db.get(Reply, mark.reply_id) if mark.reply_id is not None else None
            if reply is None:
                return None
            owner_id = reply.user_id
            message = f"{actor_name} marked your reply as helpful"
            discussion_id, reply_id = reply.discussion_id, reply.id

        if owner_id == mark.user_id:
            return None

        notification = NotificationRepository(db).create(
            user_id=owner_id,
            triggered_by_user_id=mark.user_id,
            type_=NOTIFICATION_TYPE_HELPFUL,
            message=message,
            discussion_id=discussion_id,
            reply_id=reply_id,
        )
        db.commit()
        await self.dispatch(db, notification)
        return notification

    async def dispatch(
        self,
        db: Session,
        notification: Notification,
    ) -> tuple[DispatchResult, DispatchResult]:
        """Offer a stored notification to the email and push channels.

        Returns:
            The email and push outcomes, in that order.
        """
        email_result = await self._send_email(db, notification)
        push_result = await self._push(notification)
        return email_result, push_result

    async def _send_email(self, db: Session, notification: Notification) -> DispatchResult:
        if self.mailer is None:
            return DispatchResult(ok=False, detail="no mailer")
        if notification.email_sent:
            return DispatchResult(ok=False, detail="already sent")
        recipient = db.get(User, notification.user_id)
        if recipient is None or not recipient.wants_email:
            return DispatchResult(ok=False, detail="recipient opted out")

        try:
            content = self._render(db, notification, recipient)
            result = await self.mailer.send(recipient.email or "", content)
            if result.ok:
                notification.email_sent = True
                db.commit()
        except Exception as exc:
            db.rollback()
            logger.exception("Email dispatch failed for notification %s", notification.id)
            return DispatchResult(ok=False, detail=str(exc))
        return result

    async def _push(self, notification: Notification) -> DispatchResult:
        if self.hub is None:
            return DispatchResult(ok=False, detail="no hub")
        payload: dict[str, Any] = {
            "type": "notification",
            "notification": NotificationResponse.model_validate(notification).model_dump(mode="json"),
        }
        try:
            return await self.hub.push(notification.user_id, payload)
        except Exception as exc:
            logger.exception("Push dispatch failed for notification %s", notification.id)
            return DispatchResult(ok=False, detail=str(exc))

    def _render(self, db: Session, notification: Notification, recipient: User) -> EmailContent:
        actor_name = _display_name(db.get(User, notification.triggered_by_user_id))
        discussion = (
            db.get(Discussion, notification.discussion_id)
            if notification.discussion_id is not None
            else None
        )
        reply = db.get(Reply, notification.reply_id) if notification.reply_id is not None else None

        if notification.type == NOTIFICATION_TYPE_REPLY:
            return render_reply_email(
                recipient_name=recipient.username,
                actor_name=actor_name,
                discussion_title=discussion.title if discussion is not None else "a discussion",
                reply_content=reply.content if reply is not None else notification.message,
                discussion_id=notification.discussion_id or 0,
            )
        if reply is not None:
            title, kind = _excerpt(reply.content), "reply"
        else:
            title = discussion.title if discussion is not None else ""
            kind = "discussion"
        return render_helpful_email(
            recipient_name=recipient.username,
            actor_name=actor_name,
            content_title=title,
            content_kind=kind,
            discussion_id=notification.discussion_id,
        )

    async def send_pending_emails(self, db: Session, *, limit: int = PENDING_EMAIL_BATCH) -> int:
        """Retry email for unread notifications that were never emailed.

        Returns:
            Number of emails delivered by this sweep.
        """
        delivered = 0
        for notification in NotificationRepository(db).list_pending_email(limit=limit):
            result = await self._send_email(db, notification)
            if result.ok:
                delivered += 1
        logger.info("Pending email sweep delivered %s message(s)", delivered)
        return delivered


def list_notifications(
    db: Session,
    user_id: int,
    *,
    limit: int = 50,
    offset: int = 0,
) -> list[NotificationWithActor]:
    """Return the recipient's inbox with actors and related content resolved."""
    notifications = NotificationRepository(db).list_for_user(user_id, limit=limit, offset=offset)
    actors = UserRepository(db).get_many(n.triggered_by_user_id for n in notifications)

    entries: list[NotificationWithActor] = []
    for notification in notifications:
        actor = actors.get(notification.triggered_by_user_id)
        if actor is None:
            logger.warning("Notification %s has no resolvable actor", notification.id)
            continue
        discussion = (
            db.get(Discussion, notification.discussion_id)
            if notification.discussion_id is not None
            else None
        )
        reply = db.get(Reply, notification.reply_id) if notification.reply_id is not None else None
        data = NotificationResponse.model_validate(notification).model_dump()
        data["triggered_by_user"] = UserPublic.model_validate(actor)
        if discussion is not None:
            data["discussion"] = {"id": discussion.id, "title": discussion.title, "content": discussion.content}
        if reply is not None:
            data["reply"] = {"id": reply.id, "content": reply.content}
        entries.append(NotificationWithActor.model_validate(data))
    return entries


def count_unread(db: Session, user_id: int) -> int:
    return NotificationRepository(db).count_unread(user_id)


def _owned_notification(db: Session, user_id: int, notification_id: int) -> Notification:
    notification = NotificationRepository(db).get_by_id(notification_id)
    if notification is None:
        raise NotFoundError("Notification not found")
    if notification.user_id != user_id:
        raise AuthorizationError("Not authorized to modify this notification")
    return notification


def mark_read(db: Session, user_id: int, notification_id: int) -> Notification:
    """Flag one of the recipient's notifications as read."""
    notification = _owned_notification(db, user_id, notification_id)
    if not notification.is_read:
        notification.is_read = True
        db.commit()
        db.refresh(notification)
    return notification


def mark_all_read(db: Session, user_id: int) -> int:
    """Flag all of the recipient's notifications as read; return how many changed."""
    updated = NotificationRepository(db).mark_all_read(user_id)
    db.commit()
    return updated


def delete_notification(db: Session, user_id: int, notification_id: int) -> None:
    """Remove one of the recipient's notifications."""
    notification = _owned_notification(db, user_id, notification_id)
    NotificationRepository(db).delete(notification)
    db.commit()


class _NotificationServiceSingleton:
    """Singleton wrapper for NotificationService."""

    _instance: NotificationService | None = None

    @classmethod
    def get_instance(cls) -> NotificationService:
        """Get or create the service wired to the shared mailer and hub."""
        if cls._instance is None:
            cls._instance = NotificationService(get_email_client(), get_connection_hub())
        return cls._instance


def get_notification_service() -> NotificationService:
    """Return the process-wide notification service."""
    return _NotificationServiceSingleton.get_instance()
