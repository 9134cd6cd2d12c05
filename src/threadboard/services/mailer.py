"""Outbound notification email over SendGrid's v3 HTTP API.

Delivery is best effort: every failure is logged and reported through a
``DispatchResult`` instead of an exception, so a broken mail provider can
never fail the write that triggered the notification.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from html import escape

import httpx

from threadboard.core.settings import settings

logger = logging.getLogger(__name__)

SENDGRID_SEND_PATH = "/v3/mail/send"
HTTP_ACCEPTED = 202

_FOOTER_TEXT = (
    "You received this email because you have email notifications enabled. "
    "To disable them, go to your Profile Settings."
)


@dataclass(frozen=True)
class DispatchResult:
    """Outcome of one email or push attempt; callers may ignore it."""

    ok: bool
    detail: str = ""


@dataclass(frozen=True)
class EmailContent:
    """Rendered message in both MIME flavours."""

    subject: str
    html: str
    text: str


@dataclass(frozen=True)
class EmailConfig:
    """Immutable configuration for the mail client."""

    api_key: str | None
    base_url: str
    sender: str
    timeout_seconds: float


def load_email_config() -> EmailConfig:
    """Build configuration object from global settings."""
    return EmailConfig(
        api_key=settings.sendgrid_api_key,
        base_url=settings.sendgrid_base_url,
        sender=settings.email_sender,
        timeout_seconds=float(settings.email_timeout_seconds),
    )


def _discussion_url(discussion_id: int | None) -> str:
    if discussion_id is None:
        return settings.app_url or "/"
    return f"{settings.app_url}/discussions/{discussion_id}"


def render_reply_email(
    *,
    recipient_name: str,
    actor_name: str,
    discussion_title: str,
    reply_content: str,
    discussion_id: int,
) -> EmailContent:
    """Render the "new reply" email."""
    url = _discussion_url(discussion_id)
    html = (
        '<div style="font-family: Arial, sans-serif; max-width: 600px; margin: 0 auto;">'
        '<h2 style="color: #0079D3;">New Reply in Discussion Forum</h2>'
        f"<p>Hello {escape(recipient_name)},</p>"
        f"<p><strong>{escape(actor_name)}</strong> has replied to your discussion: "
        f"<strong>{escape(discussion_title)}</strong></p>"
        '<div style="background-color: #f5f5f5; padding: 15px; border-radius: 5px;">'
        f"<p>{escape(reply_content)}</p></div>"
        f'<p><a href="{escape(url, quote=True)}">View Discussion</a></p>'
        f'<p style="color: #888; font-size: 12px;">{_FOOTER_TEXT}</p>'
        "</div>"
    )
    text = "\n\n".join(
        [
            "New Reply in Discussion Forum",
            f"Hello {recipient_name},",
            f"{actor_name} has replied to your discussion: {discussion_title}",
            f"Reply: {reply_content}",
            f"View the discussion here: {url}",
            _FOOTER_TEXT,
        ]
    )
    return EmailContent(subject=f"New reply to: {discussion_title}", html=html, text=text)


def render_helpful_email(
    *,
    recipient_name: str,
    actor_name: str,
    content_title: str,
    content_kind: str,
    discussion_id: int | None,
) -> EmailContent:
    """Render the "marked as helpful" email; ``content_kind`` is discussion or reply."""
    url = _discussion_url(discussion_id)
    heading = f"Your {content_kind} was marked as helpful!"
    html = (
        '<div style="font-family: Arial, sans-serif; max-width: 600px; margin: 0 auto;">'
        f'<h2 style="color: #0079D3;">{escape(heading)}</h2>'
        f"<p>Hello {escape(recipient_name)},</p>"
        f"<p><strong>{escape(actor_name)}</strong> has marked your {escape(content_kind)} "
        f"&quot;{escape(content_title)}&quot; as helpful.</p>"
        f'<p><a href="{escape(url, quote=True)}">View Content</a></p>'
        f'<p style="color: #888; font-size: 12px;">{_FOOTER_TEXT}</p>'
        "</div>"
    )
    text = "\n\n".join(
        [
            heading,
            f"Hello {recipient_name},",
            f'{actor_name} has marked your {content_kind} "{content_title}" as helpful.',
            f"View it here: {url}",
            _FOOTER_TEXT,
        ]
    )
    return EmailContent(subject=heading, html=html, text=text)


class EmailClient:
    """HTTP client wrapper for the mail provider."""

    def __init__(
        self,
        config: EmailConfig | None = None,
        *,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.config = config or load_email_config()
        self._transport = transport
        self._client: httpx.AsyncClient | None = None
        self._client_lock = asyncio.Lock()

    @property
    def enabled(self) -> bool:
        return bool(self.config.api_key)

    async def _ensure_client(self) -> httpx.AsyncClient:
        async with self._client_lock:
            if self._client is None:
                self._client = httpx.AsyncClient(
                    base_url=self.config.base_url,
                    timeout=httpx.Timeout(self.config.timeout_seconds),
                    transport=self._transport,
                )
        return self._client

    def _build_payload(self, to: str, content: EmailContent) -> dict[str, object]:
        return {
            "personalizations": [{"to": [{"email": to}]}],
            "from": {"email": self.config.sender},
            "subject": content.subject,
            "content": [
                {"type": "text/plain", "value": content.text},
                {"type": "text/html", "value": content.html},
            ],
        }

    async def send(self, to: str, content: EmailContent) -> DispatchResult:
        """Send one message; never raises."""
        if not self.enabled:
            logger.warning("Email service not configured; skipping email to %s", to)
            return DispatchResult(ok=False, detail="email disabled")

        try:
            client = await self._ensure_client()
            response = await client.post(
                SENDGRID_SEND_PATH,
                json=self._build_payload(to, content),
                headers={"Authorization": f"Bearer {self.config.api_key}"},
            )
        except httpx.HTTPError as exc:
            logger.error("Failed to send email notification to %s: %s", to, exc)
            return DispatchResult(ok=False, detail=f"network error: {exc}")

        if response.status_code != HTTP_ACCEPTED:
            logger.error(
                "Mail provider rejected email to %s with status %s",
                to,
                response.status_code,
            )
            return DispatchResult(ok=False, detail=f"http_{response.status_code}")

        logger.info("Email notification sent to %s", to)
        return DispatchResult(ok=True)

    async def close(self) -> None:
        """Clean up underlying HTTP client resources."""
        async with self._client_lock:
            if self._client is not None:
                await self._client.aclose()
                self._client = None


class _EmailClientSingleton:
    """Singleton wrapper for EmailClient."""

    _instance: EmailClient | None = None

    @classmethod
    def get_instance(cls) -> EmailClient:
        """Get or create the singleton EmailClient instance."""
        if cls._instance is None:
            cls._instance = EmailClient()
        return cls._instance


def get_email_client() -> EmailClient:
    """Return a singleton email client instance."""
    return _EmailClientSingleton.get_instance()
