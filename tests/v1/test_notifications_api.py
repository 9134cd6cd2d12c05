# tests/v1/test_notifications_api.py
"""Tests for the notification inbox endpoints."""

from __future__ import annotations

from datetime import timedelta

from fastapi import status

from threadboard.models import Notification
from tests.conftest import BASE_TIME


def _notify(db_session, recipient, actor, message: str, minutes: int = 0, **fields) -> Notification:
    notification = Notification(
        user_id=recipient.id,
        triggered_by_user_id=actor.id,
        type=fields.pop("type", "reply"),
        message=message,
        created_at=BASE_TIME + timedelta(minutes=minutes),
        **fields,
    )
    db_session.add(notification)
    db_session.commit()
    db_session.refresh(notification)
    return notification


def test_inbox_is_newest_first_and_private(client, db_session, discussion, alice, bob, alice_headers) -> None:
    older = _notify(db_session, alice, bob, "first", minutes=1, discussion_id=discussion.id)
    newer = _notify(db_session, alice, bob, "second", minutes=2, type="helpful")
    _notify(db_session, bob, alice, "for bob")

    response = client.get("/api/v1/notifications/", headers=alice_headers)

    assert response.status_code == status.HTTP_200_OK
    data = response.json()
    assert [n["id"] for n in data] == [newer.id, older.id]
    assert data[0]["triggered_by_user"]["username"] == "bob"
    assert data[1]["discussion"]["title"] == discussion.title


def test_unread_count_and_read_all(client, db_session, alice, bob, alice_headers) -> None:
    _notify(db_session, alice, bob, "one")
    _notify(db_session, alice, bob, "two")

    assert client.get("/api/v1/notifications/unread-count", headers=alice_headers).json() == {"count": 2}

    response = client.patch("/api/v1/notifications/read-all", headers=alice_headers)

    assert response.json() == {"count": 2}
    assert client.get("/api/v1/notifications/unread-count", headers=alice_headers).json() == {"count": 0}


def test_mark_single_read(client, db_session, alice, bob, alice_headers, bob_headers) -> None:
    notification = _notify(db_session, alice, bob, "one")

    forbidden = client.patch(f"/api/v1/notifications/{notification.id}/read", headers=bob_headers)
    allowed = client.patch(f"/api/v1/notifications/{notification.id}/read", headers=alice_headers)

    assert forbidden.status_code == status.HTTP_403_FORBIDDEN
    assert allowed.status_code == status.HTTP_200_OK
    assert allowed.json()["is_read"] is True


def test_delete_notification(client, db_session, alice, bob, alice_headers) -> None:
    notification_id = _notify(db_session, alice, bob, "one").id

    first = client.delete(f"/api/v1/notifications/{notification_id}", headers=alice_headers)
    second = client.delete(f"/api/v1/notifications/{notification_id}", headers=alice_headers)

    assert first.status_code == status.HTTP_200_OK
    assert second.status_code == status.HTTP_404_NOT_FOUND


def test_inbox_requires_auth(client) -> None:
    response = client.get("/api/v1/notifications/")

    assert response.status_code in (status.HTTP_401_UNAUTHORIZED, status.HTTP_403_FORBIDDEN)
