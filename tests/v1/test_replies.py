# tests/v1/test_replies.py
"""Tests for reply endpoints."""

from __future__ import annotations

from fastapi import status
from sqlalchemy import select

from threadboard.models import HelpfulMark, Notification, Reply
from threadboard.services.marks import MarkTarget, apply_mark
from tests.conftest import add_discussion, add_reply


def test_top_level_reply_notifies_owner(client, db_session, discussion, alice, bob_headers) -> None:
    response = client.post(
        "/api/v1/replies/",
        json={"discussion_id": discussion.id, "content": "Pinch the suckers"},
        headers=bob_headers,
    )

    assert response.status_code == status.HTTP_201_CREATED
    data = response.json()
    assert data["parent_id"] is None
    assert data["discussion_id"] == discussion.id

    [notification] = db_session.execute(select(Notification)).scalars().all()
    assert notification.user_id == alice.id
    assert notification.reply_id == data["id"]
    # Mail is not configured in tests.
    assert notification.email_sent is False


def test_nested_reply_notifies_parent_author(
    client, db_session, discussion, bob, carol, alice_headers
) -> None:
    parent = add_reply(db_session, bob, discussion)

    response = client.post(
        "/api/v1/replies/",
        json={"discussion_id": discussion.id, "parent_id": parent.id, "content": "Agreed"},
        headers=alice_headers,
    )

    assert response.status_code == status.HTTP_201_CREATED
    assert response.json()["parent_id"] == parent.id
    [notification] = db_session.execute(select(Notification)).scalars().all()
    assert notification.user_id == bob.id
    assert notification.message == "alice replied to your comment"


def test_reply_to_missing_discussion(client, alice_headers) -> None:
    response = client.post(
        "/api/v1/replies/",
        json={"discussion_id": 999, "content": "Hello?"},
        headers=alice_headers,
    )

    assert response.status_code == status.HTTP_404_NOT_FOUND


def test_parent_from_other_discussion_is_rejected(
    client, db_session, discussion, alice, bob, alice_headers
) -> None:
    elsewhere = add_discussion(db_session, bob, title="Elsewhere")
    foreign = add_reply(db_session, bob, elsewhere)

    response = client.post(
        "/api/v1/replies/",
        json={"discussion_id": discussion.id, "parent_id": foreign.id, "content": "x"},
        headers=alice_headers,
    )

    assert response.status_code == status.HTTP_400_BAD_REQUEST
    assert db_session.scalar(select(Reply).where(Reply.discussion_id == discussion.id)) is None


def test_update_reply(client, db_session, discussion, bob, bob_headers, alice_headers) -> None:
    reply = add_reply(db_session, bob, discussion)

    forbidden = client.patch(
        f"/api/v1/replies/{reply.id}", json={"content": "edited"}, headers=alice_headers
    )
    allowed = client.patch(
        f"/api/v1/replies/{reply.id}", json={"content": "edited"}, headers=bob_headers
    )

    assert forbidden.status_code == status.HTTP_403_FORBIDDEN
    assert allowed.status_code == status.HTTP_200_OK
    assert allowed.json()["content"] == "edited"


def test_delete_reply_removes_subtree(
    client, db_session, discussion, alice, bob, carol, bob_headers
) -> None:
    root = add_reply(db_session, bob, discussion, minutes=1)
    child = add_reply(db_session, alice, discussion, parent=root, minutes=2)
    grandchild = add_reply(db_session, carol, discussion, parent=child, minutes=3)
    sibling = add_reply(db_session, alice, discussion, minutes=4)
    apply_mark(db_session, alice.id, MarkTarget.reply(grandchild.id))
    db_session.add(
        Notification(
            user_id=alice.id,
            triggered_by_user_id=carol.id,
            discussion_id=discussion.id,
            reply_id=grandchild.id,
            type="reply",
            message="carol replied to your comment",
        )
    )
    db_session.commit()
    subtree = [root.id, child.id, grandchild.id]
    sibling_id = sibling.id

    response = client.delete(f"/api/v1/replies/{subtree[0]}", headers=bob_headers)

    assert response.status_code == status.HTTP_200_OK
    deleted = response.json()["deleted_ids"]
    assert deleted[0] == subtree[0]
    assert sorted(deleted) == sorted(subtree)
    remaining = db_session.execute(select(Reply.id)).scalars().all()
    assert remaining == [sibling_id]
    assert db_session.execute(select(HelpfulMark)).scalars().all() == []
    [notification] = db_session.execute(select(Notification)).scalars().all()
    assert notification.reply_id is None
    assert notification.discussion_id is not None


def test_delete_reply_by_non_owner_is_forbidden(client, db_session, discussion, bob, alice_headers) -> None:
    reply = add_reply(db_session, bob, discussion)

    response = client.delete(f"/api/v1/replies/{reply.id}", headers=alice_headers)

    assert response.status_code == status.HTTP_403_FORBIDDEN
    assert response.json()["detail"] == "You can only delete your own replies"
