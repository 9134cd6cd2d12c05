# tests/services/test_reply_tree.py
"""Tests for nested reply tree construction."""

from __future__ import annotations

from datetime import datetime, timedelta

from threadboard.models import Reply, User
from threadboard.services.reply_tree import (
    build_reply_tree,
    collect_descendant_ids,
    get_reply_tree,
)
from tests.conftest import BASE_TIME, add_discussion, add_reply


def _user(user_id: int, name: str | None = None) -> User:
    return User(
        id=user_id,
        username=name or f"u{user_id}",
        password_hash="pbkdf2_sha256$1$salt$digest",
        email=f"u{user_id}@example.com",
        email_notifications=True,
        is_online=False,
        last_seen=BASE_TIME,
    )


def _reply(
    reply_id: int,
    parent_id: int | None = None,
    *,
    user_id: int = 1,
    minutes: int = 0,
    created_at: datetime | None = None,
) -> Reply:
    return Reply(
        id=reply_id,
        content=f"reply {reply_id}",
        user_id=user_id,
        discussion_id=1,
        parent_id=parent_id,
        image_paths=[],
        captions=[],
        helpful_count=0,
        created_at=created_at or BASE_TIME + timedelta(minutes=minutes),
    )


def _shape(nodes) -> list:
    return [(node.id, _shape(node.children)) for node in nodes]


def test_builds_nested_forest_in_creation_order() -> None:
    users = {1: _user(1), 2: _user(2)}
    replies = [
        _reply(4, parent_id=1, minutes=5),
        _reply(2, minutes=2, user_id=2),
        _reply(1, minutes=1),
        _reply(3, parent_id=1, minutes=3, user_id=2),
        _reply(5, parent_id=3, minutes=4),
    ]

    forest = build_reply_tree(replies, users)

    assert _shape(forest) == [
        (1, [(3, [(5, [])]), (4, [])]),
        (2, []),
    ]


def test_every_reply_with_live_ancestry_appears_exactly_once() -> None:
    users = {1: _user(1)}
    replies = [_reply(i, parent_id=(None if i % 3 == 1 else i - 1), minutes=i) for i in range(1, 31)]

    forest = build_reply_tree(replies, users)

    seen: list[int] = []
    pending = list(forest)
    while pending:
        node = pending.pop()
        seen.append(node.id)
        pending.extend(node.children)
    assert sorted(seen) == list(range(1, 31))


def test_sibling_ties_break_on_id() -> None:
    users = {1: _user(1)}
    replies = [_reply(9, minutes=0), _reply(7, minutes=0), _reply(8, minutes=0)]

    forest = build_reply_tree(replies, users)

    assert [node.id for node in forest] == [7, 8, 9]


def test_naive_and_aware_timestamps_compare_as_utc() -> None:
    users = {1: _user(1)}
    naive_later = (BASE_TIME + timedelta(minutes=10)).replace(tzinfo=None)
    replies = [_reply(1, created_at=naive_later), _reply(2, minutes=5)]

    forest = build_reply_tree(replies, users)

    assert [node.id for node in forest] == [2, 1]


def test_orphans_are_dropped_with_their_subtree() -> None:
    users = {1: _user(1)}
    replies = [
        _reply(1, minutes=1),
        _reply(2, parent_id=99, minutes=2),
        _reply(3, parent_id=2, minutes=3),
    ]

    forest = build_reply_tree(replies, users)

    assert _shape(forest) == [(1, [])]


def test_parent_cycles_are_excluded() -> None:
    users = {1: _user(1)}
    replies = [
        _reply(1, minutes=1),
        _reply(2, parent_id=3, minutes=2),
        _reply(3, parent_id=2, minutes=3),
        _reply(4, parent_id=4, minutes=4),
    ]

    forest = build_reply_tree(replies, users)

    assert _shape(forest) == [(1, [])]


def test_missing_author_drops_reply_and_descendants() -> None:
    users = {1: _user(1)}
    replies = [
        _reply(1, minutes=1),
        _reply(2, user_id=42, minutes=2),
        _reply(3, parent_id=2, minutes=3),
    ]

    forest = build_reply_tree(replies, users)

    assert _shape(forest) == [(1, [])]


def test_nodes_carry_public_author_without_credentials() -> None:
    users = {1: _user(1, "alice")}

    [node] = build_reply_tree([_reply(1)], users)

    assert node.author.username == "alice"
    assert node.children == []
    dumped = node.author.model_dump()
    assert "password_hash" not in dumped
    assert "email" not in dumped


def test_deep_chain_does_not_hit_recursion_limit() -> None:
    users = {1: _user(1)}
    depth = 5_000
    replies = [_reply(1)]
    replies.extend(_reply(i, parent_id=i - 1, minutes=i) for i in range(2, depth + 1))

    forest = build_reply_tree(replies, users)

    node = forest[0]
    levels = 1
    while node.children:
        node = node.children[0]
        levels += 1
    assert levels == depth


def test_empty_input_yields_empty_forest() -> None:
    assert build_reply_tree([], {}) == []


def test_collect_descendant_ids_walks_whole_subtree() -> None:
    replies = [
        _reply(1),
        _reply(2, parent_id=1),
        _reply(3, parent_id=2),
        _reply(4, parent_id=1),
        _reply(5),
    ]

    assert sorted(collect_descendant_ids(replies, 1)) == [2, 3, 4]
    assert collect_descendant_ids(replies, 5) == []


def test_get_reply_tree_reads_from_store(db_session, alice, bob) -> None:
    discussion = add_discussion(db_session, alice)
    other = add_discussion(db_session, alice, title="Other")
    top = add_reply(db_session, bob, discussion, minutes=1)
    add_reply(db_session, alice, discussion, parent=top, minutes=2)
    add_reply(db_session, bob, other, minutes=3)

    forest = get_reply_tree(db_session, discussion.id)

    assert len(forest) == 1
    assert forest[0].author.username == "bob"
    assert [child.author.username for child in forest[0].children] == ["alice"]
