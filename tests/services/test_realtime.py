# tests/services/test_realtime.py
"""Tests for the WebSocket connection hub."""

from __future__ import annotations

import pytest

from threadboard.services.realtime import ConnectionHub


@pytest.mark.asyncio
async def test_connect_reports_first_socket(mocker) -> None:
    hub = ConnectionHub()
    first, second = mocker.AsyncMock(), mocker.AsyncMock()

    assert await hub.connect(1, first) is True
    assert await hub.connect(1, second) is False
    assert hub.is_connected(1) is True


@pytest.mark.asyncio
async def test_disconnect_reports_last_socket(mocker) -> None:
    hub = ConnectionHub()
    first, second = mocker.AsyncMock(), mocker.AsyncMock()
    await hub.connect(1, first)
    await hub.connect(1, second)

    assert await hub.disconnect(1, first) is False
    assert await hub.disconnect(1, second) is True
    assert hub.is_connected(1) is False
    assert await hub.disconnect(1, second) is False


@pytest.mark.asyncio
async def test_push_targets_one_user(mocker) -> None:
    hub = ConnectionHub()
    mine, theirs = mocker.AsyncMock(), mocker.AsyncMock()
    await hub.connect(1, mine)
    await hub.connect(2, theirs)

    result = await hub.push(1, {"type": "notification"})

    assert result.ok is True
    mine.send_json.assert_awaited_once_with({"type": "notification"})
    theirs.send_json.assert_not_awaited()


@pytest.mark.asyncio
async def test_push_to_absent_user_is_not_an_error() -> None:
    result = await ConnectionHub().push(5, {"type": "notification"})

    assert result.ok is False
    assert result.detail == "not connected"


@pytest.mark.asyncio
async def test_announce_reaches_everyone_and_drops_dead_sockets(mocker) -> None:
    hub = ConnectionHub()
    alive, dead = mocker.AsyncMock(), mocker.AsyncMock()
    dead.send_json.side_effect = RuntimeError("gone")
    await hub.connect(1, alive)
    await hub.connect(2, dead)

    await hub.announce("reply", 42)

    alive.send_json.assert_awaited_once_with({"type": "reply", "discussionId": 42})
    assert hub.is_connected(1) is True
    assert hub.is_connected(2) is False
