# tests/v1/test_realtime_api.py
"""Tests for the WebSocket push channel."""

from __future__ import annotations

import pytest
from fastapi import WebSocketDisconnect

from threadboard.core.security import create_access_token
from threadboard.db.time import as_utc
from threadboard.services.realtime import get_connection_hub
from tests.conftest import BASE_TIME


def test_connection_without_valid_token_is_refused(client) -> None:
    with pytest.raises(WebSocketDisconnect) as excinfo:
        with client.websocket_connect("/api/v1/ws?token=garbage"):
            pass

    assert excinfo.value.code == 1008


def test_session_updates_presence(client, db_session, alice) -> None:
    token = create_access_token(alice.id)

    with client.websocket_connect(f"/api/v1/ws?token={token}") as websocket:
        websocket.send_text("ignored")

    db_session.refresh(alice)
    assert alice.is_online is False
    assert as_utc(alice.last_seen) > BASE_TIME
    assert get_connection_hub().is_connected(alice.id) is False
