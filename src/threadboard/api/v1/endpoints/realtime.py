"""WebSocket push channel.

Clients connect with ``?token=<access token>``. The server pushes
``{"type": "notification", ...}`` frames to the recipient and
``{"type": "reply" | "discussion", "discussionId": ...}`` frames to everyone
when a thread changes. Anything the client sends is ignored.
"""

from __future__ import annotations

import logging

from fastapi import APIRouter, Query, WebSocket, WebSocketDisconnect, status

from threadboard.api.v1.dependencies import HubDep, SessionDep, resolve_token_user
from threadboard.services import accounts

logger = logging.getLogger(__name__)

router = APIRouter(tags=["realtime"])


@router.websocket("/ws")
async def push_channel(
    websocket: WebSocket,
    db: SessionDep,
    hub: HubDep,
    token: str | None = Query(None),
) -> None:
    user = resolve_token_user(db, token) if token else None
    if user is None:
        await websocket.close(code=status.WS_1008_POLICY_VIOLATION)
        return

    await websocket.accept()
    if await hub.connect(user.id, websocket):
        accounts.set_presence(db, user, online=True)
    try:
        while True:
            await websocket.receive_text()
    except WebSocketDisconnect:
        logger.debug("Socket of user %s closed", user.id)
    finally:
        if await hub.disconnect(user.id, websocket):
            accounts.set_presence(db, user, online=False)
