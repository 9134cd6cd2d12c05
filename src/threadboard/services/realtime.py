"""In-process registry of live WebSocket connections used for push signals."""

from __future__ import annotations

import asyncio
import logging
from collections import defaultdict
from typing import Any

from fastapi import WebSocket

from threadboard.services.mailer import DispatchResult

logger = logging.getLogger(__name__)


class ConnectionHub:
    """Fan push payloads out to the sockets a user holds open.

    Delivery is at most once and best effort. A socket that fails to accept
    a frame is dropped from the registry.
    """

    def __init__(self) -> None:
        self._connections: dict[int, set[WebSocket]] = defaultdict(set)
        self._lock = asyncio.Lock()

    async def connect(self, user_id: int, websocket: WebSocket) -> bool:
        """Register a socket; return True when it is the user's first one."""
        async with self._lock:
            first = not self._connections.get(user_id)
            self._connections[user_id].add(websocket)
        logger.debug("User %s connected (first=%s)", user_id, first)
        return first

    async def disconnect(self, user_id: int, websocket: WebSocket) -> bool:
        """Forget a socket; return True when the user has none left."""
        async with self._lock:
            sockets = self._connections.get(user_id)
            if sockets is None:
                return False
            sockets.discard(websocket)
            if sockets:
                return False
            del self._connections[user_id]
        logger.debug("User %s has no live connections", user_id)
        return True

    def is_connected(self, user_id: int) -> bool:
        return bool(self._connections.get(user_id))

    async def _send_all(self, targets: list[tuple[int, WebSocket]], payload: dict[str, Any]) -> int:
        delivered = 0
        stale: list[tuple[int, WebSocket]] = []
        for user_id, websocket in targets:
            try:
                await websocket.send_json(payload)
            except Exception as exc:
                logger.warning("Dropping socket of user %s after send failure: %s", user_id, exc)
                stale.append((user_id, websocket))
            else:
                delivered += 1
        for user_id, websocket in stale:
            await self.disconnect(user_id, websocket)
        return delivered

    async def push(self, user_id: int, payload: dict[str, Any]) -> DispatchResult:
        """Send ``payload`` to every socket of one user."""
        async with self._lock:
            targets = [(user_id, ws) for ws in self._connections.get(user_id, ())]
        if not targets:
            return DispatchResult(ok=False, detail="not connected")
        delivered = await self._send_all(targets, payload)
        return DispatchResult(ok=delivered > 0, detail=f"{delivered}/{len(targets)} sockets")

    async def broadcast(self, payload: dict[str, Any]) -> DispatchResult:
        """Send ``payload`` to every live socket."""
        async with self._lock:
            targets = [
                (user_id, ws)
                for user_id, sockets in self._connections.items()
                for ws in sockets
            ]
        delivered = await self._send_all(targets, payload)
        return DispatchResult(ok=True, detail=f"{delivered}/{len(targets)} sockets")

    async def announce(self, kind: str, discussion_id: int) -> DispatchResult:
        """Tell every open client that a thread changed; ``kind`` is reply or discussion."""
        return await self.broadcast({"type": kind, "discussionId": discussion_id})


class _ConnectionHubSingleton:
    """Singleton wrapper for ConnectionHub."""

    _instance: ConnectionHub | None = None

    @classmethod
    def get_instance(cls) -> ConnectionHub:
        """Get or create the process-wide hub."""
        if cls._instance is None:
            cls._instance = ConnectionHub()
        return cls._instance


def get_connection_hub() -> ConnectionHub:
    """Return the singleton connection hub."""
    return _ConnectionHubSingleton.get_instance()
