"""WebSocket-backed pub/sub channel grouping connections by lobby id."""

from __future__ import annotations

import logging
from typing import Any

from .protocol import ws_send_event

logger = logging.getLogger(__name__)


class WebSocketChannel:
    """Deliver coordinator events to registered websocket connections."""

    def __init__(self) -> None:
        self._connections: dict[str, Any] = {}
        self._groups: dict[str, set[str]] = {}

    def register(self, connection_id: str, websocket: Any) -> None:
        self._connections[connection_id] = websocket

    def unregister(self, connection_id: str) -> None:
        """Drop a connection and its group memberships; lobby rosters are untouched."""
        self._connections.pop(connection_id, None)
        for group in list(self._groups):
            self._discard(connection_id, group)

    def group_members(self, group: str) -> set[str]:
        return set(self._groups.get(group, ()))

    def is_connected(self, connection_id: str) -> bool:
        return connection_id in self._connections

    async def join_group(self, connection_id: str, group: str) -> None:
        self._groups.setdefault(group, set()).add(connection_id)

    async def leave_group(self, connection_id: str, group: str) -> None:
        self._discard(connection_id, group)

    async def broadcast(self, group: str, event: str, payload: dict[str, Any]) -> None:
        listeners = self._groups.get(group)
        if not listeners:
            return

        stale: list[str] = []
        for connection_id in list(listeners):
            websocket = self._connections.get(connection_id)
            if websocket is None:
                stale.append(connection_id)
                continue
            try:
                await ws_send_event(websocket, event, payload)
            except Exception:
                stale.append(connection_id)

        for connection_id in stale:
            logger.info("dropping stale connection %s from lobby %s", connection_id, group)
            self._discard(connection_id, group)

    async def send_to_one(self, connection_id: str, event: str, payload: dict[str, Any]) -> None:
        websocket = self._connections.get(connection_id)
        if websocket is None:
            return
        await ws_send_event(websocket, event, payload)

    def _discard(self, connection_id: str, group: str) -> None:
        listeners = self._groups.get(group)
        if listeners is None:
            return
        listeners.discard(connection_id)
        if not listeners:
            self._groups.pop(group, None)
