"""Pub/sub channel contract used by the session coordinator."""

from __future__ import annotations

from typing import Any
from typing import Protocol

LOBBY_UPDATE = "lobby-update"
SESSION_UPDATE = "session-update"


class PubSubChannel(Protocol):
    """Group-addressed event delivery keyed by lobby id."""

    async def join_group(self, connection_id: str, group: str) -> None: ...

    async def leave_group(self, connection_id: str, group: str) -> None: ...

    async def broadcast(self, group: str, event: str, payload: dict[str, Any]) -> None: ...

    async def send_to_one(self, connection_id: str, event: str, payload: dict[str, Any]) -> None: ...
