"""WebSocket route carrying lobby events, acks and group broadcasts."""

from __future__ import annotations

import logging
from typing import Any
import uuid

from fastapi import APIRouter
from fastapi import WebSocket
from fastapi import WebSocketDisconnect

import jellypick.runtime as runtime

from .heartbeat import ws_message_loop
from .protocol import FrameError
from .protocol import parse_event_frame
from .protocol import ws_send_event

logger = logging.getLogger(__name__)

router = APIRouter()


async def handle_event_frame(websocket: Any, *, connection_id: str, message: str) -> None:
    """Dispatch one event frame to the coordinator and reply with its ack."""
    try:
        event_type, request_id, payload = parse_event_frame(message)
    except FrameError as exc:
        await ws_send_event(websocket, "ERROR", {"message": str(exc)})
        return

    ack = await runtime.coordinator.dispatch(event_type, connection_id, payload)
    await ws_send_event(websocket, "ACK", {"request_id": request_id, "event": event_type, "ack": ack})


@router.websocket("/ws")
async def ws_lobby_events(websocket: WebSocket) -> None:
    """Lobby event socket: CONNECTED greeting, event acks and lobby/session pushes."""
    await websocket.accept()
    connection_id = uuid.uuid4().hex
    channel = runtime.channel
    channel.register(connection_id, websocket)
    logger.info("connection %s opened", connection_id)

    async def _on_message(message: str) -> None:
        await handle_event_frame(websocket, connection_id=connection_id, message=message)

    try:
        await ws_send_event(websocket, "CONNECTED", {"connection_id": connection_id})
        await ws_message_loop(
            websocket,
            on_message=_on_message,
            interval_seconds=runtime.settings.jellypick_ws_heartbeat_interval_seconds,
            pong_timeout_seconds=runtime.settings.jellypick_ws_pong_timeout_seconds,
        )
    except WebSocketDisconnect:
        return
    finally:
        channel.unregister(connection_id)
        logger.info("connection %s closed", connection_id)
