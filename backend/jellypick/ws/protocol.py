"""WebSocket wire protocol helpers."""

from __future__ import annotations

import json
from typing import Any

WS_PROTOCOL_VERSION = 1


class FrameError(ValueError):
    """Raised when an inbound frame is not a valid event envelope."""


def ws_event(event_type: str, payload: dict[str, Any]) -> dict[str, Any]:
    return {"v": WS_PROTOCOL_VERSION, "type": event_type, "payload": payload}


async def ws_send_event(websocket: Any, event_type: str, payload: dict[str, Any]) -> None:
    message = ws_event(event_type, payload)
    if hasattr(websocket, "send_json"):
        await websocket.send_json(message)
        return
    if hasattr(websocket, "send_text"):
        await websocket.send_text(json.dumps(message))


def parse_event_frame(message: str) -> tuple[str, Any, Any]:
    """Split ``{"type", "request_id", "payload"}`` text into its parts."""
    try:
        frame = json.loads(message)
    except json.JSONDecodeError as exc:
        raise FrameError("frame is not valid JSON") from exc
    if not isinstance(frame, dict):
        raise FrameError("frame must be a JSON object")

    event_type = frame.get("type")
    if not isinstance(event_type, str) or not event_type:
        raise FrameError("frame type is required")
    return event_type, frame.get("request_id"), frame.get("payload", {})
