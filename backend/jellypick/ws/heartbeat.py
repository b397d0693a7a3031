"""Keepalive probing and the inbound frame loop for lobby sockets."""

from __future__ import annotations

import asyncio
from collections.abc import Awaitable
from collections.abc import Callable
import json
import logging
import time
from typing import Any

from fastapi import WebSocketDisconnect

from .protocol import ws_send_event

logger = logging.getLogger(__name__)

MessageHandler = Callable[[str], Awaitable[None]]

HEARTBEAT_TIMEOUT_CLOSE_CODE = 4408
MAX_MISSED_PONGS = 2


class PongTracker:
    """Per-connection keepalive bookkeeping: one outstanding probe at a time."""

    def __init__(self) -> None:
        self.last_pong_at: float | None = None
        self.missed_pongs = 0
        self._answered = asyncio.Event()
        self._outstanding = False

    def probe_sent(self) -> None:
        self._outstanding = True
        self._answered.clear()

    def pong_received(self) -> None:
        self.last_pong_at = time.monotonic()
        if self._outstanding:
            self._outstanding = False
            self.missed_pongs = 0
            self._answered.set()

    async def await_pong(self, timeout_seconds: float) -> bool:
        """Wait for the outstanding probe; count a miss on timeout."""
        if not self._outstanding:
            return True
        try:
            await asyncio.wait_for(self._answered.wait(), timeout=timeout_seconds)
        except TimeoutError:
            self._outstanding = False
            self.missed_pongs += 1
            return False
        return True


def control_frame_type(message: str) -> str | None:
    """Return "PING" or "PONG" for keepalive frames (bare text or envelope), else None."""
    if message in ("PING", "PONG"):
        return message
    if not message.startswith("{"):
        return None
    try:
        frame = json.loads(message)
    except json.JSONDecodeError:
        return None
    frame_type = frame.get("type") if isinstance(frame, dict) else None
    return frame_type if frame_type in ("PING", "PONG") else None


async def route_inbound_frame(
    websocket: Any,
    *,
    tracker: PongTracker,
    message: str,
    on_message: MessageHandler,
) -> None:
    control = control_frame_type(message)
    if control == "PING":
        await ws_send_event(websocket, "PONG", {})
    elif control == "PONG":
        tracker.pong_received()
    else:
        await on_message(message)


async def heartbeat_loop(
    websocket: Any,
    *,
    tracker: PongTracker,
    interval_seconds: float = 30.0,
    pong_timeout_seconds: float = 10.0,
    max_missed_pongs: int = MAX_MISSED_PONGS,
) -> None:
    """Probe every interval; close with 4408 once max_missed_pongs probes go unanswered."""
    idle_seconds = max(interval_seconds - pong_timeout_seconds, 0.0)
    while True:
        await ws_send_event(websocket, "PING", {})
        tracker.probe_sent()
        if not await tracker.await_pong(pong_timeout_seconds) and tracker.missed_pongs >= max_missed_pongs:
            logger.info("closing socket after %d missed pongs", tracker.missed_pongs)
            await websocket.close(code=HEARTBEAT_TIMEOUT_CLOSE_CODE, reason="HEARTBEAT_TIMEOUT")
            return
        if idle_seconds:
            await asyncio.sleep(idle_seconds)


async def ws_message_loop(
    websocket: Any,
    *,
    on_message: MessageHandler,
    interval_seconds: float = 30.0,
    pong_timeout_seconds: float = 10.0,
) -> None:
    """Read frames until disconnect while a heartbeat task probes the peer."""
    tracker = PongTracker()
    prober = asyncio.create_task(
        heartbeat_loop(
            websocket,
            tracker=tracker,
            interval_seconds=interval_seconds,
            pong_timeout_seconds=pong_timeout_seconds,
        )
    )
    try:
        while True:
            message = await websocket.receive_text()
            await route_inbound_frame(websocket, tracker=tracker, message=message, on_message=on_message)
    except WebSocketDisconnect:
        return
    finally:
        prober.cancel()
        try:
            await prober
        except asyncio.CancelledError:
            pass
