"""Process-wide runtime state shared by REST and WebSocket handlers."""

from __future__ import annotations

import time

from jellypick.catalog.jellyfin import JellyfinCatalog
from jellypick.coordinator.service import SessionCoordinator
from jellypick.core.config import Settings
from jellypick.core.config import load_settings
from jellypick.lobbies.registry import LobbyRegistry
from jellypick.ws.channel import WebSocketChannel


def _build_catalog(settings: Settings) -> JellyfinCatalog:
    return JellyfinCatalog(
        server_url=settings.jellypick_jellyfin_url,
        limit=settings.jellypick_catalog_limit,
        timeout_seconds=settings.jellypick_catalog_timeout_seconds,
    )


settings = load_settings()
lobby_registry = LobbyRegistry(invite_code_length=settings.jellypick_invite_code_length)
channel = WebSocketChannel()
catalog = _build_catalog(settings)
coordinator = SessionCoordinator(registry=lobby_registry, channel=channel, catalog=catalog)
started_at = time.monotonic()


def startup() -> None:
    """Reload settings and reset all in-memory lobby runtime state."""
    global settings, lobby_registry, channel, catalog, coordinator, started_at
    settings = load_settings()
    lobby_registry = LobbyRegistry(invite_code_length=settings.jellypick_invite_code_length)
    channel = WebSocketChannel()
    catalog = _build_catalog(settings)
    coordinator = SessionCoordinator(registry=lobby_registry, channel=channel, catalog=catalog)
    started_at = time.monotonic()


__all__ = [
    "Settings",
    "catalog",
    "channel",
    "coordinator",
    "lobby_registry",
    "settings",
    "started_at",
    "startup",
]
