"""Health and version routes."""

from __future__ import annotations

from datetime import datetime
from datetime import timezone
from importlib.metadata import PackageNotFoundError
from importlib.metadata import version as package_version
import time

from fastapi import APIRouter

import jellypick.runtime as runtime

APP_NAME = "jellypick"
FALLBACK_VERSION = "1.0.0"

router = APIRouter()


def _app_version() -> str:
    try:
        return package_version(APP_NAME)
    except PackageNotFoundError:
        return FALLBACK_VERSION


@router.get("/api/health")
def health() -> dict[str, object]:
    """Liveness probe with uptime and live lobby count."""
    return {
        "status": "ok",
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "uptime_seconds": round(time.monotonic() - runtime.started_at, 3),
        "lobby_count": len(runtime.lobby_registry.list_lobbies()),
    }


@router.get("/api/version")
def version() -> dict[str, str]:
    current = _app_version()
    return {"name": APP_NAME, "version": current, "server_version": current}
