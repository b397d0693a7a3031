"""Read-only lobby REST routes."""

from __future__ import annotations

from fastapi import APIRouter

import jellypick.runtime as runtime
from jellypick.api.errors import raise_for_domain_error
from jellypick.api.views import lobby_view
from jellypick.api.views import session_view
from jellypick.core.errors import LobbyError

router = APIRouter()


@router.get("/api/lobbies/by-code/{invite_code}")
def get_lobby_by_code(invite_code: str) -> dict[str, object]:
    """Resolve an invite code to its lobby."""
    try:
        lobby = runtime.lobby_registry.get_lobby_by_invite_code(invite_code)
    except LobbyError as exc:
        raise_for_domain_error(exc, detail={"invite_code": invite_code})
    return lobby_view(lobby)


@router.get("/api/lobbies/{lobby_id}")
def get_lobby_detail(lobby_id: str) -> dict[str, object]:
    try:
        lobby = runtime.lobby_registry.get_lobby(lobby_id)
    except LobbyError as exc:
        raise_for_domain_error(exc, detail={"lobby_id": lobby_id})
    return lobby_view(lobby)


@router.get("/api/lobbies/{lobby_id}/session")
def get_lobby_session(lobby_id: str) -> dict[str, object]:
    """Return the active voting session of one lobby."""
    try:
        session = runtime.lobby_registry.get_session(lobby_id)
    except LobbyError as exc:
        raise_for_domain_error(exc, detail={"lobby_id": lobby_id})
    return session_view(session)
