"""Lobby-domain error classes.

Each class carries the user-facing ``message`` sent back in failure acks; the
exception text itself holds the internal detail for logs.
"""

from __future__ import annotations


class LobbyError(Exception):
    """Base class for lobby-domain errors."""

    message = "Request failed"


class LobbyNotFoundError(LobbyError):
    """Raised when lobby_id does not exist in the registry."""

    message = "Lobby not found"


class InvalidInviteCodeError(LobbyNotFoundError):
    """Raised when an invite code does not map to a live lobby."""

    message = "Invalid invite code"


class SessionNotFoundError(LobbyError):
    """Raised when a lobby has no active voting session."""

    message = "Session not found"


class InvalidInputError(LobbyError):
    """Raised when a required field is missing or malformed."""

    message = "Invalid input"

    def __init__(self, detail: str) -> None:
        super().__init__(detail)
        self.message = f"Invalid input: {detail}"
