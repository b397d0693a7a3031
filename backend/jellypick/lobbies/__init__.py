"""Lobby domain package."""

from jellypick.lobbies.registry import InvalidInputError
from jellypick.lobbies.registry import InvalidInviteCodeError
from jellypick.lobbies.registry import Lobby
from jellypick.lobbies.registry import LobbyError
from jellypick.lobbies.registry import LobbyNotFoundError
from jellypick.lobbies.registry import LobbyRegistry
from jellypick.lobbies.registry import RemovalOutcome
from jellypick.lobbies.registry import SessionNotFoundError
from jellypick.lobbies.models import CreateLobbyRequest
from jellypick.lobbies.models import JoinLobbyRequest
from jellypick.lobbies.models import LeaveLobbyRequest
from jellypick.lobbies.models import MoviePayload
from jellypick.lobbies.models import StartSessionRequest
from jellypick.lobbies.models import SubmitVoteRequest

__all__ = [
    "CreateLobbyRequest",
    "InvalidInputError",
    "InvalidInviteCodeError",
    "JoinLobbyRequest",
    "LeaveLobbyRequest",
    "Lobby",
    "LobbyError",
    "LobbyNotFoundError",
    "LobbyRegistry",
    "MoviePayload",
    "RemovalOutcome",
    "SessionNotFoundError",
    "StartSessionRequest",
    "SubmitVoteRequest",
]
