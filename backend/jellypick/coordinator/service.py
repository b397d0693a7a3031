"""Session coordinator: lobby events in, acknowledgments and broadcasts out."""

from __future__ import annotations

import asyncio
from collections.abc import AsyncIterator
from collections.abc import Awaitable
from collections.abc import Callable
from contextlib import AbstractAsyncContextManager
from contextlib import asynccontextmanager
import logging
from typing import Any

from pydantic import ValidationError

from jellypick.api.views import lobby_view
from jellypick.api.views import session_view
from jellypick.catalog.jellyfin import CatalogProvider
from jellypick.catalog.jellyfin import CatalogUnavailableError
from jellypick.core.errors import InvalidInputError
from jellypick.core.errors import LobbyError
from jellypick.lobbies.models import CreateLobbyRequest
from jellypick.lobbies.models import JoinLobbyRequest
from jellypick.lobbies.models import LeaveLobbyRequest
from jellypick.lobbies.models import StartSessionRequest
from jellypick.lobbies.models import SubmitVoteRequest
from jellypick.lobbies.registry import Lobby
from jellypick.lobbies.registry import LobbyRegistry
from jellypick.voting.session import Movie

from .channel import LOBBY_UPDATE
from .channel import SESSION_UPDATE
from .channel import PubSubChannel

logger = logging.getLogger(__name__)

CREATE_LOBBY = "create-lobby"
JOIN_LOBBY = "join-lobby"
JOIN_LOBBY_CODE = "join-lobby-code"
START_SESSION = "start-session"
SUBMIT_VOTE = "submit-vote"
LEAVE_LOBBY = "leave-lobby"

FAILURE_MESSAGES = {
    CREATE_LOBBY: "Failed to create lobby",
    JOIN_LOBBY: "Failed to join lobby",
    JOIN_LOBBY_CODE: "Failed to join lobby",
    START_SESSION: "Failed to start session",
    SUBMIT_VOTE: "Failed to submit vote",
    LEAVE_LOBBY: "Failed to leave lobby",
}

Ack = dict[str, Any]
Handler = Callable[[str, dict[str, Any]], Awaitable[Ack]]


def ack_ok(lobby_payload: dict[str, Any] | None) -> Ack:
    return {"success": True, "lobby": lobby_payload}


def ack_error(message: str) -> Ack:
    return {"success": False, "error": message}


def describe_validation_error(exc: ValidationError) -> str:
    first = exc.errors()[0]
    location = ".".join(str(part) for part in first.get("loc", ())) or "payload"
    return f"{location}: {first.get('msg', 'invalid value')}"


class KeyedLocks:
    """asyncio locks keyed by id, kept only while someone holds or awaits them."""

    def __init__(self) -> None:
        self._locks: dict[str, asyncio.Lock] = {}
        self._holders: dict[str, int] = {}

    def __len__(self) -> int:
        return len(self._locks)

    @asynccontextmanager
    async def hold(self, key: str) -> AsyncIterator[None]:
        lock = self._locks.setdefault(key, asyncio.Lock())
        self._holders[key] = self._holders.get(key, 0) + 1
        try:
            async with lock:
                yield
        finally:
            self._holders[key] -= 1
            if not self._holders[key]:
                del self._holders[key]
                del self._locks[key]


class SessionCoordinator:
    """Serialize lobby events per lobby id and fan results out to the group.

    Every handler runs "validate, mutate, broadcast" inside the lobby's
    asyncio lock and answers the caller with an ack dict. Create, join and leave
    also hold a per-user lock around the whole move between lobbies. Faults
    never escape ``dispatch``; they become ``{"success": False, "error": ...}``.
    """

    def __init__(
        self,
        *,
        registry: LobbyRegistry,
        channel: PubSubChannel,
        catalog: CatalogProvider | None = None,
    ) -> None:
        self._registry = registry
        self._channel = channel
        self._catalog = catalog
        self._lobby_locks = KeyedLocks()
        self._user_locks = KeyedLocks()
        self._handlers: dict[str, Handler] = {
            CREATE_LOBBY: self._create_lobby,
            JOIN_LOBBY: self._join_lobby,
            JOIN_LOBBY_CODE: self._join_lobby,
            START_SESSION: self._start_session,
            SUBMIT_VOTE: self._submit_vote,
            LEAVE_LOBBY: self._leave_lobby,
        }

    @property
    def registry(self) -> LobbyRegistry:
        return self._registry

    async def dispatch(self, event: str, connection_id: str, payload: Any) -> Ack:
        """Run one inbound event and convert every fault into a failure ack."""
        handler = self._handlers.get(event)
        if handler is None:
            return ack_error(f"Unknown event: {event}")
        if not isinstance(payload, dict):
            return ack_error(InvalidInputError("payload must be an object").message)

        try:
            return await handler(connection_id, payload)
        except ValidationError as exc:
            return ack_error(InvalidInputError(describe_validation_error(exc)).message)
        except (LobbyError, CatalogUnavailableError) as exc:
            logger.info("%s rejected for connection %s: %s", event, connection_id, exc)
            return ack_error(exc.message)
        except Exception:
            logger.exception("%s failed for connection %s", event, connection_id)
            return ack_error(FAILURE_MESSAGES[event])

    async def create_lobby(self, connection_id: str, payload: Any) -> Ack:
        return await self.dispatch(CREATE_LOBBY, connection_id, payload)

    async def join_lobby(self, connection_id: str, payload: Any) -> Ack:
        return await self.dispatch(JOIN_LOBBY, connection_id, payload)

    async def start_session(self, connection_id: str, payload: Any) -> Ack:
        return await self.dispatch(START_SESSION, connection_id, payload)

    async def submit_vote(self, connection_id: str, payload: Any) -> Ack:
        return await self.dispatch(SUBMIT_VOTE, connection_id, payload)

    async def leave_lobby(self, connection_id: str, payload: Any) -> Ack:
        return await self.dispatch(LEAVE_LOBBY, connection_id, payload)

    def _serialize(self, lobby_id: str) -> AbstractAsyncContextManager[None]:
        return self._lobby_locks.hold(lobby_id)

    async def _create_lobby(self, connection_id: str, payload: dict[str, Any]) -> Ack:
        request = CreateLobbyRequest.model_validate(payload)
        creator = request.creator_user.to_user()

        async with self._user_locks.hold(creator.id):
            previous_lobby_id = self._registry.find_lobby_id_by_user(creator.id)
            lobby = self._registry.create_lobby(creator, request.name)
            async with self._serialize(lobby.lobby_id):
                await self._channel.join_group(connection_id, lobby.lobby_id)
                lobby_payload = lobby_view(lobby)

            await self._leave_previous_lobby(connection_id, creator.id, previous_lobby_id, lobby.lobby_id)
            return ack_ok(lobby_payload)

    async def _join_lobby(self, connection_id: str, payload: dict[str, Any]) -> Ack:
        request = JoinLobbyRequest.model_validate(payload)
        user = request.user.to_user()

        # One membership change per user at a time; the previous lobby is left
        # only after the user landed in the target.
        async with self._user_locks.hold(user.id):
            if request.invite_code is not None:
                lobby_id = self._registry.get_lobby_by_invite_code(request.invite_code).lobby_id
            else:
                lobby_id = str(request.lobby_id)
            previous_lobby_id = self._registry.find_lobby_id_by_user(user.id)

            async with self._serialize(lobby_id):
                lobby = self._registry.add_participant(lobby_id, user)
                await self._channel.join_group(connection_id, lobby_id)
                lobby_payload = lobby_view(lobby)
                await self._publish(lobby_id, LOBBY_UPDATE, lobby_payload)

                # Late joiners catch up on the running round privately.
                if lobby.status == "picking" and self._registry.has_session(lobby_id):
                    session_payload = session_view(self._registry.get_session(lobby_id))
                    await self._send(connection_id, SESSION_UPDATE, session_payload)

            await self._leave_previous_lobby(connection_id, user.id, previous_lobby_id, lobby_id)
            return ack_ok(lobby_payload)

    async def _start_session(self, connection_id: str, payload: dict[str, Any]) -> Ack:
        request = StartSessionRequest.model_validate(payload)
        lobby = self._registry.get_lobby(request.lobby_id)
        if request.movies is not None:
            movies = [movie.to_movie() for movie in request.movies]
        else:
            movies = await self._fetch_creator_movies(lobby)

        async with self._serialize(lobby.lobby_id):
            session = self._registry.start_session(lobby.lobby_id, movies)
            lobby = self._registry.get_lobby(lobby.lobby_id)
            lobby_payload = lobby_view(lobby)
            await self._publish(lobby.lobby_id, LOBBY_UPDATE, lobby_payload)
            await self._publish(lobby.lobby_id, SESSION_UPDATE, session_view(session))
            return ack_ok(lobby_payload)

    async def _submit_vote(self, connection_id: str, payload: dict[str, Any]) -> Ack:
        request = SubmitVoteRequest.model_validate(payload)
        lobby_id = request.lobby_id

        async with self._serialize(lobby_id):
            outcome = self._registry.record_vote(
                lobby_id,
                user_id=request.user_id,
                movie_id=request.movie_id,
                vote=request.vote,
            )
            lobby_payload = lobby_view(self._registry.get_lobby(lobby_id))
            session_payload = session_view(self._registry.get_session(lobby_id))
            if outcome.matched:
                await self._publish(lobby_id, LOBBY_UPDATE, lobby_payload)
            await self._publish(lobby_id, SESSION_UPDATE, session_payload)
            return ack_ok(lobby_payload)

    async def _leave_lobby(self, connection_id: str, payload: dict[str, Any]) -> Ack:
        try:
            request = LeaveLobbyRequest.model_validate(payload)
        except ValidationError:
            logger.info("ignoring malformed leave-lobby from connection %s", connection_id)
            return ack_ok(None)
        async with self._user_locks.hold(request.user_id):
            lobby_payload = await self._leave(connection_id, request.user_id, request.lobby_id)
        return ack_ok(lobby_payload)

    async def _leave(self, connection_id: str, user_id: str, lobby_id: str) -> dict[str, Any] | None:
        async with self._serialize(lobby_id):
            outcome = self._registry.remove_participant(lobby_id, user_id)
            lobby_payload = None
            if outcome.lobby is not None:
                lobby_payload = lobby_view(outcome.lobby)
                await self._publish(lobby_id, LOBBY_UPDATE, lobby_payload)
            await self._channel.leave_group(connection_id, lobby_id)
        return lobby_payload

    async def _leave_previous_lobby(
        self,
        connection_id: str,
        user_id: str,
        previous_lobby_id: str | None,
        current_lobby_id: str,
    ) -> None:
        if previous_lobby_id is None or previous_lobby_id == current_lobby_id:
            return
        logger.info("user %s moves out of lobby %s", user_id, previous_lobby_id)
        await self._leave(connection_id, user_id, previous_lobby_id)

    async def _fetch_creator_movies(self, lobby: Lobby) -> list[Movie]:
        if self._catalog is None:
            raise CatalogUnavailableError("no catalog provider configured")
        creator = next((user for user in lobby.participants if user.id == lobby.creator_id), None)
        if creator is None:
            raise CatalogUnavailableError(f"lobby_id={lobby.lobby_id} has no creator credentials")
        return await self._catalog.fetch_movies(creator.credentials)

    async def _publish(self, lobby_id: str, event: str, payload: dict[str, Any]) -> None:
        try:
            await self._channel.broadcast(lobby_id, event, payload)
        except Exception:
            logger.warning("dropped %s broadcast for lobby %s", event, lobby_id, exc_info=True)

    async def _send(self, connection_id: str, event: str, payload: dict[str, Any]) -> None:
        try:
            await self._channel.send_to_one(connection_id, event, payload)
        except Exception:
            logger.warning("dropped %s for connection %s", event, connection_id, exc_info=True)
