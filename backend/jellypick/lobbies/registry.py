"""In-memory lobby domain models and registry."""

from __future__ import annotations

from collections.abc import Callable
from collections.abc import Iterable
from collections.abc import Iterator
from contextlib import contextmanager
from dataclasses import dataclass
from dataclasses import field
import logging
import secrets
import string
import threading
import uuid

from jellypick.core.errors import InvalidInputError
from jellypick.core.errors import InvalidInviteCodeError
from jellypick.core.errors import LobbyError
from jellypick.core.errors import LobbyNotFoundError
from jellypick.core.errors import SessionNotFoundError
from jellypick.users.identity import MembershipIndex
from jellypick.users.identity import User
from jellypick.voting.session import MatchOutcome
from jellypick.voting.session import Movie
from jellypick.voting.session import VotingSession
from jellypick.voting.session import record_vote
from jellypick.voting.session import start_session

logger = logging.getLogger(__name__)

DEFAULT_INVITE_CODE_LENGTH = 6
INVITE_CODE_ALPHABET = string.digits + string.ascii_uppercase


def generate_invite_code(length: int = DEFAULT_INVITE_CODE_LENGTH) -> str:
    """Return a random upper-case base-36 code."""
    return "".join(secrets.choice(INVITE_CODE_ALPHABET) for _ in range(length))


def normalize_invite_code(raw_code: str | None) -> str:
    code = (raw_code or "").strip().upper()
    if not code:
        raise InvalidInputError("invite code is required")
    return code


@dataclass(slots=True)
class Lobby:
    """Lobby aggregate state."""

    lobby_id: str
    name: str
    creator_id: str
    invite_code: str
    participants: list[User] = field(default_factory=list)
    status: str = "waiting"
    selected_movie_id: str | None = None

    def has_participant(self, user_id: str) -> bool:
        return any(user.id == user_id for user in self.participants)


@dataclass(frozen=True, slots=True)
class RemovalOutcome:
    """Result of removing one participant.

    ``lobby`` is set when the lobby survives, ``destroyed`` when the removal
    emptied it; both unset means the lobby did not exist.
    """

    lobby_id: str
    lobby: Lobby | None = None
    destroyed: bool = False


class LobbyRegistry:
    """In-memory registry for live lobbies, invite codes and voting sessions."""

    def __init__(
        self,
        *,
        invite_code_length: int = DEFAULT_INVITE_CODE_LENGTH,
        code_factory: Callable[[int], str] = generate_invite_code,
        membership: MembershipIndex | None = None,
    ) -> None:
        if invite_code_length < 1:
            raise ValueError("invite_code_length must be >= 1")

        self._invite_code_length = invite_code_length
        self._code_factory = code_factory
        self._membership = membership or MembershipIndex()
        self._lobbies: dict[str, Lobby] = {}
        self._invite_codes: dict[str, str] = {}
        self._sessions: dict[str, VotingSession] = {}
        self._lobby_locks: dict[str, threading.RLock] = {}
        self._guard = threading.RLock()

    def get_lobby(self, lobby_id: str) -> Lobby:
        """Return lobby snapshot by lobby id."""
        lobby = self._lobbies.get(lobby_id)
        if lobby is None:
            raise LobbyNotFoundError(f"lobby_id={lobby_id} not found")
        return lobby

    def get_lobby_by_invite_code(self, invite_code: str | None) -> Lobby:
        """Resolve an invite code (case-insensitive) to its live lobby."""
        code = normalize_invite_code(invite_code)
        lobby_id = self._invite_codes.get(code)
        if lobby_id is None or lobby_id not in self._lobbies:
            raise InvalidInviteCodeError(f"invite_code={code} not found")
        return self._lobbies[lobby_id]

    def list_lobbies(self) -> list[Lobby]:
        with self._guard:
            return list(self._lobbies.values())

    def find_lobby_id_by_user(self, user_id: str) -> str | None:
        """Return current lobby id for user, or None if user is not in any lobby."""
        return self._membership.lobby_of(user_id)

    def get_session(self, lobby_id: str) -> VotingSession:
        """Return the active voting session for lobby_id."""
        session = self._sessions.get(lobby_id)
        if session is None:
            raise SessionNotFoundError(f"lobby_id={lobby_id} has no active session")
        return session

    def has_session(self, lobby_id: str) -> bool:
        return lobby_id in self._sessions

    def invite_code_in_use(self, invite_code: str) -> bool:
        return invite_code in self._invite_codes

    @contextmanager
    def lock_lobby(self, lobby_id: str) -> Iterator[None]:
        """Acquire one lobby write lock."""
        with self._guard:
            self.get_lobby(lobby_id)
            lock = self._lobby_locks[lobby_id]
        with lock:
            yield

    def create_lobby(self, creator: User, name: str) -> Lobby:
        """Create a waiting lobby owned by creator with a fresh invite code."""
        with self._guard:
            lobby_id = str(uuid.uuid4())
            while lobby_id in self._lobbies:
                lobby_id = str(uuid.uuid4())
            invite_code = self._allocate_invite_code()
            lobby = Lobby(
                lobby_id=lobby_id,
                name=name,
                creator_id=creator.id,
                invite_code=invite_code,
                participants=[creator],
            )
            self._lobbies[lobby_id] = lobby
            self._invite_codes[invite_code] = lobby_id
            self._lobby_locks[lobby_id] = threading.RLock()

        self._membership.assign(creator.id, lobby_id)
        logger.info("lobby %s created by user %s (invite code %s)", lobby_id, creator.id, invite_code)
        return lobby

    def add_participant(self, lobby_id: str, user: User) -> Lobby:
        """Append user to the roster; joining twice is a no-op."""
        with self.lock_lobby(lobby_id):
            lobby = self.get_lobby(lobby_id)
            if not lobby.has_participant(user.id):
                lobby.participants.append(user)
            self._membership.assign(user.id, lobby_id)
            return lobby

    def remove_participant(self, lobby_id: str, user_id: str) -> RemovalOutcome:
        """Remove user, hand the creator role down, destroy the lobby when empty."""
        try:
            with self.lock_lobby(lobby_id):
                lobby = self.get_lobby(lobby_id)
                lobby.participants = [user for user in lobby.participants if user.id != user_id]
                self._membership.release(user_id, lobby_id)

                if not lobby.participants:
                    self._destroy(lobby)
                    return RemovalOutcome(lobby_id=lobby_id, destroyed=True)

                if lobby.creator_id == user_id:
                    lobby.creator_id = self._pick_next_creator(lobby)
                return RemovalOutcome(lobby_id=lobby_id, lobby=lobby)
        except LobbyNotFoundError:
            return RemovalOutcome(lobby_id=lobby_id)

    def start_session(self, lobby_id: str, movies: Iterable[Movie]) -> VotingSession:
        """Replace the lobby's voting session with a fresh one."""
        with self.lock_lobby(lobby_id):
            lobby = self.get_lobby(lobby_id)
            session = start_session(lobby, movies)
            self._sessions[lobby_id] = session
            logger.info("lobby %s started picking with %d movies", lobby_id, len(session.movies))
            return session

    def record_vote(self, lobby_id: str, *, user_id: str, movie_id: str, vote: str) -> MatchOutcome:
        """Record one vote under the lobby lock and evaluate the match."""
        self.get_session(lobby_id)
        try:
            with self.lock_lobby(lobby_id):
                session = self.get_session(lobby_id)
                lobby = self.get_lobby(lobby_id)
                outcome = record_vote(session, lobby, user_id=user_id, movie_id=movie_id, vote=vote)
        except LobbyNotFoundError as exc:
            raise SessionNotFoundError(f"lobby_id={lobby_id} has no active session") from exc

        if outcome.matched:
            logger.info("lobby %s matched movie %s", lobby_id, movie_id)
        return outcome

    def _allocate_invite_code(self) -> str:
        code = self._code_factory(self._invite_code_length)
        while code in self._invite_codes:
            logger.debug("invite code collision on %s, regenerating", code)
            code = self._code_factory(self._invite_code_length)
        return code

    def _destroy(self, lobby: Lobby) -> None:
        with self._guard:
            self._lobbies.pop(lobby.lobby_id, None)
            if self._invite_codes.get(lobby.invite_code) == lobby.lobby_id:
                del self._invite_codes[lobby.invite_code]
            self._sessions.pop(lobby.lobby_id, None)
            self._lobby_locks.pop(lobby.lobby_id, None)
        logger.info("lobby %s destroyed", lobby.lobby_id)

    @staticmethod
    def _pick_next_creator(lobby: Lobby) -> str:
        return lobby.participants[0].id


__all__ = [
    "DEFAULT_INVITE_CODE_LENGTH",
    "INVITE_CODE_ALPHABET",
    "InvalidInputError",
    "InvalidInviteCodeError",
    "Lobby",
    "LobbyError",
    "LobbyNotFoundError",
    "LobbyRegistry",
    "RemovalOutcome",
    "SessionNotFoundError",
    "generate_invite_code",
    "normalize_invite_code",
]
