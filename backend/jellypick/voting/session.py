"""Voting session state and unanimous-match detection."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from dataclasses import field
from typing import TYPE_CHECKING

from jellypick.core.errors import InvalidInputError

if TYPE_CHECKING:
    from jellypick.lobbies.registry import Lobby

VOTE_YES = "yes"
VOTE_NO = "no"
VOTE_VALUES = frozenset({VOTE_YES, VOTE_NO})


@dataclass(frozen=True, slots=True)
class Movie:
    """Immutable catalog snapshot taken at session start."""

    id: str
    name: str
    overview: str = ""
    poster_url: str = ""
    year: int = 0
    runtime: int = 0
    genres: tuple[str, ...] = ()


@dataclass(slots=True)
class VotingSession:
    """Per-lobby movie list and vote tally."""

    lobby_id: str
    movies: list[Movie] = field(default_factory=list)
    votes: dict[str, dict[str, str]] = field(default_factory=dict)
    matched_movie_id: str | None = None


@dataclass(frozen=True, slots=True)
class MatchOutcome:
    """Result of one recorded vote."""

    movie_id: str
    matched: bool = False


def _unique_movies(movies: Iterable[Movie]) -> list[Movie]:
    seen: set[str] = set()
    unique: list[Movie] = []
    for movie in movies:
        if movie.id in seen:
            continue
        seen.add(movie.id)
        unique.append(movie)
    return unique


def start_session(lobby: Lobby, movies: Iterable[Movie]) -> VotingSession:
    """Move lobby to picking and build a fresh session with seeded vote maps.

    A new round from a completed lobby is allowed and clears the previous pick.
    """
    session_movies = _unique_movies(movies)
    session = VotingSession(
        lobby_id=lobby.lobby_id,
        movies=session_movies,
        votes={movie.id: {} for movie in session_movies},
    )
    lobby.status = "picking"
    lobby.selected_movie_id = None
    return session


def is_unanimous_yes(session: VotingSession, lobby: Lobby, movie_id: str) -> bool:
    """Check every current participant voted yes on movie_id."""
    if not lobby.participants:
        return False
    movie_votes = session.votes.get(movie_id, {})
    return all(movie_votes.get(user.id) == VOTE_YES for user in lobby.participants)


def record_vote(
    session: VotingSession,
    lobby: Lobby,
    *,
    user_id: str,
    movie_id: str,
    vote: str,
) -> MatchOutcome:
    """Store one vote (last write wins) and complete the lobby on first unanimous yes."""
    if vote not in VOTE_VALUES:
        raise InvalidInputError(f"vote must be one of {sorted(VOTE_VALUES)}")
    if not user_id or not movie_id:
        raise InvalidInputError("user_id and movie_id are required")

    session.votes.setdefault(movie_id, {})[user_id] = vote

    if session.matched_movie_id is not None:
        return MatchOutcome(movie_id=movie_id)
    if not is_unanimous_yes(session, lobby, movie_id):
        return MatchOutcome(movie_id=movie_id)

    session.matched_movie_id = movie_id
    lobby.status = "completed"
    lobby.selected_movie_id = movie_id
    return MatchOutcome(movie_id=movie_id, matched=True)
