"""Lobby and session view builders used by REST and WS responses."""

from __future__ import annotations

from jellypick.lobbies.registry import Lobby
from jellypick.users.identity import User
from jellypick.voting.session import Movie
from jellypick.voting.session import VotingSession


def user_view(user: User) -> dict[str, object]:
    return {
        "id": user.id,
        "name": user.name,
        "jellyfinUserId": user.credentials.user_id,
    }


def lobby_view(lobby: Lobby) -> dict[str, object]:
    return {
        "id": lobby.lobby_id,
        "name": lobby.name,
        "creatorId": lobby.creator_id,
        "participants": [user_view(user) for user in lobby.participants],
        "status": lobby.status,
        "selectedMovieId": lobby.selected_movie_id,
        "inviteCode": lobby.invite_code,
    }


def movie_view(movie: Movie) -> dict[str, object]:
    return {
        "id": movie.id,
        "name": movie.name,
        "overview": movie.overview,
        "posterUrl": movie.poster_url,
        "year": movie.year,
        "runtime": movie.runtime,
        "genres": list(movie.genres),
    }


def session_view(session: VotingSession) -> dict[str, object]:
    return {
        "lobbyId": session.lobby_id,
        "movies": [movie_view(movie) for movie in session.movies],
        "votes": {movie_id: dict(votes) for movie_id, votes in session.votes.items()},
        "matchedMovieId": session.matched_movie_id,
    }
