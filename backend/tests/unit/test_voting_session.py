"""Voting session and match detection tests."""

from __future__ import annotations

import pytest

from jellypick.core.errors import InvalidInputError
from jellypick.voting.session import Movie
from jellypick.voting.session import is_unanimous_yes
from jellypick.voting.session import record_vote
from jellypick.voting.session import start_session


def _lobby_with(registry, make_user, *user_ids: str):
    first, *rest = user_ids
    lobby = registry.create_lobby(make_user(first, first.upper()), "L")
    for user_id in rest:
        registry.add_participant(lobby.lobby_id, make_user(user_id, user_id.upper()))
    return lobby


def test_start_session_seeds_every_movie(registry, make_user, movies) -> None:
    """Input: start with [M1, M2] -> Output: picking lobby, empty vote map per movie."""
    lobby = _lobby_with(registry, make_user, "a", "b")

    session = start_session(lobby, movies)

    assert lobby.status == "picking"
    assert session.lobby_id == lobby.lobby_id
    assert [movie.id for movie in session.movies] == ["M1", "M2"]
    assert session.votes == {"M1": {}, "M2": {}}
    assert session.matched_movie_id is None


def test_start_session_drops_duplicate_movie_ids(registry, make_user) -> None:
    lobby = _lobby_with(registry, make_user, "a")
    movies = [Movie(id="M1", name="first"), Movie(id="M1", name="second"), Movie(id="M2", name="other")]

    session = start_session(lobby, movies)

    assert [movie.name for movie in session.movies] == ["first", "other"]
    assert set(session.votes) == {"M1", "M2"}


def test_unanimous_yes_matches_and_completes_lobby(registry, make_user, movies) -> None:
    lobby = _lobby_with(registry, make_user, "a", "b")
    session = start_session(lobby, movies)

    first = record_vote(session, lobby, user_id="a", movie_id="M1", vote="yes")
    second = record_vote(session, lobby, user_id="b", movie_id="M1", vote="yes")

    assert first.matched is False
    assert second.matched is True
    assert session.matched_movie_id == "M1"
    assert lobby.status == "completed"
    assert lobby.selected_movie_id == "M1"


def test_no_vote_blocks_match_until_changed(registry, make_user, movies) -> None:
    """Input: A yes, B no, then B flips to yes -> Output: match only after the flip."""
    lobby = _lobby_with(registry, make_user, "a", "b")
    session = start_session(lobby, movies)

    record_vote(session, lobby, user_id="a", movie_id="M1", vote="yes")
    outcome = record_vote(session, lobby, user_id="b", movie_id="M1", vote="no")

    assert outcome.matched is False
    assert session.votes["M1"] == {"a": "yes", "b": "no"}
    assert lobby.status == "picking"

    outcome = record_vote(session, lobby, user_id="b", movie_id="M1", vote="yes")

    assert outcome.matched is True
    assert session.votes["M1"] == {"a": "yes", "b": "yes"}


def test_match_is_single_fire(registry, make_user, movies) -> None:
    """Input: match on M1, then unanimous yes on M2 -> Output: matched id stays M1."""
    lobby = _lobby_with(registry, make_user, "a", "b")
    session = start_session(lobby, movies)
    record_vote(session, lobby, user_id="a", movie_id="M1", vote="yes")
    record_vote(session, lobby, user_id="b", movie_id="M1", vote="yes")

    record_vote(session, lobby, user_id="a", movie_id="M2", vote="yes")
    late = record_vote(session, lobby, user_id="b", movie_id="M2", vote="yes")
    flip = record_vote(session, lobby, user_id="a", movie_id="M1", vote="no")

    assert late.matched is False
    assert flip.matched is False
    assert session.matched_movie_id == "M1"
    assert lobby.status == "completed"
    assert lobby.selected_movie_id == "M1"
    assert session.votes["M2"] == {"a": "yes", "b": "yes"}


def test_unanimity_uses_current_participants(registry, make_user, movies) -> None:
    """Input: A yes, C joins, B yes -> Output: no match until C also votes yes."""
    lobby = _lobby_with(registry, make_user, "a", "b")
    session = start_session(lobby, movies)
    record_vote(session, lobby, user_id="a", movie_id="M1", vote="yes")
    registry.add_participant(lobby.lobby_id, make_user("c", "C"))

    assert record_vote(session, lobby, user_id="b", movie_id="M1", vote="yes").matched is False
    assert record_vote(session, lobby, user_id="c", movie_id="M1", vote="yes").matched is True


def test_departed_voter_no_longer_counts(registry, make_user, movies) -> None:
    lobby = _lobby_with(registry, make_user, "a", "b", "c")
    session = start_session(lobby, movies)
    record_vote(session, lobby, user_id="c", movie_id="M2", vote="no")
    registry.remove_participant(lobby.lobby_id, "c")

    record_vote(session, lobby, user_id="a", movie_id="M2", vote="yes")
    outcome = record_vote(session, lobby, user_id="b", movie_id="M2", vote="yes")

    assert outcome.matched is True
    assert session.votes["M2"]["c"] == "no"


def test_vote_on_unknown_movie_creates_entry(registry, make_user, movies) -> None:
    lobby = _lobby_with(registry, make_user, "a", "b")
    session = start_session(lobby, movies)

    outcome = record_vote(session, lobby, user_id="a", movie_id="M9", vote="yes")

    assert outcome.matched is False
    assert session.votes["M9"] == {"a": "yes"}


def test_invalid_vote_value_is_rejected_without_mutation(registry, make_user, movies) -> None:
    lobby = _lobby_with(registry, make_user, "a")
    session = start_session(lobby, movies)

    with pytest.raises(InvalidInputError):
        record_vote(session, lobby, user_id="a", movie_id="M1", vote="maybe")

    assert session.votes["M1"] == {}


def test_is_unanimous_yes_requires_participants(registry, make_user, movies) -> None:
    lobby = _lobby_with(registry, make_user, "a")
    session = start_session(lobby, movies)
    lobby.participants.clear()

    assert is_unanimous_yes(session, lobby, "M1") is False


def test_restart_from_completed_clears_selection(registry, make_user, movies) -> None:
    """Input: start after a match -> Output: picking again with a fresh session and no selection."""
    lobby = _lobby_with(registry, make_user, "a")
    session = start_session(lobby, movies)
    record_vote(session, lobby, user_id="a", movie_id="M1", vote="yes")
    assert lobby.status == "completed"

    fresh = start_session(lobby, movies)

    assert lobby.status == "picking"
    assert lobby.selected_movie_id is None
    assert fresh.matched_movie_id is None
    assert fresh.votes == {"M1": {}, "M2": {}}
