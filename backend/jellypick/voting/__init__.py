"""Voting session package."""

from jellypick.voting.session import MatchOutcome
from jellypick.voting.session import Movie
from jellypick.voting.session import VOTE_NO
from jellypick.voting.session import VOTE_VALUES
from jellypick.voting.session import VOTE_YES
from jellypick.voting.session import VotingSession
from jellypick.voting.session import is_unanimous_yes
from jellypick.voting.session import record_vote
from jellypick.voting.session import start_session

__all__ = [
    "MatchOutcome",
    "Movie",
    "VOTE_NO",
    "VOTE_VALUES",
    "VOTE_YES",
    "VotingSession",
    "is_unanimous_yes",
    "record_vote",
    "start_session",
]
