"""Pydantic models for inbound lobby events."""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel
from pydantic import ConfigDict
from pydantic import Field
from pydantic import model_validator

from jellypick.users.models import UserPayload
from jellypick.voting.session import Movie


class _EventModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True)


class MoviePayload(_EventModel):
    """Movie record as produced by the catalog and echoed by clients."""

    id: str = Field(min_length=1)
    name: str = ""
    overview: str = ""
    poster_url: str = Field(default="", alias="posterUrl")
    year: int = 0
    runtime: int = 0
    genres: list[str] = Field(default_factory=list)

    def to_movie(self) -> Movie:
        return Movie(
            id=self.id,
            name=self.name,
            overview=self.overview,
            poster_url=self.poster_url,
            year=self.year,
            runtime=self.runtime,
            genres=tuple(self.genres),
        )


class CreateLobbyRequest(_EventModel):
    """create-lobby event payload."""

    creator_user: UserPayload = Field(alias="creatorUser")
    name: str = Field(min_length=1)


class JoinLobbyRequest(_EventModel):
    """join-lobby / join-lobby-code event payload."""

    user: UserPayload
    lobby_id: str | None = Field(default=None, alias="lobbyId")
    invite_code: str | None = Field(default=None, alias="inviteCode")

    @model_validator(mode="after")
    def validate_target(self) -> "JoinLobbyRequest":
        """Require a lobby id or an invite code."""
        if not self.lobby_id and self.invite_code is None:
            raise ValueError("lobbyId or inviteCode is required")
        return self


class StartSessionRequest(_EventModel):
    """start-session event payload; movies default to the creator's catalog."""

    lobby_id: str = Field(min_length=1, alias="lobbyId")
    movies: list[MoviePayload] | None = None


class SubmitVoteRequest(_EventModel):
    """submit-vote event payload."""

    lobby_id: str = Field(min_length=1, alias="lobbyId")
    user_id: str = Field(min_length=1, alias="userId")
    movie_id: str = Field(min_length=1, alias="movieId")
    vote: Literal["yes", "no"]


class LeaveLobbyRequest(_EventModel):
    """leave-lobby event payload; blanks make the leave a no-op."""

    user_id: str = Field(default="", alias="userId")
    lobby_id: str = Field(default="", alias="lobbyId")


class CatalogRequest(_EventModel):
    """POST /api/catalog/movies request body."""

    user: UserPayload
