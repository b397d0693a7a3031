"""Pydantic models for user payloads."""

from __future__ import annotations

from pydantic import BaseModel
from pydantic import ConfigDict
from pydantic import Field

from jellypick.users.identity import CatalogCredentials
from jellypick.users.identity import User
from jellypick.users.identity import new_guest_id


class UserPayload(BaseModel):
    """User object sent by clients inside lobby events."""

    model_config = ConfigDict(populate_by_name=True)

    id: str | None = None
    name: str = Field(min_length=1)
    jellyfin_user_id: str = Field(default="", alias="jellyfinUserId")
    jellyfin_access_token: str = Field(default="", alias="jellyfinAccessToken")
    jellyfin_server_url: str | None = Field(default=None, alias="jellyfinServerUrl")

    def to_user(self) -> User:
        """Build a domain user; clients without an id become guests."""
        return User(
            id=self.id or new_guest_id(),
            name=self.name,
            credentials=CatalogCredentials(
                user_id=self.jellyfin_user_id,
                access_token=self.jellyfin_access_token,
                server_url=self.jellyfin_server_url,
            ),
        )
