"""User identity and lobby membership tracking."""

from __future__ import annotations

from dataclasses import dataclass
from dataclasses import field
import secrets
import threading


@dataclass(frozen=True, slots=True)
class CatalogCredentials:
    """Media-server credentials; opaque to the lobby engine."""

    user_id: str = ""
    access_token: str = ""
    server_url: str | None = None


@dataclass(slots=True)
class User:
    """One participant as supplied by the client."""

    id: str
    name: str
    credentials: CatalogCredentials = field(default_factory=CatalogCredentials)


def new_guest_id() -> str:
    return f"guest-{secrets.token_hex(8)}"


class MembershipIndex:
    """Track the single lobby each user currently belongs to."""

    def __init__(self) -> None:
        self._lobby_by_user: dict[str, str] = {}
        self._lock = threading.Lock()

    def lobby_of(self, user_id: str) -> str | None:
        """Return current lobby id for user, or None if user is not in any lobby."""
        with self._lock:
            return self._lobby_by_user.get(user_id)

    def assign(self, user_id: str, lobby_id: str) -> str | None:
        """Point user at lobby_id and return the previous lobby id, if any."""
        with self._lock:
            previous = self._lobby_by_user.get(user_id)
            self._lobby_by_user[user_id] = lobby_id
            return previous

    def release(self, user_id: str, lobby_id: str) -> bool:
        """Forget user's membership only when it still points at lobby_id."""
        with self._lock:
            if self._lobby_by_user.get(user_id) != lobby_id:
                return False
            del self._lobby_by_user[user_id]
            return True

    def __len__(self) -> int:
        with self._lock:
            return len(self._lobby_by_user)
