"""Shared fixtures for lobby engine tests."""

from __future__ import annotations

import copy
from typing import Any

import pytest

from jellypick.coordinator.service import SessionCoordinator
from jellypick.lobbies.registry import LobbyRegistry
from jellypick.users.identity import CatalogCredentials
from jellypick.users.identity import User
from jellypick.voting.session import Movie


class RecordingChannel:
    """In-memory pub/sub channel that records every delivery."""

    def __init__(self) -> None:
        self.groups: dict[str, set[str]] = {}
        self.broadcasts: list[tuple[str, str, dict[str, Any]]] = []
        self.direct: list[tuple[str, str, dict[str, Any]]] = []

    async def join_group(self, connection_id: str, group: str) -> None:
        self.groups.setdefault(group, set()).add(connection_id)

    async def leave_group(self, connection_id: str, group: str) -> None:
        self.groups.get(group, set()).discard(connection_id)

    async def broadcast(self, group: str, event: str, payload: dict[str, Any]) -> None:
        self.broadcasts.append((group, event, copy.deepcopy(payload)))

    async def send_to_one(self, connection_id: str, event: str, payload: dict[str, Any]) -> None:
        self.direct.append((connection_id, event, copy.deepcopy(payload)))

    def broadcast_payloads(self, group: str, event: str) -> list[dict[str, Any]]:
        return [payload for target, name, payload in self.broadcasts if target == group and name == event]

    def direct_payloads(self, connection_id: str, event: str) -> list[dict[str, Any]]:
        return [payload for target, name, payload in self.direct if target == connection_id and name == event]

    def members(self, group: str) -> set[str]:
        return set(self.groups.get(group, set()))

    def clear(self) -> None:
        self.broadcasts.clear()
        self.direct.clear()


def make_user(user_id: str, name: str) -> User:
    return User(
        id=user_id,
        name=name,
        credentials=CatalogCredentials(user_id=f"jf-{user_id}", access_token=f"token-{user_id}"),
    )


def user_payload(user_id: str, name: str) -> dict[str, Any]:
    return {
        "id": user_id,
        "name": name,
        "jellyfinUserId": f"jf-{user_id}",
        "jellyfinAccessToken": f"token-{user_id}",
    }


@pytest.fixture
def alice() -> dict[str, Any]:
    return user_payload("user-a", "Alice")


@pytest.fixture
def bob() -> dict[str, Any]:
    return user_payload("user-b", "Bob")


@pytest.fixture
def carol() -> dict[str, Any]:
    return user_payload("user-c", "Carol")


@pytest.fixture
def movie_payloads() -> list[dict[str, Any]]:
    return [
        {
            "id": "M1",
            "name": "Heat",
            "overview": "Cops and robbers.",
            "posterUrl": "/Items/M1/Images/Primary?tag=t1",
            "year": 1995,
            "runtime": 170,
            "genres": ["Crime", "Thriller"],
        },
        {
            "id": "M2",
            "name": "Alien",
            "overview": "In space no one can hear you scream.",
            "posterUrl": "",
            "year": 1979,
            "runtime": 117,
            "genres": ["Horror", "Science Fiction"],
        },
    ]


@pytest.fixture
def movies() -> list[Movie]:
    return [
        Movie(id="M1", name="Heat", year=1995, runtime=170, genres=("Crime",)),
        Movie(id="M2", name="Alien", year=1979, runtime=117, genres=("Horror",)),
    ]


@pytest.fixture
def registry() -> LobbyRegistry:
    return LobbyRegistry()


@pytest.fixture
def channel() -> RecordingChannel:
    return RecordingChannel()


@pytest.fixture
def coordinator(registry: LobbyRegistry, channel: RecordingChannel) -> SessionCoordinator:
    return SessionCoordinator(registry=registry, channel=channel)


@pytest.fixture(name="make_user")
def make_user_fixture():
    """Factory fixture building domain users with stub credentials."""
    return make_user
