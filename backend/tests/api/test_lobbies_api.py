"""REST contract tests: health, version, lobby lookups and catalog proxy."""

from __future__ import annotations

import importlib

import pytest
from fastapi.testclient import TestClient

from jellypick.users.identity import CatalogCredentials
from jellypick.users.identity import User
from jellypick.voting.session import Movie


def _new_client(monkeypatch: pytest.MonkeyPatch) -> TestClient:
    monkeypatch.delenv("JELLYPICK_JELLYFIN_URL", raising=False)

    import jellypick.main as app_main

    app_main = importlib.reload(app_main)
    return TestClient(app_main.app)


def _runtime():
    import jellypick.runtime as runtime

    return runtime


def _seed_lobby() -> tuple[str, str]:
    registry = _runtime().lobby_registry
    lobby = registry.create_lobby(
        User(id="user-a", name="Alice", credentials=CatalogCredentials(user_id="jf-a", access_token="secret")),
        "Movie night",
    )
    return lobby.lobby_id, lobby.invite_code


def test_health_and_version(monkeypatch: pytest.MonkeyPatch) -> None:
    with _new_client(monkeypatch) as client:
        _seed_lobby()

        health = client.get("/api/health")
        version = client.get("/api/version")

        assert health.status_code == 200
        body = health.json()
        assert body["status"] == "ok"
        assert body["lobby_count"] == 1
        assert body["uptime_seconds"] >= 0
        assert version.status_code == 200
        assert version.json()["name"] == "jellypick"
        assert version.json()["version"]


def test_get_lobby_and_invite_code_lookup(monkeypatch: pytest.MonkeyPatch) -> None:
    """Contract: lobby detail and code lookup return the same view without access tokens."""
    with _new_client(monkeypatch) as client:
        lobby_id, invite_code = _seed_lobby()

        by_id = client.get(f"/api/lobbies/{lobby_id}")
        by_code = client.get(f"/api/lobbies/by-code/{invite_code.lower()}")

        assert by_id.status_code == 200
        assert by_code.status_code == 200
        assert by_id.json() == by_code.json()
        lobby = by_id.json()
        assert lobby["inviteCode"] == invite_code
        assert lobby["status"] == "waiting"
        assert lobby["participants"] == [{"id": "user-a", "name": "Alice", "jellyfinUserId": "jf-a"}]
        assert "secret" not in by_id.text


def test_lobby_lookup_errors(monkeypatch: pytest.MonkeyPatch) -> None:
    with _new_client(monkeypatch) as client:
        missing = client.get("/api/lobbies/nope")
        bad_code = client.get("/api/lobbies/by-code/ZZZZZZ")
        blank_code = client.get("/api/lobbies/by-code/%20")

        assert missing.status_code == 404
        assert missing.json() == {
            "code": "LOBBY_NOT_FOUND",
            "message": "lobby not found",
            "detail": {"lobby_id": "nope"},
        }
        assert bad_code.status_code == 404
        assert bad_code.json()["code"] == "INVITE_CODE_NOT_FOUND"
        assert blank_code.status_code == 400
        assert blank_code.json()["code"] == "VALIDATION_ERROR"


def test_lobby_session_endpoint(monkeypatch: pytest.MonkeyPatch) -> None:
    with _new_client(monkeypatch) as client:
        lobby_id, _ = _seed_lobby()

        before = client.get(f"/api/lobbies/{lobby_id}/session")
        _runtime().lobby_registry.start_session(lobby_id, [Movie(id="M1", name="Heat")])
        after = client.get(f"/api/lobbies/{lobby_id}/session")

        assert before.status_code == 404
        assert before.json()["code"] == "SESSION_NOT_FOUND"
        assert after.status_code == 200
        assert after.json()["lobbyId"] == lobby_id
        assert after.json()["votes"] == {"M1": {}}
        assert after.json()["matchedMovieId"] is None


def test_catalog_movies_proxy(monkeypatch: pytest.MonkeyPatch) -> None:
    seen: list[CatalogCredentials] = []

    class _FakeCatalog:
        async def fetch_movies(self, credentials: CatalogCredentials) -> list[Movie]:
            seen.append(credentials)
            return [Movie(id="M1", name="Heat", year=1995, genres=("Crime",))]

    with _new_client(monkeypatch) as client:
        monkeypatch.setattr(_runtime(), "catalog", _FakeCatalog())

        response = client.post(
            "/api/catalog/movies",
            json={"user": {"id": "user-a", "name": "Alice", "jellyfinUserId": "jf-a", "jellyfinAccessToken": "secret"}},
        )

        assert response.status_code == 200
        assert response.json() == [
            {
                "id": "M1",
                "name": "Heat",
                "overview": "",
                "posterUrl": "",
                "year": 1995,
                "runtime": 0,
                "genres": ["Crime"],
            }
        ]
        assert seen[0].access_token == "secret"


def test_catalog_movies_unavailable(monkeypatch: pytest.MonkeyPatch) -> None:
    """Contract: catalog failures map to 502 CATALOG_UNAVAILABLE."""
    with _new_client(monkeypatch) as client:
        response = client.post("/api/catalog/movies", json={"user": {"id": "user-a", "name": "Alice"}})

        assert response.status_code == 502
        assert response.json()["code"] == "CATALOG_UNAVAILABLE"
        assert response.json()["message"] == "failed to fetch movies"
