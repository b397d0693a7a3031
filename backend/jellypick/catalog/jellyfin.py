"""Jellyfin-backed catalog provider."""

from __future__ import annotations

import logging
from typing import Any
from typing import Protocol

import httpx

from jellypick.users.identity import CatalogCredentials
from jellypick.voting.session import Movie

logger = logging.getLogger(__name__)

TICKS_PER_MINUTE = 600_000_000
ITEM_FIELDS = "Overview,Genres,ProductionYear,RunTimeTicks"


class CatalogUnavailableError(RuntimeError):
    """Raised when the media server cannot produce a movie list."""

    message = "Failed to fetch movies"


class CatalogProvider(Protocol):
    async def fetch_movies(self, credentials: CatalogCredentials) -> list[Movie]: ...


def poster_path(item_id: str, tag: str) -> str:
    return f"/Items/{item_id}/Images/Primary?tag={tag}"


def movie_from_item(item: dict[str, Any]) -> Movie | None:
    """Map one Jellyfin item to a Movie; items without an id are skipped."""
    item_id = item.get("Id")
    if not item_id:
        return None

    image_tags = item.get("ImageTags")
    primary_tag = image_tags.get("Primary") if isinstance(image_tags, dict) else None
    genres = item.get("Genres")
    return Movie(
        id=str(item_id),
        name=str(item.get("Name") or ""),
        overview=str(item.get("Overview") or ""),
        poster_url=poster_path(str(item_id), str(primary_tag)) if primary_tag else "",
        year=int(item.get("ProductionYear") or 0),
        runtime=int(item.get("RunTimeTicks") or 0) // TICKS_PER_MINUTE,
        genres=tuple(str(genre) for genre in genres) if isinstance(genres, list) else (),
    )


class JellyfinCatalog:
    """Fetch a random slice of a user's movie library."""

    def __init__(
        self,
        *,
        server_url: str | None = None,
        limit: int = 100,
        timeout_seconds: float = 10.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._server_url = server_url
        self._limit = limit
        self._timeout_seconds = timeout_seconds
        self._transport = transport

    async def fetch_movies(self, credentials: CatalogCredentials) -> list[Movie]:
        server_url = credentials.server_url or self._server_url
        if not server_url:
            raise CatalogUnavailableError("no media server configured")

        params = {
            "userId": credentials.user_id,
            "sortBy": "Random",
            "sortOrder": "Ascending",
            "includeItemTypes": "Movie",
            "recursive": "true",
            "fields": ITEM_FIELDS,
            "limit": str(self._limit),
        }
        headers = {"X-Emby-Token": credentials.access_token}

        try:
            async with httpx.AsyncClient(
                base_url=server_url.rstrip("/"),
                timeout=self._timeout_seconds,
                transport=self._transport,
            ) as client:
                response = await client.get("/Items", params=params, headers=headers)
                response.raise_for_status()
                payload = response.json()
        except (httpx.HTTPError, ValueError) as exc:
            logger.warning("catalog fetch from %s failed: %s", server_url, exc)
            raise CatalogUnavailableError(str(exc)) from exc

        items = payload.get("Items") if isinstance(payload, dict) else None
        if not isinstance(items, list):
            return []

        movies = [movie_from_item(item) for item in items if isinstance(item, dict)]
        return [movie for movie in movies if movie is not None]
