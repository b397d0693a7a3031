"""Catalog REST routes."""

from __future__ import annotations

from fastapi import APIRouter

import jellypick.runtime as runtime
from jellypick.api.errors import raise_for_domain_error
from jellypick.api.views import movie_view
from jellypick.catalog.jellyfin import CatalogUnavailableError
from jellypick.lobbies.models import CatalogRequest

router = APIRouter()


@router.post("/api/catalog/movies")
async def list_catalog_movies(payload: CatalogRequest) -> list[dict[str, object]]:
    """Fetch the caller's movie list from the media server."""
    credentials = payload.user.to_user().credentials
    try:
        movies = await runtime.catalog.fetch_movies(credentials)
    except CatalogUnavailableError as exc:
        raise_for_domain_error(exc, detail={"reason": str(exc)})
    return [movie_view(movie) for movie in movies]
