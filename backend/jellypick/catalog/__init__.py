"""Catalog provider package."""

from jellypick.catalog.jellyfin import CatalogProvider
from jellypick.catalog.jellyfin import CatalogUnavailableError
from jellypick.catalog.jellyfin import JellyfinCatalog
from jellypick.catalog.jellyfin import movie_from_item

__all__ = [
    "CatalogProvider",
    "CatalogUnavailableError",
    "JellyfinCatalog",
    "movie_from_item",
]
