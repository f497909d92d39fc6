"""
Catalogue interfaces consumed by the data sources.

Concrete HTTP clients live in :mod:`tmdb_provider.adapters.api`.
"""

from .base import AdapterError, Movie, MovieCatalog

__all__ = [
    "AdapterError",
    "Movie",
    "MovieCatalog",
]
