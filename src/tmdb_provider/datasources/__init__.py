"""
Read-only data sources exposed by the provider.
"""

from .base import DataSource, ReadResponse
from .movie import MovieDataSource
from .popular_movies import PopularMoviesDataSource
from .search import SearchDataSource

__all__ = [
    "DataSource",
    "MovieDataSource",
    "PopularMoviesDataSource",
    "ReadResponse",
    "SearchDataSource",
]
