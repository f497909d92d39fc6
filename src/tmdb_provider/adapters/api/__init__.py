"""
HTTP API clients backing :class:`~tmdb_provider.adapters.base.MovieCatalog`.
"""

from .base import APIError, BaseAPIClient, RateLimitedError
from .tmdb import DEFAULT_BASE_URL, TMDBClient, TMDBClientError, validate_api_key

__all__ = [
    "APIError",
    "BaseAPIClient",
    "DEFAULT_BASE_URL",
    "RateLimitedError",
    "TMDBClient",
    "TMDBClientError",
    "validate_api_key",
]
