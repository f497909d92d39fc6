"""
TMDB v3 REST API client.

The client authenticates with the ``api_key`` query parameter and reads only
the first page of list endpoints, which is what TMDB returns when no paging
options are supplied. Instances are immutable after construction and safe to
share between concurrently running data source reads.
"""

from __future__ import annotations

from typing import Any, List, Mapping, MutableMapping, Optional

import httpx

from ..base import Movie
from .base import DEFAULT_RATE_LIMIT_ATTEMPTS, DEFAULT_TIMEOUT, APIError, BaseAPIClient

DEFAULT_BASE_URL = "https://api.themoviedb.org/3"


class TMDBClientError(APIError):
    """Raised when the TMDB client cannot be built or a TMDB call fails."""


def validate_api_key(api_key: Optional[str]) -> str:
    """Reject keys that TMDB could never accept before any request is made."""

    if api_key is None or not api_key.strip():
        raise TMDBClientError("API key is empty.")
    if api_key != api_key.strip() or any(char.isspace() or not char.isprintable() for char in api_key):
        raise TMDBClientError("API key contains whitespace or control characters.")
    return api_key


class TMDBClient(BaseAPIClient):
    """Minimal client for the endpoints the provider reads; satisfies :class:`~tmdb_provider.adapters.base.MovieCatalog`."""

    def __init__(
        self,
        api_key: str,
        *,
        base_url: str = DEFAULT_BASE_URL,
        timeout: float = DEFAULT_TIMEOUT,
        language: Optional[str] = None,
        rate_limit_attempts: int = DEFAULT_RATE_LIMIT_ATTEMPTS,
        transport: Optional[httpx.BaseTransport] = None,
    ) -> None:
        params: MutableMapping[str, str] = {"api_key": validate_api_key(api_key)}
        if language:
            params["language"] = language
        super().__init__(
            base_url=base_url,
            timeout=timeout,
            default_headers={"Accept": "application/json"},
            default_params=params,
            rate_limit_attempts=rate_limit_attempts,
            transport=transport,
        )

    def fetch_by_id(self, movie_id: int) -> Movie:
        payload = self._fetch(f"/movie/{int(movie_id)}")
        return Movie.from_payload(payload)

    def fetch_popular(self) -> List[Movie]:
        payload = self._fetch("/movie/popular")
        return _results(payload)

    def fetch_by_query(self, query: str) -> List[Movie]:
        payload = self._fetch("/search/movie", params={"query": query})
        return _results(payload)

    def _fetch(self, path: str, *, params: Optional[Mapping[str, Any]] = None) -> Mapping[str, Any]:
        try:
            payload = self._get_json(path, params=params)
        except TMDBClientError:
            raise
        except APIError as exc:
            raise TMDBClientError(str(exc), status_code=exc.status_code, status_message=exc.status_message) from exc
        if not isinstance(payload, dict):
            raise TMDBClientError(f"Unexpected payload structure from TMDB endpoint {path}.")
        return payload


def _results(payload: Mapping[str, Any]) -> List[Movie]:
    results = payload.get("results")
    if results is None:
        return []
    if not isinstance(results, list):
        raise TMDBClientError("TMDB list payload is missing a results array.")
    return [Movie.from_payload(entry) for entry in results if isinstance(entry, dict)]
