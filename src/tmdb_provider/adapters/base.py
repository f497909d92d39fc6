"""
Base protocols for the remote movie catalogue.

Data sources never talk HTTP themselves. They depend on the narrow
:class:`MovieCatalog` capability, which the provider builds once and shares with
every data source. Implementations must be safe for concurrent read-only use.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, List, Mapping, Protocol


class AdapterError(RuntimeError):
    """Raised when a catalogue call fails."""


@dataclass(frozen=True, slots=True)
class Movie:
    """One movie record as returned by the catalogue."""

    id: int
    title: str = ""
    overview: str = ""
    release_date: str = ""

    @classmethod
    def from_payload(cls, payload: Mapping[str, Any]) -> "Movie":
        """Build a record from a TMDB movie object. Absent fields fall back to empty values."""

        raw_id = payload.get("id")
        return cls(
            id=raw_id if isinstance(raw_id, int) and not isinstance(raw_id, bool) else 0,
            title=_as_text(payload.get("title")),
            overview=_as_text(payload.get("overview")),
            release_date=_as_text(payload.get("release_date")),
        )


class MovieCatalog(Protocol):
    """Read-only capability consumed by the data sources."""

    def fetch_by_id(self, movie_id: int) -> Movie:
        """Return a single movie or raise :class:`AdapterError`."""

    def fetch_popular(self) -> List[Movie]:
        """Return the current popular movies in ranking order or raise :class:`AdapterError`."""

    def fetch_by_query(self, query: str) -> List[Movie]:
        """Return movies matching ``query`` in relevance order or raise :class:`AdapterError`."""


def _as_text(value: Any) -> str:
    if value is None:
        return ""
    return value if isinstance(value, str) else str(value)
