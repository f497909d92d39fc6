"""
Contract shared by all data sources.

A data source is anything satisfying :class:`DataSource`: it names itself, declares a
schema, accepts the shared catalogue client and turns a configuration mapping into
a state document. The helpers in this module hold the pieces every read pipeline
has in common (movie mapping, unconfigured-client handling, state finalisation).
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Mapping, Optional, Protocol

from ..adapters.base import Movie, MovieCatalog
from ..core.diagnostics import Diagnostics
from ..core.schema import Attribute, AttributeType, SchemaDeclaration

MOVIE_ATTRIBUTES = (
    Attribute("id", AttributeType.INT, computed=True, description="TMDB movie identifier."),
    Attribute("title", AttributeType.STRING, computed=True, description="Movie title."),
    Attribute("overview", AttributeType.STRING, computed=True, description="Plot overview."),
    Attribute("releasedate", AttributeType.STRING, computed=True, description="Release date as reported by TMDB (YYYY-MM-DD)."),
)

MOVIES_ATTRIBUTE = Attribute(
    "movies",
    AttributeType.LIST_NESTED,
    computed=True,
    description="Movies in the order returned by TMDB.",
    nested=MOVIE_ATTRIBUTES,
)


@dataclass(slots=True)
class ReadResponse:
    """State produced by a read. ``state`` is ``None`` whenever an error was reported."""

    state: Optional[Dict[str, Any]] = None
    diagnostics: Diagnostics = field(default_factory=Diagnostics)

    @property
    def ok(self) -> bool:
        return not self.diagnostics.has_error()

    def to_dict(self) -> Dict[str, Any]:
        return {"state": self.state, "diagnostics": self.diagnostics.to_list()}


class DataSource(Protocol):
    """Protocol implemented by every data source."""

    type_suffix: str

    def metadata(self, provider_type_name: str) -> str:
        """Return the full type name, ``<provider>_<suffix>``."""

    def schema(self) -> SchemaDeclaration:
        """Return the static schema declaration."""

    def configure(self, client: Optional[MovieCatalog]) -> None:
        """Store the shared client. ``None`` means the provider is not configured yet."""

    def read(self, config: Mapping[str, Any]) -> ReadResponse:
        """Fetch and map remote data into a state document."""


def type_name(provider_type_name: str, suffix: str) -> str:
    return f"{provider_type_name}_{suffix}"


def movie_to_state(movie: Movie) -> Dict[str, Any]:
    return {
        "id": movie.id,
        "title": movie.title,
        "overview": movie.overview,
        "releasedate": movie.release_date,
    }


def movies_to_state(movies: Iterable[Movie]) -> List[Dict[str, Any]]:
    return [movie_to_state(movie) for movie in movies]


def check_configured(client: Optional[MovieCatalog], diagnostics: Diagnostics) -> bool:
    if client is not None:
        return True
    diagnostics.add_error(
        "Unconfigured TMDB API Client",
        "The data source was read before the provider configured a TMDB API client. "
        "This is always an error in the provider. Please report this issue to the provider developers.",
    )
    return False


def finalize(schema: SchemaDeclaration, state: Dict[str, Any], diagnostics: Diagnostics) -> ReadResponse:
    """Validate the mapped state and void it if any error has been collected."""

    diagnostics.extend(schema.validate_state(state))
    if diagnostics.has_error():
        return ReadResponse(state=None, diagnostics=diagnostics)
    return ReadResponse(state=state, diagnostics=diagnostics)
