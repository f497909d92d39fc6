"""
Single movie lookup by TMDB identifier.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from logging import LoggerAdapter
from typing import Any, ClassVar, Mapping, Optional

from ..adapters.base import AdapterError, MovieCatalog
from ..core.logging import get_logger, log_progress
from ..core.schema import Attribute, AttributeType, SchemaDeclaration
from .base import MOVIE_ATTRIBUTES, ReadResponse, check_configured, finalize, movie_to_state, type_name

MOVIE_SCHEMA = SchemaDeclaration(
    attributes=(
        Attribute("id", AttributeType.INT, required=True, description="TMDB movie identifier to look up."),
        *(attribute for attribute in MOVIE_ATTRIBUTES if attribute.name != "id"),
    ),
    description="Look up a single movie by its TMDB identifier.",
)


@dataclass(slots=True)
class MovieDataSource:
    """Reads one movie. The ``id`` in state is the one TMDB returns, not the one requested."""

    type_suffix: ClassVar[str] = "movie"
    client: Optional[MovieCatalog] = None
    logger: LoggerAdapter = field(init=False, repr=False)

    def __post_init__(self) -> None:
        self.logger = get_logger(__name__, extra={"data_source": self.type_suffix})

    def metadata(self, provider_type_name: str) -> str:
        return type_name(provider_type_name, self.type_suffix)

    def schema(self) -> SchemaDeclaration:
        return MOVIE_SCHEMA

    def configure(self, client: Optional[MovieCatalog]) -> None:
        if client is None:
            return
        self.client = client

    def read(self, config: Mapping[str, Any]) -> ReadResponse:
        diagnostics = MOVIE_SCHEMA.validate_config(config)
        if diagnostics.has_error():
            return ReadResponse(diagnostics=diagnostics)
        if not check_configured(self.client, diagnostics):
            return ReadResponse(diagnostics=diagnostics)

        movie_id = config["id"]
        log_progress(self.logger, "Reading TMDB movie", step="fetch", extra={"movie_id": movie_id})
        try:
            movie = self.client.fetch_by_id(movie_id)
        except AdapterError as exc:
            diagnostics.add_error(f"Unable to Read TMDB Movie with ID: {movie_id}", str(exc))
            return ReadResponse(diagnostics=diagnostics)

        return finalize(MOVIE_SCHEMA, movie_to_state(movie), diagnostics)
