"""
Current popular movies, first page, in TMDB ranking order.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from logging import LoggerAdapter
from typing import Any, ClassVar, Mapping, Optional

from ..adapters.base import AdapterError, MovieCatalog
from ..core.logging import get_logger, log_progress
from ..core.schema import SchemaDeclaration
from .base import MOVIES_ATTRIBUTE, ReadResponse, check_configured, finalize, movies_to_state, type_name

POPULAR_MOVIES_SCHEMA = SchemaDeclaration(
    attributes=(MOVIES_ATTRIBUTE,),
    description="List the movies TMDB currently ranks as popular.",
)


@dataclass(slots=True)
class PopularMoviesDataSource:
    type_suffix: ClassVar[str] = "popular_movies"
    client: Optional[MovieCatalog] = None
    logger: LoggerAdapter = field(init=False, repr=False)

    def __post_init__(self) -> None:
        self.logger = get_logger(__name__, extra={"data_source": self.type_suffix})

    def metadata(self, provider_type_name: str) -> str:
        return type_name(provider_type_name, self.type_suffix)

    def schema(self) -> SchemaDeclaration:
        return POPULAR_MOVIES_SCHEMA

    def configure(self, client: Optional[MovieCatalog]) -> None:
        if client is None:
            return
        self.client = client

    def read(self, config: Mapping[str, Any]) -> ReadResponse:
        diagnostics = POPULAR_MOVIES_SCHEMA.validate_config(config)
        if diagnostics.has_error():
            return ReadResponse(diagnostics=diagnostics)
        if not check_configured(self.client, diagnostics):
            return ReadResponse(diagnostics=diagnostics)

        log_progress(self.logger, "Reading TMDB popular movies", step="fetch")
        try:
            movies = self.client.fetch_popular()
        except AdapterError as exc:
            diagnostics.add_error("Unable to Read TMDB Movies", str(exc))
            return ReadResponse(diagnostics=diagnostics)

        return finalize(POPULAR_MOVIES_SCHEMA, {"movies": movies_to_state(movies)}, diagnostics)
