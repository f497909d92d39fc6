"""
Free-text movie search.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from logging import LoggerAdapter
from typing import Any, ClassVar, Mapping, Optional

from ..adapters.base import AdapterError, MovieCatalog
from ..core.logging import get_logger, log_progress
from ..core.schema import Attribute, AttributeType, SchemaDeclaration
from .base import MOVIES_ATTRIBUTE, ReadResponse, check_configured, finalize, movies_to_state, type_name

SEARCH_SCHEMA = SchemaDeclaration(
    attributes=(
        Attribute("query", AttributeType.STRING, required=True, min_length=1, description="Search text, echoed back unchanged."),
        MOVIES_ATTRIBUTE,
    ),
    description="Search TMDB movies by title text.",
)


@dataclass(slots=True)
class SearchDataSource:
    type_suffix: ClassVar[str] = "search"
    client: Optional[MovieCatalog] = None
    logger: LoggerAdapter = field(init=False, repr=False)

    def __post_init__(self) -> None:
        self.logger = get_logger(__name__, extra={"data_source": self.type_suffix})

    def metadata(self, provider_type_name: str) -> str:
        return type_name(provider_type_name, self.type_suffix)

    def schema(self) -> SchemaDeclaration:
        return SEARCH_SCHEMA

    def configure(self, client: Optional[MovieCatalog]) -> None:
        if client is None:
            return
        self.client = client

    def read(self, config: Mapping[str, Any]) -> ReadResponse:
        diagnostics = SEARCH_SCHEMA.validate_config(config)
        if diagnostics.has_error():
            return ReadResponse(diagnostics=diagnostics)
        if not check_configured(self.client, diagnostics):
            return ReadResponse(diagnostics=diagnostics)

        query = config["query"]
        log_progress(self.logger, "Searching TMDB movies", step="fetch", extra={"query": query})
        try:
            movies = self.client.fetch_by_query(query)
        except AdapterError as exc:
            diagnostics.add_error(f"Unable to Read TMDB Movies with query: {query}", str(exc))
            return ReadResponse(diagnostics=diagnostics)

        return finalize(SEARCH_SCHEMA, {"query": query, "movies": movies_to_state(movies)}, diagnostics)
