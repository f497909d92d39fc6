"""
Read-only TMDB provider.

:class:`~tmdb_provider.provider.TMDBProvider` is the entry point: configure it
once with the host's provider configuration and an environment snapshot, then
pass the resulting client to each data source from
:meth:`~tmdb_provider.provider.TMDBProvider.data_sources` before reading.
"""

from .adapters import AdapterError, Movie, MovieCatalog
from .core import UNKNOWN, Diagnostic, Diagnostics, SchemaDeclaration, Severity
from .credentials import build_client, resolve_credential
from .datasources import DataSource, MovieDataSource, PopularMoviesDataSource, ReadResponse, SearchDataSource
from .provider import PROVIDER_TYPE_NAME, ConfigureResponse, ProviderMetadata, TMDBProvider

__all__ = [
    "AdapterError",
    "ConfigureResponse",
    "DataSource",
    "Diagnostic",
    "Diagnostics",
    "Movie",
    "MovieCatalog",
    "MovieDataSource",
    "PROVIDER_TYPE_NAME",
    "PopularMoviesDataSource",
    "ProviderMetadata",
    "ReadResponse",
    "SchemaDeclaration",
    "SearchDataSource",
    "Severity",
    "TMDBProvider",
    "UNKNOWN",
    "build_client",
    "resolve_credential",
]
