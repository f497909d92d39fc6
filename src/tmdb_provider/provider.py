"""
Provider root: owns credential resolution, builds the shared TMDB client and
enumerates the data sources.

The host calls :meth:`TMDBProvider.configure` once, then hands
:attr:`ConfigureResponse.client` to each data source's ``configure`` before
reading. The provider never reads ``os.environ`` itself; the environment is
passed in by the caller.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from logging import LoggerAdapter
from typing import Any, Callable, List, Mapping, Optional

from .adapters.base import MovieCatalog
from .config import ENV_CREDENTIAL, ClientSettings
from .core.diagnostics import Diagnostics
from .core.logging import bind_fields, get_logger, log_progress, mask_secret
from .core.registry import DataSourceDescriptor, DataSourceRegistry
from .core.schema import Attribute, AttributeType, SchemaDeclaration
from .credentials import KEY_ATTRIBUTE, build_client, resolve_credential
from .datasources import DataSource, MovieDataSource, PopularMoviesDataSource, SearchDataSource

PROVIDER_TYPE_NAME = "tmdb"

PROVIDER_SCHEMA = SchemaDeclaration(
    attributes=(
        Attribute(
            KEY_ATTRIBUTE,
            AttributeType.STRING,
            optional=True,
            sensitive=True,
            description=f"TMDB API key. May also be provided via the {ENV_CREDENTIAL} environment variable.",
        ),
    ),
    description="Read-only access to The Movie Database (TMDB).",
)


@dataclass(frozen=True, slots=True)
class ProviderMetadata:
    type_name: str
    version: str


@dataclass(slots=True)
class ConfigureResponse:
    """Outcome of provider configuration. ``client`` is ``None`` whenever an error was reported."""

    client: Optional[MovieCatalog] = None
    diagnostics: Diagnostics = field(default_factory=Diagnostics)

    @property
    def ok(self) -> bool:
        return not self.diagnostics.has_error()


@dataclass(slots=True)
class TMDBProvider:
    """
    Root object of the plugin.

    Parameters
    ----------
    version:
        Provider version; ``"dev"`` for local builds and ``"test"`` under test.
    settings:
        Client tuning settings applied when the client is built.
    """

    version: str = "dev"
    settings: ClientSettings = field(default_factory=ClientSettings)
    logger: LoggerAdapter = field(init=False, repr=False)

    def __post_init__(self) -> None:
        self.logger = get_logger(__name__, extra={"provider": PROVIDER_TYPE_NAME})

    def metadata(self) -> ProviderMetadata:
        return ProviderMetadata(type_name=PROVIDER_TYPE_NAME, version=self.version)

    def schema(self) -> SchemaDeclaration:
        return PROVIDER_SCHEMA

    def configure(self, config: Mapping[str, Any], environ: Mapping[str, str]) -> ConfigureResponse:
        """
        Resolve the API key and build the shared client.

        Parameters
        ----------
        config:
            Provider configuration from the host. ``key`` may be absent, ``None`` or
            :data:`~tmdb_provider.core.values.UNKNOWN`.
        environ:
            Environment snapshot; only ``TMDB_KEY`` is consulted.
        """

        log_progress(self.logger, "Configuring TMDB client", phase="configure")

        diagnostics = PROVIDER_SCHEMA.validate_config(config, allow_unknown=True)
        if diagnostics.has_error():
            return ConfigureResponse(diagnostics=diagnostics)

        credential, resolution = resolve_credential(config.get(KEY_ATTRIBUTE), environ.get(ENV_CREDENTIAL))
        diagnostics.extend(resolution)
        if credential is None or diagnostics.has_error():
            return ConfigureResponse(diagnostics=diagnostics)

        scoped = bind_fields(self.logger, tmdb_apikey=mask_secret(credential))
        log_progress(scoped, "Creating TMDB client", phase="configure", step="build_client", level=logging.DEBUG)

        client, construction = build_client(credential, self.settings)
        diagnostics.extend(construction)
        if client is None or diagnostics.has_error():
            return ConfigureResponse(diagnostics=diagnostics)

        log_progress(self.logger, "Configured TMDB client", phase="configure", status="done", extra={"success": True})
        return ConfigureResponse(client=client, diagnostics=diagnostics)

    def data_sources(self) -> List[Callable[[], DataSource]]:
        return [MovieDataSource, PopularMoviesDataSource, SearchDataSource]

    def resources(self) -> List[Callable[[], Any]]:
        """The provider manages no remote objects."""

        return []

    def registry(self) -> DataSourceRegistry:
        """Build a registry keyed by full data source type name."""

        registry = DataSourceRegistry()
        for factory in self.data_sources():
            sample = factory()
            registry.register(
                DataSourceDescriptor(
                    type_name=sample.metadata(PROVIDER_TYPE_NAME),
                    factory=factory,
                    description=sample.schema().description,
                )
            )
        return registry
