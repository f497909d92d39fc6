"""
Catalogue of the data source types a provider exposes.

The host addresses data sources by their full type name (``tmdb_movie``), so
the registry maps those names to factories producing fresh, unconfigured data
source instances together with the metadata needed to list them.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Callable, Iterator, List, MutableMapping, Optional

if TYPE_CHECKING:
    from ..datasources.base import DataSource


class RegistryLoadError(RuntimeError):
    """Raised when a data source cannot be registered or resolved."""


@dataclass(frozen=True, slots=True)
class DataSourceDescriptor:
    """
    Metadata associated with a single data source type.

    Parameters
    ----------
    type_name:
        Full type name as seen by the host, ``<provider>_<suffix>``.
    factory:
        Zero-argument callable returning a new, unconfigured data source.
    description:
        Short summary taken from the schema declaration.
    """

    type_name: str
    factory: Callable[[], DataSource]
    description: str = ""

    def validate(self) -> None:
        if not self.type_name or not self.type_name.isidentifier():
            raise RegistryLoadError(f"Data source type '{self.type_name}' must be a valid identifier (letters, digits, underscore).")

    def create(self) -> DataSource:
        return self.factory()


class DataSourceRegistry:
    """In-memory catalogue of :class:`DataSourceDescriptor` entries."""

    def __init__(self) -> None:
        self._entries: MutableMapping[str, DataSourceDescriptor] = {}

    def register(self, descriptor: DataSourceDescriptor) -> None:
        descriptor.validate()
        if descriptor.type_name in self._entries:
            raise RegistryLoadError(f"Data source type '{descriptor.type_name}' is already registered.")
        self._entries[descriptor.type_name] = descriptor

    def get(self, type_name: str) -> Optional[DataSourceDescriptor]:
        return self._entries.get(type_name)

    def require(self, type_name: str) -> DataSourceDescriptor:
        """Retrieve a descriptor or raise an informative error."""

        descriptor = self.get(type_name)
        if descriptor is None:
            known = ", ".join(sorted(self._entries)) or "none"
            raise RegistryLoadError(f"Data source type '{type_name}' is not supported by this provider (known: {known}).")
        return descriptor

    def list(self) -> List[DataSourceDescriptor]:
        return [self._entries[name] for name in sorted(self._entries)]

    def __iter__(self) -> Iterator[DataSourceDescriptor]:
        return iter(self.list())

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, type_name: object) -> bool:
        return type_name in self._entries
