"""
YAML manifests describing a provider configuration and the data blocks to read.

The manifest stands in for the host's declarative configuration when the
provider is driven from the command line::

    provider:
      key: "(known after apply)"   # optional; becomes UNKNOWN
    data:
      - type: tmdb_movie
        name: fight_club
        config:
          id: 550
      - type: tmdb_popular_movies
        name: trending

Values equal to :data:`~tmdb_provider.core.values.UNKNOWN_PLACEHOLDER` are
converted to :data:`~tmdb_provider.core.values.UNKNOWN` so unknown-value
handling can be exercised end to end.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Mapping, Sequence

import yaml

from .values import UNKNOWN, UNKNOWN_PLACEHOLDER


class ManifestLoadError(RuntimeError):
    """Raised when a manifest cannot be parsed or validated."""


@dataclass(frozen=True, slots=True)
class DataBlock:
    """One data source invocation: the type to read, a local name and its configuration."""

    type_name: str
    name: str
    config: Mapping[str, Any] = field(default_factory=dict)


@dataclass(frozen=True, slots=True)
class Manifest:
    provider: Mapping[str, Any] = field(default_factory=dict)
    data: Sequence[DataBlock] = field(default_factory=tuple)

    @classmethod
    def from_yaml(cls, path: Path | str) -> "Manifest":
        """Load a manifest from a YAML document."""

        location = Path(path)
        if not location.exists():
            raise ManifestLoadError(f"Manifest file '{location}' does not exist.")

        try:
            with location.open("r", encoding="utf-8") as handle:
                payload = yaml.safe_load(handle)
        except yaml.YAMLError as exc:
            raise ManifestLoadError(f"Failed to parse '{location}': {exc}") from exc

        return cls.from_payload(payload if payload is not None else {}, origin=str(location))

    @classmethod
    def from_payload(cls, payload: Any, *, origin: str = "<memory>") -> "Manifest":
        if not isinstance(payload, dict):
            raise ManifestLoadError(f"Manifest '{origin}' must be a mapping with 'provider' and 'data' keys.")

        unexpected = sorted(set(payload) - {"provider", "data"})
        if unexpected:
            raise ManifestLoadError(f"Manifest '{origin}' has unexpected top-level keys: {', '.join(map(str, unexpected))}.")

        provider = payload.get("provider") or {}
        if not isinstance(provider, dict):
            raise ManifestLoadError(f"'provider' in '{origin}' must be a mapping.")

        raw_blocks = payload.get("data") or []
        if not isinstance(raw_blocks, list):
            raise ManifestLoadError(f"'data' in '{origin}' must be a list of data blocks.")

        blocks: List[DataBlock] = []
        seen: set[tuple[str, str]] = set()
        for position, entry in enumerate(raw_blocks):
            block = _block_from_payload(entry, position=position, origin=origin)
            key = (block.type_name, block.name)
            if key in seen:
                raise ManifestLoadError(f"Duplicate data block '{block.type_name}.{block.name}' in '{origin}'.")
            seen.add(key)
            blocks.append(block)

        return cls(provider=_convert_values(provider), data=tuple(blocks))


def _block_from_payload(entry: Any, *, position: int, origin: str) -> DataBlock:
    if not isinstance(entry, dict):
        raise ManifestLoadError(f"Invalid data block #{position} in '{origin}': expected mapping, got {type(entry).__name__}.")

    try:
        type_name = entry["type"]
    except KeyError as exc:
        raise ManifestLoadError(f"Missing required key {exc!s} in data block #{position} of '{origin}'.") from exc
    if not isinstance(type_name, str) or not type_name:
        raise ManifestLoadError(f"Data block #{position} in '{origin}' has an invalid type.")

    name = entry.get("name", f"{type_name}_{position}")
    config = entry.get("config") or {}
    if not isinstance(config, dict):
        raise ManifestLoadError(f"'config' of data block '{name}' in '{origin}' must be a mapping.")

    return DataBlock(type_name=type_name, name=str(name), config=_convert_values(config))


def _convert_values(raw: Mapping[str, Any]) -> Dict[str, Any]:
    return {str(key): (UNKNOWN if value == UNKNOWN_PLACEHOLDER else value) for key, value in raw.items()}
