"""
Client tuning settings for the TMDB provider.

Settings are loaded from the ``[tmdb]`` table of a TOML file. The lookup order is:

1. Explicit ``TMDB_PROVIDER_SETTINGS_PATH`` environment value.
2. ``.secrets/settings.toml`` relative to the current working directory.
3. ``.secrets/settings.toml`` relative to the project root.

Only transport tuning lives here (base URL, timeout, language). The API key is
deliberately not read from this file: it is resolved from the provider
configuration or the ``TMDB_KEY`` environment value by
:func:`tmdb_provider.credentials.resolve_credential`.
"""

from __future__ import annotations

import tomllib
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Iterable, Mapping, Optional

from .adapters.api.base import DEFAULT_RATE_LIMIT_ATTEMPTS, DEFAULT_TIMEOUT
from .adapters.api.tmdb import DEFAULT_BASE_URL

ENV_CREDENTIAL = "TMDB_KEY"
ENV_SETTINGS_PATH = "TMDB_PROVIDER_SETTINGS_PATH"


class SettingsError(ValueError):
    """Raised when a settings file exists but cannot be used."""


@dataclass(frozen=True, slots=True)
class ClientSettings:
    """Transport options applied when the provider builds its client."""

    base_url: str = DEFAULT_BASE_URL
    timeout: float = DEFAULT_TIMEOUT
    language: Optional[str] = None
    rate_limit_attempts: int = DEFAULT_RATE_LIMIT_ATTEMPTS
    source_path: Optional[Path] = None


def _discover_project_root() -> Optional[Path]:
    current = Path(__file__).resolve()
    for parent in current.parents:
        if (parent / "pyproject.toml").is_file():
            return parent
    return None


def _candidate_paths(environ: Mapping[str, str]) -> Iterable[Path]:
    env_override = environ.get(ENV_SETTINGS_PATH)
    if env_override:
        yield Path(env_override).expanduser()

    seen: set[Path] = set()
    roots = [Path.cwd()]
    project_root = _discover_project_root()
    if project_root:
        roots.append(project_root)
    for root in roots:
        candidate = root / ".secrets" / "settings.toml"
        if candidate not in seen:
            seen.add(candidate)
            yield candidate


def _load_toml(path: Path) -> Dict[str, Any]:
    try:
        with path.open("rb") as handle:
            return tomllib.load(handle)
    except tomllib.TOMLDecodeError as exc:
        raise SettingsError(f"Failed to parse settings file '{path}': {exc}") from exc


def _settings_from_table(section: Mapping[str, Any], *, origin: Optional[Path]) -> ClientSettings:
    base_url = section.get("base_url", DEFAULT_BASE_URL)
    timeout = section.get("timeout", DEFAULT_TIMEOUT)
    language = section.get("language")
    attempts = section.get("rate_limit_attempts", DEFAULT_RATE_LIMIT_ATTEMPTS)

    if not isinstance(base_url, str) or not base_url:
        raise SettingsError(f"'base_url' in '{origin}' must be a non-empty string.")
    if isinstance(timeout, bool) or not isinstance(timeout, (int, float)) or timeout <= 0:
        raise SettingsError(f"'timeout' in '{origin}' must be a positive number.")
    if language is not None and not isinstance(language, str):
        raise SettingsError(f"'language' in '{origin}' must be a string.")
    if isinstance(attempts, bool) or not isinstance(attempts, int) or attempts < 1:
        raise SettingsError(f"'rate_limit_attempts' in '{origin}' must be a positive integer.")
    if "key" in section:
        raise SettingsError(f"'{origin}' must not contain an API key; use the provider 'key' attribute or {ENV_CREDENTIAL}.")

    return ClientSettings(
        base_url=base_url.rstrip("/"),
        timeout=float(timeout),
        language=language or None,
        rate_limit_attempts=attempts,
        source_path=origin,
    )


def load_settings(path: Optional[Path] = None, *, environ: Optional[Mapping[str, str]] = None) -> ClientSettings:
    """
    Load client settings.

    Parameters
    ----------
    path:
        Explicit settings file. When given it must exist.
    environ:
        Environment snapshot used to locate the settings file. Defaults to an empty mapping so
        callers decide explicitly whether process state participates.
    """

    if path is not None:
        if not path.is_file():
            raise SettingsError(f"Settings file '{path}' does not exist.")
        data = _load_toml(path)
        return _settings_from_table(_tmdb_table(data, path), origin=path)

    for candidate in _candidate_paths(environ or {}):
        if candidate.is_file():
            data = _load_toml(candidate)
            return _settings_from_table(_tmdb_table(data, candidate), origin=candidate)

    return ClientSettings()


def _tmdb_table(data: Mapping[str, Any], origin: Path) -> Mapping[str, Any]:
    section = data.get("tmdb", {})
    if not isinstance(section, dict):
        raise SettingsError(f"'[tmdb]' in '{origin}' must be a table.")
    return section
