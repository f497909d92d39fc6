"""
Execution context handed to host-side helpers (runner, CLI).

The context carries an explicit snapshot of the environment so credential
fallback never reads process-wide state from inside the provider. Tests build
contexts with hand-written ``environ`` mappings.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from logging import LoggerAdapter
from pathlib import Path
from typing import Mapping, Optional, Sequence

from ..config import ENV_CREDENTIAL, ClientSettings, load_settings
from .logging import get_logger as _get_logger

DEFAULT_MAX_WORKERS = 4


@dataclass(slots=True)
class ExecutionOptions:
    """
    Flags controlling how host-side helpers behave at runtime.

    Attributes
    ----------
    max_workers:
        Upper bound on concurrently running data source reads.
    observability_tags:
        Additional tags surfaced in logs.
    """

    max_workers: int = DEFAULT_MAX_WORKERS
    observability_tags: Sequence[str] = field(default_factory=tuple)


@dataclass(slots=True)
class ExecutionContext:
    """
    Shared execution context.

    Attributes
    ----------
    environ:
        Environment snapshot consulted for the ``TMDB_KEY`` fallback.
    settings:
        Client tuning settings.
    options:
        Auxiliary execution flags.
    """

    environ: Mapping[str, str] = field(default_factory=dict)
    settings: ClientSettings = field(default_factory=ClientSettings)
    options: ExecutionOptions = field(default_factory=ExecutionOptions)

    @classmethod
    def build_default(
        cls,
        *,
        environ: Optional[Mapping[str, str]] = None,
        settings_path: Optional[Path] = None,
        settings: Optional[ClientSettings] = None,
        options: Optional[ExecutionOptions] = None,
    ) -> "ExecutionContext":
        """
        Construct a context from the current process.

        Parameters
        ----------
        environ:
            Environment snapshot. Defaults to a copy of :data:`os.environ`.
        settings_path:
            Explicit settings file passed to :func:`~tmdb_provider.config.load_settings`.
        settings:
            Preloaded settings; skips file discovery.
        options:
            Optional execution flags.
        """

        snapshot = dict(os.environ if environ is None else environ)
        resolved_settings = settings or load_settings(settings_path, environ=snapshot)
        return cls(environ=snapshot, settings=resolved_settings, options=options or ExecutionOptions())

    @property
    def credential_fallback(self) -> Optional[str]:
        return self.environ.get(ENV_CREDENTIAL)

    def get_logger(self, name: str, *, extra: Optional[Mapping[str, object]] = None) -> LoggerAdapter:
        """Return a logger adapter enriched with the context's observability tags."""

        tags = tuple(self.options.observability_tags)
        return _get_logger(name, tags=tags if tags else None, extra=extra)
