"""
Credential resolution and client construction.

Both steps run exactly once per provider configuration cycle, before any data
source read. Neither raises: every problem is reported through the returned
:class:`~tmdb_provider.core.diagnostics.Diagnostics`.
"""

from __future__ import annotations

from typing import Optional, Tuple

from .adapters.api.tmdb import TMDBClient, TMDBClientError
from .adapters.base import MovieCatalog
from .config import ENV_CREDENTIAL, ClientSettings
from .core.diagnostics import AttributePath, Diagnostics
from .core.values import UnknownValue, is_unknown

KEY_ATTRIBUTE = "key"


def resolve_credential(declared: Optional[str | UnknownValue], env_value: Optional[str]) -> Tuple[Optional[str], Diagnostics]:
    """
    Pick the API key: declared configuration wins over the environment fallback.

    Parameters
    ----------
    declared:
        Value of the provider ``key`` attribute. ``None`` when absent or null,
        :data:`~tmdb_provider.core.values.UNKNOWN` when the host cannot resolve it yet.
    env_value:
        Value of ``TMDB_KEY`` taken from the caller's environment snapshot.
    """

    diagnostics = Diagnostics()
    path = AttributePath.root(KEY_ATTRIBUTE)

    if is_unknown(declared):
        diagnostics.add_attribute_error(
            path,
            "Unknown TMDB API Key",
            "The provider cannot create the TMDB API client as there is an unknown configuration value for the TMDB API key. "
            f"Either target apply the source of the value first, set the value statically in the configuration, or use the {ENV_CREDENTIAL} environment variable.",
        )
        return None, diagnostics

    credential = env_value or ""
    if declared is not None:
        credential = declared

    if not credential:
        diagnostics.add_attribute_error(
            path,
            "Missing TMDB API Key",
            "The provider cannot create the TMDB API client as there is a missing or empty value for the TMDB API key. "
            f'Set the "{KEY_ATTRIBUTE}" value in the provider configuration or use the {ENV_CREDENTIAL} environment variable. '
            "If either is already set, ensure the value is not empty.",
        )
        return None, diagnostics

    return credential, diagnostics


def build_client(credential: str, settings: Optional[ClientSettings] = None) -> Tuple[Optional[MovieCatalog], Diagnostics]:
    """Construct the shared catalogue client from a resolved credential."""

    diagnostics = Diagnostics()
    resolved = settings or ClientSettings()
    try:
        client = TMDBClient(
            credential,
            base_url=resolved.base_url,
            timeout=resolved.timeout,
            language=resolved.language,
            rate_limit_attempts=resolved.rate_limit_attempts,
        )
    except TMDBClientError as exc:
        diagnostics.add_error(
            "Unable to Create TMDB API Client",
            "An unexpected error occurred when creating the TMDB API client. "
            "If the error is not clear, please contact the provider developers.\n\n"
            f"TMDB Client Error: {exc}",
        )
        return None, diagnostics
    return client, diagnostics
