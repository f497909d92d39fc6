"""
Typer application for driving the TMDB provider from a terminal.

The CLI plays the host's role: it builds the provider configuration from
``--key`` or a manifest, configures the provider once and prints state
documents plus diagnostics as JSON. Any error diagnostic makes the command
exit with status 1.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Dict, Optional

import typer

from ..config import SettingsError
from ..core.context import ExecutionContext, ExecutionOptions
from ..core.logging import configure_logging
from ..core.manifest import Manifest, ManifestLoadError
from ..provider import PROVIDER_TYPE_NAME, TMDBProvider
from ..services import ProviderRunner, RunResult

app = typer.Typer(
    no_args_is_help=True,
    add_completion=False,
    help=(
        "Read-only TMDB provider.\n\n"
        "Command groups:\n"
        "- sources: list the data sources the provider exposes.\n"
        "- read: evaluate a YAML manifest of data blocks.\n"
        "- movie / popular / search: one-off reads."
    ),
)
sources_app = typer.Typer(help="Inspect the data sources exposed by the provider.")
app.add_typer(sources_app, name="sources")


@app.callback(invoke_without_command=False)
def main(
    ctx: typer.Context,
    key: Optional[str] = typer.Option(
        None,
        "--key",
        help="TMDB API key. Overrides the TMDB_KEY environment variable.",
    ),
    settings_file: Optional[Path] = typer.Option(
        None,
        "--settings",
        help="TOML file with a [tmdb] table (base_url, timeout, language).",
        exists=True,
        dir_okay=False,
        readable=True,
    ),
    workers: int = typer.Option(4, "--workers", min=1, help="Maximum number of concurrent reads."),
    log_level: Optional[str] = typer.Option(None, "--log-level", help="Logging level, e.g. DEBUG or INFO."),
) -> None:
    """
    Configure the execution context shared by every command.
    """

    configure_logging(log_level, force=log_level is not None)
    try:
        context = ExecutionContext.build_default(settings_path=settings_file, options=ExecutionOptions(max_workers=workers))
    except SettingsError as exc:
        typer.echo(f"Invalid settings: {exc}", err=True)
        raise typer.Exit(code=2) from exc

    state = ctx.ensure_object(dict)
    state["context"] = context
    state["provider_config"] = {"key": key} if key is not None else {}


def _require_context(ctx: typer.Context) -> ExecutionContext:
    state = ctx.ensure_object(dict)
    context = state.get("context")
    if not isinstance(context, ExecutionContext):
        raise typer.Exit(code=2)
    return context


def _provider_config(ctx: typer.Context) -> Dict[str, Any]:
    return dict(ctx.ensure_object(dict).get("provider_config") or {})


def _emit(result: RunResult) -> None:
    typer.echo(json.dumps(result.to_dict(), ensure_ascii=False, indent=2))
    if not result.ok:
        raise typer.Exit(code=1)


@app.command("schema")
def schema_command() -> None:
    """Print the provider and data source schemas as JSON."""

    provider = TMDBProvider()
    payload: Dict[str, Any] = {
        "provider": {
            "type_name": provider.metadata().type_name,
            "version": provider.metadata().version,
            "schema": provider.schema().to_dict(),
        },
        "data_sources": {descriptor.type_name: descriptor.create().schema().to_dict() for descriptor in provider.registry()},
        "resources": {},
    }
    typer.echo(json.dumps(payload, ensure_ascii=False, indent=2))


@sources_app.command("list")
def sources_list() -> None:
    """List the data source type names with a short description."""

    registry = TMDBProvider().registry()
    header = f"{'Type':<24} Description"
    typer.echo(header)
    typer.echo("-" * len(header))
    for descriptor in registry:
        typer.echo(f"{descriptor.type_name:<24} {descriptor.description}")


@app.command("read")
def read_manifest(
    ctx: typer.Context,
    manifest_file: Path = typer.Argument(..., exists=True, dir_okay=False, readable=True, help="YAML manifest."),
) -> None:
    """Configure the provider from the manifest and read every data block concurrently."""

    context = _require_context(ctx)
    try:
        manifest = Manifest.from_yaml(manifest_file)
    except ManifestLoadError as exc:
        typer.echo(f"Invalid manifest: {exc}", err=True)
        raise typer.Exit(code=2) from exc

    cli_config = _provider_config(ctx)
    if cli_config:
        merged = dict(manifest.provider)
        merged.update(cli_config)
        manifest = Manifest(provider=merged, data=manifest.data)

    _emit(ProviderRunner(context=context).run(manifest))


@app.command("movie")
def read_movie(
    ctx: typer.Context,
    movie_id: int = typer.Argument(..., help="TMDB movie identifier."),
) -> None:
    """Look up one movie by identifier."""

    runner = ProviderRunner(context=_require_context(ctx))
    _emit(runner.read_one(f"{PROVIDER_TYPE_NAME}_movie", {"id": movie_id}, _provider_config(ctx)))


@app.command("popular")
def read_popular(ctx: typer.Context) -> None:
    """List currently popular movies."""

    runner = ProviderRunner(context=_require_context(ctx))
    _emit(runner.read_one(f"{PROVIDER_TYPE_NAME}_popular_movies", {}, _provider_config(ctx)))


@app.command("search")
def read_search(
    ctx: typer.Context,
    query: str = typer.Argument(..., help="Search text."),
) -> None:
    """Search movies by title text."""

    runner = ProviderRunner(context=_require_context(ctx))
    _emit(runner.read_one(f"{PROVIDER_TYPE_NAME}_search", {"query": query}, _provider_config(ctx)))


@app.command("verify")
def verify(ctx: typer.Context) -> None:
    """
    Check that the provider can be configured and TMDB answers.

    Configures the provider and probes the popular-movies endpoint once.
    """

    runner = ProviderRunner(context=_require_context(ctx))
    result = runner.read_one(f"{PROVIDER_TYPE_NAME}_popular_movies", {}, _provider_config(ctx))
    if not result.configure.ok:
        for diagnostic in result.configure.diagnostics:
            typer.echo(f"{diagnostic.summary}: {diagnostic.detail}", err=True)
        raise typer.Exit(code=1)

    block = result.blocks[0].response
    if not block.ok:
        for diagnostic in block.diagnostics:
            typer.echo(f"Verification failed: {diagnostic.summary}: {diagnostic.detail}", err=True)
        raise typer.Exit(code=1)

    count = len(block.state["movies"]) if block.state else 0
    typer.echo(f"TMDB API reachable ({count} popular movies).")
