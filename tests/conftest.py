from __future__ import annotations

from pathlib import Path
from unittest.mock import MagicMock

import pytest
from typer.testing import CliRunner

from tmdb_provider.adapters.base import Movie
from tmdb_provider.cli.main import app
from tmdb_provider.core.context import ExecutionContext, ExecutionOptions
from tmdb_provider.config import ClientSettings


@pytest.fixture()
def fight_club() -> Movie:
    return Movie(
        id=550,
        title="Fight Club",
        overview="A ticking-time-bomb insomniac and a slippery soap salesman channel primal male aggression.",
        release_date="1999-10-15",
    )


@pytest.fixture()
def dune_results() -> list[Movie]:
    return [
        Movie(id=438631, title="Dune", overview="Paul Atreides arrives on Arrakis.", release_date="2021-09-15"),
        Movie(id=841, title="Dune", overview="In the year 10,191 the spice melange is the most valuable substance.", release_date="1984-12-14"),
        Movie(id=693134, title="Dune: Part Two", overview="Paul unites with Chani and the Fremen.", release_date="2024-02-27"),
    ]


@pytest.fixture()
def catalog(fight_club, dune_results) -> MagicMock:
    client = MagicMock()
    client.fetch_by_id.return_value = fight_club
    client.fetch_popular.return_value = list(dune_results)
    client.fetch_by_query.return_value = list(dune_results)
    return client


@pytest.fixture()
def context() -> ExecutionContext:
    return ExecutionContext(environ={}, settings=ClientSettings(), options=ExecutionOptions(max_workers=2))


@pytest.fixture()
def manifest_file(tmp_path) -> Path:
    path = tmp_path / "manifest.yaml"
    path.write_text(
        "\n".join(
            [
                "provider:",
                "  key: manifest-key",
                "data:",
                "  - type: tmdb_movie",
                "    name: fight_club",
                "    config:",
                "      id: 550",
                "  - type: tmdb_popular_movies",
                "    name: trending",
                "  - type: tmdb_search",
                "    name: dune",
                "    config:",
                "      query: dune",
            ]
        ),
        encoding="utf-8",
    )
    return path


@pytest.fixture()
def cli_runner() -> CliRunner:
    return CliRunner()


@pytest.fixture()
def cli_app():
    return app
