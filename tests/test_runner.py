from __future__ import annotations

import threading
from unittest.mock import patch

from tmdb_provider.adapters.api.tmdb import TMDBClientError
from tmdb_provider.core.diagnostics import Diagnostics
from tmdb_provider.core.manifest import DataBlock, Manifest
from tmdb_provider.services import ProviderRunner


def _run(context, catalog, manifest):
    with patch("tmdb_provider.provider.build_client", return_value=(catalog, Diagnostics())):
        return ProviderRunner(context=context).run(manifest)


def test_runner_reads_every_block_in_manifest_order(context, catalog, manifest_file, fight_club):
    result = _run(context, catalog, Manifest.from_yaml(manifest_file))

    assert result.ok
    assert [block.address for block in result.blocks] == [
        "data.tmdb_movie.fight_club",
        "data.tmdb_popular_movies.trending",
        "data.tmdb_search.dune",
    ]
    assert result.blocks[0].response.state["title"] == fight_club.title
    assert result.blocks[2].response.state["query"] == "dune"


def test_runner_uses_declared_key_over_environment(context, catalog):
    context.environ = {"TMDB_KEY": "env-key"}
    with patch("tmdb_provider.provider.build_client", return_value=(catalog, Diagnostics())) as factory:
        ProviderRunner(context=context).run(Manifest(provider={"key": "declared"}))

    assert factory.call_args.args[0] == "declared"


def test_runner_skips_reads_when_configuration_fails(context, catalog):
    manifest = Manifest(provider={}, data=(DataBlock("tmdb_movie", "m", {"id": 550}),))

    result = ProviderRunner(context=context).run(manifest)

    assert not result.ok
    assert [d.summary for d in result.configure.diagnostics] == ["Missing TMDB API Key"]
    assert result.blocks[0].response.state is None
    assert [d.summary for d in result.blocks[0].response.diagnostics] == ["Provider Not Configured"]
    catalog.fetch_by_id.assert_not_called()


def test_runner_isolates_failures_per_block(context, catalog):
    catalog.fetch_popular.side_effect = TMDBClientError("boom")
    manifest = Manifest(
        provider={"key": "declared"},
        data=(
            DataBlock("tmdb_popular_movies", "popular"),
            DataBlock("tmdb_movie", "movie", {"id": 550}),
            DataBlock("tmdb_tv", "tv"),
        ),
    )

    result = _run(context, catalog, manifest)

    assert not result.ok
    popular, movie, tv = (block.response for block in result.blocks)
    assert popular.state is None
    assert movie.ok and movie.state["id"] == 550
    assert [d.summary for d in tv.diagnostics] == ["Invalid Data Source"]


def test_runner_reads_concurrently(context, catalog, fight_club):
    barrier = threading.Barrier(2, timeout=5)

    def fetch(movie_id):
        barrier.wait()
        return fight_club

    catalog.fetch_by_id.side_effect = fetch
    manifest = Manifest(
        provider={"key": "declared"},
        data=(DataBlock("tmdb_movie", "a", {"id": 550}), DataBlock("tmdb_movie", "b", {"id": 550})),
    )

    result = _run(context, catalog, manifest)

    assert result.ok
    assert result.blocks[0].response.state == result.blocks[1].response.state


def test_run_result_to_dict(context, catalog):
    result = _run(context, catalog, Manifest(provider={"key": "declared"}, data=(DataBlock("tmdb_search", "s", {"query": "dune"}),)))

    payload = result.to_dict()

    assert payload["provider"] == {"diagnostics": []}
    assert payload["data"][0]["address"] == "data.tmdb_search.s"
    assert payload["data"][0]["diagnostics"] == []
    assert len(payload["data"][0]["state"]["movies"]) == 3
