from __future__ import annotations

import pytest

from tmdb_provider.adapters.api.tmdb import TMDBClientError
from tmdb_provider.adapters.base import Movie
from tmdb_provider.core.diagnostics import Severity
from tmdb_provider.core.values import UNKNOWN
from tmdb_provider.datasources import MovieDataSource, PopularMoviesDataSource, SearchDataSource
from tmdb_provider.datasources.movie import MOVIE_SCHEMA
from tmdb_provider.datasources.popular_movies import POPULAR_MOVIES_SCHEMA
from tmdb_provider.datasources.search import SEARCH_SCHEMA


def _configured(source_cls, catalog):
    source = source_cls()
    source.configure(catalog)
    return source


@pytest.mark.parametrize(
    ("source_cls", "expected"),
    [
        (MovieDataSource, "tmdb_movie"),
        (PopularMoviesDataSource, "tmdb_popular_movies"),
        (SearchDataSource, "tmdb_search"),
    ],
)
def test_metadata_joins_provider_prefix_and_suffix(source_cls, expected):
    assert source_cls().metadata("tmdb") == expected
    assert source_cls().metadata("other") == expected.replace("tmdb", "other", 1)


def test_schemas_never_mark_computed_attributes_required():
    for schema in (MOVIE_SCHEMA, POPULAR_MOVIES_SCHEMA, SEARCH_SCHEMA):
        for attribute in schema.attributes:
            assert not (attribute.required and attribute.computed)


def test_movie_read_maps_record_fields(catalog, fight_club):
    source = _configured(MovieDataSource, catalog)

    response = source.read({"id": 550})

    assert response.ok
    assert len(response.diagnostics) == 0
    assert response.state == {
        "id": fight_club.id,
        "title": fight_club.title,
        "overview": fight_club.overview,
        "releasedate": fight_club.release_date,
    }
    catalog.fetch_by_id.assert_called_once_with(550)


def test_movie_read_echoes_canonical_identifier(catalog):
    catalog.fetch_by_id.return_value = Movie(id=551, title="Other")
    source = _configured(MovieDataSource, catalog)

    response = source.read({"id": 550})

    assert response.state["id"] == 551


def test_movie_read_failure_reports_identifier(catalog):
    catalog.fetch_by_id.side_effect = TMDBClientError("HTTP 404 error: The resource you requested could not be found.", status_code=404)
    source = _configured(MovieDataSource, catalog)

    response = source.read({"id": 550})

    assert response.state is None
    assert not response.ok
    errors = response.diagnostics.errors()
    assert len(errors) == 1
    assert errors[0].summary == "Unable to Read TMDB Movie with ID: 550"
    assert "could not be found" in errors[0].detail


@pytest.mark.parametrize(
    ("config", "summary"),
    [
        ({}, "Missing Configuration for Required Attribute"),
        ({"id": None}, "Missing Configuration for Required Attribute"),
        ({"id": "550"}, "Incorrect Attribute Value Type"),
        ({"id": True}, "Incorrect Attribute Value Type"),
        ({"id": UNKNOWN}, "Unknown Configuration Value"),
        ({"id": 550, "title": "x"}, "Invalid Configuration for Read-Only Attribute"),
        ({"id": 550, "year": 1999}, "Unsupported Argument"),
    ],
)
def test_movie_read_rejects_invalid_config_before_fetching(catalog, config, summary):
    source = _configured(MovieDataSource, catalog)

    response = source.read(config)

    assert response.state is None
    assert summary in [d.summary for d in response.diagnostics.errors()]
    catalog.fetch_by_id.assert_not_called()


def test_unconfigured_read_fails_explicitly():
    source = MovieDataSource()
    source.configure(None)

    response = source.read({"id": 550})

    assert response.state is None
    assert [d.summary for d in response.diagnostics] == ["Unconfigured TMDB API Client"]


def test_configure_with_none_keeps_existing_client(catalog):
    source = _configured(PopularMoviesDataSource, catalog)
    source.configure(None)

    assert source.client is catalog


def test_popular_read_preserves_order(catalog, dune_results):
    source = _configured(PopularMoviesDataSource, catalog)

    response = source.read({})

    assert response.ok
    assert [movie["id"] for movie in response.state["movies"]] == [movie.id for movie in dune_results]
    assert set(response.state) == {"movies"}


def test_popular_read_empty_list_is_success(catalog):
    catalog.fetch_popular.return_value = []
    source = _configured(PopularMoviesDataSource, catalog)

    response = source.read({})

    assert response.state == {"movies": []}
    assert len(response.diagnostics) == 0


def test_popular_read_failure(catalog):
    catalog.fetch_popular.side_effect = TMDBClientError("timed out")
    source = _configured(PopularMoviesDataSource, catalog)

    response = source.read({})

    assert response.state is None
    assert [(d.severity, d.summary, d.detail) for d in response.diagnostics] == [(Severity.ERROR, "Unable to Read TMDB Movies", "timed out")]


def test_search_read_maps_results_one_to_one(catalog, dune_results):
    source = _configured(SearchDataSource, catalog)

    response = source.read({"query": "dune"})

    assert response.ok
    assert response.state["query"] == "dune"
    assert response.state["movies"] == [
        {"id": movie.id, "title": movie.title, "overview": movie.overview, "releasedate": movie.release_date} for movie in dune_results
    ]
    catalog.fetch_by_query.assert_called_once_with("dune")


def test_search_zero_results_is_success(catalog):
    catalog.fetch_by_query.return_value = []
    source = _configured(SearchDataSource, catalog)

    response = source.read({"query": "zzzzzz"})

    assert response.state == {"query": "zzzzzz", "movies": []}
    assert not response.diagnostics


def test_search_rejects_empty_query(catalog):
    source = _configured(SearchDataSource, catalog)

    response = source.read({"query": ""})

    assert response.state is None
    (diagnostic,) = list(response.diagnostics)
    assert diagnostic.summary == "Invalid Attribute Value Length"
    assert str(diagnostic.attribute_path) == "query"
    catalog.fetch_by_query.assert_not_called()


def test_search_failure_names_query(catalog):
    catalog.fetch_by_query.side_effect = TMDBClientError("HTTP 401 error: Invalid API key: You must be granted a valid key.")
    source = _configured(SearchDataSource, catalog)

    response = source.read({"query": "dune"})

    assert response.state is None
    assert [d.summary for d in response.diagnostics] == ["Unable to Read TMDB Movies with query: dune"]


@pytest.mark.parametrize(
    ("source_cls", "config"),
    [
        (MovieDataSource, {"id": 550}),
        (PopularMoviesDataSource, {}),
        (SearchDataSource, {"query": "dune"}),
    ],
)
def test_reads_are_idempotent(catalog, source_cls, config):
    source = _configured(source_cls, catalog)

    first = source.read(config)
    second = source.read(config)

    assert first.state == second.state
    assert first.diagnostics.to_list() == second.diagnostics.to_list()
