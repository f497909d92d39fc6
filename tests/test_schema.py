from __future__ import annotations

import pytest

from tmdb_provider.core.schema import Attribute, AttributeType, SchemaDeclaration, SchemaError
from tmdb_provider.core.values import UNKNOWN
from tmdb_provider.datasources.search import SEARCH_SCHEMA


def test_required_and_computed_is_rejected():
    with pytest.raises(SchemaError):
        SchemaDeclaration(attributes=(Attribute("id", AttributeType.INT, required=True, computed=True),))


def test_attribute_without_mode_is_rejected():
    with pytest.raises(SchemaError):
        SchemaDeclaration(attributes=(Attribute("id", AttributeType.INT),))


def test_duplicate_attribute_is_rejected():
    with pytest.raises(SchemaError, match="Duplicate"):
        SchemaDeclaration(
            attributes=(
                Attribute("id", AttributeType.INT, required=True),
                Attribute("id", AttributeType.STRING, computed=True),
            )
        )


def test_nested_list_requires_element_attributes():
    with pytest.raises(SchemaError):
        SchemaDeclaration(attributes=(Attribute("movies", AttributeType.LIST_NESTED, computed=True),))


def test_optional_computed_attribute_accepts_input():
    schema = SchemaDeclaration(attributes=(Attribute("language", AttributeType.STRING, optional=True, computed=True),))

    assert not schema.validate_config({"language": "en-US"})
    assert not schema.validate_config({})


def test_validate_config_allows_unknown_when_requested():
    schema = SchemaDeclaration(attributes=(Attribute("key", AttributeType.STRING, optional=True),))

    assert not schema.validate_config({"key": UNKNOWN}, allow_unknown=True)
    assert [d.summary for d in schema.validate_config({"key": UNKNOWN})] == ["Unknown Configuration Value"]


def test_validate_state_reports_nested_paths():
    diagnostics = SEARCH_SCHEMA.validate_state(
        {
            "query": "dune",
            "movies": [
                {"id": 1, "title": "A", "overview": "", "releasedate": ""},
                {"id": "2", "title": "B", "overview": "", "releasedate": ""},
            ],
        }
    )

    assert [str(d.attribute_path) for d in diagnostics] == ["movies[1].id"]


def test_validate_state_flags_missing_and_extra_attributes():
    diagnostics = SEARCH_SCHEMA.validate_state({"movies": [], "page": 1})

    assert sorted(str(d.attribute_path) for d in diagnostics) == ["page", "query"]


def test_to_dict_describes_nested_attributes():
    payload = SEARCH_SCHEMA.to_dict()

    assert payload["attributes"]["query"]["required"] is True
    assert payload["attributes"]["movies"]["computed"] is True
    assert set(payload["attributes"]["movies"]["nested"]) == {"id", "title", "overview", "releasedate"}
