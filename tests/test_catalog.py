from pathlib import Path

import pytest

from spring_http_requests.errors import CatalogError, ResolutionMiss
from spring_http_requests.parser.catalog import load_catalog, parse_catalog

FIXTURES = Path(__file__).parent / "fixtures"


@pytest.fixture
def catalog():
    return load_catalog(FIXTURES / "catalog.yaml")


class TestResolve:
    def test_resolve_by_path_and_method(self, catalog):
        endpoint = catalog.resolve("/users", "POST")
        assert endpoint.handler == "com.example.demo.UserController#create"

    def test_method_is_case_insensitive(self, catalog):
        assert catalog.resolve("/users", "get").handler.endswith("#list")

    def test_template_segments_match_any_value(self, catalog):
        endpoint = catalog.resolve("/users/42", "PUT")
        assert endpoint.path == "/users/{id}"

    def test_trailing_slash_ignored(self, catalog):
        assert catalog.resolve("/users/42/avatar/", "POST").handler.endswith("#uploadAvatar")

    def test_ambiguous_match_is_a_miss(self, catalog):
        with pytest.raises(ResolutionMiss, match="Ambiguous"):
            catalog.resolve("/users")

    def test_unknown_path_is_a_miss(self, catalog):
        with pytest.raises(ResolutionMiss):
            catalog.resolve("/orders/1", "GET")

    def test_literal_path_beats_template(self):
        catalog = parse_catalog({"endpoints": [
            {"path": "/users/{id}", "handler": "byId"},
            {"path": "/users/me", "handler": "me"},
        ]})
        assert catalog.resolve("/users/me", "GET").handler == "me"
        assert catalog.resolve("/users/7", "GET").handler == "byId"

    def test_endpoint_without_method_matches_any(self):
        catalog = parse_catalog({"endpoints": [{"path": "/ping"}]})
        assert catalog.resolve("/ping", "DELETE").path == "/ping"

    def test_annotation_attributes_kept_as_text(self, catalog):
        endpoint = catalog.resolve("/users", "GET")
        attributes = endpoint.parameters[1].annotations[0].attributes
        assert attributes == {"value": '"pageSize"', "required": "false"}


class TestFieldsOf:
    def test_own_fields_then_inherited(self, catalog):
        fields = catalog.fields_of("com.example.demo.User")
        assert [f.name for f in fields] == ["name", "email", "id"]

    def test_lookup_by_simple_name(self, catalog):
        assert [f.name for f in catalog.fields_of("User")] == ["name", "email", "id"]

    def test_unknown_type(self, catalog):
        assert catalog.fields_of("com.example.demo.Order") is None
        assert catalog.fields_of(None) is None

    def test_cyclic_inheritance_terminates(self):
        catalog = parse_catalog({"types": {
            "A": {"fields": ["a"], "extends": "B"},
            "B": {"fields": [{"name": "b"}], "extends": "A"},
        }})
        assert [f.name for f in catalog.fields_of("A")] == ["a", "b"]

    def test_type_without_fields(self):
        catalog = parse_catalog({"types": {"Empty": None}})
        assert catalog.fields_of("Empty") == []


class TestLoadCatalog:
    def test_json_catalog(self, tmp_path):
        f = tmp_path / "catalog.json"
        f.write_text('{"endpoints": [{"path": "/ping", "method": "GET"}]}')
        assert load_catalog(f).resolve("/ping", "GET").method == "GET"

    def test_invalid_yaml(self, tmp_path):
        f = tmp_path / "catalog.yaml"
        f.write_text("endpoints: [unclosed")
        with pytest.raises(CatalogError):
            load_catalog(f)

    def test_top_level_must_be_mapping(self, tmp_path):
        f = tmp_path / "catalog.yaml"
        f.write_text("- /users\n")
        with pytest.raises(CatalogError):
            load_catalog(f)

    def test_endpoint_without_path(self):
        with pytest.raises(CatalogError):
            parse_catalog({"endpoints": [{"method": "GET"}]})

    def test_empty_file(self, tmp_path):
        f = tmp_path / "catalog.yaml"
        f.write_text("")
        assert load_catalog(f).endpoints == []
