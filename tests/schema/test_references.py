"""Tests for pyfulmen.schema.references."""

from pathlib import Path

import pytest

from pyfulmen.config import reset_config
from pyfulmen.schema.errors import SchemaReferenceError
from pyfulmen.schema.references import (
    PACKAGED_SCHEMA_ROOT,
    ReferenceLoader,
    file_uri,
    resolve_default_root,
)


@pytest.fixture
def loader() -> ReferenceLoader:
    return ReferenceLoader(PACKAGED_SCHEMA_ROOT)


class TestResolvePath:
    def test_draft_2020_12_metaschema(self, loader):
        path = loader.resolve_path("https://json-schema.org/draft/2020-12/schema")
        assert path == PACKAGED_SCHEMA_ROOT / "meta" / "draft-2020-12" / "schema.json"

    def test_draft_2020_12_vocabulary(self, loader):
        path = loader.resolve_path("https://json-schema.org/draft/2020-12/meta/applicator")
        assert path.name == "applicator.json"

    def test_draft_07_metaschema_with_fragment(self, loader):
        path = loader.resolve_path("http://json-schema.org/draft-07/schema#")
        assert path == PACKAGED_SCHEMA_ROOT / "meta" / "draft-07" / "schema.json"

    def test_vendor_versioned_url(self, loader):
        path = loader.resolve_path(
            "https://schemas.fulmenhq.dev/crucible/pathfinder/path-result-v1.0.0.json"
        )
        assert path == PACKAGED_SCHEMA_ROOT / "pathfinder" / "v1.0.0" / "path-result.schema.json"

    def test_vendor_nested_category(self, loader):
        path = loader.resolve_path(
            "https://schemas.fulmenhq.dev/crucible/observability/logging/log-event-v1.0.0.json"
        )
        assert path.name == "log-event.schema.json"

    def test_vendor_yaml_schema(self, loader):
        path = loader.resolve_path(
            "https://schemas.fulmenhq.dev/crucible/config/app-identity-v1.0.0.json"
        )
        assert path.name == "app-identity.schema.yaml"

    def test_vendor_schema_yml_suffixes(self, schema_root):
        gadgets = schema_root / "gadgets" / "v1.0.0"
        gadgets.mkdir(parents=True)
        (gadgets / "gizmo.schema.yml").write_text("type: object\n", encoding="utf-8")
        (gadgets / "sprocket.schema.yaml").write_text("type: string\n", encoding="utf-8")
        loader = ReferenceLoader(schema_root)

        versioned = loader.resolve_path("https://schemas.fulmenhq.dev/gadgets/gizmo-v1.0.0.json")
        assert versioned == gadgets / "gizmo.schema.yml"

        unversioned = loader.resolve_path(
            "https://schemas.fulmenhq.dev/gadgets/sprocket.schema.yaml"
        )
        assert unversioned == gadgets / "sprocket.schema.yaml"

    def test_vendor_direct_layout(self, schema_root):
        path = ReferenceLoader(schema_root).resolve_path(
            "https://schemas.fulmenhq.dev/test/v1.0.0/widget.schema.json"
        )
        assert path == schema_root / "test" / "v1.0.0" / "widget.schema.json"

    def test_file_url(self, loader, tmp_path):
        target = tmp_path / "local.json"
        assert loader.resolve_path(file_uri(target)) == target.resolve()

    def test_relative_path(self, loader):
        path = loader.resolve_path("common/v1.0.0/correlation-id.schema.json")
        assert path.is_file()

    def test_other_hosts_are_rejected(self, loader):
        with pytest.raises(SchemaReferenceError):
            loader.resolve_path("https://example.com/schema.json")

    def test_other_schemes_are_rejected(self, loader):
        with pytest.raises(SchemaReferenceError):
            loader.resolve_path("ftp://example.com/schema.json")

    def test_missing_vendor_schema(self, loader):
        with pytest.raises(SchemaReferenceError):
            loader.resolve_path("https://schemas.fulmenhq.dev/crucible/nope/absent-v1.0.0.json")

    def test_custom_prefix(self, schema_root):
        loader = ReferenceLoader(schema_root, url_prefix="https://schemas.example.org/")
        path = loader.resolve_path("https://schemas.example.org/test/v1.0.0/person.schema.json")
        assert path.name == "person.schema.json"


class TestRetrieve:
    def test_resource_is_cached(self, loader):
        uri = "https://json-schema.org/draft/2020-12/schema"
        assert loader.retrieve(uri) is loader.retrieve(uri)

    def test_load_parses_yaml(self, loader):
        document = loader.load("config/v1.0.0/app-identity.schema.yaml")
        assert document["required"] == ["vendor"]


class TestDefaultRoot:
    def test_configured_root_wins(self, tmp_path, monkeypatch):
        monkeypatch.setenv("PYFULMEN_SCHEMA_ROOT", str(tmp_path))
        reset_config()
        assert resolve_default_root() == tmp_path

    def test_conventional_directory_in_ancestor(self, tmp_path):
        conventional = tmp_path / "schemas" / "crucible-py"
        conventional.mkdir(parents=True)
        nested = tmp_path / "a" / "b"
        nested.mkdir(parents=True)
        assert resolve_default_root(nested) == conventional

    def test_search_depth_is_bounded(self, tmp_path):
        (tmp_path / "schemas" / "crucible-py").mkdir(parents=True)
        deep = tmp_path / "a" / "b" / "c" / "d" / "e"
        deep.mkdir(parents=True)
        assert resolve_default_root(deep) == PACKAGED_SCHEMA_ROOT

    def test_packaged_fallback(self, tmp_path):
        assert resolve_default_root(tmp_path) == PACKAGED_SCHEMA_ROOT
        assert Path(PACKAGED_SCHEMA_ROOT / "meta").is_dir()
