"""Tests for pyfulmen.schema.catalog."""

import json
from pathlib import Path

import pytest

from pyfulmen.schema import catalog as schema_catalog
from pyfulmen.schema.catalog import SchemaCatalog, SchemaDiff, schema_id_for
from pyfulmen.schema.errors import (
    DuplicateSchemaError,
    SchemaLoadError,
    SchemaNotFoundError,
    SchemaParseError,
)
from pyfulmen.schema.references import PACKAGED_SCHEMA_ROOT


# --- Identifiers ---


class TestSchemaIdFor:
    def test_simple_layout(self):
        assert schema_id_for(Path("pathfinder/v1.0.0/path-result.schema.json")) == (
            "pathfinder",
            "v1.0.0",
            "path-result",
        )

    def test_nested_category(self):
        assert schema_id_for(Path("library/foundry/v2.0.0/similarity-fixtures.schema.json")) == (
            "library/foundry",
            "v2.0.0",
            "similarity-fixtures",
        )

    def test_yaml_extension(self):
        assert schema_id_for(Path("config/v1.0.0/app-identity.schema.yaml"))[2] == "app-identity"

    def test_too_shallow(self):
        assert schema_id_for(Path("v1.0.0/orphan.json")) is None


# --- Discovery ---


class TestDiscovery:
    def test_packaged_catalog_ids(self, packaged_catalog):
        ids = [descriptor.id for descriptor in packaged_catalog.list_schemas()]
        assert ids == [
            "common/v1.0.0/correlation-id",
            "config/v1.0.0/app-identity",
            "library/foundry/v2.0.0/similarity-fixtures",
            "observability/logging/v1.0.0/log-event",
            "pathfinder/v1.0.0/path-result",
        ]

    def test_meta_directory_is_skipped(self, packaged_catalog):
        assert not any(d.id.startswith("meta/") for d in packaged_catalog.list_schemas())

    def test_prefix_filter(self, packaged_catalog):
        ids = [d.id for d in packaged_catalog.list_schemas("pathfinder/")]
        assert ids == ["pathfinder/v1.0.0/path-result"]

    def test_descriptor_fields(self, packaged_catalog):
        descriptor = packaged_catalog.get_schema("pathfinder/v1.0.0/path-result")
        assert descriptor.category == "pathfinder"
        assert descriptor.version == "v1.0.0"
        assert descriptor.name == "path-result"
        assert descriptor.title == "Pathfinder Path Result"
        assert descriptor.draft == "https://json-schema.org/draft/2020-12/schema"
        assert descriptor.path.is_file()

    def test_missing_schema(self, packaged_catalog):
        with pytest.raises(SchemaNotFoundError) as exc:
            packaged_catalog.get_schema("nope/v1.0.0/missing")
        assert exc.value.schema_id == "nope/v1.0.0/missing"
        assert not packaged_catalog.has_schema("nope/v1.0.0/missing")

    def test_duplicate_ids_are_fatal(self, schema_root):
        (schema_root / "test" / "v1.0.0" / "widget.yaml").write_text("type: object\n")
        with pytest.raises(DuplicateSchemaError):
            SchemaCatalog(schema_root).list_schemas()

    def test_missing_root(self, tmp_path):
        with pytest.raises(SchemaLoadError):
            SchemaCatalog(tmp_path / "absent").list_schemas()

    def test_yaml_schema_is_indexed(self, tmp_catalog):
        assert tmp_catalog.get_schema("test/v1.0.0/legacy").title == "Legacy"


# --- Loading and comparison ---


class TestLoading:
    def test_load_schema_bytes_is_canonical(self, tmp_catalog):
        raw = tmp_catalog.load_schema_bytes("test/v1.0.0/person")
        assert raw == json.dumps(
            json.loads(raw), sort_keys=True, separators=(",", ":"), ensure_ascii=False
        ).encode("utf-8")

    def test_compare_identical(self, tmp_catalog):
        document = tmp_catalog.load_schema_document("test/v1.0.0/person")
        assert tmp_catalog.compare_schema("test/v1.0.0/person", json.dumps(document, indent=4)) == []

    def test_compare_yaml_equivalent(self, tmp_catalog):
        legacy_yaml = (tmp_catalog.root / "test" / "v1.0.0" / "legacy.yaml").read_text()
        assert tmp_catalog.compare_schema("test/v1.0.0/legacy", legacy_yaml) == []

    def test_compare_different(self, tmp_catalog):
        diffs = tmp_catalog.compare_schema("test/v1.0.0/person", '{"type": "string"}')
        assert diffs == [SchemaDiff("test/v1.0.0/person", "schemas differ")]

    def test_compare_unparsable_raises(self, tmp_catalog):
        with pytest.raises(SchemaParseError):
            tmp_catalog.compare_schema("test/v1.0.0/person", b"{not json")

    def test_compare_invalid_utf8_raises(self, tmp_catalog):
        with pytest.raises(SchemaParseError, match="invalid UTF-8"):
            tmp_catalog.compare_schema("test/v1.0.0/person", b'{"type": "\xff\xfe"}')


# --- Validation by id ---


class TestValidateById:
    def test_valid_payload(self, packaged_catalog):
        payload = {"relativePath": "a.txt", "sourcePath": "/data/a.txt"}
        assert packaged_catalog.validate_data_by_id("pathfinder/v1.0.0/path-result", payload) == []

    def test_missing_required_property(self, packaged_catalog):
        diagnostics = packaged_catalog.validate_data_by_id(
            "pathfinder/v1.0.0/path-result", {"sourcePath": "/data/a.txt"}
        )
        assert len(diagnostics) == 1
        assert diagnostics[0].keyword == "required"
        assert "relativePath" in diagnostics[0].message
        assert diagnostics[0].pointer == ""

    def test_json_text_payload(self, packaged_catalog):
        diagnostics = packaged_catalog.validate_data_by_id(
            "pathfinder/v1.0.0/path-result",
            '{"relativePath": "a", "sourcePath": "b", "extra": 1}',
        )
        assert [d.keyword for d in diagnostics] == ["additionalProperties"]

    def test_invalid_json_text(self, packaged_catalog):
        with pytest.raises(SchemaParseError):
            packaged_catalog.validate_data_by_id("pathfinder/v1.0.0/path-result", "{oops")

    def test_pointer_for_nested_value(self, packaged_catalog):
        diagnostics = packaged_catalog.validate_data_by_id(
            "pathfinder/v1.0.0/path-result",
            {"relativePath": "a", "sourcePath": "b", "loaderType": "ftp"},
        )
        assert [(d.pointer, d.keyword) for d in diagnostics] == [("/loaderType", "enum")]

    def test_cross_schema_reference(self, packaged_catalog):
        event = {
            "timestamp": "2025-10-01T12:00:00.123456789Z",
            "severity": "INFO",
            "message": "started",
            "service": "api",
            "correlationId": "not-a-uuid",
        }
        diagnostics = packaged_catalog.validate_data_by_id(
            "observability/logging/v1.0.0/log-event", event
        )
        assert [(d.pointer, d.keyword) for d in diagnostics] == [("/correlationId", "pattern")]

        event["correlationId"] = "018f5f8e-6b7a-7c3d-9e2f-1a2b3c4d5e6f"
        assert (
            packaged_catalog.validate_data_by_id("observability/logging/v1.0.0/log-event", event)
            == []
        )

    def test_relative_reference_in_tmp_catalog(self, tmp_catalog):
        diagnostics = tmp_catalog.validate_data_by_id(
            "test/v1.0.0/widget", {"name": "w", "owner": {"email": "nobody"}}
        )
        assert [(d.pointer, d.keyword) for d in diagnostics] == [("/owner/email", "pattern")]

    def test_draft07_yaml_schema(self, tmp_catalog):
        assert tmp_catalog.validate_data_by_id("test/v1.0.0/legacy", {"enabled": True}) == []
        diagnostics = tmp_catalog.validate_data_by_id("test/v1.0.0/legacy", {"enabled": "yes"})
        assert [d.keyword for d in diagnostics] == ["type"]

    def test_validate_yaml_file(self, tmp_catalog, tmp_path):
        document = tmp_path / "widget.yaml"
        document.write_text("name: gadget\nsize: -1\n", encoding="utf-8")
        diagnostics = tmp_catalog.validate_file_by_id("test/v1.0.0/widget", document)
        assert [(d.pointer, d.keyword) for d in diagnostics] == [("/size", "minimum")]

    def test_validate_file_with_invalid_utf8(self, packaged_catalog, tmp_path):
        document = tmp_path / "broken.json"
        document.write_bytes(b'{"a": "\xff\xfe"}')
        with pytest.raises(SchemaParseError, match="invalid UTF-8"):
            packaged_catalog.validate_file_by_id("pathfinder/v1.0.0/path-result", document)

    def test_validator_is_cached(self, tmp_catalog):
        first = tmp_catalog.validator_by_id("test/v1.0.0/widget")
        assert tmp_catalog.validator_by_id("test/v1.0.0/widget") is first

    def test_every_packaged_schema_is_valid(self, packaged_catalog):
        for descriptor in packaged_catalog.list_schemas():
            assert packaged_catalog.validate_schema_by_id(descriptor.id) == [], descriptor.id


# --- Default catalog ---


class TestDefaultCatalog:
    def test_uses_configured_root(self, schema_root, monkeypatch):
        monkeypatch.setenv("PYFULMEN_SCHEMA_ROOT", str(schema_root))
        from pyfulmen.config import reset_config

        reset_config()
        schema_catalog.reset_default_catalog()
        assert schema_catalog.default_catalog().root == schema_root
        assert schema_catalog.get_schema("test/v1.0.0/widget").name == "widget"

    def test_falls_back_to_packaged_root(self, tmp_path, monkeypatch):
        monkeypatch.chdir(tmp_path)
        assert schema_catalog.default_catalog().root == PACKAGED_SCHEMA_ROOT

    def test_module_helpers(self, tmp_path, monkeypatch):
        monkeypatch.chdir(tmp_path)
        assert schema_catalog.list_schemas("common/")[0].id == "common/v1.0.0/correlation-id"
        assert schema_catalog.validate_data_by_id(
            "common/v1.0.0/correlation-id", '"018f5f8e-6b7a-7c3d-9e2f-1a2b3c4d5e6f"'
        ) == []
