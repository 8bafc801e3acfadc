"""Common test fixtures."""

import json
import shutil
from pathlib import Path

import pytest

from pyfulmen import telemetry
from pyfulmen.config import reset_config
from pyfulmen.foundry import catalog as foundry_catalog
from pyfulmen.foundry import exit_codes, signals
from pyfulmen.schema import catalog as schema_catalog
from pyfulmen.schema.references import PACKAGED_SCHEMA_ROOT


@pytest.fixture(autouse=True)
def isolated_state(monkeypatch):
    """Reset every process-wide singleton around each test."""
    for name in ("PYFULMEN_SCHEMA_ROOT", "PYFULMEN_TELEMETRY_ENABLED", "PYFULMEN_LOG_LEVEL"):
        monkeypatch.delenv(name, raising=False)
    reset_config()
    schema_catalog.reset_default_catalog()
    foundry_catalog.reset_default_catalog()
    monkeypatch.setattr(signals, "_default_signal_catalog", None)
    telemetry.disable()
    yield
    telemetry.disable()
    reset_config()
    schema_catalog.reset_default_catalog()
    foundry_catalog.reset_default_catalog()
    exit_codes.reset_exit_code_catalog()


@pytest.fixture
def memory_emitter():
    """Install an in-memory telemetry emitter for the duration of a test."""
    emitter = telemetry.MemoryEmitter()
    telemetry.enable(emitter)
    yield emitter
    telemetry.disable()


@pytest.fixture
def packaged_catalog() -> schema_catalog.SchemaCatalog:
    return schema_catalog.SchemaCatalog(PACKAGED_SCHEMA_ROOT)


@pytest.fixture
def schema_root(tmp_path) -> Path:
    """A small catalog tree with the bundled metaschemas."""
    root = tmp_path / "schemas"
    shutil.copytree(PACKAGED_SCHEMA_ROOT / "meta", root / "meta")

    widgets = root / "test" / "v1.0.0"
    widgets.mkdir(parents=True)
    (widgets / "widget.schema.json").write_text(
        json.dumps(
            {
                "$schema": "https://json-schema.org/draft/2020-12/schema",
                "$id": "https://schemas.fulmenhq.dev/test/v1.0.0/widget.schema.json",
                "title": "Widget",
                "type": "object",
                "required": ["name"],
                "properties": {
                    "name": {"type": "string", "minLength": 1},
                    "size": {"type": "integer", "minimum": 0},
                    "owner": {"$ref": "person.schema.json"},
                },
                "additionalProperties": False,
            }
        ),
        encoding="utf-8",
    )
    (widgets / "person.schema.json").write_text(
        json.dumps(
            {
                "$schema": "https://json-schema.org/draft/2020-12/schema",
                "$id": "https://schemas.fulmenhq.dev/test/v1.0.0/person.schema.json",
                "title": "Person",
                "type": "object",
                "required": ["email"],
                "properties": {"email": {"type": "string", "pattern": "@"}},
            }
        ),
        encoding="utf-8",
    )
    (widgets / "legacy.yaml").write_text(
        "$schema: http://json-schema.org/draft-07/schema#\n"
        "title: Legacy\n"
        "type: object\n"
        "properties:\n"
        "  enabled:\n"
        "    type: boolean\n",
        encoding="utf-8",
    )
    return root


@pytest.fixture
def tmp_catalog(schema_root) -> schema_catalog.SchemaCatalog:
    return schema_catalog.SchemaCatalog(schema_root)
