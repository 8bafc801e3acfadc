"""Tests for the pyfulmen CLI."""

import json

import pytest
from typer.testing import CliRunner

import pyfulmen
from pyfulmen.cli.main import app
from pyfulmen.config import reset_config
from pyfulmen.schema import catalog as schema_catalog

runner = CliRunner()


@pytest.fixture(autouse=True)
def quiet_logging(monkeypatch):
    monkeypatch.setattr("pyfulmen.cli.app.setup_logging", lambda level: None)


@pytest.fixture
def catalog_env(monkeypatch, schema_root):
    monkeypatch.setenv("PYFULMEN_SCHEMA_ROOT", str(schema_root))
    reset_config()
    schema_catalog.reset_default_catalog()
    return schema_root


def test_version():
    result = runner.invoke(app, ["--version"])
    assert result.exit_code == 0
    assert f"pyfulmen version: {pyfulmen.__version__}" in result.stdout
    assert "Crucible version:" in result.stdout


def test_help():
    result = runner.invoke(app, ["--help"])
    assert result.exit_code == 0
    for group in ("schema", "similarity", "foundry"):
        assert group in result.stdout


# --- Similarity ---


def test_distance():
    result = runner.invoke(app, ["similarity", "distance", "kitten", "sitting"])
    assert result.exit_code == 0
    assert "distance: 3" in result.stdout
    assert "score: 0.5714" in result.stdout


def test_distance_wrong_api():
    result = runner.invoke(app, ["similarity", "distance", "a", "b", "-a", "jaro_winkler"])
    assert result.exit_code == 40


def test_suggest():
    result = runner.invoke(
        app, ["similarity", "suggest", "confg", "config", "context", "unrelated"]
    )
    assert result.exit_code == 0
    assert "config" in result.stdout
    assert "unrelated" not in result.stdout


def test_suggest_nothing_close():
    result = runner.invoke(app, ["similarity", "suggest", "zzz", "config"])
    assert result.exit_code == 0
    assert "No suggestions." in result.stdout


def test_suggest_invalid_options():
    result = runner.invoke(app, ["similarity", "suggest", "a", "b", "--min-score", "2"])
    assert result.exit_code == 40


# --- Foundry ---


def test_exit_code_by_number():
    result = runner.invoke(app, ["foundry", "exit-code", "20"])
    assert result.exit_code == 0
    assert "EXIT_CONFIG_INVALID" in result.stdout
    assert "EX_CONFIG (78)" in result.stdout


def test_exit_code_by_name():
    result = runner.invoke(app, ["foundry", "exit-code", "usage"])
    assert result.exit_code == 0
    assert "EXIT_USAGE" in result.stdout


def test_exit_code_unknown():
    result = runner.invoke(app, ["foundry", "exit-code", "999"])
    assert result.exit_code == 40


def test_signal_by_id_and_name():
    by_id = runner.invoke(app, ["foundry", "signal", "term"])
    by_name = runner.invoke(app, ["foundry", "signal", "SIGTERM"])
    assert by_id.exit_code == by_name.exit_code == 0
    assert "CTRL_CLOSE_EVENT" in by_id.stdout
    assert by_id.stdout == by_name.stdout


def test_signal_fallback():
    result = runner.invoke(app, ["foundry", "signal", "hup"])
    assert result.exit_code == 0
    assert "http_admin_endpoint" in result.stdout


def test_signal_unknown():
    result = runner.invoke(app, ["foundry", "signal", "SIGWINCH"])
    assert result.exit_code == 40


# --- Schema ---


def test_schema_list(catalog_env):
    result = runner.invoke(app, ["schema", "list", "test/"])
    assert result.exit_code == 0
    assert "test/v1.0.0/widget" in result.stdout


def test_schema_show(catalog_env):
    result = runner.invoke(app, ["schema", "show", "test/v1.0.0/person"])
    assert result.exit_code == 0
    assert json.loads(result.stdout)["title"] == "Person"


def test_schema_show_unknown(catalog_env):
    result = runner.invoke(app, ["schema", "show", "test/v1.0.0/absent"])
    assert result.exit_code == 40


def test_schema_validate_valid(catalog_env, tmp_path):
    document = tmp_path / "widget.json"
    document.write_text(json.dumps({"name": "bolt", "size": 3}), encoding="utf-8")
    result = runner.invoke(
        app, ["schema", "validate", str(document), "--schema-id", "test/v1.0.0/widget"]
    )
    assert result.exit_code == 0


def test_schema_validate_invalid(catalog_env, tmp_path):
    document = tmp_path / "widget.json"
    document.write_text(json.dumps({"name": "bolt", "size": -1}), encoding="utf-8")
    result = runner.invoke(
        app, ["schema", "validate", str(document), "--schema-id", "test/v1.0.0/widget"]
    )
    assert result.exit_code == 60
    assert "[ERROR] /size (minimum)" in result.stdout


def test_schema_validate_json_output(catalog_env, tmp_path):
    document = tmp_path / "widget.json"
    document.write_text("{}", encoding="utf-8")
    result = runner.invoke(
        app,
        [
            "schema",
            "validate",
            str(document),
            "--schema-id",
            "test/v1.0.0/widget",
            "--format",
            "json",
        ],
    )
    assert result.exit_code == 60
    diagnostics = json.loads(result.stdout)
    assert diagnostics[0]["keyword"] == "required"
    assert diagnostics[0]["pointer"] == ""


def test_schema_validate_invalid_utf8(catalog_env, tmp_path):
    document = tmp_path / "widget.json"
    document.write_bytes(b'{"name": "\xff\xfe"}')
    result = runner.invoke(
        app, ["schema", "validate", str(document), "--schema-id", "test/v1.0.0/widget"]
    )
    assert result.exit_code == 60
    assert "invalid UTF-8" in result.stdout


def test_schema_validate_unknown_schema(catalog_env, tmp_path):
    document = tmp_path / "doc.json"
    document.write_text("{}", encoding="utf-8")
    result = runner.invoke(
        app, ["schema", "validate", str(document), "--schema-id", "test/v1.0.0/absent"]
    )
    assert result.exit_code == 40


def test_validate_schema_file(tmp_path):
    good = tmp_path / "good.json"
    good.write_text('{"type": "object"}', encoding="utf-8")
    bad = tmp_path / "bad.json"
    bad.write_text('{"type": 12}', encoding="utf-8")

    assert runner.invoke(app, ["schema", "validate-schema", str(good)]).exit_code == 0
    assert runner.invoke(app, ["schema", "validate-schema", str(bad)]).exit_code == 60
    missing = runner.invoke(app, ["schema", "validate-schema", str(tmp_path / "missing.json")])
    assert missing.exit_code == 53


def test_schema_export(catalog_env, tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    args = ["schema", "export", "--schema-id", "test/v1.0.0/person", "--out", "out/person.json"]

    result = runner.invoke(app, args)
    assert result.exit_code == 0
    exported = json.loads((tmp_path / "out" / "person.json").read_text(encoding="utf-8"))
    assert exported["x-crucible-source"]["schema_id"] == "test/v1.0.0/person"

    assert runner.invoke(app, args).exit_code == 54
    assert runner.invoke(app, [*args, "--force", "--no-provenance"]).exit_code == 0
    exported = json.loads((tmp_path / "out" / "person.json").read_text(encoding="utf-8"))
    assert "x-crucible-source" not in exported


def test_schema_export_outside_working_root(catalog_env, tmp_path, monkeypatch):
    work = tmp_path / "work"
    work.mkdir()
    monkeypatch.chdir(work)
    result = runner.invoke(
        app, ["schema", "export", "--schema-id", "test/v1.0.0/person", "--out", "../escape.json"]
    )
    assert result.exit_code == 54


def test_schema_export_bad_extension(catalog_env, tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    result = runner.invoke(
        app, ["schema", "export", "--schema-id", "test/v1.0.0/person", "--out", "person.txt"]
    )
    assert result.exit_code == 40


def test_schema_diff(tmp_path):
    left = tmp_path / "left.json"
    right = tmp_path / "right.json"
    left.write_text('{"type": "object"}', encoding="utf-8")
    right.write_text('{"type": "object", "title": "T"}', encoding="utf-8")

    same = runner.invoke(app, ["schema", "diff", str(left), str(left)])
    assert same.exit_code == 0
    changed = runner.invoke(app, ["schema", "diff", str(left), str(right)])
    assert changed.exit_code == 1
    assert "title: added" in changed.stdout
