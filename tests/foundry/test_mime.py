"""Tests for MIME detection."""

import io

import pytest

from pyfulmen.foundry.catalog import default_catalog
from pyfulmen.foundry.mime import (
    detect_mime_type,
    detect_mime_type_from_file,
    detect_mime_type_from_reader,
    is_supported_mime_type,
)


@pytest.mark.parametrize(
    "content,expected",
    [
        (b'{"name": "fulmen"}', "application/json"),
        (b"  \n[1, 2, 3]", "application/json"),
        (b'\xef\xbb\xbf{"bom": true}', "application/json"),
        (b'<?xml version="1.0"?><root/>', "application/xml"),
        (b"name: fulmen\nversion: 1\n", "application/yaml"),
        (b"id,name,email\n1,a,a@example.com\n", "text/csv"),
        (b"just some words here", "text/plain"),
    ],
)
def test_detect(content, expected):
    detected = detect_mime_type(content)
    assert detected is not None
    assert detected.mime == expected


def test_detect_accepts_str():
    assert detect_mime_type('{"a": 1}').id == "json"


def test_empty_and_binary_are_unknown():
    assert detect_mime_type(b"") is None
    assert detect_mime_type(b"   \n\t") is None
    assert detect_mime_type(bytes(range(0, 32)) * 4) is None


def test_detection_emits_telemetry(memory_emitter):
    detect_mime_type(b'{"a": 1}')
    detect_mime_type(b"")
    assert memory_emitter.total("foundry.mime.detections", mime_type="application/json") == 1
    assert memory_emitter.total("foundry.mime.detections", mime_type="unknown") == 1


def test_reader_replays_consumed_bytes():
    payload = b'{"key": "value", "items": [1, 2, 3]}' + b" " * 1000
    detected, replay = detect_mime_type_from_reader(io.BytesIO(payload), max_bytes=16)
    assert detected.id == "json"
    assert replay.read() == payload


def test_reader_non_positive_limit_uses_default():
    payload = b"a,b,c\n1,2,3\n"
    detected, replay = detect_mime_type_from_reader(io.BytesIO(payload), max_bytes=0)
    assert detected.id == "csv"
    assert replay.read() == payload


def test_detect_from_file(tmp_path):
    path = tmp_path / "config"
    path.write_text("server:\n  port: 8080\n", encoding="utf-8")
    assert detect_mime_type_from_file(path).id == "yaml"


def test_is_supported_mime_type():
    assert is_supported_mime_type("application/json")
    assert is_supported_mime_type("  Text/CSV ")
    assert not is_supported_mime_type("application/octet-stream")


def test_extension_helpers():
    json_type = default_catalog().get_mime_type("json")
    assert json_type.matches_extension(".JSON")
    assert json_type.matches_filename("data/config.json")
    assert not json_type.matches_filename("README")
    assert json_type.primary_extension() == "json"
