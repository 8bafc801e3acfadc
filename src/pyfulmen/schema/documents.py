"""Reading JSON/YAML documents and producing canonical JSON bytes."""

import json
from pathlib import Path
from typing import Any, Union

import yaml

from pyfulmen.schema.errors import SchemaLoadError, SchemaParseError


def is_json(data: Union[bytes, str]) -> bool:
    """Sniff JSON by the first non-whitespace character."""
    text = data.decode("utf-8", errors="replace") if isinstance(data, bytes) else data
    stripped = text.lstrip()
    return stripped.startswith("{") or stripped.startswith("[")


def canonical_json(value: Any) -> bytes:
    """Serialize ``value`` as compact JSON with sorted keys."""
    return json.dumps(value, sort_keys=True, separators=(",", ":"), ensure_ascii=False).encode(
        "utf-8"
    )


def to_json_value(value: Any) -> Any:
    """Coerce YAML-only scalars (dates, timestamps) into the JSON value model."""
    return json.loads(json.dumps(value, default=str))


def parse_document(data: Union[bytes, str], source: str = "<memory>") -> Any:
    """Parse a JSON or YAML payload into JSON-compatible Python values.

    Raises:
        SchemaParseError: If the payload is empty or malformed
    """
    if isinstance(data, bytes):
        try:
            text = data.decode("utf-8")
        except UnicodeDecodeError as e:
            raise SchemaParseError(f"invalid UTF-8 in {source}: {e}") from e
    else:
        text = data
    if not text.strip():
        raise SchemaParseError(f"empty document: {source}")

    if is_json(text):
        try:
            return json.loads(text)
        except json.JSONDecodeError as e:
            raise SchemaParseError(f"invalid JSON in {source}: {e}") from e

    try:
        return to_json_value(yaml.safe_load(text))
    except yaml.YAMLError as e:
        raise SchemaParseError(f"invalid YAML in {source}: {e}") from e


def load_document(path: Union[str, Path]) -> Any:
    """Read and parse a JSON or YAML file.

    Raises:
        SchemaLoadError: If the file cannot be read
        SchemaParseError: If the contents are malformed
    """
    file_path = Path(path)
    try:
        raw = file_path.read_bytes()
    except OSError as e:
        raise SchemaLoadError(f"failed to read {file_path}: {e}") from e
    return parse_document(raw, source=str(file_path))


def normalize_schema_bytes(data: Union[bytes, str]) -> bytes:
    """Parse a JSON or YAML payload and return its canonical JSON bytes."""
    return canonical_json(parse_document(data))
