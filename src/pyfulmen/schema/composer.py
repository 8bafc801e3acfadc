"""Deep merge and structural diff of schema documents."""

import copy
from typing import TYPE_CHECKING, Any, Union

from pyfulmen.schema.catalog import SchemaDiff
from pyfulmen.schema.documents import canonical_json, parse_document
from pyfulmen.schema.errors import SchemaCompositionError, SchemaParseError

if TYPE_CHECKING:  # pragma: no cover
    from pyfulmen.schema.catalog import SchemaCatalog

Payload = Union[bytes, str, dict]


def _decode(payload: Payload, label: str) -> dict:
    if isinstance(payload, dict):
        return copy.deepcopy(payload)

    text = payload.decode("utf-8") if isinstance(payload, bytes) else payload
    if not text.strip():
        return {}
    try:
        document = parse_document(text, source=label)
    except SchemaParseError as e:
        raise SchemaCompositionError(f"{label} is not valid JSON or YAML: {e}") from e
    if not isinstance(document, dict):
        raise SchemaCompositionError(f"{label} must be a JSON object, got {type(document).__name__}")
    return document


def merge_documents(base: dict, overlay: dict) -> dict:
    """Merge ``overlay`` into ``base`` in place and return ``base``.

    Objects merge recursively, arrays are replaced wholesale and scalars follow
    last-writer-wins.
    """
    for key, value in overlay.items():
        existing = base.get(key)
        if isinstance(existing, dict) and isinstance(value, dict):
            merge_documents(existing, value)
        else:
            base[key] = copy.deepcopy(value)
    return base


def merge_schemas(base: Payload, *overlays: Payload) -> bytes:
    """Deep-merge schema documents and return canonical JSON bytes.

    Empty overlays are ignored.

    Raises:
        SchemaCompositionError: If any document is malformed or not an object
    """
    merged = _decode(base, "base schema")
    for index, overlay in enumerate(overlays):
        if not isinstance(overlay, dict) and not overlay:
            continue
        merge_documents(merged, _decode(overlay, f"overlay {index}"))
    return canonical_json(merged)


def extend_schema(catalog: "SchemaCatalog", schema_id: str, extension: Payload) -> bytes:
    """Merge ``extension`` on top of a catalog schema."""
    return merge_schemas(catalog.load_schema_bytes(schema_id), extension)


def diff_schemas(left: Payload, right: Payload) -> list[SchemaDiff]:
    """Structural delta from ``left`` to ``right``.

    Paths use ``.`` between object keys and ``[i]`` for array indices. Arrays of
    different lengths are reported once as a whole; equal-length arrays are compared
    element by element.
    """
    diffs: list[SchemaDiff] = []
    _diff_values("", _decode(left, "left schema"), _decode(right, "right schema"), diffs)
    return diffs


def _join(path: str, key: str) -> str:
    return f"{path}.{key}" if path else key


def _diff_values(path: str, left: Any, right: Any, diffs: list[SchemaDiff]) -> None:
    if isinstance(left, dict) and isinstance(right, dict):
        for key in sorted(set(left) | set(right)):
            child = _join(path, key)
            if key not in right:
                diffs.append(SchemaDiff(child, "removed"))
            elif key not in left:
                diffs.append(SchemaDiff(child, "added"))
            else:
                _diff_values(child, left[key], right[key], diffs)
        return

    if isinstance(left, list) and isinstance(right, list):
        if len(left) != len(right):
            diffs.append(SchemaDiff(path, f"array length {len(left)} -> {len(right)}"))
            return
        for index, (left_item, right_item) in enumerate(zip(left, right)):
            _diff_values(f"{path}[{index}]", left_item, right_item, diffs)
        return

    left_json = canonical_json(left)
    right_json = canonical_json(right)
    if left_json != right_json:
        diffs.append(
            SchemaDiff(
                path,
                f"changed from {left_json.decode('utf-8')} to {right_json.decode('utf-8')}",
            )
        )
