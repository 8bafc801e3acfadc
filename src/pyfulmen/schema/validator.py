"""JSON Schema validation with structured diagnostics."""

import json
from pathlib import Path
from typing import TYPE_CHECKING, Any, Iterator, Optional, Union

from jsonschema import Draft202012Validator
from jsonschema.validators import validator_for
from loguru import logger
from referencing import Resource
from referencing.exceptions import Unresolvable
from referencing.jsonschema import DRAFT202012

from pyfulmen.schema.diagnostics import Diagnostic, diagnostics_from_errors
from pyfulmen.schema.documents import load_document, parse_document
from pyfulmen.schema.errors import (
    SchemaCompilationError,
    SchemaParseError,
    SchemaReferenceError,
)
from pyfulmen.schema.references import (
    ReferenceLoader,
    file_uri,
    resolve_default_root,
)

if TYPE_CHECKING:  # pragma: no cover
    from pyfulmen.schema.catalog import SchemaDescriptor

DRAFT_2020_12_URL = "https://json-schema.org/draft/2020-12/schema"
DRAFT_07_URL = "http://json-schema.org/draft-07/schema#"

SUPPORTED_DRAFTS = {
    "draft/2020-12": "2020-12",
    "draft-07": "draft-07",
}

# Keywords whose values are data, not subschemas
_DATA_KEYWORDS = frozenset({"const", "enum", "examples", "default"})

# Keywords whose values map arbitrary names to subschemas
_SCHEMA_MAP_KEYWORDS = frozenset(
    {"properties", "patternProperties", "$defs", "definitions", "dependentSchemas"}
)


def detect_draft(document: Any) -> Optional[str]:
    """Return "2020-12" or "draft-07" for a schema document, None when unsupported.

    Documents without ``$schema`` are treated as Draft 2020-12.
    """
    declared = document.get("$schema") if isinstance(document, dict) else None
    if not declared:
        return "2020-12"
    for marker, draft in SUPPORTED_DRAFTS.items():
        if marker in declared:
            return draft
    return None


def check_schema_document(document: Any, loader: ReferenceLoader) -> list[Diagnostic]:
    """Validate a parsed schema document against its embedded metaschema."""
    if isinstance(document, bool):
        return []
    if not isinstance(document, dict):
        return [Diagnostic(pointer="", keyword="type", message="schema must be an object or boolean")]

    draft = detect_draft(document)
    if draft is None:
        return [
            Diagnostic(
                pointer="/$schema",
                keyword="$schema",
                message=f"unsupported metaschema {document['$schema']!r}",
            )
        ]

    metaschema = loader.load(DRAFT_07_URL if draft == "draft-07" else DRAFT_2020_12_URL)
    meta_cls = validator_for(metaschema, default=Draft202012Validator)
    meta_validator = meta_cls(
        metaschema,
        registry=loader.registry(),
        format_checker=meta_cls.FORMAT_CHECKER,
    )
    return diagnostics_from_errors(meta_validator.iter_errors(document))


def validate_schema_bytes(
    schema_bytes: Union[bytes, str],
    meta_root: Optional[Path] = None,
) -> list[Diagnostic]:
    """Validate a JSON or YAML schema document against the embedded metaschemas.

    Args:
        schema_bytes: The schema document
        meta_root: Directory holding ``draft-2020-12/`` and ``draft-07/``; defaults to
            the ``meta/`` directory of the default catalog root

    Returns:
        Structural problems with the schema; empty means the schema is well formed

    Raises:
        SchemaParseError: If the payload is not JSON or YAML
    """
    root = meta_root.parent if meta_root is not None else resolve_default_root()
    document = parse_document(schema_bytes, source="<schema>")
    return check_schema_document(document, ReferenceLoader(root))


class SchemaValidator:
    """A compiled schema.

    Validators are read-only after construction and safe to share between threads.
    ``$ref`` targets are resolved through a ``ReferenceLoader`` and never over the network.

    Raises:
        SchemaCompilationError: If the schema violates its metaschema
        SchemaReferenceError: If a ``$ref`` cannot be resolved offline
    """

    def __init__(
        self,
        schema: Any,
        loader: ReferenceLoader,
        schema_id: str = "",
        base_uri: Optional[str] = None,
    ):
        self.schema_id = schema_id
        self.loader = loader
        label = schema_id or "<memory>"

        diagnostics = check_schema_document(schema, loader)
        if diagnostics:
            raise SchemaCompilationError(
                f"schema {label} failed metaschema validation with {len(diagnostics)} problem(s)",
                diagnostics,
            )

        # Relative references resolve against the schema file when the schema has no $id
        if base_uri and isinstance(schema, dict) and "$id" not in schema:
            schema = {**schema, "$id": base_uri}
        self.schema = schema

        validator_cls = validator_for(schema, default=Draft202012Validator)
        self._validator = validator_cls(schema, registry=loader.registry())
        self._check_references()
        logger.debug("Compiled schema", schema_id=label, draft=validator_cls.__name__)

    @classmethod
    def from_bytes(
        cls,
        schema_bytes: Union[bytes, str],
        meta_root: Optional[Path] = None,
        schema_root: Optional[Path] = None,
    ) -> "SchemaValidator":
        """Compile an in-memory JSON or YAML schema."""
        if schema_root is None:
            schema_root = meta_root.parent if meta_root is not None else resolve_default_root()
        document = parse_document(schema_bytes, source="<schema>")
        return cls(document, ReferenceLoader(schema_root))

    @classmethod
    def from_descriptor(
        cls,
        descriptor: "SchemaDescriptor",
        schema_root: Path,
        loader: Optional[ReferenceLoader] = None,
    ) -> "SchemaValidator":
        """Compile the catalog schema described by ``descriptor``."""
        document = load_document(descriptor.path)
        return cls(
            document,
            loader or ReferenceLoader(schema_root),
            schema_id=descriptor.id,
            base_uri=file_uri(descriptor.path),
        )

    # --- Validation ---

    def validate_data(self, value: Any) -> list[Diagnostic]:
        """Validate an already-parsed value. An empty list means valid."""
        try:
            return diagnostics_from_errors(self._validator.iter_errors(value))
        except Unresolvable as e:
            raise SchemaReferenceError(f"unresolvable reference in {self.schema_id or 'schema'}: {e}") from e

    def validate_json(self, data: Union[bytes, str]) -> list[Diagnostic]:
        """Parse ``data`` as JSON and validate it.

        Raises:
            SchemaParseError: If ``data`` is not valid JSON
        """
        try:
            value = json.loads(data)
        except (json.JSONDecodeError, UnicodeDecodeError) as e:
            raise SchemaParseError(f"invalid JSON payload: {e}") from e
        return self.validate_data(value)

    def validate_file(self, path: Union[str, Path]) -> list[Diagnostic]:
        """Load a JSON or YAML file and validate its contents.

        Raises:
            SchemaLoadError: If the file cannot be read
            SchemaParseError: If the file is not valid JSON or YAML
        """
        return self.validate_data(load_document(path))

    def is_valid(self, value: Any) -> bool:
        return not self.validate_data(value)

    # --- Reference Checks ---

    def _check_references(self) -> None:
        """Resolve every static ``$ref`` once so broken references fail at compile time."""
        if not isinstance(self.schema, dict):
            return
        resource = Resource.from_contents(self.schema, default_specification=DRAFT202012)
        resolver = self.loader.registry().resolver_with_root(resource)
        for ref in _iter_refs(self.schema, root=True):
            try:
                resolver.lookup(ref)
            except Unresolvable as e:
                raise SchemaReferenceError(
                    f"cannot resolve $ref {ref!r} in {self.schema_id or 'schema'}: {e}"
                ) from e


def _iter_refs(node: Any, root: bool = False) -> Iterator[str]:
    """Yield ``$ref`` values, skipping embedded resources with their own ``$id``."""
    if isinstance(node, dict):
        if not root and isinstance(node.get("$id"), str):
            return
        ref = node.get("$ref")
        if isinstance(ref, str):
            yield ref
        for key, child in node.items():
            if key in _DATA_KEYWORDS:
                continue
            if key in _SCHEMA_MAP_KEYWORDS and isinstance(child, dict):
                # Keys here are user-chosen names, so "default" or "enum" is a subschema
                for subschema in child.values():
                    yield from _iter_refs(subschema)
                continue
            yield from _iter_refs(child)
    elif isinstance(node, list):
        for item in node:
            yield from _iter_refs(item)
