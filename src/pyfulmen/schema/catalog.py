"""Schema catalog: discovery, lookup and validation by schema identifier.

A catalog indexes every ``.json``/``.yaml``/``.yml`` file beneath its root (except the
reserved ``meta/`` directory). Identifiers take the form ``<category>/<version>/<name>``:

    pathfinder/v1.0.0/path-result.schema.json   ->  pathfinder/v1.0.0/path-result
    library/foundry/v2.0.0/similarity-fixtures.schema.json
                                                ->  library/foundry/v2.0.0/similarity-fixtures
"""

import threading
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Optional, Union

from loguru import logger

from pyfulmen.schema.diagnostics import Diagnostic
from pyfulmen.schema.documents import canonical_json, load_document, normalize_schema_bytes
from pyfulmen.schema.errors import (
    DuplicateSchemaError,
    SchemaLoadError,
    SchemaNotFoundError,
)
from pyfulmen.schema.references import META_DIR_NAME, ReferenceLoader, resolve_default_root
from pyfulmen.schema.validator import SchemaValidator, check_schema_document

SCHEMA_FILE_SUFFIXES = (".json", ".yaml", ".yml")


@dataclass(frozen=True)
class SchemaDescriptor:
    """Metadata for one catalog schema."""

    id: str
    category: str
    version: str
    name: str
    path: Path
    draft: Optional[str] = None
    title: Optional[str] = None
    description: Optional[str] = None


@dataclass(frozen=True)
class SchemaDiff:
    """A single difference between two schema documents."""

    path: str
    message: str

    def __str__(self) -> str:
        return f"{self.path}: {self.message}" if self.path else self.message


def schema_id_for(relative: Path) -> Optional[tuple[str, str, str]]:
    """Split a catalog-relative file path into (category, version, name).

    Returns None for files that are not at least ``<category>/<version>/<file>`` deep.
    """
    parts = relative.parts
    if len(parts) < 3:
        return None

    name = relative.name
    for suffix in SCHEMA_FILE_SUFFIXES:
        if name.lower().endswith(suffix):
            name = name[: -len(suffix)]
            break
    name = name.removesuffix(".schema")

    category = "/".join(parts[:-2])
    version = parts[-2]
    return category, version, name


class SchemaCatalog:
    """Index of the schemas beneath ``root``.

    The tree is walked once, on first access. Lookups after that are read-only; compiled
    validators are cached per identifier.
    """

    def __init__(self, root: Union[str, Path], loader: Optional[ReferenceLoader] = None):
        self.root = Path(root)
        self.loader = loader or ReferenceLoader(self.root)
        self._lock = threading.RLock()
        self._loaded = False
        self._descriptors: dict[str, SchemaDescriptor] = {}
        self._validators: dict[str, SchemaValidator] = {}

    @property
    def schema_root(self) -> Path:
        return self.root

    @property
    def meta_root(self) -> Path:
        return self.root / META_DIR_NAME

    # --- Loading ---

    def _ensure_loaded(self) -> None:
        if self._loaded:
            return
        with self._lock:
            if self._loaded:
                return
            self._descriptors = self._scan()
            self._loaded = True
            logger.debug("Schema catalog loaded", root=str(self.root), schemas=len(self._descriptors))

    def _scan(self) -> dict[str, SchemaDescriptor]:
        if not self.root.is_dir():
            raise SchemaLoadError(f"schema root {self.root} does not exist")

        descriptors: dict[str, SchemaDescriptor] = {}
        for path in sorted(self.root.rglob("*")):
            if not path.is_file() or not path.name.lower().endswith(SCHEMA_FILE_SUFFIXES):
                continue
            relative = path.relative_to(self.root)
            if relative.parts[0] == META_DIR_NAME:
                continue

            split = schema_id_for(relative)
            if split is None:
                logger.trace("Skipping file outside <category>/<version>/ layout", path=str(path))
                continue
            category, version, name = split
            schema_id = f"{category}/{version}/{name}"

            if schema_id in descriptors:
                raise DuplicateSchemaError(schema_id, str(descriptors[schema_id].path), str(path))
            descriptors[schema_id] = self._describe(schema_id, category, version, name, path)

        return descriptors

    def _describe(
        self, schema_id: str, category: str, version: str, name: str, path: Path
    ) -> SchemaDescriptor:
        document = load_document(path)
        metadata = document if isinstance(document, dict) else {}
        return SchemaDescriptor(
            id=schema_id,
            category=category,
            version=version,
            name=name,
            path=path,
            draft=metadata.get("$schema"),
            title=metadata.get("title"),
            description=metadata.get("description"),
        )

    # --- Lookup ---

    def list_schemas(self, prefix: str = "") -> list[SchemaDescriptor]:
        """Descriptors whose identifier starts with ``prefix``, sorted by identifier."""
        self._ensure_loaded()
        return [self._descriptors[key] for key in sorted(self._descriptors) if key.startswith(prefix)]

    def get_schema(self, schema_id: str) -> SchemaDescriptor:
        """Look up a descriptor.

        Raises:
            SchemaNotFoundError: If ``schema_id`` is not in the catalog
        """
        self._ensure_loaded()
        descriptor = self._descriptors.get(schema_id)
        if descriptor is None:
            raise SchemaNotFoundError(schema_id)
        return descriptor

    def has_schema(self, schema_id: str) -> bool:
        self._ensure_loaded()
        return schema_id in self._descriptors

    def load_schema_document(self, schema_id: str) -> Any:
        return load_document(self.get_schema(schema_id).path)

    def load_schema_bytes(self, schema_id: str) -> bytes:
        """Canonical JSON bytes of a catalog schema."""
        return canonical_json(self.load_schema_document(schema_id))

    def compare_schema(self, schema_id: str, other: Union[bytes, str]) -> list[SchemaDiff]:
        """Compare a catalog schema with another document by canonical JSON.

        Returns a single "schemas differ" entry when they diverge; use
        ``pyfulmen.schema.composer.diff_schemas`` for the detailed delta.

        Raises:
            SchemaNotFoundError: If ``schema_id`` is not in the catalog
            SchemaParseError: If ``other`` is not valid UTF-8 JSON or YAML
        """
        source = self.load_schema_bytes(schema_id)
        candidate = normalize_schema_bytes(other)
        if source != candidate:
            return [SchemaDiff(path=schema_id, message="schemas differ")]
        return []

    # --- Validation ---

    def validator_by_id(self, schema_id: str) -> SchemaValidator:
        """Compiled validator for ``schema_id``, cached after the first call."""
        validator = self._validators.get(schema_id)
        if validator is not None:
            return validator

        descriptor = self.get_schema(schema_id)
        with self._lock:
            validator = self._validators.get(schema_id)
            if validator is None:
                validator = SchemaValidator.from_descriptor(descriptor, self.root, loader=self.loader)
                self._validators[schema_id] = validator
        return validator

    def validate_data_by_id(self, schema_id: str, data: Any) -> list[Diagnostic]:
        """Validate ``data`` against a catalog schema.

        ``bytes`` and ``str`` payloads are parsed as JSON first; anything else is
        validated as an already-parsed value.
        """
        validator = self.validator_by_id(schema_id)
        if isinstance(data, (bytes, str)):
            return validator.validate_json(data)
        return validator.validate_data(data)

    def validate_file_by_id(self, schema_id: str, path: Union[str, Path]) -> list[Diagnostic]:
        return self.validator_by_id(schema_id).validate_file(path)

    def validate_schema_by_id(self, schema_id: str) -> list[Diagnostic]:
        """Check a catalog schema against its metaschema."""
        return check_schema_document(self.load_schema_document(schema_id), self.loader)


# --- Default Catalog ---

_default_catalog: Optional[SchemaCatalog] = None
_default_lock = threading.Lock()


def default_catalog() -> SchemaCatalog:
    """Process-wide catalog rooted at ``resolve_default_root()``."""
    global _default_catalog
    if _default_catalog is None:
        with _default_lock:
            if _default_catalog is None:
                root = resolve_default_root()
                logger.debug("Using schema catalog", root=str(root))
                _default_catalog = SchemaCatalog(root)
    return _default_catalog


def reset_default_catalog() -> None:
    global _default_catalog
    with _default_lock:
        _default_catalog = None


def list_schemas(prefix: str = "") -> list[SchemaDescriptor]:
    return default_catalog().list_schemas(prefix)


def get_schema(schema_id: str) -> SchemaDescriptor:
    return default_catalog().get_schema(schema_id)


def validate_data_by_id(schema_id: str, data: Any) -> list[Diagnostic]:
    return default_catalog().validate_data_by_id(schema_id, data)


def validate_file_by_id(schema_id: str, path: Union[str, Path]) -> list[Diagnostic]:
    return default_catalog().validate_file_by_id(schema_id, path)


def validate_schema_by_id(schema_id: str) -> list[Diagnostic]:
    return default_catalog().validate_schema_by_id(schema_id)
