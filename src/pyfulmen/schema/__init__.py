"""JSON Schema catalog, validation, composition and export for pyfulmen."""

from pyfulmen.schema.catalog import (
    SchemaCatalog,
    SchemaDescriptor,
    SchemaDiff,
    default_catalog,
    get_schema,
    list_schemas,
    validate_data_by_id,
    validate_file_by_id,
    validate_schema_by_id,
)
from pyfulmen.schema.composer import diff_schemas, extend_schema, merge_schemas
from pyfulmen.schema.diagnostics import (
    Diagnostic,
    Severity,
    diagnostics_to_messages,
    format_diagnostic,
)
from pyfulmen.schema.errors import (
    DuplicateSchemaError,
    SchemaCompilationError,
    SchemaCompositionError,
    SchemaError,
    SchemaLoadError,
    SchemaNotFoundError,
    SchemaParseError,
    SchemaReferenceError,
)
from pyfulmen.schema.references import ReferenceLoader
from pyfulmen.schema.validator import SchemaValidator, validate_schema_bytes

__all__ = [
    # Catalog
    "SchemaCatalog",
    "SchemaDescriptor",
    "SchemaDiff",
    "default_catalog",
    "get_schema",
    "list_schemas",
    "validate_data_by_id",
    "validate_file_by_id",
    "validate_schema_by_id",
    # Composition
    "diff_schemas",
    "extend_schema",
    "merge_schemas",
    # Diagnostics
    "Diagnostic",
    "Severity",
    "diagnostics_to_messages",
    "format_diagnostic",
    # Errors
    "DuplicateSchemaError",
    "SchemaCompilationError",
    "SchemaCompositionError",
    "SchemaError",
    "SchemaLoadError",
    "SchemaNotFoundError",
    "SchemaParseError",
    "SchemaReferenceError",
    # Validation
    "ReferenceLoader",
    "SchemaValidator",
    "validate_schema_bytes",
]
