"""Errors raised by the schema catalog, validator and composer."""

from pyfulmen.schema.diagnostics import Diagnostic


class SchemaError(Exception):
    """Base class for schema errors."""


class SchemaNotFoundError(SchemaError):
    """Raised when a schema identifier is not in the catalog."""

    def __init__(self, schema_id: str):
        self.schema_id = schema_id
        super().__init__(f"schema {schema_id!r} not found")


class DuplicateSchemaError(SchemaError):
    """Raised when two catalog files map to the same schema identifier."""

    def __init__(self, schema_id: str, first: str, second: str):
        self.schema_id = schema_id
        super().__init__(f"duplicate schema id {schema_id!r}: {first} and {second}")


class SchemaLoadError(SchemaError):
    """Raised when a schema or document file cannot be read."""


class SchemaParseError(SchemaError):
    """Raised when a payload is not valid JSON or YAML."""


class SchemaReferenceError(SchemaError):
    """Raised when a $ref cannot be resolved offline."""


class SchemaCompositionError(SchemaError):
    """Raised when schema documents cannot be merged or diffed."""


class SchemaCompilationError(SchemaError):
    """Raised when a schema document is itself invalid."""

    def __init__(self, message: str, diagnostics: list[Diagnostic]):
        self.diagnostics = diagnostics
        super().__init__(message)
