"""Schema export with provenance."""

from pyfulmen.schema.export.errors import (
    ExportError,
    ExportMismatchError,
    ExportSchemaNotFoundError,
    ExportSchemaValidationError,
    FileExistsExportError,
    FileWriteExportError,
    InvalidExportOptionsError,
    PathValidationError,
)
from pyfulmen.schema.export.exporter import (
    export_schema,
    export_schema_sync,
    validate_exported_schema,
)
from pyfulmen.schema.export.identity import (
    DefaultIdentityProvider,
    Identity,
    IdentityProvider,
    StaticIdentityProvider,
)
from pyfulmen.schema.export.options import ExportFormat, ExportOptions, ProvenanceStyle
from pyfulmen.schema.export.provenance import (
    PROVENANCE_KEY,
    ProvenanceMetadata,
    strip_provenance,
)

__all__ = [
    # Export
    "export_schema",
    "export_schema_sync",
    "validate_exported_schema",
    # Options
    "ExportFormat",
    "ExportOptions",
    "ProvenanceStyle",
    # Identity
    "DefaultIdentityProvider",
    "Identity",
    "IdentityProvider",
    "StaticIdentityProvider",
    # Provenance
    "PROVENANCE_KEY",
    "ProvenanceMetadata",
    "strip_provenance",
    # Errors
    "ExportError",
    "ExportMismatchError",
    "ExportSchemaNotFoundError",
    "ExportSchemaValidationError",
    "FileExistsExportError",
    "FileWriteExportError",
    "InvalidExportOptionsError",
    "PathValidationError",
]
