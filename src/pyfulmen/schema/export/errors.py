"""Errors raised by the schema exporter."""


class ExportError(Exception):
    """Base class for export errors."""


class InvalidExportOptionsError(ExportError, ValueError):
    """Raised when export options are incomplete or inconsistent."""


class FileExistsExportError(ExportError):
    """Raised when the target exists and overwrite is disabled."""

    def __init__(self, path):
        self.path = path
        super().__init__(f"file already exists (use overwrite to replace): {path}")


class PathValidationError(ExportError):
    """Raised when the output path is unusable or escapes the working root."""


class ExportSchemaNotFoundError(ExportError):
    """Raised when the schema to export is not in the catalog."""


class ExportSchemaValidationError(ExportError):
    """Raised when the schema to export fails metaschema validation."""

    def __init__(self, message: str, diagnostics=None):
        self.diagnostics = diagnostics or []
        super().__init__(message)


class FileWriteExportError(ExportError):
    """Raised when writing the exported file fails."""


class ExportMismatchError(ExportError):
    """Raised when an exported file no longer matches its catalog source."""
