"""Export options."""

from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Optional, Union

from pyfulmen.schema.export.errors import InvalidExportOptionsError
from pyfulmen.schema.export.identity import DefaultIdentityProvider, IdentityProvider


class ExportFormat(str, Enum):
    AUTO = "auto"
    JSON = "json"
    YAML = "yaml"


class ProvenanceStyle(str, Enum):
    """How provenance is embedded in the exported document."""

    OBJECT = "object"
    COMMENT = "comment"
    NONE = "none"


FORMAT_BY_EXTENSION = {
    ".json": ExportFormat.JSON,
    ".yaml": ExportFormat.YAML,
    ".yml": ExportFormat.YAML,
}


@dataclass
class ExportOptions:
    """Options for ``export_schema``.

    Attributes:
        schema_id: Catalog identifier, e.g. "pathfinder/v1.0.0/path-result"
        out_path: Destination file
        format: Output format; ``auto`` picks it from the file extension
        include_provenance: Embed provenance metadata
        provenance_style: Object key, ``$comment`` string, or nothing
        validate_schema: Check the schema against its metaschema before writing
        overwrite: Replace an existing file
        identity_provider: Optional source of vendor/binary identity
    """

    schema_id: str
    out_path: Union[str, Path]
    format: ExportFormat = ExportFormat.AUTO
    include_provenance: bool = True
    provenance_style: ProvenanceStyle = ProvenanceStyle.OBJECT
    validate_schema: bool = True
    overwrite: bool = False
    identity_provider: Optional[IdentityProvider] = None

    @classmethod
    def create(cls, schema_id: str, out_path: Union[str, Path], **overrides) -> "ExportOptions":
        """Options with the standard defaults and the ``.fulmen/app.yaml`` identity provider."""
        overrides.setdefault("identity_provider", DefaultIdentityProvider())
        return cls(schema_id=schema_id, out_path=out_path, **overrides)

    def validate(self) -> None:
        """Check required fields and that the output format can be determined.

        Raises:
            InvalidExportOptionsError: If the options cannot be used
        """
        if not self.schema_id or not self.schema_id.strip():
            raise InvalidExportOptionsError("schema_id is required")
        if not str(self.out_path).strip():
            raise InvalidExportOptionsError("out_path is required")
        self.resolved_format()

    def resolved_format(self) -> ExportFormat:
        """The concrete output format after extension detection."""
        export_format = ExportFormat(self.format)
        if export_format is not ExportFormat.AUTO:
            return export_format

        suffix = Path(self.out_path).suffix.lower()
        detected = FORMAT_BY_EXTENSION.get(suffix)
        if detected is None:
            raise InvalidExportOptionsError(
                f"cannot detect export format from extension {suffix or '(none)'!r}; "
                "use .json, .yaml or .yml, or set format explicitly"
            )
        return detected

    @property
    def embeds_provenance(self) -> bool:
        return self.include_provenance and ProvenanceStyle(self.provenance_style) is not ProvenanceStyle.NONE
