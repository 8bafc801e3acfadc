"""Export catalog schemas to JSON or YAML files with provenance."""

import asyncio
import json
from pathlib import Path
from typing import Any, Optional, Union

import yaml
from loguru import logger

from pyfulmen.schema.catalog import SchemaCatalog, default_catalog
from pyfulmen.schema.documents import canonical_json, load_document
from pyfulmen.schema.errors import SchemaError, SchemaNotFoundError
from pyfulmen.schema.export.errors import (
    ExportMismatchError,
    ExportSchemaNotFoundError,
    ExportSchemaValidationError,
)
from pyfulmen.schema.export.options import ExportFormat, ExportOptions, ProvenanceStyle
from pyfulmen.schema.export.provenance import (
    PROVENANCE_KEY,
    ProvenanceMetadata,
    build_provenance,
    strip_provenance,
)
from pyfulmen.schema.export.safety import validate_output_path, write_file_atomic


# --- Rendering ---


def render_json(
    document: Any,
    metadata: Optional[ProvenanceMetadata],
    style: ProvenanceStyle,
) -> str:
    """Two-space indented JSON with a trailing newline."""
    if metadata is not None and isinstance(document, dict):
        document = dict(document)
        if style is ProvenanceStyle.OBJECT:
            document[PROVENANCE_KEY] = metadata.to_dict()
        elif style is ProvenanceStyle.COMMENT:
            document["$comment"] = metadata.to_comment()
    return json.dumps(document, indent=2, ensure_ascii=False) + "\n"


def render_yaml(
    document: Any,
    metadata: Optional[ProvenanceMetadata],
    style: ProvenanceStyle,
) -> str:
    """YAML document, preceded by a commented provenance block and ``---``."""
    header = ""
    if metadata is not None:
        if style is ProvenanceStyle.OBJECT:
            header = metadata.to_yaml_comment_block() + "---\n"
        elif style is ProvenanceStyle.COMMENT:
            header = f"# {metadata.to_comment()}\n---\n"
    body = yaml.safe_dump(document, sort_keys=False, indent=2, allow_unicode=True)
    return header + body


# --- Export ---


async def export_schema(
    options: ExportOptions,
    catalog: Optional[SchemaCatalog] = None,
    working_root: Optional[Path] = None,
) -> Path:
    """Export a catalog schema.

    Args:
        options: What to export and how
        catalog: Source catalog; defaults to the process-wide catalog
        working_root: When set, the output must stay inside this directory

    Returns:
        The absolute path that was written

    Raises:
        InvalidExportOptionsError: If the options are unusable
        ExportSchemaNotFoundError: If the schema is not in the catalog
        ExportSchemaValidationError: If the schema fails metaschema validation
        FileExistsExportError: If the target exists and overwrite is off
        PathValidationError: If the target escapes ``working_root``
        FileWriteExportError: If the file cannot be written
    """
    options.validate()
    export_format = options.resolved_format()
    style = ProvenanceStyle(options.provenance_style)
    source = catalog or default_catalog()

    # Fail before any work when the destination is unusable
    target = validate_output_path(options.out_path, options.overwrite, working_root)

    try:
        document = await asyncio.to_thread(source.load_schema_document, options.schema_id)
    except SchemaNotFoundError as e:
        raise ExportSchemaNotFoundError(f"schema {options.schema_id!r} not found") from e

    if options.validate_schema:
        try:
            diagnostics = await asyncio.to_thread(source.validate_schema_by_id, options.schema_id)
        except SchemaError as e:
            raise ExportSchemaValidationError(f"schema {options.schema_id!r} is invalid: {e}") from e
        if diagnostics:
            raise ExportSchemaValidationError(
                f"schema {options.schema_id!r} failed validation with {len(diagnostics)} problem(s)",
                diagnostics,
            )

    metadata = None
    if options.embeds_provenance:
        metadata = await build_provenance(options.schema_id, options.identity_provider)

    if export_format is ExportFormat.YAML:
        content = render_yaml(document, metadata, style)
    else:
        content = render_json(document, metadata, style)

    await write_file_atomic(target, content)
    logger.info(
        "Exported schema",
        schema_id=options.schema_id,
        path=str(target),
        format=export_format.value,
        provenance=style.value if metadata is not None else "none",
    )
    return target


def export_schema_sync(
    options: ExportOptions,
    catalog: Optional[SchemaCatalog] = None,
    working_root: Optional[Path] = None,
) -> Path:
    """Blocking wrapper around ``export_schema`` for non-async callers."""
    return asyncio.run(export_schema(options, catalog=catalog, working_root=working_root))


def validate_exported_schema(
    schema_id: str,
    path: Union[str, Path],
    catalog: Optional[SchemaCatalog] = None,
) -> None:
    """Check that an exported file still matches its catalog source.

    Provenance (the reserved key and a provenance ``$comment``) is stripped before
    the canonical JSON of both documents is compared.

    Raises:
        ExportSchemaNotFoundError: If the schema is not in the catalog
        ExportMismatchError: If the payloads differ
    """
    source = catalog or default_catalog()
    try:
        expected = source.load_schema_bytes(schema_id)
    except SchemaNotFoundError as e:
        raise ExportSchemaNotFoundError(f"schema {schema_id!r} not found") from e

    exported = canonical_json(strip_provenance(load_document(path)))
    if exported != expected:
        raise ExportMismatchError(
            f"{path} differs from catalog schema {schema_id!r} after stripping provenance"
        )
