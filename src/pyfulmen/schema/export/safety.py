"""Safe output paths and atomic writes for exported schemas."""

from pathlib import Path
from typing import Optional, Union

import aiofiles
from loguru import logger

from pyfulmen.schema.export.errors import (
    FileExistsExportError,
    FileWriteExportError,
    PathValidationError,
)


def validate_output_path(
    out_path: Union[str, Path],
    overwrite: bool,
    working_root: Optional[Path] = None,
) -> Path:
    """Resolve ``out_path`` and check it can be written.

    Args:
        out_path: Requested destination
        overwrite: Whether an existing file may be replaced
        working_root: When set, the destination must stay inside this directory

    Returns:
        The absolute destination path

    Raises:
        PathValidationError: If the path escapes ``working_root`` or is a directory
        FileExistsExportError: If the file exists and ``overwrite`` is False
    """
    path = Path(out_path).expanduser()
    if working_root is not None and not path.is_absolute():
        path = Path(working_root) / path
    resolved = path.resolve()

    if working_root is not None:
        root = Path(working_root).resolve()
        if not resolved.is_relative_to(root):
            raise PathValidationError(f"output path {out_path} is outside working root {root}")

    if resolved.is_dir():
        raise PathValidationError(f"output path {resolved} is a directory")

    if resolved.exists() and not overwrite:
        raise FileExistsExportError(resolved)

    return resolved


async def write_file_atomic(path: Path, content: str) -> None:
    """Write ``content`` through a temporary sibling file and rename it into place.

    Raises:
        PathValidationError: If the parent directory cannot be created
        FileWriteExportError: If writing fails; the original file is left untouched
    """
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        raise PathValidationError(f"cannot create parent directory {path.parent}: {e}") from e

    temp_path = path.with_name(f".{path.name}.tmp")
    try:
        async with aiofiles.open(temp_path, mode="w", encoding="utf-8") as f:
            await f.write(content)
        temp_path.replace(path)
        logger.debug("Wrote file atomically", path=str(path), content_length=len(content))
    except OSError as e:
        temp_path.unlink(missing_ok=True)
        logger.error("Failed to write file", path=str(path), error=str(e))
        raise FileWriteExportError(f"failed to write {path}: {e}") from e
