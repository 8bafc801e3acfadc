"""Provenance metadata stamped into exported schemas."""

import subprocess
from dataclasses import dataclass, field
from typing import Any, Optional

from loguru import logger

from pyfulmen import CRUCIBLE_VERSION, __version__
from pyfulmen.foundry.timestamp import TimestampRFC3339Nano
from pyfulmen.schema.export.identity import Identity, IdentityProvider

# Reserved top-level key for object-style provenance
PROVENANCE_KEY = "x-crucible-source"

# Prefix of a $comment value carrying comment-style provenance
PROVENANCE_COMMENT_PREFIX = f"{PROVENANCE_KEY}:"


@dataclass
class ProvenanceMetadata:
    schema_id: str
    crucible_version: str = CRUCIBLE_VERSION
    pyfulmen_version: str = __version__
    git_revision: Optional[str] = None
    exported_at: TimestampRFC3339Nano = field(default_factory=TimestampRFC3339Nano.now)
    identity: Optional[Identity] = None

    def to_dict(self) -> dict[str, Any]:
        """Object-style payload; optional fields are omitted when unset."""
        data: dict[str, Any] = {
            "schema_id": self.schema_id,
            "crucible_version": self.crucible_version,
            "pyfulmen_version": self.pyfulmen_version,
        }
        if self.git_revision:
            data["git_revision"] = self.git_revision
        data["exported_at"] = str(self.exported_at)
        if self.identity is not None and self.identity.to_dict():
            data["identity"] = self.identity.to_dict()
        return data

    def to_comment(self) -> str:
        """Compact ``$comment`` form: ``x-crucible-source: k=v; k=v``."""
        parts = [
            f"schema_id={self.schema_id}",
            f"crucible={self.crucible_version}",
            f"pyfulmen={self.pyfulmen_version}",
        ]
        if self.git_revision:
            parts.append(f"git={self.git_revision}")
        parts.append(f"exported={self.exported_at}")
        if self.identity is not None:
            if self.identity.vendor:
                parts.append(f"vendor={self.identity.vendor}")
            if self.identity.binary:
                parts.append(f"binary={self.identity.binary}")
        return f"{PROVENANCE_COMMENT_PREFIX} " + "; ".join(parts)

    def to_yaml_comment_block(self) -> str:
        """Object-style provenance as ``#`` comment lines for YAML front-matter."""
        lines = [f"# {PROVENANCE_KEY}:"]
        for key, value in self.to_dict().items():
            if isinstance(value, dict):
                lines.append(f"#   {key}:")
                lines.extend(f"#     {sub_key}: {sub_value}" for sub_key, sub_value in value.items())
            else:
                lines.append(f"#   {key}: {value}")
        return "\n".join(lines) + "\n"


def get_git_revision() -> Optional[str]:
    """Short SHA of HEAD in the working directory, or None outside a git checkout."""
    try:
        result = subprocess.run(
            ["git", "rev-parse", "--short", "HEAD"],
            capture_output=True,
            text=True,
            timeout=5,
            check=False,
        )
    except (OSError, subprocess.SubprocessError) as e:
        logger.debug(f"git revision unavailable: {e}")
        return None
    if result.returncode != 0:
        return None
    return result.stdout.strip() or None


async def build_provenance(
    schema_id: str,
    identity_provider: Optional[IdentityProvider] = None,
) -> ProvenanceMetadata:
    """Collect provenance for an export. Identity lookup failures are ignored."""
    metadata = ProvenanceMetadata(schema_id=schema_id, git_revision=get_git_revision())

    if identity_provider is not None:
        try:
            metadata.identity = await identity_provider.get_identity()
        except Exception as e:
            logger.debug(f"Ignoring identity provider failure: {e}")

    return metadata


def strip_provenance(document: Any) -> Any:
    """Remove the reserved provenance key and a provenance ``$comment`` from a document."""
    if not isinstance(document, dict):
        return document
    stripped = {key: value for key, value in document.items() if key != PROVENANCE_KEY}
    comment = stripped.get("$comment")
    if isinstance(comment, str) and comment.startswith(PROVENANCE_COMMENT_PREFIX):
        del stripped["$comment"]
    return stripped
