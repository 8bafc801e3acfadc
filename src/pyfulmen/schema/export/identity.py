"""Application identity for export provenance."""

from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Protocol

import yaml
from loguru import logger

from pyfulmen.config import get_config


@dataclass(frozen=True)
class Identity:
    vendor: str = ""
    binary: str = ""

    def to_dict(self) -> dict[str, str]:
        return {key: value for key, value in (("vendor", self.vendor), ("binary", self.binary)) if value}


class IdentityProvider(Protocol):
    """Source of the vendor/binary identity stamped into exports."""

    async def get_identity(self) -> Optional[Identity]:
        """Return the identity, or None when unknown."""
        ...


class StaticIdentityProvider:
    """Provider that always returns the same identity."""

    def __init__(self, vendor: str = "", binary: str = ""):
        self.identity = Identity(vendor=vendor, binary=binary)

    async def get_identity(self) -> Optional[Identity]:
        return self.identity


def find_identity_file(start: Optional[Path] = None, relative: Optional[str] = None) -> Optional[Path]:
    """Search ``start`` and its ancestors for the identity file."""
    relative = relative or get_config().identity_file
    current = (start or Path.cwd()).resolve()
    for directory in [current, *current.parents]:
        candidate = directory / relative
        if candidate.is_file():
            return candidate
    return None


class DefaultIdentityProvider:
    """Reads ``vendor`` and ``binary`` from ``.fulmen/app.yaml``.

    ``name`` is used when ``binary`` is missing. A missing or unreadable file means
    no identity; it is never an error.
    """

    def __init__(self, start: Optional[Path] = None):
        self.start = start

    async def get_identity(self) -> Optional[Identity]:
        path = find_identity_file(self.start)
        if path is None:
            return None

        try:
            data = yaml.safe_load(path.read_text(encoding="utf-8"))
        except (OSError, yaml.YAMLError) as e:
            logger.debug(f"Ignoring unreadable identity file {path}: {e}")
            return None
        if not isinstance(data, dict):
            return None

        vendor = str(data.get("vendor") or "")
        binary = str(data.get("binary") or data.get("name") or "")
        if not vendor and not binary:
            return None
        return Identity(vendor=vendor, binary=binary)
