"""Errors raised by the foundry reference catalogs."""

import platform

from pyfulmen import CRUCIBLE_VERSION, __version__


class FoundryError(Exception):
    """Base class for foundry errors."""


class CatalogLoadError(FoundryError, RuntimeError):
    """Raised when a packaged reference catalog is missing or malformed.

    The message carries the library and catalog versions plus the host OS and
    architecture, since a failed load almost always means a broken install.
    """

    def __init__(self, catalog: str, reason: str):
        self.catalog = catalog
        self.reason = reason
        super().__init__(
            f"failed to load {catalog} catalog: {reason} "
            f"(pyfulmen {__version__}, crucible {CRUCIBLE_VERSION}, "
            f"{platform.system()}/{platform.machine()})"
        )


class SignalNotFoundError(FoundryError, LookupError):
    """Raised when a signal id or name is not in the signal catalog."""

    def __init__(self, key: str):
        self.key = key
        super().__init__(f"signal not found: {key}")


class InvalidCorrelationIDError(FoundryError, ValueError):
    """Raised when a string is not a UUIDv7 correlation ID."""


class PatternError(FoundryError, ValueError):
    """Raised when a catalog pattern cannot be compiled."""
