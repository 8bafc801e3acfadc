"""pyfulmen - foundation helpers for Fulmen applications."""

# Package version, kept in sync with pyproject.toml
__version__ = "0.1.0"

# Version of the Crucible SSOT snapshot bundled under pyfulmen/data
CRUCIBLE_VERSION = "2025.10.2"
