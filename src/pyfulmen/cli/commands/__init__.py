"""CLI commands for pyfulmen."""

from . import foundry, schema, similarity

__all__ = [
    "foundry",
    "schema",
    "similarity",
]
