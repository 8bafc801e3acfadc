"""Main CLI entry point for pyfulmen."""  # pragma: no cover

from pyfulmen.cli.app import app  # pragma: no cover

# Register commands
from pyfulmen.cli.commands import foundry, schema, similarity  # noqa: F401  # pragma: no cover

if __name__ == "__main__":  # pragma: no cover
    app()
