"""Command-line interface for pyfulmen."""
