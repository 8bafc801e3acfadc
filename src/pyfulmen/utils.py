"""Utility functions for pyfulmen."""

import sys
from pathlib import Path
from typing import Optional

from loguru import logger


def setup_logging(
    level: str = "INFO",
    log_file: Optional[Path] = None,
    console: bool = True,
) -> None:
    """Configure loguru sinks for an application using pyfulmen.

    The library itself only emits through ``loguru.logger``; sinks are configured
    by the entry point (the CLI, or the embedding application).

    Args:
        level: Minimum log level for all sinks
        log_file: Optional file to write logs to, rotated at 10 MB
        console: Whether to log to stderr
    """
    logger.remove()

    if console:
        logger.add(sys.stderr, level=level, backtrace=False, diagnose=False)

    if log_file is not None:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        logger.add(
            str(log_file),
            level=level,
            rotation="10 MB",
            retention="7 days",
            backtrace=True,
            diagnose=False,
            enqueue=True,
        )

    logger.debug("Logging configured", level=level, log_file=str(log_file) if log_file else None)
