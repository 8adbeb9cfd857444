"""Logging configuration utilities for Fahrplan.

The interactive viewer owns the terminal, so log output goes either to a
file or nowhere while it runs.
"""

from __future__ import annotations

import logging
import sys
from pathlib import Path

DEFAULT_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def configure_logging(
    level: str = "WARNING",
    filename: str | Path | None = None,
    console: bool = True,
) -> None:
    """Configure application-wide logging.

    Can be called multiple times to reconfigure logging (uses force=True).

    Args:
        level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL).
               Case-insensitive.
        filename: Path to log file. If None, logs to stderr when `console`
                  is set and are discarded otherwise.
        console: Whether stderr is available for log output.
    """
    handlers: list[logging.Handler] = []

    if filename:
        handlers.append(logging.FileHandler(filename))
    elif console:
        handlers.append(logging.StreamHandler(sys.stderr))
    else:
        handlers.append(logging.NullHandler())

    logging.basicConfig(
        level=getattr(logging, level.upper()),
        format=DEFAULT_FORMAT,
        handlers=handlers,
        force=True,
    )


def get_logger(name: str) -> logging.Logger:
    """Get a logger instance.

    Args:
        name: Logger name (usually __name__ from the calling module)

    Returns:
        Logger instance
    """
    return logging.getLogger(name)
