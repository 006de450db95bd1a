"""
Logging setup for the deskdialog command.

Dialog results are printed on stdout, so every handler installed here writes
to stderr or to the configured log file.
"""

from __future__ import annotations

import logging
import sys

from deskdialog import __version__
from deskdialog.common.config import LoggingConfig

__all__ = [
    "logging_setup",
    "logFormatWithVersion_get",
    "logLevel_resolve",
]


def logLevel_resolve(level: str) -> int:
    """
    Translate a level name from config or the command line.

    Args:
        level: Level name such as `info` or `DEBUG`.

    Returns:
        Numeric logging level.

    Raises:
        ValueError: If the name is not a standard logging level.
    """
    resolved = logging.getLevelName(level.strip().upper())
    if not isinstance(resolved, int):
        raise ValueError(f"Unknown log level '{level}'")
    return resolved


def logging_setup(config: LoggingConfig) -> None:
    """
    Install stderr and optional file handlers.

    Args:
        config: Logging section of the loaded configuration.
    """
    handlers: list[logging.Handler] = [logging.StreamHandler(sys.stderr)]
    if config.file:
        handlers.append(logging.FileHandler(config.file))

    logging.basicConfig(
        level=logLevel_resolve(config.level),
        format=logFormatWithVersion_get(config.format),
        handlers=handlers,
        force=True,
    )


def logFormatWithVersion_get(log_format: str) -> str:
    """Tag timestamped records with the deskdialog version"""
    return log_format.replace("%(asctime)s", f"%(asctime)s deskdialog/{__version__}")
