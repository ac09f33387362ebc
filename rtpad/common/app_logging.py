"""
Logging policy.

Every rtpad entry point configures logging through ``logging_setup`` so the
package version appears in each timestamped record.
"""

from __future__ import annotations

import logging

from rtpad import __version__

__all__ = ["LOG_LEVELS", "logLevel_resolve", "logging_setup"]

LOG_LEVELS: tuple[str, ...] = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


def logLevel_resolve(level: str) -> int:
    """
    Map a level name to its logging constant.

    Args:
        level: Level name, any case.

    Returns:
        Numeric logging level.

    Raises:
        ValueError: If the name is not one of LOG_LEVELS.
    """
    name: str = level.upper()
    if name not in LOG_LEVELS:
        raise ValueError(f"Unknown log level '{level}'. Supported: {', '.join(LOG_LEVELS)}.")
    return logging.getLevelName(name)


def logging_setup(level: str, log_format: str, log_file: str | None = None) -> None:
    """
    Configure root logging, replacing any handlers set up earlier.

    Args:
        level: Log level name.
        log_format: Base format; the version is inserted after ``%(asctime)s``.
        log_file: Optional file to log to in addition to stderr.
    """
    handlers: list[logging.Handler] = [logging.StreamHandler()]
    if log_file:
        handlers.append(logging.FileHandler(log_file))

    logging.basicConfig(
        level=logLevel_resolve(level),
        format=log_format.replace("%(asctime)s", f"%(asctime)s [v{__version__}]"),
        handlers=handlers,
        force=True,
    )
