"""
Logging for pcomp.

The ``pcomp`` logger owns the only handler, writing to stderr (stdout
carries the compression report). Loggers below it, such as
``pcomp.jobs``, have no handlers of their own and propagate to it.

Environment Variables:
    LOG_LEVEL: DEBUG, INFO, WARNING, ERROR or CRITICAL (default INFO)
    LOG_FORMAT: "structured" or "simple" (default structured)
"""

import logging
import multiprocessing
import os
import sys
from typing import Optional

ROOT_LOGGER_NAME = "pcomp"
LEVEL_ENV_VAR = "LOG_LEVEL"
FORMAT_ENV_VAR = "LOG_FORMAT"

DATE_FORMAT = "%Y-%m-%d %H:%M:%S"
LOG_FORMATS = {
    "structured": (
        "%(asctime)s | %(processName)s | %(name)s | %(levelname)-8s | "
        "%(filename)s:%(lineno)d | %(funcName)s() | %(message)s"
    ),
    "simple": "%(asctime)s %(levelname)s %(name)s: %(message)s",
}


def resolve_level(level: Optional[str] = None) -> int:
    """Level from ``level`` or $LOG_LEVEL; unknown names resolve to INFO."""
    name = (level or os.getenv(LEVEL_ENV_VAR) or "INFO").upper()
    resolved = logging.getLevelName(name)
    return resolved if isinstance(resolved, int) else logging.INFO


def build_formatter(format_type: str = "structured") -> logging.Formatter:
    """$LOG_FORMAT wins over ``format_type``; unknown names use the structured layout."""
    name = os.getenv(FORMAT_ENV_VAR, format_type).lower()
    return logging.Formatter(
        LOG_FORMATS.get(name, LOG_FORMATS["structured"]), datefmt=DATE_FORMAT
    )


def setup_logger(
    name: str = ROOT_LOGGER_NAME,
    level: Optional[str] = None,
    format_type: str = "structured",
) -> logging.Logger:
    """
    Give logger ``name`` a stderr handler and stop propagation above it.

    Calling it again for the same name only re-applies the level.

    Args:
        name: Logger to configure
        level: Level name overriding $LOG_LEVEL
        format_type: "structured" or "simple", overridden by $LOG_FORMAT
    """
    configured = logging.getLogger(name)
    configured.setLevel(resolve_level(level))

    if not configured.handlers:
        handler = logging.StreamHandler(sys.stderr)
        handler.setFormatter(build_formatter(format_type))
        configured.addHandler(handler)

    configured.propagate = False
    return configured


def get_logger(name: str = ROOT_LOGGER_NAME) -> logging.Logger:
    """Return logger ``name``, configuring the ``pcomp`` logger it reports to."""
    if not name.startswith(ROOT_LOGGER_NAME + "."):
        return setup_logger(name)

    if not logging.getLogger(ROOT_LOGGER_NAME).handlers:
        setup_logger()
    return logging.getLogger(name)


def configure_multiprocessing_logging() -> logging.Logger:
    """
    Set up logging inside a process pool worker.

    Spawned workers start with a fresh ``logging`` module, forked ones
    inherit the parent's; both end up with the ``pcomp`` handler applied
    from the worker's own environment.

    Returns:
        The logger named after the current worker process
    """
    setup_logger()
    return get_logger(f"{ROOT_LOGGER_NAME}.{multiprocessing.current_process().name}")


logger = setup_logger()
