# hopper/logging/logger.py
"""
Logger factory for hopper.

All modules obtain loggers through get_logger(__name__) so that a single
call to configure_logging() controls the whole package.
"""

from __future__ import annotations

import logging
import sys

ROOT_LOGGER_NAME = "hopper"
LOG_FORMAT = "%(asctime)s %(levelname)-7s %(name)s: %(message)s"


def get_logger(name: str) -> logging.Logger:
    """Return a logger in the hopper hierarchy."""
    if name != ROOT_LOGGER_NAME and not name.startswith(f"{ROOT_LOGGER_NAME}."):
        name = f"{ROOT_LOGGER_NAME}.{name}"
    return logging.getLogger(name)


def configure_logging(level: str | int = "INFO") -> None:
    """
    Install a single stream handler on the package root logger.

    Safe to call more than once; the handler is replaced, not duplicated.
    """
    root = logging.getLogger(ROOT_LOGGER_NAME)

    for handler in list(root.handlers):
        if getattr(handler, "_hopper_handler", False):
            root.removeHandler(handler)

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    handler._hopper_handler = True  # type: ignore[attr-defined]

    root.addHandler(handler)
    root.setLevel(level.upper() if isinstance(level, str) else level)
    root.propagate = False
