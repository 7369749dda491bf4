"""
Package logging.

Library loggers carry no handlers and no level of their own; applications
decide where records go. ``report`` is for output the caller asked for
explicitly (``verbose=True``): it bypasses logger levels and, when the
application has configured no handler at all, writes to stderr.
"""

from __future__ import annotations

import logging
import sys

__all__ = ["get_logger", "report"]

_FORMAT = "%(name)s: %(message)s"


def get_logger(name: str) -> logging.Logger:
    """Return the named logger (typically ``__name__`` of the calling module)."""
    return logging.getLogger(name)


def report(logger: logging.Logger, msg: str, *args: object) -> None:
    """Emit an INFO record regardless of the configured level.

    Records go to the application's handlers when any are reachable from
    ``logger``; otherwise they are written to stderr.
    """
    record = logger.makeRecord(logger.name, logging.INFO, "(report)", 0, msg, args, None)
    if logger.hasHandlers():
        logger.handle(record)
        return

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(logging.Formatter(_FORMAT))
    handler.handle(record)
