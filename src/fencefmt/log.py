"""Logging setup for the fencefmt namespace."""

from __future__ import annotations

import logging
import sys

LOGGER_NAME = "fencefmt"


class _TextFormatter(logging.Formatter):
    """``[LEVEL] logger: message`` with extra detail at DEBUG."""

    def __init__(self, *, debug: bool = False) -> None:
        if debug:
            fmt = "[%(levelname)-7s] %(name)s:%(funcName)s:%(lineno)d %(message)s"
        else:
            fmt = "[%(levelname)s] %(message)s"
        super().__init__(fmt)


def configure_logging(verbose: bool = False, stream=None) -> logging.Logger:
    """Attach a single stderr handler to the fencefmt logger."""
    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(logging.DEBUG if verbose else logging.WARNING)
    logger.handlers.clear()

    handler = logging.StreamHandler(stream or sys.stderr)
    handler.setFormatter(_TextFormatter(debug=verbose))
    logger.addHandler(handler)
    logger.propagate = False
    return logger

