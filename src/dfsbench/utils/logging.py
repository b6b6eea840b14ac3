"""Logging helpers for embedding dfsbench in other programs.

The CLI installs a ``RichHandler`` on the root logger itself; library users who
drive :class:`~dfsbench.orchestrator.LocalOrchestrator` directly can call
:func:`configure_logger` to get plain, consistently formatted output.
"""

from __future__ import annotations

import logging

from dfsbench.constants import PROG_NAME

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def configure_logger(name: str = PROG_NAME, level: int | None = None) -> logging.Logger:
    """Return the named logger with a stream handler attached.

    Parameters:
        name: Name of the logger to retrieve. Defaults to the package logger.
        level: Optional level. Applied on every call when given; defaults to
            ``logging.INFO`` the first time a handler is attached.
    """

    logger = logging.getLogger(name)

    if not logger.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        logger.addHandler(handler)
        logger.setLevel(level if level is not None else logging.INFO)
    elif level is not None:
        logger.setLevel(level)

    return logger


__all__ = ["LOG_FORMAT", "configure_logger"]
