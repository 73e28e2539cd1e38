"""Logging for the ``account_trends`` package.

Library modules log through ``get_logger("account_trends.<module>")`` and stay
silent until an entrypoint calls :func:`configure_logging`. The CLI does so
from its root callback, picking the level from ``--log-level``, the count of
``-v`` flags, or ``ACCOUNT_TRENDS_LOG_LEVEL``, in that order.

Skipped records are logged at WARNING, so the default level shows them and
``-v``/``-vv`` add the INFO summaries and DEBUG cache traces.
"""

from __future__ import annotations

import logging
import os
import sys
from typing import IO

_PKG_LOGGER_NAME = "account_trends"
LEVEL_ENV = "ACCOUNT_TRENDS_LOG_LEVEL"
DEFAULT_LEVEL = logging.WARNING
_FORMAT = "%(levelname)s %(name)s: %(message)s"

# The handler installed by the last configure_logging() call.
_handler: logging.Handler | None = None


def parse_level(value: int | str) -> int:
    """Return a numeric level for an ``int``, a digit string or a level name.

    Unknown names raise ``ValueError``.
    """

    if isinstance(value, int):
        return value
    name = value.strip().upper()
    if name.isdigit():
        return int(name)
    level = logging.getLevelNamesMapping().get(name)
    if level is None:
        raise ValueError(f"unknown log level {value!r}")
    return level


def level_for_verbosity(verbose: int) -> int | None:
    """Map a ``-v`` count to a level; ``None`` leaves the choice to the env."""

    if verbose <= 0:
        return None
    return logging.INFO if verbose == 1 else logging.DEBUG


def configure_logging(
    level: int | str | None = None,
    *,
    stream: IO[str] | None = None,
) -> int:
    """Point the package logger at ``stream`` (``sys.stderr`` when omitted).

    ``level`` falls back to ``ACCOUNT_TRENDS_LOG_LEVEL`` and then to WARNING.
    Calling again replaces the previous handler, so one process can be
    reconfigured. Returns the level in effect.
    """

    global _handler
    if level is None:
        level = os.getenv(LEVEL_ENV) or DEFAULT_LEVEL
    resolved = parse_level(level)

    logger = logging.getLogger(_PKG_LOGGER_NAME)
    for h in list(logger.handlers):
        if h is _handler or isinstance(h, logging.NullHandler):
            logger.removeHandler(h)

    _handler = logging.StreamHandler(stream if stream is not None else sys.stderr)
    _handler.setFormatter(logging.Formatter(_FORMAT))
    logger.addHandler(_handler)
    logger.setLevel(resolved)
    logger.propagate = False
    return resolved


def get_logger(name: str) -> logging.Logger:
    pkg_logger = logging.getLogger(_PKG_LOGGER_NAME)
    if not pkg_logger.handlers:
        pkg_logger.addHandler(logging.NullHandler())
    return logging.getLogger(name)


__all__ = ["configure_logging", "get_logger", "level_for_verbosity", "parse_level"]
