"""Pytest configuration for test isolation.

Report settings are read from ``ACCOUNT_TRENDS_*`` environment variables, and
the CLI additionally loads a ``.env`` from the working directory into
``os.environ``. Either source leaking between tests would change the default
timezone or preset under unrelated tests, so every test starts and ends with
those variables cleared.

The CLI also points the package logger at the current stderr on every run.
Tests reset that configuration so a handler bound to one test's captured
stream never outlives it.
"""

from __future__ import annotations

import logging
import os
from collections.abc import Iterator

import pytest

from account_trends import logging_setup

_ENV_PREFIX = "ACCOUNT_TRENDS_"


def _clear_env() -> None:
    for key in [k for k in os.environ if k.startswith(_ENV_PREFIX)]:
        os.environ.pop(key, None)


@pytest.fixture(autouse=True)
def _isolate_settings_env(monkeypatch: pytest.MonkeyPatch) -> Iterator[None]:
    """Hide pre-existing ``ACCOUNT_TRENDS_*`` variables for the test's duration."""

    for key in [k for k in os.environ if k.startswith(_ENV_PREFIX)]:
        monkeypatch.delenv(key)
    yield
    # Values set by the test itself (e.g. via a loaded .env) are dropped here;
    # monkeypatch then restores whatever existed before the test.
    _clear_env()


@pytest.fixture(autouse=True)
def _reset_logging() -> Iterator[None]:
    yield
    logger = logging.getLogger("account_trends")
    for h in list(logger.handlers):
        logger.removeHandler(h)
    logger.propagate = True
    logger.setLevel(logging.NOTSET)
    logging_setup._handler = None
