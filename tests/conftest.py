"""
Shared test fixtures.

Author: Cronkeeper Project
License: MIT
"""

import logging
import time

import pytest


@pytest.fixture(autouse=True)
def restore_cronkeeper_logger():
    """Undo any setup_logging() call so caplog keeps seeing scheduler records."""
    logger = logging.getLogger("cronkeeper")
    handlers = list(logger.handlers)
    level = logger.level
    propagate = logger.propagate

    yield

    for handler in list(logger.handlers):
        if handler not in handlers:
            logger.removeHandler(handler)
            handler.close()
    for handler in handlers:
        if handler not in logger.handlers:
            logger.addHandler(handler)
    logger.setLevel(level)
    logger.propagate = propagate


def _wait_for(predicate, timeout: float = 5.0, interval: float = 0.01) -> bool:
    """Poll predicate until it is true or timeout expires."""
    deadline = time.monotonic() + timeout
    while time.monotonic() < deadline:
        if predicate():
            return True
        time.sleep(interval)
    return predicate()


@pytest.fixture
def wait_for():
    """Polling helper for assertions on background timer activity."""
    return _wait_for
