"""Shared test fixtures."""

import logging

import pytest
import structlog

from fetch_cache.clock import ManualClock


@pytest.fixture
def clock():
    """Virtual clock starting at t=1000s."""
    return ManualClock(start=1000.0)


@pytest.fixture(autouse=True)
def _restore_logging():
    """Undo setup_logging() so one test's handler never outlives its stream."""
    yield
    root = logging.getLogger()
    for handler in root.handlers[:]:
        if isinstance(handler.formatter, structlog.stdlib.ProcessorFormatter):
            root.removeHandler(handler)
    root.setLevel(logging.WARNING)
    structlog.reset_defaults()
