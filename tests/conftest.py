"""Root pytest configuration for all tests."""

import logging

import pytest


@pytest.fixture(autouse=True)
def recordmark_debug_logging(caplog):
    """Capture converter debug logs so failing tests show the pass trail."""
    caplog.set_level(logging.DEBUG, logger="recordmark")
    yield
