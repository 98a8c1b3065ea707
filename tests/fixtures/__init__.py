"""Test fixtures for converter and CLI tests.

This module provides sample markup documents for:
- Forward conversion of realistic pages
- Round-trip conversion tests
- CLI tests that need a file on disk
"""

from .sample_markup import (
    SAMPLE_MARKUP_FOOTNOTES,
    SAMPLE_MARKUP_KITCHEN_SINK,
    SAMPLE_MARKUP_SIMPLE,
    SAMPLE_MARKUP_TABLE,
)

__all__ = [
    "SAMPLE_MARKUP_FOOTNOTES",
    "SAMPLE_MARKUP_KITCHEN_SINK",
    "SAMPLE_MARKUP_SIMPLE",
    "SAMPLE_MARKUP_TABLE",
]
