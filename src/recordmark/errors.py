"""Typed exception hierarchy for conversion errors.

This module defines the exceptions raised inside the conversion pipelines.
All exceptions inherit from RecordMarkError so callers (and the pipeline
boundary) can catch every application-level failure in one place.
"""

from typing import Optional


class RecordMarkError(Exception):
    """Base exception for all recordmark errors."""
    pass


class ConversionError(RecordMarkError):
    """Raised when a transformation pass cannot complete."""

    def __init__(self, message: str, pass_name: Optional[str] = None):
        if pass_name:
            full_message = f"Conversion failed in pass '{pass_name}': {message}"
        else:
            full_message = f"Conversion failed: {message}"
        super().__init__(full_message)
        self.pass_name = pass_name
        self.original_message = message


class PlaceholderError(ConversionError):
    """Raised when a placeholder token survives the restore step."""

    def __init__(self, token: str):
        super().__init__(
            f"Unresolved placeholder token {token!r}",
            "restore"
        )
        self.token = token
