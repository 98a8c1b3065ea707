"""Typed exception hierarchy for CLI-related errors.

All exceptions inherit from CLIError so the command handlers can report
them with a single except clause.
"""

from recordmark.errors import RecordMarkError


class CLIError(RecordMarkError):
    """Base exception for all CLI-related errors."""
    pass


class InputFileError(CLIError):
    """Raised when an input file cannot be read or an output file written."""

    def __init__(self, file_path: str, reason: str):
        super().__init__(f"Cannot access {file_path}: {reason}")
        self.file_path = file_path
        self.reason = reason
