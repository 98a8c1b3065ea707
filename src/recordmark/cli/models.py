"""Data models for CLI operations."""

from enum import IntEnum


class ExitCode(IntEnum):
    """Exit codes for CLI operations.

    - SUCCESS (0): Conversion completed (warnings may have been reported)
    - GENERAL_ERROR (1): Bad input file, bad config, unexpected failure
    - CONVERSION_ERRORS (2): The result carries at least one error diagnostic

    Example:
        >>> raise typer.Exit(ExitCode.CONVERSION_ERRORS)
    """
    SUCCESS = 0
    GENERAL_ERROR = 1
    CONVERSION_ERRORS = 2
