"""Terminal output handling using Rich library.

This module provides the OutputHandler class for CLI status messages.
Messages go to stderr so converted documents written to stdout can be
piped without interference. Supports verbosity levels and --no-color flag.
"""

from typing import Iterable

from rich.console import Console
from rich.markup import escape

from recordmark.models.conversion_result import Diagnostic, Severity


class OutputHandler:
    """Handles all terminal status output using Rich library.

    Attributes:
        verbosity: Verbosity level (0=summary, 1=info, 2=debug)
        console: Rich Console instance writing to stderr

    Example:
        >>> handler = OutputHandler(verbosity=1, no_color=False)
        >>> handler.success("Rendered notes.wiki")
    """

    def __init__(self, verbosity: int = 0, no_color: bool = False):
        """Initialize output handler.

        Args:
            verbosity: Verbosity level (0=summary, 1=info, 2=debug)
            no_color: Disable color output if True
        """
        self.verbosity = verbosity
        self.console = Console(
            stderr=True,
            force_terminal=not no_color,
            no_color=no_color,
            highlight=False,
        )

    def success(self, message: str) -> None:
        """Display success message in green.

        Args:
            message: Success message to display
        """
        self.console.print(f"[green]✓[/green] {escape(message)}")

    def error(self, message: str) -> None:
        """Display error message in red.

        Args:
            message: Error message to display
        """
        self.console.print(f"[red]✗[/red] {escape(message)}", style="red")

    def warning(self, message: str) -> None:
        """Display warning message in yellow.

        Args:
            message: Warning message to display
        """
        self.console.print(f"[yellow]⚠[/yellow] {escape(message)}", style="yellow")

    def info(self, message: str) -> None:
        """Display info message (only if verbosity >= 1)."""
        if self.verbosity >= 1:
            self.console.print(escape(message))

    def debug(self, message: str) -> None:
        """Display debug message (only if verbosity >= 2)."""
        if self.verbosity >= 2:
            self.console.print(f"[dim]{escape(message)}[/dim]")

    def print_diagnostics(self, source_name: str, diagnostics: Iterable[Diagnostic]) -> None:
        """Display conversion diagnostics as compiler-style lines.

        Args:
            source_name: File name shown in front of each line number
            diagnostics: Diagnostics from a ConversionResult
        """
        for diagnostic in diagnostics:
            location = f"{source_name}:{diagnostic.line}" if diagnostic.line else source_name
            message = f"{location}: {diagnostic.message}"
            if diagnostic.severity == Severity.ERROR:
                self.error(message)
            else:
                self.warning(message)
