"""Command-line interface for recordmark."""
