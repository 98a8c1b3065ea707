"""HTML to markup conversion pipeline."""

from recordmark.converter.reverse.base import ReverseContext, ReversePass
from recordmark.converter.reverse.pipeline import REVERSE_PASSES, convert_html_to_markup

__all__ = [
    'REVERSE_PASSES',
    'ReverseContext',
    'ReversePass',
    'convert_html_to_markup',
]
