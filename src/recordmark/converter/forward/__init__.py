"""Markup to HTML conversion pipeline."""

from recordmark.converter.forward.base import ForwardContext, ForwardPass
from recordmark.converter.forward.pipeline import FORWARD_PASSES, convert_markup_to_html

__all__ = [
    'FORWARD_PASSES',
    'ForwardContext',
    'ForwardPass',
    'convert_markup_to_html',
]
