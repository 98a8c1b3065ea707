"""Conversion engine: markup to HTML and back."""

from recordmark.converter.forward import FORWARD_PASSES, convert_markup_to_html
from recordmark.converter.references import ReferenceResolver, ResolverState
from recordmark.converter.reverse import REVERSE_PASSES, convert_html_to_markup
from recordmark.converter.stylesheet import STYLESHEET, STYLESHEET_VERSION
from recordmark.converter.toc import build_toc

__all__ = [
    'FORWARD_PASSES',
    'REVERSE_PASSES',
    'STYLESHEET',
    'STYLESHEET_VERSION',
    'ReferenceResolver',
    'ResolverState',
    'build_toc',
    'convert_html_to_markup',
    'convert_markup_to_html',
]
