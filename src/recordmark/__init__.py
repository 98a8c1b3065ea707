"""recordmark: wiki-style markup to HTML, with HTML-to-markup recovery.

Public entry points:
    convert_markup_to_html(source, config=None) -> ConversionResult
    convert_html_to_markup(html, config=None) -> str
    STYLESHEET / STYLESHEET_VERSION
"""

from recordmark.config import ConfigLoader, ConverterConfig
from recordmark.converter import (
    STYLESHEET,
    STYLESHEET_VERSION,
    build_toc,
    convert_html_to_markup,
    convert_markup_to_html,
)
from recordmark.errors import ConversionError, PlaceholderError, RecordMarkError
from recordmark.models import (
    CodeBlock,
    ConversionResult,
    Diagnostic,
    Footnote,
    Heading,
    Image,
    Metadata,
    Severity,
    Task,
    TemplateInvocation,
)

__version__ = "0.1.0"

__all__ = [
    'CodeBlock',
    'ConfigLoader',
    'ConversionError',
    'ConversionResult',
    'ConverterConfig',
    'Diagnostic',
    'Footnote',
    'Heading',
    'Image',
    'Metadata',
    'PlaceholderError',
    'RecordMarkError',
    'STYLESHEET',
    'STYLESHEET_VERSION',
    'Severity',
    'Task',
    'TemplateInvocation',
    'build_toc',
    'convert_html_to_markup',
    'convert_markup_to_html',
]
