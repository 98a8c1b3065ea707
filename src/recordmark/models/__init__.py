"""Data models for conversion results and document metadata."""

from recordmark.models.conversion_result import ConversionResult, Diagnostic, Severity
from recordmark.models.metadata import (
    Citation,
    CodeBlock,
    Definition,
    Footnote,
    Heading,
    Image,
    Metadata,
    Task,
    TemplateInvocation,
)

__all__ = [
    'Citation',
    'CodeBlock',
    'ConversionResult',
    'Definition',
    'Diagnostic',
    'Footnote',
    'Heading',
    'Image',
    'Metadata',
    'Severity',
    'Task',
    'TemplateInvocation',
]
