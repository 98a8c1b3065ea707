"""Reverse conversion: HTML back to markup.

REVERSE_PASSES is roughly the forward order turned around. Any HTML is
accepted; elements outside the known vocabulary are left in the output as
literal text.
"""

import logging
from typing import Optional

from recordmark.config.models import DEFAULT_CONFIG, ConverterConfig
from recordmark.converter.reverse.base import ReverseContext
from recordmark.converter.reverse.block_groups import (
    DefinitionListPass,
    OrderedListPass,
    TablePass,
    UnorderedListPass,
)
from recordmark.converter.reverse.code import CodePass
from recordmark.converter.reverse.finalize import (
    ParagraphPass,
    ReferencesSectionPass,
    RestorePass,
    RulePass,
    TemplatePass,
    WhitespacePass,
)
from recordmark.converter.reverse.inline import ImagePass, LinkPass
from recordmark.converter.reverse.structure import (
    CitationPass,
    EmphasisPass,
    HeadingPass,
    QuotePass,
    TextEscapePass,
    UnwrapContainerPass,
)
from recordmark.converter.utils import strip_tags, unescape_html

logger = logging.getLogger(__name__)

REVERSE_PASSES = (
    UnwrapContainerPass(),
    TextEscapePass(),
    CitationPass(),
    HeadingPass(),
    EmphasisPass(),
    QuotePass(),
    CodePass(),
    ImagePass(),
    LinkPass(),
    DefinitionListPass(),
    OrderedListPass(),
    UnorderedListPass(),
    TablePass(),
    TemplatePass(),
    ReferencesSectionPass(),
    RulePass(),
    ParagraphPass(),
    WhitespacePass(),
    RestorePass(),
)


def convert_html_to_markup(html: Optional[str], config: Optional[ConverterConfig] = None) -> str:
    """Convert an HTML fragment to markup.

    Never raises: on an internal failure the tag-stripped text of the input
    is returned and the failure is logged.

    Args:
        html: HTML fragment (None is treated as empty)
        config: Converter options, defaults to ConverterConfig()

    Returns:
        Markup text
    """
    config = config or DEFAULT_CONFIG
    text = html or ""
    current = None
    try:
        ctx = ReverseContext(config=config)
        for current in REVERSE_PASSES:
            text = current.apply(text, ctx)
        return text
    except Exception:
        pass_name = current.name if current is not None else None
        logger.exception(f"Reverse conversion failed in pass '{pass_name}'")
        return unescape_html(strip_tags(html if isinstance(html, str) else "")).strip()
