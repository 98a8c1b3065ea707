"""Forward conversion: markup to HTML plus metadata.

The pipeline is the ordered tuple FORWARD_PASSES. Order matters: code is
vaulted before any inline rule runs, text is escaped exactly once, images
are matched before links, and footnote definitions are collected before
references are numbered.
"""

import logging
from typing import Optional

from recordmark.config.models import DEFAULT_CONFIG, ConverterConfig
from recordmark.converter.forward.base import ForwardContext
from recordmark.converter.forward.block_groups import DefinitionListPass, ListPass, TablePass
from recordmark.converter.forward.code import CodePass, EscapePass
from recordmark.converter.forward.finalize import ParagraphPass, RestorePass, RootContainerPass
from recordmark.converter.forward.footnotes import FootnotePass, ReferencesSectionPass
from recordmark.converter.forward.inline import (
    EmphasisPass,
    ExternalLinkPass,
    InternalLinkPass,
    MediaPass,
)
from recordmark.converter.forward.preprocess import CommentPass, FrontMatterPass, TemplatePass
from recordmark.converter.forward.structure import (
    BlockquotePass,
    CalloutPass,
    HeadingPass,
    HorizontalRulePass,
)
from recordmark.converter.placeholder_vault import strip_reserved
from recordmark.converter.toc import build_toc
from recordmark.converter.utils import count_words, reading_time, strip_tags, unescape_html
from recordmark.errors import ConversionError
from recordmark.models.conversion_result import ConversionResult, Diagnostic, Severity

logger = logging.getLogger(__name__)

FORWARD_PASSES = (
    FrontMatterPass(),
    CommentPass(),
    TemplatePass(),
    CodePass(),
    EscapePass(),
    CalloutPass(),
    BlockquotePass(),
    HeadingPass(),
    HorizontalRulePass(),
    EmphasisPass(),
    MediaPass(),
    ExternalLinkPass(),
    InternalLinkPass(),
    DefinitionListPass(),
    ListPass(),
    TablePass(),
    FootnotePass(),
    ParagraphPass(),
    ReferencesSectionPass(),
    RestorePass(),
    RootContainerPass(),
)

ERROR_BODY = "<p>Error parsing markup</p>"


def convert_markup_to_html(source: Optional[str], config: Optional[ConverterConfig] = None) -> ConversionResult:
    """Convert a markup document to HTML.

    Never raises: a failure inside a pass is logged and reported as an
    error diagnostic next to a minimal HTML body.

    Args:
        source: Markup text (None is treated as an empty document)
        config: Converter options, defaults to ConverterConfig()

    Returns:
        ConversionResult with html, metadata, diagnostics and optional TOC

    Example:
        >>> result = convert_markup_to_html("## Title")
        >>> result.html
        '<div class="recordmark-content"><h2 id="title">Title</h2></div>'
    """
    config = config or DEFAULT_CONFIG
    current = None
    try:
        text = strip_reserved(source or "").replace("\r\n", "\n").replace("\r", "\n")
        ctx = ForwardContext(source=text, config=config)
        for current in FORWARD_PASSES:
            text = current.apply(text, ctx)
    except Exception as e:
        pass_name = current.name if current is not None else None
        logger.exception(f"Forward conversion failed in pass '{pass_name}'")
        error = e if isinstance(e, ConversionError) else ConversionError(str(e), pass_name)
        return ConversionResult(
            html=f'<div class="{config.root_class}">{ERROR_BODY}</div>',
            errors=[Diagnostic(0, str(error), Severity.ERROR)],
        )

    metadata = ctx.metadata
    metadata.word_count = count_words(unescape_html(strip_tags(text)))
    metadata.reading_time = reading_time(metadata.word_count, config.words_per_minute)
    toc = build_toc(metadata.headings) if config.table_of_contents else ""

    logger.debug(
        f"Converted {len(ctx.source)} characters with {len(ctx.diagnostics)} diagnostics"
    )
    return ConversionResult(html=text, metadata=metadata, errors=ctx.diagnostics, toc=toc)
