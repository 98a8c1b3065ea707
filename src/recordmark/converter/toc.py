"""Table of contents built from heading metadata."""

from typing import Sequence

from recordmark.converter.utils import escape_html
from recordmark.models.metadata import Heading


def build_toc(headings: Sequence[Heading], title: str = "Contents") -> str:
    """Render a flat table of contents, indented by heading level via CSS.

    Args:
        headings: Headings in document order (ConversionResult.metadata.headings)
        title: Visible title of the block

    Returns:
        TOC HTML, or an empty string when there are no headings
    """
    if not headings:
        return ""
    items = "".join(
        f'<li class="toc-level-{heading.level}">'
        f'<a href="#{escape_html(heading.id)}">{escape_html(heading.text)}</a></li>'
        for heading in headings
    )
    return (
        f'<nav class="recordmark-toc"><h2 class="toc-title">{escape_html(title)}</h2>'
        f'<ul>{items}</ul></nav>'
    )
