"""Final forward passes: paragraphs, vault restore and the root container."""

import logging
import re
from typing import List

from recordmark.converter.forward.base import ForwardContext, ForwardPass
from recordmark.converter.utils import escape_html

logger = logging.getLogger(__name__)

BLOCK_TAGS = (
    "h1", "h2", "h3", "h4", "h5", "h6", "p", "div", "section", "nav", "ul", "ol", "li",
    "table", "thead", "tbody", "tr", "th", "td", "pre", "blockquote", "hr", "figure",
    "video", "audio", "iframe", "dl", "dt", "dd",
)
BLOCK_START_PATTERN = re.compile(r'^\s*</?(?:' + '|'.join(BLOCK_TAGS) + r')\b', re.IGNORECASE)


class ParagraphPass(ForwardPass):
    """Wrap runs of bare lines in ``<p>``.

    Lines that start with a block-level tag (opening or closing) or with a
    block placeholder are left alone, as are blank lines, which end a run.
    """

    name = "paragraphs"

    def apply(self, text: str, ctx: ForwardContext) -> str:
        output: List[str] = []
        run: List[str] = []

        def flush():
            if run:
                output.append("<p>" + "\n".join(line.strip() for line in run) + "</p>")
                run.clear()

        for line in text.split("\n"):
            if not line.strip():
                flush()
            elif BLOCK_START_PATTERN.match(line) or ctx.vault.is_block(line):
                flush()
                output.append(line.strip())
            else:
                run.append(line)
        flush()
        return "\n".join(output)


class RestorePass(ForwardPass):
    """Put protected fragments back. A leftover token raises PlaceholderError."""

    name = "restore"

    def apply(self, text: str, ctx: ForwardContext) -> str:
        return ctx.vault.restore_all(text)


class RootContainerPass(ForwardPass):
    name = "root_container"

    def apply(self, text: str, ctx: ForwardContext) -> str:
        return f'<div class="{escape_html(ctx.config.root_class)}">{text.strip()}</div>'
