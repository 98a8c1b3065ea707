"""Line-level block passes: callouts, block quotes, headings and rules.

These run on escaped text, so ``>`` appears as ``&gt;``.
"""

import logging
import re

from recordmark.converter.forward.base import ForwardContext, ForwardPass
from recordmark.converter.utils import slug
from recordmark.models.metadata import Heading

logger = logging.getLogger(__name__)


class CalloutPass(ForwardPass):
    """``:::info`` ... ``:::`` fenced callouts.

    The opening and closing tags go on their own lines so the enclosed lines
    still receive list, table and paragraph handling.
    """

    name = "callouts"

    CALLOUT_PATTERN = re.compile(
        r'^:::(info|warning|error|success)[ \t]*\n(.*?)^:::[ \t]*$',
        re.MULTILINE | re.DOTALL
    )

    def apply(self, text: str, ctx: ForwardContext) -> str:
        def replace(match):
            body = match.group(2).rstrip("\n")
            return f'<div class="callout callout-{match.group(1)}">\n{body}\n</div>'

        return self.CALLOUT_PATTERN.sub(replace, text)


class BlockquotePass(ForwardPass):
    """Contiguous ``> `` lines become one blockquote, lines joined by ``<br>``."""

    name = "blockquotes"

    QUOTE_PATTERN = re.compile(r'^&gt;(?: (.*))?$')

    def apply(self, text: str, ctx: ForwardContext) -> str:
        output = []
        quoted = []
        for line in text.split("\n"):
            match = self.QUOTE_PATTERN.match(line)
            if match:
                quoted.append(match.group(1) or "")
                continue
            if quoted:
                output.append(f"<blockquote>{'<br>'.join(quoted)}</blockquote>")
                quoted = []
            output.append(line)
        if quoted:
            output.append(f"<blockquote>{'<br>'.join(quoted)}</blockquote>")
        return "\n".join(output)


class HeadingPass(ForwardPass):
    """ATX headings with optional ``{#custom-id}``.

    Ids are unique per document: the first heading with a given slug keeps
    it, later ones get ``-2``, ``-3`` and so on, skipping ids already taken.
    A heading whose text yields no slug characters is called ``section``.
    """

    name = "headings"

    HEADING_PATTERN = re.compile(
        r'^(#{1,6})[ \t]+(.+?)(?:[ \t]*\{#([A-Za-z][\w-]*)\})?[ \t]*$',
        re.MULTILINE
    )

    def apply(self, text: str, ctx: ForwardContext) -> str:
        def replace(match):
            level = len(match.group(1))
            content = match.group(2)
            plain = ctx.plain(content)
            anchor = self._allocate(match.group(3) or slug(plain) or "section", ctx)
            ctx.metadata.headings.append(Heading(level, plain, anchor))
            return f'<h{level} id="{anchor}">{content}</h{level}>'

        text = self.HEADING_PATTERN.sub(replace, text)
        logger.debug(f"Found {len(ctx.metadata.headings)} headings")
        return text

    @staticmethod
    def _allocate(base: str, ctx: ForwardContext) -> str:
        anchor = base
        suffix = 2
        while anchor in ctx.anchor_ids:
            anchor = f"{base}-{suffix}"
            suffix += 1
        ctx.anchor_ids.add(anchor)
        return anchor


class HorizontalRulePass(ForwardPass):
    """``---``, ``***`` or ``___`` (three or more, spaces allowed) on a line of their own."""

    name = "rules"

    RULE_PATTERN = re.compile(
        r'^[ \t]*(?:(?:-[ \t]*){3,}|(?:\*[ \t]*){3,}|(?:_[ \t]*){3,})$',
        re.MULTILINE
    )

    def apply(self, text: str, ctx: ForwardContext) -> str:
        return self.RULE_PATTERN.sub('<hr>', text)
