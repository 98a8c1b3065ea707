"""Code, math and literal extraction, followed by the escape pass.

Everything this module produces goes straight into the placeholder vault,
already escaped, so no later rule can reinterpret code or math contents.
After the escape pass the remaining text is HTML-safe and every later pass
matches on escaped text.
"""

import logging
import re
from typing import Callable

from recordmark.converter.forward.base import ForwardContext, ForwardPass
from recordmark.converter.utils import escape_html
from recordmark.models.metadata import CodeBlock

logger = logging.getLogger(__name__)

FENCE_PATTERN = re.compile(
    r'^[ \t]*(`{3,})[ \t]*([\w+#.-]*)(?:[ \t]+file:(\S+))?[^\n]*\n(.*?)^[ \t]*\1[ \t]*$',
    re.MULTILINE | re.DOTALL
)
OPEN_FENCE_PATTERN = re.compile(r'^[ \t]*`{3,}.*$', re.MULTILINE)
INLINE_CODE_PATTERN = re.compile(r'(?<!`)(`+)(?!`)([^\n]+?)(?<!`)\1(?!`)')
CODE_REGION_PATTERN = re.compile(
    FENCE_PATTERN.pattern + '|' + INLINE_CODE_PATTERN.pattern.replace('\\1', '\\5'),
    re.MULTILINE | re.DOTALL
)
DISPLAY_MATH_PATTERN = re.compile(r'\$\$(.+?)\$\$', re.DOTALL)
INLINE_MATH_PATTERN = re.compile(r'(?<![\\$\w])\$(?=\S)([^$\n]+?)(?<=\S)\$(?![\w$])')
ESCAPED_CHAR_PATTERN = re.compile(r'\\([\\`*_{}\[\]()#+\-.!|~=$<>"\'%:^@])')
DESTINATION = r'(?:[^()\s]|\([^()\s]*\))+'
TITLE = r'(?:(?!&quot;\)|\]\()[^\n])*'
LINK_DESTINATION_PATTERN = re.compile(r'\]\((' + DESTINATION + r')(?=\)|[ \t]+")')
AUTOLINK_BODY_PATTERN = re.compile(r'(?<!\\)<([A-Za-z][\w+.-]*://)([^\s<>]+)>')


def map_outside_code(text: str, transform: Callable[[str], str]) -> str:
    """Apply transform to every stretch of text that is not fenced or inline code."""
    parts = []
    position = 0
    for match in CODE_REGION_PATTERN.finditer(text):
        parts.append(transform(text[position:match.start()]))
        parts.append(match.group(0))
        position = match.end()
    parts.append(transform(text[position:]))
    return "".join(parts)


class CodePass(ForwardPass):
    """Vault fenced blocks, inline code, link destinations, math and backslash escapes.

    Link and image destinations (``](...)``) and autolink bodies are vaulted
    as literal text so emphasis and math never reach inside a URL.
    """

    name = "code"

    def apply(self, text: str, ctx: ForwardContext) -> str:
        text = FENCE_PATTERN.sub(lambda m: self._fence(m, ctx), text)

        for match in OPEN_FENCE_PATTERN.finditer(text):
            ctx.warn("Unterminated code fence; rendered as text", needle=match.group(0).strip())
            break

        text = INLINE_CODE_PATTERN.sub(lambda m: self._inline_code(m, ctx), text)
        text = AUTOLINK_BODY_PATTERN.sub(
            lambda m: f"<{m.group(1)}{ctx.vault.protect(escape_html(m.group(2)), m.group(2))}>",
            text
        )
        text = LINK_DESTINATION_PATTERN.sub(
            lambda m: f"]({ctx.vault.protect(escape_html(m.group(1)), m.group(1))}",
            text
        )
        if ctx.config.math:
            text = DISPLAY_MATH_PATTERN.sub(lambda m: self._display_math(m, ctx), text)
            text = INLINE_MATH_PATTERN.sub(lambda m: self._inline_math(m, ctx), text)
        text = ESCAPED_CHAR_PATTERN.sub(
            lambda m: ctx.vault.protect(escape_html(m.group(1)), m.group(1)),
            text
        )
        logger.debug(f"Protected {len(ctx.vault)} fragments")
        return text

    def _fence(self, match, ctx: ForwardContext) -> str:
        lang, filename, code = match.group(2), match.group(3) or "", match.group(4)
        if code.endswith("\n"):
            code = code[:-1]
        ctx.metadata.code_blocks.append(CodeBlock(lang, code, filename))

        if lang == "mermaid":
            html = f'<div class="diagram mermaid">{escape_html(code)}</div>'
        else:
            header = f'<div class="code-header">{escape_html(filename)}</div>' if filename else ''
            css = f' class="language-{escape_html(lang)}"' if lang else ''
            html = (
                f'<div class="code-block">{header}'
                f'<pre><code{css}>{escape_html(code)}</code></pre></div>'
            )
        return ctx.vault.protect(html, match.group(0), block=True)

    def _inline_code(self, match, ctx: ForwardContext) -> str:
        code = match.group(2)
        if len(code) > 2 and code.startswith(' ') and code.endswith(' ') and code.strip():
            code = code[1:-1]
        return ctx.vault.protect(f'<code>{escape_html(code)}</code>', match.group(0))

    def _display_math(self, match, ctx: ForwardContext) -> str:
        expression = match.group(1).strip()
        ctx.metadata.math.append(expression)
        return ctx.vault.protect(
            f'<div class="math-display">{escape_html(expression)}</div>',
            match.group(0),
            block=True
        )

    def _inline_math(self, match, ctx: ForwardContext) -> str:
        return ctx.vault.protect(
            f'<span class="math-inline">{escape_html(match.group(1))}</span>',
            match.group(0)
        )


class EscapePass(ForwardPass):
    """Escape all remaining user text exactly once."""

    name = "escape"

    def apply(self, text: str, ctx: ForwardContext) -> str:
        return escape_html(text)
