"""Reverse pass for code blocks, diagrams, math and inline code.

Rebuilt fences and spans are put in the vault right away so the paragraph
and whitespace passes cannot alter their contents.
"""

import re

from recordmark.converter.blocks import replace_elements
from recordmark.converter.reverse.base import ReverseContext, ReversePass, block, parse_attributes
from recordmark.converter.utils import strip_tags

_LANGUAGE_CLASS = re.compile(r'(?:^|\s)(?:language|lang)-([\w+#.-]+)')


def _fence(lang: str, code: str, filename: str = "") -> str:
    code = code.replace('&#96;', '`')
    info = lang + (f" file:{filename}" if filename else "")
    longest = max((len(run) for run in re.findall(r'`+', code)), default=0)
    ticks = "`" * max(3, longest + 1)
    return f"{ticks}{info}\n{code}\n{ticks}"


def _language(*tags: str) -> str:
    for tag in tags:
        match = _LANGUAGE_CLASS.search(parse_attributes(tag).get('class', ''))
        if match:
            return match.group(1)
    return ""


class CodePass(ReversePass):
    """Code blocks (with file headers), ``<pre>``, diagrams, math and ``<code>``."""

    name = "code"

    CODE_BLOCK_OPEN = re.compile(r'<div\b[^>]*class="code-block"[^>]*>', re.IGNORECASE)
    HEADER_PATTERN = re.compile(r'<div\b[^>]*class="code-header"[^>]*>(.*?)</div>', re.DOTALL | re.IGNORECASE)
    PRE_PATTERN = re.compile(r'<pre\b([^>]*)>\s*(?:<code\b([^>]*)>(.*?)</code>|(.*?))\s*</pre>', re.DOTALL | re.IGNORECASE)
    DIAGRAM_PATTERN = re.compile(r'<div\b[^>]*class="diagram mermaid"[^>]*>(.*?)</div>', re.DOTALL | re.IGNORECASE)
    DISPLAY_MATH_PATTERN = re.compile(r'<div\b[^>]*class="math-display"[^>]*>(.*?)</div>', re.DOTALL | re.IGNORECASE)
    INLINE_MATH_PATTERN = re.compile(r'<span\b[^>]*class="math-inline"[^>]*>(.*?)</span>', re.DOTALL | re.IGNORECASE)
    INLINE_CODE_PATTERN = re.compile(r'<code\b[^>]*>(.*?)</code>', re.DOTALL | re.IGNORECASE)

    def apply(self, text: str, ctx: ReverseContext) -> str:
        text = replace_elements(text, 'div', self.CODE_BLOCK_OPEN, lambda opening, inner: self._code_block(inner, ctx))
        text = self.PRE_PATTERN.sub(lambda m: self._pre(m, "", ctx), text)
        text = self.DIAGRAM_PATTERN.sub(
            lambda m: self._protect_block(_fence("mermaid", strip_tags(m.group(1)).strip("\n")), ctx),
            text
        )
        text = self.DISPLAY_MATH_PATTERN.sub(
            lambda m: self._protect_block(f"$${strip_tags(m.group(1)).strip()}$$", ctx),
            text
        )
        text = self.INLINE_MATH_PATTERN.sub(
            lambda m: ctx.vault.protect(f"${strip_tags(m.group(1)).strip()}$"),
            text
        )
        return self.INLINE_CODE_PATTERN.sub(lambda m: ctx.vault.protect(self._inline(strip_tags(m.group(1)))), text)

    def _code_block(self, inner: str, ctx: ReverseContext) -> str:
        header = self.HEADER_PATTERN.search(inner)
        filename = strip_tags(header.group(1)).strip() if header else ""
        pre = self.PRE_PATTERN.search(inner)
        if pre is None:
            return self._protect_block(_fence("", strip_tags(inner).strip("\n"), filename), ctx)
        return self._pre(pre, filename, ctx)

    def _pre(self, match, filename: str, ctx: ReverseContext) -> str:
        code = match.group(3) if match.group(3) is not None else match.group(4)
        lang = _language(match.group(1), match.group(2) or "")
        return self._protect_block(_fence(lang, strip_tags(code).strip("\n"), filename), ctx)

    @staticmethod
    def _inline(code: str) -> str:
        code = code.replace('&#96;', '`')
        longest = max((len(run) for run in re.findall(r'`+', code)), default=0)
        ticks = "`" * (longest + 1)
        if code.startswith('`') or code.endswith('`'):
            code = f" {code} "
        return f"{ticks}{code}{ticks}"

    @staticmethod
    def _protect_block(markup: str, ctx: ReverseContext) -> str:
        return block(ctx.vault.protect(markup, block=True))
