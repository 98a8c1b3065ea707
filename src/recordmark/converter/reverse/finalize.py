"""Late reverse passes: templates, footnote definitions, rules, paragraphs and cleanup."""

import logging
import re

from recordmark.converter.blocks import replace_elements
from recordmark.converter.reverse.base import (
    FOOTNOTE_MARK_PATTERN,
    SOURCE_MARK_PATTERN,
    ReverseContext,
    ReversePass,
    block,
    parse_attributes,
)
from recordmark.converter.utils import unescape_html

logger = logging.getLogger(__name__)


class TemplatePass(ReversePass):
    """Template elements become ``{% name key=value %}`` again."""

    name = "templates"

    PARAM_PATTERN = re.compile(
        r'<span\b[^>]*\bdata-key="([^"]*)"[^>]*>(.*?)</span>',
        re.DOTALL | re.IGNORECASE
    )

    def apply(self, text: str, ctx: ReverseContext) -> str:
        for tag in ('div', 'span'):
            opening = re.compile(rf'<{tag}\b[^>]*\bdata-template="[^"]*"[^>]*>', re.IGNORECASE)
            text = replace_elements(text, tag, opening, lambda m, inner, tag=tag: self._template(m, inner, tag))
        return text

    def _template(self, opening, inner: str, tag: str) -> str:
        name = parse_attributes(opening.group(0)).get('data-template', '')
        parts = [name]
        for param in self.PARAM_PATTERN.finditer(inner):
            key = param.group(1)
            value = self._strip_label(key, param.group(2))
            parts.append(f"{key}={self._quote(value)}")
        invocation = "{% " + " ".join(parts) + " %}"
        return block(invocation) if tag == 'div' else invocation

    @staticmethod
    def _strip_label(key: str, value: str) -> str:
        # The label is already markup by now: <strong>key:</strong> became **key:**
        for label in (f"**{key}:**", f"<strong>{key}:</strong>"):
            stripped = value.strip()
            if stripped.startswith(label):
                return stripped[len(label):].strip()
        return value.strip()

    @staticmethod
    def _quote(value: str) -> str:
        if value and not re.search(r'\s', value):
            return value
        if '&quot;' in value:
            return f"'{value}'"
        return f'"{value}"'


class ReferencesSectionPass(ReversePass):
    """Marker lines left by the citation pass become ``[^id]: text`` or ``[@id]: text``."""

    name = "references_section"

    def apply(self, text: str, ctx: ReverseContext) -> str:
        ctx.resolver.seal()
        ctx.citations.seal()
        text = FOOTNOTE_MARK_PATTERN.sub(lambda m: f"[^{m.group(1)}]: ", text)
        return SOURCE_MARK_PATTERN.sub(lambda m: f"[@{m.group(1)}]: ", text)


class RulePass(ReversePass):
    name = "rules"

    RULE_PATTERN = re.compile(r'<hr\b[^>]*/?>', re.IGNORECASE)

    def apply(self, text: str, ctx: ReverseContext) -> str:
        return self.RULE_PATTERN.sub(lambda m: block("---"), text)


class ParagraphPass(ReversePass):
    """``<p>`` and attribute-less ``<div>`` become paragraphs; ``<br>`` a newline."""

    name = "paragraphs"

    PARAGRAPH_PATTERN = re.compile(r'<p\b[^>]*>(.*?)</p>', re.DOTALL | re.IGNORECASE)
    PLAIN_DIV_PATTERN = re.compile(r'<div>((?:(?!<div\b).)*?)</div>', re.DOTALL | re.IGNORECASE)
    LINE_BREAK_PATTERN = re.compile(r'[ \t]*<br>[ \t]*', re.IGNORECASE)

    def apply(self, text: str, ctx: ReverseContext) -> str:
        text = self.PARAGRAPH_PATTERN.sub(lambda m: block(m.group(1).strip()), text)
        while True:
            updated = self.PLAIN_DIV_PATTERN.sub(lambda m: block(m.group(1).strip()), text)
            if updated == text:
                break
            text = updated
        return self.LINE_BREAK_PATTERN.sub('\n', text)


class WhitespacePass(ReversePass):
    """Trim line ends, collapse runs of blank lines to one and trim the document."""

    name = "whitespace"

    TRAILING_SPACE = re.compile(r'[ \t]+$', re.MULTILINE)
    BLANK_RUN = re.compile(r'\n{3,}')

    def apply(self, text: str, ctx: ReverseContext) -> str:
        text = self.TRAILING_SPACE.sub('', text)
        return self.BLANK_RUN.sub('\n\n', text).strip()


class RestorePass(ReversePass):
    """Release vaulted code and math, then turn entities back into characters."""

    name = "restore"

    def apply(self, text: str, ctx: ReverseContext) -> str:
        return unescape_html(ctx.vault.restore_all(text))
