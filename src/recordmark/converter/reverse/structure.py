"""Reverse passes for the document shell, citations, headings, emphasis and quotes."""

import logging
import re
from typing import Optional

from recordmark.converter.blocks import decode_entity, outermost_elements, replace_elements
from recordmark.converter.placeholder_vault import TOKEN_CLOSE, strip_reserved
from recordmark.converter.reverse.base import (
    FOOTNOTE_MARK,
    SOURCE_MARK,
    ReverseContext,
    ReversePass,
    block,
    parse_attributes,
)
from recordmark.converter.utils import escape_html, slug, strip_tags, unescape_html

logger = logging.getLogger(__name__)


class UnwrapContainerPass(ReversePass):
    """Normalise line endings and entities, then drop the root container."""

    name = "unwrap"

    ENTITY_ALIASES = (
        ('&nbsp;', ' '),
        ('&#160;', ' '),
        ('&apos;', '&#39;'),
        ('&#x27;', '&#39;'),
        ('&#34;', '&quot;'),
    )
    ENTITY_PATTERN = re.compile(
        r'&(?!(?:amp|lt|gt|quot|#39|#96);)(?:#\d+|#[xX][0-9a-fA-F]+|[A-Za-z][A-Za-z0-9]*);'
    )
    LINE_BREAK_PATTERN = re.compile(r'<br\s*/?>', re.IGNORECASE)

    def apply(self, text: str, ctx: ReverseContext) -> str:
        text = text.replace("\r\n", "\n").replace("\r", "\n")
        for entity, replacement in self.ENTITY_ALIASES:
            text = text.replace(entity, replacement)
        text = strip_reserved(self.ENTITY_PATTERN.sub(self._decode, text))
        text = self.LINE_BREAK_PATTERN.sub('<br>', text).strip()

        spans = outermost_elements(text, 'div')
        if len(spans) == 1 and spans[0][0] == 0 and spans[0][1] == len(text):
            opening = text[:text.index('>') + 1]
            classes = parse_attributes(opening).get('class', '').split()
            if ctx.config.root_class in classes:
                text = text[len(opening):-len('</div>')]
        return text

    @staticmethod
    def _decode(match) -> str:
        char = decode_entity(match.group(0))
        return match.group(0) if char == match.group(0) else escape_html(char)


_INLINE_TAGS = frozenset((
    'a', 'abbr', 'b', 'code', 'del', 'em', 'i', 'img', 'kbd', 'mark', 's',
    'small', 'span', 'strike', 'strong', 'sub', 'sup', 'u',
))
_LITERAL_TAGS = frozenset(('pre', 'code', 'script', 'style'))
_LITERAL_CLASSES = frozenset(('math-inline', 'math-display', 'diagram', 'code-block', 'template'))
_TAG_SPLIT = re.compile(r'(<[^>]*>)')
_TAG_NAME = re.compile(r'<(/?)([A-Za-z][\w-]*)')
_LINE_END = re.compile(r'\n[ \t]*$')


class TextEscapePass(ReversePass):
    """Backslash-escape text that would otherwise read back as markup.

    Runs on text nodes only, before any markup is produced. Code, math,
    diagrams and templates are left alone. Block markers (``#``, ``>``,
    ``-``, ``1.`` and the like) are escaped only where a line starts: at
    the start of the document, after a newline, or after any tag that is
    not an inline one.
    """

    name = "escape_text"

    ANYWHERE_PATTERN = re.compile(
        r'\\|\*|\[|\||`|&#96;|\{|~(?=~)|=(?==)|%(?=%)|&lt;(?=!--|[A-Za-z][\w+.-]*://)'
    )
    LINE_START_PATTERN = re.compile(
        r'^([ \t]*)(?:(#|&gt;|[-+_:])|(\d+)(?=[.)](?:[ \t]|$)))',
        re.MULTILINE
    )

    def apply(self, text: str, ctx: ReverseContext) -> str:
        parts = _TAG_SPLIT.split(text)
        line_start = True
        literal_tag = None
        depth = 0
        for index, part in enumerate(parts):
            if index % 2:
                match = _TAG_NAME.match(part)
                if match is None:
                    line_start = True
                    continue
                closing, tag = match.group(1) == '/', match.group(2).lower()
                if literal_tag is not None:
                    if tag == literal_tag:
                        depth += -1 if closing else 1
                        if depth == 0:
                            literal_tag = None
                elif not closing and self._is_literal(tag, part):
                    literal_tag, depth = tag, 1
                if tag not in _INLINE_TAGS:
                    line_start = True
                continue

            if not part:
                continue
            if literal_tag is None:
                parts[index] = self._escape(part, line_start, ctx)
            if part.strip(" \t"):
                line_start = bool(_LINE_END.search(part))
        return "".join(parts)

    @staticmethod
    def _is_literal(tag: str, opening: str) -> bool:
        if tag in _LITERAL_TAGS:
            return True
        attrs = parse_attributes(opening)
        return 'data-template' in attrs or bool(_LITERAL_CLASSES.intersection(attrs.get('class', '').split()))

    def _escape(self, text: str, line_start: bool, ctx: ReverseContext) -> str:
        text = self.ANYWHERE_PATTERN.sub(lambda m: '\\' + m.group(0), text)
        if ctx.config.math:
            text = text.replace('$', '\\$')

        def mark(match):
            if match.start() == 0 and not line_start:
                return match.group(0)
            if match.group(2):
                return f"{match.group(1)}\\{match.group(2)}"
            return f"{match.group(1)}{match.group(3)}\\"

        return self.LINE_START_PATTERN.sub(mark, text)


class CitationPass(ReversePass):
    """Reference markers become ``[^id]`` or ``[@id]``; the reference lists become marker lines.

    Definitions are registered with the resolvers here, before the heading and
    list passes could misread a section's ``<h2>`` and ``<ol>``. Footnote
    anchors use the ``cite`` prefix, citation anchors the ``source`` prefix.
    """

    name = "citations"

    SECTION_PATTERN = re.compile(
        r'<(section|div)\b[^>]*class="[^"]*\breflist\b[^"]*"[^>]*>(.*?)</\1>',
        re.DOTALL | re.IGNORECASE
    )
    ITEM_PATTERN = re.compile(r'<li\b[^>]*\bid="(cite|source)_note-([^"]+)"[^>]*>(.*?)</li>', re.DOTALL | re.IGNORECASE)
    BACKREF_PATTERN = re.compile(r'<a\b[^>]*href="#(?:cite|source)_ref-[^"]*"[^>]*>.*?</a>', re.DOTALL | re.IGNORECASE)
    TYPE_PATTERN = re.compile(r'\s*<em\b[^>]*class="citation-type"[^>]*>\((\w+)\)</em>\s*$', re.IGNORECASE)
    MARKER_PATTERN = re.compile(
        r'<sup\b[^>]*class="[^"]*\breference\b[^"]*"[^>]*>\s*'
        r'<a\b[^>]*href="#(cite|source)_note-([^"]+)"[^>]*>.*?</a>\s*</sup>',
        re.DOTALL | re.IGNORECASE
    )

    def apply(self, text: str, ctx: ReverseContext) -> str:
        text = self.SECTION_PATTERN.sub(lambda m: self._section(m.group(2), ctx), text)
        return self.MARKER_PATTERN.sub(
            lambda m: f"[{'@' if m.group(1).lower() == 'source' else '^'}{m.group(2)}]",
            text
        )

    def _section(self, inner: str, ctx: ReverseContext) -> str:
        lines = []
        for item in self.ITEM_PATTERN.finditer(inner):
            ref_id = item.group(2)
            body = self.BACKREF_PATTERN.sub('', item.group(3)).strip()
            if item.group(1).lower() == 'source':
                line = self._citation_line(ref_id, body, ctx)
            elif ctx.resolver.define(ref_id, body):
                line = f"{FOOTNOTE_MARK}{ref_id}{TOKEN_CLOSE} {body}"
            else:
                line = None
            if line:
                lines.append(line)
        logger.debug(f"Recovered {len(lines)} reference definitions")
        return block("\n".join(lines)) if lines else ""

    def _citation_line(self, ref_id: str, body: str, ctx: ReverseContext) -> Optional[str]:
        kind = "general"
        match = self.TYPE_PATTERN.search(body)
        if match:
            kind = match.group(1)
            body = body[:match.start()]
        if not ctx.citations.define(ref_id, body):
            return None
        suffix = f" {{{kind}}}" if kind != "general" else ""
        return f"{SOURCE_MARK}{ref_id}{TOKEN_CLOSE} {body}{suffix}"


class HeadingPass(ReversePass):
    """``<h6>`` down to ``<h1>``; a non-derived id is kept as ``{#id}``."""

    name = "headings"

    CUSTOM_ID_PATTERN = re.compile(r'^[A-Za-z][\w-]*$')

    def apply(self, text: str, ctx: ReverseContext) -> str:
        for level in range(6, 0, -1):
            pattern = re.compile(rf'<h{level}\b([^>]*)>(.*?)</h{level}>', re.DOTALL | re.IGNORECASE)
            text = pattern.sub(lambda m, level=level: self._heading(level, m), text)
        return text

    def _heading(self, level: int, match) -> str:
        content = re.sub(r'\s+', ' ', match.group(2)).strip()
        anchor = parse_attributes(match.group(1)).get('id', '')
        suffix = ''
        if anchor and self.CUSTOM_ID_PATTERN.match(anchor):
            derived = slug(unescape_html(strip_tags(content))) or "section"
            if not re.fullmatch(re.escape(derived) + r'(?:-\d+)?', anchor):
                suffix = f" {{#{anchor}}}"
        return block(f"{'#' * level} {content}{suffix}")


_EMPHASIS_TAGS = r'(?:strong|b|em|i|del|s|strike|mark)'
_BODY = rf'(?P<body>(?:(?!</?{_EMPHASIS_TAGS}\b).)*?)'


class EmphasisPass(ReversePass):
    """Emphasis tags, innermost first.

    Each rule only matches elements with no emphasis tag inside, and the
    rules repeat until nothing changes, so nesting unwinds from the inside.
    """

    name = "emphasis"

    RULES = (
        (re.compile(rf'<strong\b[^>]*>\s*<em\b[^>]*>{_BODY}</em>\s*</strong>', re.DOTALL | re.IGNORECASE), r'***\g<body>***'),
        (re.compile(rf'<em\b[^>]*>\s*<strong\b[^>]*>{_BODY}</strong>\s*</em>', re.DOTALL | re.IGNORECASE), r'***\g<body>***'),
        (re.compile(rf'<(strong|b)\b[^>]*>{_BODY}</\1>', re.DOTALL | re.IGNORECASE), r'**\g<body>**'),
        (re.compile(rf'<(em|i)\b[^>]*>{_BODY}</\1>', re.DOTALL | re.IGNORECASE), r'*\g<body>*'),
        (re.compile(rf'<(del|s|strike)\b[^>]*>{_BODY}</\1>', re.DOTALL | re.IGNORECASE), r'~~\g<body>~~'),
        (re.compile(rf'<mark\b[^>]*>{_BODY}</mark>', re.DOTALL | re.IGNORECASE), r'==\g<body>=='),
    )

    def apply(self, text: str, ctx: ReverseContext) -> str:
        while True:
            updated = text
            for pattern, replacement in self.RULES:
                updated = pattern.sub(replacement, updated)
            if updated == text:
                return text
            text = updated


class QuotePass(ReversePass):
    """Block quotes become ``> `` lines; callouts become ``:::type`` fences."""

    name = "quotes"

    BLOCKQUOTE_OPEN = re.compile(r'<blockquote\b[^>]*>', re.IGNORECASE)
    CALLOUT_OPEN = re.compile(r'<div\b[^>]*class="callout callout-(info|warning|error|success)"[^>]*>', re.IGNORECASE)
    LINE_SPLIT = re.compile(r'<br>|</p>\s*<p\b[^>]*>|\n', re.IGNORECASE)
    PARAGRAPH_TAG = re.compile(r'</?p\b[^>]*>', re.IGNORECASE)

    def apply(self, text: str, ctx: ReverseContext) -> str:
        text = replace_elements(text, 'blockquote', self.BLOCKQUOTE_OPEN, self._quote)
        return replace_elements(
            text,
            'div',
            self.CALLOUT_OPEN,
            lambda opening, inner: block(f":::{opening.group(1)}\n{inner.strip()}\n:::")
        )

    def _quote(self, opening, inner: str) -> str:
        lines = [self.PARAGRAPH_TAG.sub('', line).strip() for line in self.LINE_SPLIT.split(inner.strip())]
        while lines and not lines[-1]:
            lines.pop()
        return block("\n".join(f"> {line}".rstrip() for line in lines))
