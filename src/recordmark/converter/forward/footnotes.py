"""Footnotes and citations, and the references sections.

Definitions are collected in a first sub-pass and removed from the body.
Only then are the resolvers sealed and references numbered, so a reference
may appear before or after its definition.
"""

import logging
import re

from recordmark.converter.forward.base import ForwardContext, ForwardPass
from recordmark.converter.utils import escape_html
from recordmark.models.metadata import Citation, Footnote

logger = logging.getLogger(__name__)


class FootnotePass(ForwardPass):
    """Footnotes and citations.

    Footnotes are ``[^id]: text`` definitions with ``[^id]`` / ``[ref^id]``
    references. Citations are ``[@id]: text {type}`` definitions with
    ``[@id]`` references; the trailing ``{type}`` is optional and defaults
    to ``general``.
    """

    name = "footnotes"

    DEFINITION_PATTERN = re.compile(r'^\[\^([\w.-]+)\]:[ \t]*(.*)$', re.MULTILINE)
    REFERENCE_PATTERN = re.compile(r'\[(ref)?\^([\w.-]+)\]')
    CITATION_DEFINITION_PATTERN = re.compile(
        r'^\[@([\w.-]+)\]:[ \t]*(.*?)(?:[ \t]+\{(\w+)\})?[ \t]*$',
        re.MULTILINE
    )
    CITATION_PATTERN = re.compile(r'\[@([\w.-]+)\]')

    def apply(self, text: str, ctx: ForwardContext) -> str:
        seen = {}
        text = self.DEFINITION_PATTERN.sub(lambda m: self._define(m, seen, ctx), text)
        text = self.CITATION_DEFINITION_PATTERN.sub(lambda m: self._define_citation(m, seen, ctx), text)
        ctx.resolver.seal()
        ctx.citations.seal()
        text = self.REFERENCE_PATTERN.sub(lambda m: self._reference(m, ctx), text)
        text = self.CITATION_PATTERN.sub(lambda m: self._citation(m, ctx), text)
        logger.debug(
            f"Resolved {len(ctx.metadata.footnotes)} footnotes and {len(ctx.metadata.citations)} citations"
        )
        return text

    def _define(self, match, seen, ctx: ForwardContext) -> str:
        ref_id, body = match.group(1), match.group(2).strip()
        needle = f"[^{ref_id}]:"
        seen[needle] = seen.get(needle, 0) + 1
        if ctx.resolver.define(ref_id, body):
            ctx.metadata.footnotes.append(Footnote(ref_id, ctx.plain(body)))
        else:
            ctx.warn(f"Duplicate footnote definition {ref_id!r} ignored", line=self._definition_line(needle, seen[needle], ctx))
        return ""

    def _define_citation(self, match, seen, ctx: ForwardContext) -> str:
        ref_id, body = match.group(1), match.group(2).strip()
        kind = match.group(3) or "general"
        needle = f"[@{ref_id}]:"
        seen[needle] = seen.get(needle, 0) + 1
        rendered = f'{body} <em class="citation-type">({kind})</em>'
        if ctx.citations.define(ref_id, rendered):
            ctx.metadata.citations.append(Citation(ref_id, ctx.plain(body), kind))
        else:
            ctx.warn(f"Duplicate citation definition {ref_id!r} ignored", line=self._definition_line(needle, seen[needle], ctx))
        return ""

    def _reference(self, match, ctx: ForwardContext) -> str:
        marker = ctx.resolver.cite(match.group(2))
        if marker is None:
            ctx.warn(f"Undefined footnote reference {match.group(2)!r}; left as text", needle=match.group(0))
            return match.group(0)
        return marker

    def _citation(self, match, ctx: ForwardContext) -> str:
        marker = ctx.citations.cite(match.group(1))
        if marker is None:
            ctx.warn(f"Undefined citation {match.group(1)!r}; left as text", needle=match.group(0))
            return match.group(0)
        return marker

    @staticmethod
    def _definition_line(needle: str, occurrence: int, ctx: ForwardContext) -> int:
        lines = [number for number, line in enumerate(ctx.source.split("\n"), start=1) if line.startswith(needle)]
        return lines[occurrence - 1] if len(lines) >= occurrence else 0


class ReferencesSectionPass(ForwardPass):
    """Append the footnote list, then the citation list, when either has entries."""

    name = "references_section"

    def apply(self, text: str, ctx: ForwardContext) -> str:
        sections = [
            ctx.resolver.render_section(escape_html(ctx.config.references_title)),
            ctx.citations.render_section(escape_html(ctx.config.citations_title), "reflist citations"),
        ]
        sections = [section for section in sections if section]
        if not sections:
            return text
        return f"{text.rstrip()}\n" + "\n".join(sections)
