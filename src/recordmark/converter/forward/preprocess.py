"""Passes that run on raw markup: front matter, comments and templates."""

import logging
import re
from typing import Dict

import yaml

from recordmark.converter.forward.base import ForwardContext, ForwardPass
from recordmark.converter.forward.code import map_outside_code
from recordmark.converter.utils import escape_html
from recordmark.models.metadata import TemplateInvocation

logger = logging.getLogger(__name__)

MAX_YAML_DEPTH = 10


class FrontMatterPass(ForwardPass):
    """Parse a leading YAML block delimited by ``---`` lines."""

    name = "front_matter"

    FRONT_MATTER_PATTERN = re.compile(r'^---[ \t]*\n(.*?)\n---[ \t]*(?:\n|$)', re.DOTALL)

    def apply(self, text: str, ctx: ForwardContext) -> str:
        if not ctx.config.front_matter:
            return text
        match = self.FRONT_MATTER_PATTERN.match(text)
        if not match:
            return text

        try:
            data = yaml.safe_load(match.group(1))
        except yaml.YAMLError as e:
            ctx.warn(f"Invalid front matter, left as text: {e}", line=1)
            return text

        # Plain prose between two rules is not front matter
        if not isinstance(data, dict):
            return text
        if _depth(data) > MAX_YAML_DEPTH:
            ctx.warn(f"Front matter nested deeper than {MAX_YAML_DEPTH} levels, left as text", line=1)
            return text

        ctx.metadata.front_matter = data
        logger.debug(f"Parsed front matter with {len(data)} keys")
        # Keep line numbers stable for later diagnostics
        return "\n" * match.group(0).count("\n") + text[match.end():]


def _depth(obj, current: int = 0) -> int:
    if isinstance(obj, dict):
        return max((_depth(value, current + 1) for value in obj.values()), default=current)
    if isinstance(obj, list):
        return max((_depth(item, current + 1) for item in obj), default=current)
    return current


class CommentPass(ForwardPass):
    """Remove ``<!-- -->`` and single-line ``%% %%`` comments outside code."""

    name = "comments"

    def apply(self, text: str, ctx: ForwardContext) -> str:
        return map_outside_code(text, strip_comments)


def strip_comments(text: str) -> str:
    """Remove comments with a forward scan over the text.

    An opener preceded by a backslash is literal. A ``<!--`` without a later
    ``-->`` is left as text, as is a ``%%`` with no partner on its line.
    """
    parts = []
    position = 0
    html_open = _find_opener(text, "<!--", 0)
    line_open = _find_opener(text, "%%", 0)
    while html_open >= 0 or line_open >= 0:
        if html_open >= 0 and (line_open < 0 or html_open < line_open):
            start = html_open
            end = text.find("-->", start + 4)
            if end < 0:
                # No closer anywhere later, so no later opener can close either
                html_open = -1
                continue
            end += 3
        else:
            start = line_open
            line_end = text.find("\n", start)
            end = text.find("%%", start + 2, len(text) if line_end < 0 else line_end)
            if end < 0:
                line_open = _find_opener(text, "%%", start + 2)
                continue
            end += 2

        parts.append(text[position:start])
        position = end
        if 0 <= html_open < position:
            html_open = _find_opener(text, "<!--", position)
        if 0 <= line_open < position:
            line_open = _find_opener(text, "%%", position)

    parts.append(text[position:])
    return "".join(parts)


def _find_opener(text: str, opener: str, start: int) -> int:
    index = text.find(opener, start)
    while index > 0 and text[index - 1] == "\\":
        index = text.find(opener, index + 1)
    return index


class TemplatePass(ForwardPass):
    """Expand ``{% name key=value %}`` invocations outside code.

    Invocations are recorded in metadata and replaced by a vaulted element
    listing their parameters: a block ``<div>`` when the invocation sits on
    its own line, otherwise an inline ``<span>``.
    """

    name = "templates"

    TEMPLATE_PATTERN = re.compile(r'(?<!\\)\{%[ \t]*([A-Za-z_][\w.-]*)((?:[ \t]+[^%\n]*?)?)[ \t]*%\}')
    PARAM_PATTERN = re.compile(r'([^\s=]+)=(?:"([^"]*)"|\'([^\']*)\'|(\S+))')
    KEY_PATTERN = re.compile(r'^[A-Za-z_][A-Za-z0-9_-]*$')

    def apply(self, text: str, ctx: ForwardContext) -> str:
        return map_outside_code(
            text,
            lambda part: self.TEMPLATE_PATTERN.sub(lambda m: self._expand(m, part, ctx), part)
        )

    def _expand(self, match, part: str, ctx: ForwardContext) -> str:
        name = match.group(1)
        params = self._parse_params(match.group(2), match.group(0), ctx)
        ctx.metadata.templates.append(TemplateInvocation(name, params))

        at_line_start = match.start() == 0 or part[match.start() - 1] == "\n"
        at_line_end = match.end() == len(part) or part[match.end()] == "\n"
        block = at_line_start and at_line_end
        tag = "div" if block else "span"

        rendered = "".join(
            f'<span class="template-param" data-key="{key}">'
            f'<strong>{key}:</strong> {escape_html(value)}</span>'
            for key, value in params.items()
        )
        html = f'<{tag} class="template" data-template="{escape_html(name)}">{rendered}</{tag}>'
        return ctx.vault.protect(html, match.group(0), block=block)

    def _parse_params(self, raw: str, invocation: str, ctx: ForwardContext) -> Dict[str, str]:
        params: Dict[str, str] = {}
        for param in self.PARAM_PATTERN.finditer(raw):
            key = param.group(1)
            value = next((g for g in param.group(2, 3, 4) if g is not None), "")
            if not self.KEY_PATTERN.match(key):
                ctx.warn(f"Invalid template parameter name {key!r} dropped", needle=invocation)
                continue
            params[key] = value
        return params
