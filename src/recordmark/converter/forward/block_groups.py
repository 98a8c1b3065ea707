"""List and table passes, grouping contiguous lines into one block."""

import logging
import re
from typing import Callable, List, Tuple

from recordmark.converter.blocks import (
    TABLE_LINE_PATTERN,
    parse_list_line,
    render_list_block,
    render_table_block,
)
from recordmark.converter.forward.base import ForwardContext, ForwardPass
from recordmark.models.metadata import Definition, Task

logger = logging.getLogger(__name__)


def group_lines(text: str, belongs: Callable[[str], bool], render: Callable[[List[str]], str]) -> str:
    """Replace each run of consecutive lines accepted by belongs with render(run)."""
    output: List[str] = []
    run: List[str] = []
    for line in text.split("\n"):
        if belongs(line):
            run.append(line)
            continue
        if run:
            output.append(render(run))
            run = []
        output.append(line)
    if run:
        output.append(render(run))
    return "\n".join(output)


class ListPass(ForwardPass):
    """Unordered (``-``, ``*``, ``+``) and ordered (``1.``, ``1)``) lists."""

    name = "lists"

    def apply(self, text: str, ctx: ForwardContext) -> str:
        def render(lines: List[str]) -> str:
            items = [parse_list_line(line) for line in lines]
            for item in items:
                if item.done is not None:
                    ctx.metadata.tasks.append(Task(item.done, ctx.plain(item.text)))
            logger.debug(f"Rendering list of {len(items)} items")
            return render_list_block(items)

        return group_lines(text, lambda line: parse_list_line(line) is not None, render)


class TablePass(ForwardPass):
    """Pipe tables of two or more lines; the first line is the header."""

    name = "tables"

    def apply(self, text: str, ctx: ForwardContext) -> str:
        def render(lines: List[str]) -> str:
            if len(lines) < 2:
                return "\n".join(lines)
            html, ragged = render_table_block(lines)
            for index in ragged:
                ctx.warn(
                    "Table row cell count differs from the header; row kept as written",
                    needle=ctx.source_text(lines[index]).strip()
                )
            return html

        return group_lines(text, lambda line: bool(TABLE_LINE_PATTERN.match(line)), render)


class DefinitionListPass(ForwardPass):
    """A term line followed by one or more ``: definition`` lines.

    Consecutive entries share one ``<dl>``. The term must start with a word
    character and must not itself be a list item.
    """

    name = "definition_lists"

    TERM_PATTERN = re.compile(r'^\w')
    DEFINITION_PATTERN = re.compile(r'^:[ \t]+(.+)$')

    def apply(self, text: str, ctx: ForwardContext) -> str:
        lines = text.split("\n")
        output: List[str] = []
        entries: List[str] = []
        index = 0
        while index < len(lines):
            line = lines[index]
            definitions, cursor = self._definitions_after(lines, index)
            if definitions:
                term = line.strip()
                entries.append(f"<dt>{term}</dt>" + "".join(f"<dd>{body}</dd>" for body in definitions))
                for definition in definitions:
                    ctx.metadata.definitions.append(Definition(ctx.plain(term), ctx.plain(definition)))
                index = cursor
                continue
            if entries:
                output.append(f"<dl>{''.join(entries)}</dl>")
                entries = []
            output.append(line)
            index += 1
        if entries:
            output.append(f"<dl>{''.join(entries)}</dl>")
        return "\n".join(output)

    def _definitions_after(self, lines: List[str], index: int) -> Tuple[List[str], int]:
        if not self.TERM_PATTERN.match(lines[index]) or parse_list_line(lines[index]) is not None:
            return [], index
        definitions = []
        cursor = index + 1
        while cursor < len(lines):
            match = self.DEFINITION_PATTERN.match(lines[cursor])
            if not match:
                break
            definitions.append(match.group(1).strip())
            cursor += 1
        return definitions, cursor
