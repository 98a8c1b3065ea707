"""Reverse passes for lists, definition lists and tables, delegating to the block reconstructor."""

import logging

from recordmark.converter.blocks import (
    definition_list_to_markup,
    list_to_markup,
    outermost_elements,
    table_to_markup,
)
from recordmark.converter.reverse.base import ReverseContext, ReversePass, block

logger = logging.getLogger(__name__)


def _replace_spans(text: str, spans, render) -> str:
    for start, end, _ in reversed(spans):
        text = text[:start] + block(render(text[start:end])) + text[end:]
    return text


class _ListPass(ReversePass):
    root = "ul"

    def apply(self, text: str, ctx: ReverseContext) -> str:
        # Nesting is tracked across both list types so a nested list is
        # handled together with the list that contains it
        spans = [span for span in outermost_elements(text, ('ol', 'ul')) if span[2] == self.root]
        if spans:
            logger.debug(f"Rebuilding {len(spans)} <{self.root}> lists")
        return _replace_spans(text, spans, list_to_markup)


class DefinitionListPass(ReversePass):
    name = "definition_lists"

    def apply(self, text: str, ctx: ReverseContext) -> str:
        return _replace_spans(text, outermost_elements(text, 'dl'), definition_list_to_markup)


class OrderedListPass(_ListPass):
    name = "ordered_lists"
    root = "ol"


class UnorderedListPass(_ListPass):
    name = "unordered_lists"
    root = "ul"


class TablePass(ReversePass):
    name = "tables"

    def apply(self, text: str, ctx: ReverseContext) -> str:
        return _replace_spans(text, outermost_elements(text, 'table'), table_to_markup)
