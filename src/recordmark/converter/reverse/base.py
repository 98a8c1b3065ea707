"""Shared state, base class and helpers for reverse conversion passes.

Reverse passes work on HTML text in its escaped form; entities are only
turned back into characters by the final restore pass.
"""

import re
from dataclasses import dataclass, field
from typing import Dict

from recordmark.config.models import ConverterConfig
from recordmark.converter.placeholder_vault import TOKEN_CLOSE, TOKEN_OPEN, PlaceholderVault
from recordmark.converter.references import ReferenceResolver

ATTRIBUTE_PATTERN = re.compile(r'([\w:-]+)\s*=\s*(?:"([^"]*)"|\'([^\']*)\'|([^\s"\'>]+))')

# Mark footnote and citation definition lines until the references pass rewrites them
FOOTNOTE_MARK = TOKEN_OPEN + "fn:"
FOOTNOTE_MARK_PATTERN = re.compile("^" + re.escape(FOOTNOTE_MARK) + "([^" + TOKEN_CLOSE + "]+)" + TOKEN_CLOSE + " ?", re.MULTILINE)
SOURCE_MARK = TOKEN_OPEN + "src:"
SOURCE_MARK_PATTERN = re.compile("^" + re.escape(SOURCE_MARK) + "([^" + TOKEN_CLOSE + "]+)" + TOKEN_CLOSE + " ?", re.MULTILINE)


@dataclass
class ReverseContext:
    """Call-local state for one reverse conversion.

    Attributes:
        config: Converter options
        vault: Holds rebuilt code and math so later passes leave them alone
        resolver: Footnote definitions recovered from the references section
        citations: Citation definitions recovered from the citations section
    """
    config: ConverterConfig
    vault: PlaceholderVault = field(default_factory=PlaceholderVault)
    resolver: ReferenceResolver = field(default_factory=ReferenceResolver)
    citations: ReferenceResolver = field(default_factory=lambda: ReferenceResolver("source"))


class ReversePass:
    """One named step of the reverse pipeline."""

    name = "pass"

    def apply(self, text: str, ctx: ReverseContext) -> str:
        raise NotImplementedError

    def __repr__(self) -> str:
        return f"<{type(self).__name__} {self.name!r}>"


def parse_attributes(tag: str) -> Dict[str, str]:
    """Parse the attributes of an opening tag into a dict (lowercase names).

    Valueless attributes such as ``checked`` are not returned.
    """
    attrs = {}
    for match in ATTRIBUTE_PATTERN.finditer(tag):
        value = next((g for g in match.group(2, 3, 4) if g is not None), "")
        attrs[match.group(1).lower()] = value
    return attrs


def block(markup: str) -> str:
    """Surround markup with blank lines so it stands as its own block."""
    return f"\n\n{markup}\n\n"
