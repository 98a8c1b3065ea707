"""Placeholder vault for fragments that later passes must not touch.

Finalised HTML (code, math, templates, escaped literals) is swapped for an
opaque token as soon as it is produced, so emphasis, link and paragraph
rules never see its contents. Tokens are built from two private-use
characters that are stripped from every input, so they cannot occur in
user text.
"""

import logging
import re
from dataclasses import dataclass
from typing import Dict, List

from recordmark.errors import PlaceholderError

logger = logging.getLogger(__name__)

TOKEN_OPEN = "\ue000"
TOKEN_CLOSE = "\ue001"

TOKEN_PATTERN = re.compile("\ue000ph[bi]\\d+\ue001")
BLOCK_TOKEN_PATTERN = re.compile("^\ue000phb\\d+\ue001")
_RESERVED_CHARS = re.compile("[\ue000\ue001]")


def strip_reserved(text: str) -> str:
    """Remove the token delimiter characters from user input."""
    return _RESERVED_CHARS.sub('', text)


@dataclass
class ProtectedFragment:
    """A fragment held by the vault.

    Attributes:
        token: Placeholder token standing in for the fragment
        html: Final HTML substituted back on restore
        source: Markup the fragment was produced from (for metadata)
        block: True if the fragment is block-level HTML
    """
    token: str
    html: str
    source: str
    block: bool = False


class PlaceholderVault:
    """Call-scoped registry of protected fragments.

    A vault is created for one conversion and discarded afterwards; the
    counter is therefore unique within the call, which is all the token
    grammar needs.
    """

    def __init__(self):
        self._fragments: Dict[str, ProtectedFragment] = {}
        self._counter = 0

    def __len__(self) -> int:
        return len(self._fragments)

    def protect(self, fragment: str, source: str = "", block: bool = False) -> str:
        """Store a fragment and return the token that replaces it.

        Args:
            fragment: Finalised HTML
            source: Original markup text, returned by reveal()
            block: Whether the fragment is a block element

        Returns:
            Placeholder token
        """
        kind = "b" if block else "i"
        token = f"{TOKEN_OPEN}ph{kind}{self._counter}{TOKEN_CLOSE}"
        self._counter += 1
        self._fragments[token] = ProtectedFragment(token, fragment, source, block)
        return token

    def restore_all(self, text: str) -> str:
        """Substitute every token with its HTML.

        Fragments may themselves contain tokens (a template parameter holding
        inline code, for instance), so substitution repeats until the text is
        stable.

        Raises:
            PlaceholderError: If a token is still present afterwards
        """
        text = self._substitute(text, lambda fragment: fragment.html)
        leftover = TOKEN_PATTERN.search(text)
        if leftover:
            raise PlaceholderError(leftover.group(0))
        logger.debug(f"Restored {len(self._fragments)} protected fragments")
        return text

    def reveal(self, text: str) -> str:
        """Replace tokens with the markup they were produced from."""
        return self._substitute(text, lambda fragment: fragment.source)

    def is_block(self, text: str) -> bool:
        """True if text (ignoring leading whitespace) starts with a block token."""
        return bool(BLOCK_TOKEN_PATTERN.match(text.lstrip()))

    def unresolved(self, text: str) -> List[str]:
        return TOKEN_PATTERN.findall(text)

    def _substitute(self, text: str, pick) -> str:
        def replace(match):
            fragment = self._fragments.get(match.group(0))
            return pick(fragment) if fragment else match.group(0)

        # Nesting depth is bounded by the number of fragments
        for _ in range(len(self._fragments) + 1):
            updated = TOKEN_PATTERN.sub(replace, text)
            if updated == text:
                break
            text = updated
        return text
