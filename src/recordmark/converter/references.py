"""Footnote and citation definitions, reference numbering and the references sections.

A ReferenceResolver moves through two states for every document. While
collecting, definitions are recorded in the order they first appear. Once
sealed, references are numbered by that definition order, regardless of
where in the body they occur.
"""

import logging
from enum import Enum
from typing import Dict, List, Optional, Tuple

from recordmark.errors import ConversionError

logger = logging.getLogger(__name__)


class ResolverState(Enum):
    """Lifecycle of a ReferenceResolver."""
    COLLECTING_DEFINITIONS = "collecting_definitions"
    NUMBERING_REFERENCES = "numbering_references"


class ReferenceResolver:
    """Pairs footnote definitions with references for one document.

    Footnotes and citations each get their own resolver; the anchor prefix
    keeps their ids apart (``cite_ref-x`` for footnotes, ``source_ref-x``
    for citations).

    Example:
        >>> resolver = ReferenceResolver()
        >>> resolver.define("b", "Second")
        True
        >>> resolver.define("a", "First")
        True
        >>> resolver.seal()
        >>> resolver.number_for("a")
        2
    """

    def __init__(self, anchor: str = "cite"):
        self.anchor = anchor
        self._definitions: Dict[str, str] = {}
        self._citations: Dict[str, int] = {}
        self._state = ResolverState.COLLECTING_DEFINITIONS

    @property
    def state(self) -> ResolverState:
        return self._state

    def define(self, ref_id: str, text: str) -> bool:
        """Record a definition.

        Args:
            ref_id: Declared footnote id
            text: Definition body

        Returns:
            False if the id was already defined (the first definition wins)

        Raises:
            ConversionError: If references are already being numbered
        """
        if self._state is not ResolverState.COLLECTING_DEFINITIONS:
            raise ConversionError(
                f"Cannot define footnote {ref_id!r} after numbering has started",
                "footnotes"
            )
        if ref_id in self._definitions:
            return False
        self._definitions[ref_id] = text
        return True

    def seal(self) -> None:
        """Stop accepting definitions and start numbering references."""
        self._state = ResolverState.NUMBERING_REFERENCES
        logger.debug(f"Sealed {len(self._definitions)} footnote definitions")

    def number_for(self, ref_id: str) -> Optional[int]:
        """Return the 1-based citation number for ref_id, or None if undefined.

        Raises:
            ConversionError: If called before seal()
        """
        if self._state is not ResolverState.NUMBERING_REFERENCES:
            raise ConversionError(
                f"Cannot number reference {ref_id!r} while definitions are being collected",
                "footnotes"
            )
        for number, defined_id in enumerate(self._definitions, start=1):
            if defined_id == ref_id:
                return number
        return None

    def cite(self, ref_id: str) -> Optional[str]:
        """Render the citation marker for one reference occurrence.

        The first occurrence gets the anchor ``<prefix>_ref-<id>``; repeats get
        ``<prefix>_ref-<id>-2``, ``-3`` and so on so anchors stay unique.

        Returns:
            Marker HTML, or None if ref_id has no definition
        """
        number = self.number_for(ref_id)
        if number is None:
            return None
        count = self._citations.get(ref_id, 0) + 1
        self._citations[ref_id] = count
        anchor = f"{self.anchor}_ref-{ref_id}"
        if count > 1:
            anchor += f"-{count}"
        return (
            f'<sup class="reference" id="{anchor}">'
            f'<a href="#{self.anchor}_note-{ref_id}">[{number}]</a></sup>'
        )

    @property
    def definitions(self) -> List[Tuple[str, str]]:
        """Definitions as (id, text) pairs in definition order."""
        return list(self._definitions.items())

    def render_section(self, title: str, css_class: str = "reflist") -> str:
        """Render the references section, or an empty string if nothing is defined.

        Definition text is inserted as-is; callers pass already-rendered HTML.
        """
        if not self._definitions:
            return ""
        items = "".join(
            f'<li id="{self.anchor}_note-{ref_id}"><a href="#{self.anchor}_ref-{ref_id}" class="backref">&#8593;</a> {text}</li>'
            for ref_id, text in self._definitions.items()
        )
        return (
            f'<section class="{css_class}"><h2 class="reflist-heading">{title}</h2>'
            f'<ol>{items}</ol></section>'
        )
