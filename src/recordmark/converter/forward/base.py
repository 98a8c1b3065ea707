"""Shared state and base class for forward conversion passes."""

import logging
from dataclasses import dataclass, field
from typing import List, Set

from recordmark.config.models import ConverterConfig
from recordmark.converter.placeholder_vault import PlaceholderVault
from recordmark.converter.references import ReferenceResolver
from recordmark.converter.utils import line_of, strip_tags, unescape_html
from recordmark.models.conversion_result import Diagnostic, Severity
from recordmark.models.metadata import Metadata

logger = logging.getLogger(__name__)


@dataclass
class ForwardContext:
    """Call-local state threaded through every forward pass.

    Attributes:
        source: Original markup (after reserved-character stripping)
        config: Converter options
        vault: Placeholder vault for protected fragments
        metadata: Metadata accumulator returned to the caller
        diagnostics: Warnings and errors raised so far
        resolver: Footnote resolver for this document
        citations: Citation resolver for this document
        anchor_ids: Heading ids already assigned
    """
    source: str
    config: ConverterConfig
    vault: PlaceholderVault = field(default_factory=PlaceholderVault)
    metadata: Metadata = field(default_factory=Metadata)
    diagnostics: List[Diagnostic] = field(default_factory=list)
    resolver: ReferenceResolver = field(default_factory=ReferenceResolver)
    citations: ReferenceResolver = field(default_factory=lambda: ReferenceResolver("source"))
    anchor_ids: Set[str] = field(default_factory=set)

    def warn(self, message: str, needle: str = "", line: int = 0) -> None:
        """Record a warning, locating it in the source by needle when given."""
        if not line and needle:
            line = line_of(self.source, needle)
        self.diagnostics.append(Diagnostic(line, message, Severity.WARNING))
        logger.debug(f"Warning at line {line}: {message}")

    def plain(self, fragment: str) -> str:
        """Plain source-level text of an escaped, partly rendered fragment."""
        return self.vault.reveal(unescape_html(strip_tags(fragment)))

    def source_text(self, fragment: str) -> str:
        """Markup as written for an escaped fragment (tags are kept)."""
        return self.vault.reveal(unescape_html(fragment))


class ForwardPass:
    """One named step of the forward pipeline.

    Subclasses set ``name`` and implement ``apply``, which receives the
    current text and returns the rewritten text.
    """

    name = "pass"

    def apply(self, text: str, ctx: ForwardContext) -> str:
        raise NotImplementedError

    def __repr__(self) -> str:
        return f"<{type(self).__name__} {self.name!r}>"
