"""Conversion result data model."""

from dataclasses import asdict, dataclass, field
from enum import Enum
from typing import Any, Dict, List

from recordmark.models.metadata import Metadata


class Severity(str, Enum):
    """Severity of a conversion diagnostic."""
    ERROR = "error"
    WARNING = "warning"


@dataclass
class Diagnostic:
    """A warning or error attached to a conversion result.

    Attributes:
        line: 1-based source line the diagnostic refers to (0 when unknown)
        message: Human readable description
        severity: Severity.ERROR or Severity.WARNING
    """
    line: int
    message: str
    severity: Severity = Severity.WARNING


@dataclass
class ConversionResult:
    """Result of markup to HTML conversion.

    Contains the rendered HTML along with the metadata discovered while
    converting and any diagnostics raised along the way. Forward conversion
    never raises, so errors are always reported here.

    Attributes:
        html: Rendered HTML, always wrapped in the root container element
        metadata: Headings, links, media, footnotes and templates found
        errors: Warnings and errors, in the order they were raised
        toc: Table of contents HTML (empty unless requested in the config)
    """
    html: str
    metadata: Metadata = field(default_factory=Metadata)
    errors: List[Diagnostic] = field(default_factory=list)
    toc: str = ""

    @property
    def warnings(self) -> List[Diagnostic]:
        return [d for d in self.errors if d.severity == Severity.WARNING]

    @property
    def has_errors(self) -> bool:
        return any(d.severity == Severity.ERROR for d in self.errors)

    def to_dict(self) -> Dict[str, Any]:
        """Return a JSON-serialisable representation of the result."""
        return {
            "html": self.html,
            "metadata": asdict(self.metadata),
            "errors": [
                {"line": d.line, "message": d.message, "severity": d.severity.value}
                for d in self.errors
            ],
            "toc": self.toc,
        }
