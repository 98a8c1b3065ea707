"""Data models for metadata discovered during forward conversion.

All models use dataclasses for clean, type-safe data structures. A fresh
Metadata instance is created for every conversion call and handed to the
caller for indexing and table-of-contents generation.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List


@dataclass
class Heading:
    """A heading found in the document.

    Attributes:
        level: Heading level, 1..6
        text: Heading text as written in the markup
        id: Anchor id, unique within the document
    """
    level: int
    text: str
    id: str


@dataclass
class Image:
    """An image reference.

    Attributes:
        src: Image source as written
        alt: Alternative text (plain text, formatting removed)
        title: Optional caption
    """
    src: str
    alt: str
    title: str = ""


@dataclass
class Footnote:
    """A footnote definition ([^id]: text).

    Attributes:
        id: Declared footnote id
        text: Plain text of the definition
    """
    id: str
    text: str


@dataclass
class Citation:
    """A citation definition ([@id]: text {type}).

    Attributes:
        id: Declared citation id
        text: Plain text of the source description
        type: Source kind from the trailing {type}, "general" when absent
    """
    id: str
    text: str
    type: str = "general"


@dataclass
class TemplateInvocation:
    """A template invocation ({% name key=value %}).

    Parameter keys are validated identifiers; invalid pairs never reach
    this record.

    Attributes:
        name: Template name
        params: Mapping of parameter name to raw value
    """
    name: str
    params: Dict[str, str] = field(default_factory=dict)


@dataclass
class CodeBlock:
    """A fenced code block."""
    lang: str
    code: str
    filename: str = ""


@dataclass
class Task:
    """A task list item (- [ ] text / - [x] text)."""
    done: bool
    text: str


@dataclass
class Definition:
    """A definition list entry (term, then a line starting with ": ")."""
    term: str
    definition: str


@dataclass
class Metadata:
    """Facts collected by the forward pipeline.

    Attributes:
        headings: Headings in document order
        links: Raw link targets (URLs and internal page names), duplicates kept
        images: Images in document order
        videos: Video sources
        footnotes: Footnote definitions in order of first definition
        citations: Citation definitions in order of first definition
        templates: Template invocations
        front_matter: Parsed YAML front matter
        audio: Audio sources
        embeds: Embedded video ids (YouTube)
        code_blocks: Fenced code blocks
        math: Display math expressions
        tasks: Task list items
        definitions: Definition list entries
        word_count: Number of words in the source
        reading_time: Estimated reading time in minutes
    """
    headings: List[Heading] = field(default_factory=list)
    links: List[str] = field(default_factory=list)
    images: List[Image] = field(default_factory=list)
    videos: List[str] = field(default_factory=list)
    footnotes: List[Footnote] = field(default_factory=list)
    citations: List[Citation] = field(default_factory=list)
    templates: List[TemplateInvocation] = field(default_factory=list)
    front_matter: Dict[str, Any] = field(default_factory=dict)
    audio: List[str] = field(default_factory=list)
    embeds: List[str] = field(default_factory=list)
    code_blocks: List[CodeBlock] = field(default_factory=list)
    math: List[str] = field(default_factory=list)
    tasks: List[Task] = field(default_factory=list)
    definitions: List[Definition] = field(default_factory=list)
    word_count: int = 0
    reading_time: int = 0
