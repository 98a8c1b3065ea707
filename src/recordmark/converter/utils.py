"""Text-safety primitives shared by both conversion directions.

Pure functions with no state: HTML escaping, anchor slugs, URL checks and a
handful of small text helpers used for metadata and diagnostics.
"""

import math
import re
from typing import Iterable
from urllib.parse import urlsplit

_ESCAPE_MAP = {
    '&': '&amp;',
    '<': '&lt;',
    '>': '&gt;',
    '"': '&quot;',
    "'": '&#39;',
    '`': '&#96;',
}
_UNESCAPE_MAP = {entity: char for char, entity in _ESCAPE_MAP.items()}

_ESCAPE_PATTERN = re.compile(r'[&<>"\'`]')
_UNESCAPE_PATTERN = re.compile(r'&(?:amp|lt|gt|quot|#39|#96);')

_NON_SLUG_CHARS = re.compile(r'[^\w\s-]')
_WHITESPACE_RUN = re.compile(r'\s+')
_DASH_RUN = re.compile(r'-{2,}')

_URL_SHAPE = re.compile(r'^([A-Za-z][A-Za-z0-9+.-]*)://([^\s/?#]+)(\S*)$')
_TAG = re.compile(r'<[^>]+>')

DEFAULT_URL_SCHEMES = ("http", "https", "ftp", "ftps")


def escape_html(text: str) -> str:
    """Escape the characters that are unsafe in HTML text and attributes.

    Maps ``& < > " ' ``` to their entity forms. Apply exactly once per
    user-supplied value; escaping an escaped value produces visible
    entities in the rendered page.

    Args:
        text: Raw user text

    Returns:
        Escaped text safe for text nodes and double-quoted attributes
    """
    return _ESCAPE_PATTERN.sub(lambda m: _ESCAPE_MAP[m.group(0)], text)


def unescape_html(text: str) -> str:
    """Exact inverse of escape_html over the same six characters.

    Args:
        text: Escaped text

    Returns:
        Text with the six entity forms turned back into characters
    """
    return _UNESCAPE_PATTERN.sub(lambda m: _UNESCAPE_MAP[m.group(0)], text)


def slug(text: str) -> str:
    """Generate an anchor id from heading text.

    Lowercases, removes characters outside the identifier alphabet
    (word characters, whitespace and hyphens), turns whitespace runs into a
    single hyphen and trims hyphens from both ends.

    Args:
        text: Heading text

    Returns:
        Slug (may be empty when the text has no identifier characters)

    Example:
        >>> slug("Hello World")
        'hello-world'
    """
    text = _NON_SLUG_CHARS.sub('', text.lower())
    text = _WHITESPACE_RUN.sub('-', text.strip())
    text = _DASH_RUN.sub('-', text)
    return text.strip('-')


def is_valid_url(url: str, schemes: Iterable[str] = DEFAULT_URL_SCHEMES) -> bool:
    """Check a value against a strict scheme://authority grammar.

    Args:
        url: Candidate URL
        schemes: Accepted schemes (lowercase)

    Returns:
        True if the URL has an accepted scheme and a non-empty host
    """
    match = _URL_SHAPE.match(url or '')
    if not match:
        return False
    if match.group(1).lower() not in set(schemes):
        return False
    try:
        return bool(urlsplit(url).hostname)
    except ValueError:
        return False


def strip_tags(html: str) -> str:
    """Remove tags from an HTML fragment, keeping text and entities."""
    return _TAG.sub('', html)


def count_words(text: str) -> int:
    return len(text.split())


def reading_time(word_count: int, words_per_minute: int = 200) -> int:
    """Estimated reading time in whole minutes (rounded up)."""
    if word_count <= 0:
        return 0
    return math.ceil(word_count / words_per_minute)


def line_of(source: str, needle: str) -> int:
    """Return the 1-based line of the first occurrence of needle, or 0."""
    index = source.find(needle) if needle else -1
    if index < 0:
        return 0
    return source.count('\n', 0, index) + 1
