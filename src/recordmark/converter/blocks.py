"""Multi-line block handling for lists and tables, in both directions.

Lists and tables span several lines, so they cannot be handled by a single
substitution. The forward helpers take already-grouped lines and render
HTML; the reverse helpers take one balanced HTML element and rebuild the
markup lines with BeautifulSoup.
"""

import logging
import re
from dataclasses import dataclass
from functools import lru_cache
from typing import List, Optional, Sequence, Tuple, Union

from bs4 import BeautifulSoup

logger = logging.getLogger(__name__)

PARSER = "lxml"

LIST_LINE_PATTERN = re.compile(r'^([ \t]*)([-*+]|\d+[.)])[ \t]+(.*)$')
TASK_PATTERN = re.compile(r'^\[([ xX])\][ \t]+(.*)$')
TABLE_LINE_PATTERN = re.compile(r'^[ \t]*\|.*\|[ \t]*$')
SEPARATOR_CELL_PATTERN = re.compile(r'^\s*(:?)-{3,}(:?)\s*$')

_ALIGN_STYLE = re.compile(r'text-align\s*:\s*(left|center|right)', re.IGNORECASE)
_WHITESPACE_RUN = re.compile(r'\s+')
_PIPE = re.compile(r'(?<!\\)\|')


@dataclass
class ListItem:
    """One line of a markup list.

    Attributes:
        indent: Width of the leading whitespace (tabs count as four)
        ordered: True for ``1.`` / ``1)`` markers
        text: Item content after the marker
        done: None for ordinary items, True/False for task items
    """
    indent: int
    ordered: bool
    text: str
    done: Optional[bool] = None


def parse_list_line(line: str) -> Optional[ListItem]:
    """Parse a list line, returning None if the line is not a list item."""
    match = LIST_LINE_PATTERN.match(line)
    if not match:
        return None
    indent = len(match.group(1).replace('\t', '    '))
    ordered = match.group(2)[0].isdigit()
    text = match.group(3)
    done = None
    task = TASK_PATTERN.match(text)
    if task and not ordered:
        done = task.group(1) != ' '
        text = task.group(2)
    return ListItem(indent, ordered, text, done)


def render_list_block(items: Sequence[ListItem]) -> str:
    """Render a group of list items as one or more (nested) lists.

    Deeper indentation opens a nested list inside the previous item. A change
    between ordered and unordered markers at the same depth starts a new list.
    """
    rendered = []
    index = 0
    while index < len(items):
        html, index = _build_list(items, index)
        rendered.append(html)
    return "\n".join(rendered)


def _build_list(items: Sequence[ListItem], start: int) -> Tuple[str, int]:
    first = items[start]
    tag = "ol" if first.ordered else "ul"
    entries: List[str] = []
    index = start
    while index < len(items):
        item = items[index]
        if item.indent < first.indent:
            break
        if item.indent == first.indent and item.ordered != first.ordered:
            break
        if item.indent > first.indent:
            nested, index = _build_list(items, index)
            entries[-1] += nested
            continue
        entries.append(_open_item(item))
        index += 1

    css = ' class="task-list"' if any(
        item.done is not None for item in items[start:index] if item.indent == first.indent
    ) else ''
    body = "".join(f"{entry}</li>" for entry in entries)
    return f"<{tag}{css}>{body}</{tag}>", index


def _open_item(item: ListItem) -> str:
    if item.done is None:
        return f"<li>{item.text}"
    checked = " checked" if item.done else ""
    return (
        f'<li class="task-list-item">'
        f'<input type="checkbox" disabled{checked}> {item.text}'
    )


def split_table_row(line: str) -> List[str]:
    """Split a pipe-delimited row into stripped cell texts."""
    row = line.strip()
    if row.startswith('|'):
        row = row[1:]
    if row.endswith('|'):
        row = row[:-1]
    return [cell.strip() for cell in row.split('|')]


def parse_alignments(line: str) -> Optional[List[Optional[str]]]:
    """Parse a separator row, returning None if the line is not one."""
    alignments: List[Optional[str]] = []
    for cell in split_table_row(line):
        match = SEPARATOR_CELL_PATTERN.match(cell)
        if not match:
            return None
        left, right = match.group(1), match.group(2)
        if left and right:
            alignments.append("center")
        elif right:
            alignments.append("right")
        elif left:
            alignments.append("left")
        else:
            alignments.append(None)
    return alignments


def render_table_block(lines: Sequence[str]) -> Tuple[str, List[int]]:
    """Render a group of pipe-delimited lines as a table.

    The first line is the header row. A separator row directly beneath it is
    optional and only contributes column alignment. Rows whose cell count
    differs from the header are kept exactly as written.

    Args:
        lines: Two or more table lines

    Returns:
        Tuple of (table HTML, indexes into lines of ragged rows)
    """
    header = split_table_row(lines[0])
    body_lines = list(enumerate(lines))[1:]
    alignments: List[Optional[str]] = []
    if body_lines:
        parsed = parse_alignments(body_lines[0][1])
        if parsed is not None:
            alignments = parsed
            body_lines = body_lines[1:]

    ragged = []
    rows = []
    for index, line in body_lines:
        cells = split_table_row(line)
        if len(cells) != len(header):
            ragged.append(index)
        rows.append("<tr>" + "".join(
            _cell("td", text, alignments, column) for column, text in enumerate(cells)
        ) + "</tr>")

    head = "<tr>" + "".join(
        _cell("th", text, alignments, column) for column, text in enumerate(header)
    ) + "</tr>"
    html = f"<table><thead>{head}</thead><tbody>{''.join(rows)}</tbody></table>"
    return html, ragged


def _cell(tag: str, text: str, alignments: List[Optional[str]], column: int) -> str:
    align = alignments[column] if column < len(alignments) else None
    style = f' style="text-align: {align}"' if align else ''
    return f"<{tag}{style}>{text}</{tag}>"


def outermost_elements(html: str, tags: Union[str, Sequence[str]]) -> List[Tuple[int, int, str]]:
    """Find balanced top-level elements of the given tag names.

    Nesting is tracked across all the given names together, so a ``<ul>``
    nested in an ``<ol>`` belongs to the ``<ol>``. Unbalanced trailing
    elements are ignored.

    Returns:
        List of (start, end, tag name) spans in document order
    """
    names = [tags] if isinstance(tags, str) else list(tags)
    pattern = re.compile(
        r'<(/?)(' + '|'.join(re.escape(name) for name in names) + r')\b[^>]*>',
        re.IGNORECASE
    )
    spans = []
    depth = 0
    start = 0
    root = ""
    for match in pattern.finditer(html):
        closing = match.group(1) == '/'
        if not closing:
            if depth == 0:
                start = match.start()
                root = match.group(2).lower()
            depth += 1
        elif depth > 0:
            depth -= 1
            if depth == 0:
                spans.append((start, match.end(), root))
    return spans


def replace_elements(html: str, tag: str, opening: re.Pattern, render) -> str:
    """Replace balanced elements whose opening tag matches a pattern.

    Matches are processed from last to first, so nested matches are rendered
    before the elements that contain them.

    Args:
        html: HTML text
        tag: Element name used for balancing
        opening: Pattern matched against opening tags of that element
        render: Callable (opening match, inner html) -> replacement text

    Returns:
        Text with every matched, balanced element replaced
    """
    tag_pattern = re.compile(rf'<(/?){re.escape(tag)}\b[^>]*>', re.IGNORECASE)
    starts = list(opening.finditer(html))
    for start in reversed(starts):
        depth = 0
        for match in tag_pattern.finditer(html, start.start()):
            depth += -1 if match.group(1) else 1
            if depth == 0:
                inner = html[start.end():match.start()]
                html = html[:start.start()] + render(start, inner) + html[match.end():]
                break
    return html


def list_to_markup(fragment: str) -> str:
    """Rebuild markup lines from one ``<ul>`` or ``<ol>`` element."""
    soup = BeautifulSoup(fragment, PARSER)
    root = soup.find(['ul', 'ol'])
    if root is None:
        return fragment
    return "\n".join(_list_lines(root, 0))


def _list_lines(element, depth: int) -> List[str]:
    lines = []
    ordered = element.name == 'ol'
    for number, item in enumerate(element.find_all('li', recursive=False), start=1):
        nested = [child.extract() for child in item.find_all(['ul', 'ol'], recursive=False)]

        prefix = ""
        checkbox = item.find('input', attrs={'type': 'checkbox'})
        if checkbox is not None:
            prefix = "[x] " if checkbox.has_attr('checked') else "[ ] "
            checkbox.decompose()

        for paragraph in item.find_all('p'):
            paragraph.unwrap()
        for line_break in item.find_all('br'):
            line_break.replace_with(' ')

        text = _collapse(item.decode_contents())
        marker = f"{number}." if ordered else "-"
        lines.append(f"{'  ' * depth}{marker} {prefix}{text}".rstrip())
        for child in nested:
            lines.extend(_list_lines(child, depth + 1))
    return lines


def table_to_markup(fragment: str) -> str:
    """Rebuild a pipe-delimited table from one ``<table>`` element.

    The first row becomes the header row and is followed by a separator row
    carrying its column alignment. Rows keep their own cell count.
    """
    soup = BeautifulSoup(fragment, PARSER)
    table = soup.find('table')
    if table is None:
        return fragment
    rows = table.find_all('tr')
    if not rows:
        return ""

    grid = []
    alignments: List[Optional[str]] = []
    for row_index, row in enumerate(rows):
        cells = row.find_all(['th', 'td'], recursive=False)
        grid.append([_PIPE.sub(r'\\|', _collapse(cell.decode_contents())) for cell in cells])
        if row_index == 0:
            alignments = [_alignment_of(cell) for cell in cells]

    separator = []
    for align in alignments:
        if align == "center":
            separator.append(":---:")
        elif align == "right":
            separator.append("---:")
        elif align == "left":
            separator.append(":---")
        else:
            separator.append("---")

    lines = [_table_row(grid[0]), _table_row(separator)]
    lines.extend(_table_row(cells) for cells in grid[1:])
    logger.debug(f"Rebuilt table with {len(grid)} rows")
    return "\n".join(lines)


def _alignment_of(cell) -> Optional[str]:
    align = cell.get('align')
    if align and align.lower() in ('left', 'center', 'right'):
        return align.lower()
    match = _ALIGN_STYLE.search(cell.get('style', ''))
    return match.group(1).lower() if match else None


def _table_row(cells: Sequence[str]) -> str:
    return "| " + " | ".join(cells) + " |"


def _collapse(text: str) -> str:
    return _WHITESPACE_RUN.sub(' ', text).strip()


@lru_cache(maxsize=512)
def decode_entity(reference: str) -> str:
    """Character(s) for one HTML character reference such as ``&copy;``.

    Unknown references come back unchanged.
    """
    return BeautifulSoup(reference, PARSER).get_text() or reference


def definition_list_to_markup(fragment: str) -> str:
    """Rebuild ``term`` / ``: definition`` lines from one ``<dl>`` element."""
    soup = BeautifulSoup(fragment, PARSER)
    root = soup.find('dl')
    if root is None:
        return fragment
    lines = []
    for child in root.find_all(['dt', 'dd']):
        text = _collapse(child.decode_contents())
        lines.append(text if child.name == 'dt' else f": {text}")
    return "\n".join(lines)
