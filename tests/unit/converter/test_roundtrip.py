"""Round-trip tests: markup → HTML → markup → HTML."""

import pytest

from recordmark.converter import convert_html_to_markup, convert_markup_to_html
from tests.fixtures.sample_markup import (
    SAMPLE_MARKUP_FOOTNOTES,
    SAMPLE_MARKUP_SIMPLE,
    SAMPLE_MARKUP_TABLE,
)

GUIDE = """# Guide

Intro with **bold** and [a link](https://example.com).

> quoted

```python
x = 1 < 2
```

- one
- two

| A | B |
|---|---|
| 1 | 2 |

Fact[^f].

[^f]: Source.
"""

LITERAL = "Price is \\*not\\* bold.\n\n\\# Not a heading\n\n1\\. not a list\n\na \\| b and \\[c]"

CITED = (
    "Apple\n: A red fruit\n\n"
    "As shown[@smith] and noted[^n].\n\n"
    "[^n]: A note.\n\n"
    "[@smith]: Smith, History {book}"
)


class TestTableRoundTrip:
    """Test cases for pipe tables."""

    def test_three_by_three_table(self):
        """A 3x3 table comes back with the same cells in the same order."""
        html = convert_markup_to_html(SAMPLE_MARKUP_TABLE).html
        markup = convert_html_to_markup(html)

        assert markup == (
            "| Name | Value | Note |\n"
            "| --- | --- | --- |\n"
            "| Alpha | 1 | first |\n"
            "| Beta | 2 | second |"
        )

    def test_cells_survive_second_pass(self):
        """Converting the recovered table again gives the same HTML."""
        html = convert_markup_to_html(SAMPLE_MARKUP_TABLE).html
        again = convert_markup_to_html(convert_html_to_markup(html)).html

        assert again == html


class TestDocumentRoundTrip:
    """Test cases for whole documents."""

    @pytest.mark.parametrize("source", [
        SAMPLE_MARKUP_SIMPLE,
        SAMPLE_MARKUP_TABLE,
        SAMPLE_MARKUP_FOOTNOTES,
        GUIDE,
        LITERAL,
        CITED,
    ])
    def test_html_is_stable(self, source):
        """HTML from recovered markup equals the original HTML."""
        first = convert_markup_to_html(source)
        second = convert_markup_to_html(convert_html_to_markup(first.html))

        assert second.html == first.html
        assert second.metadata.headings == first.metadata.headings
        assert second.metadata.footnotes == first.metadata.footnotes

    def test_guide_markup(self):
        """The recovered markup reads like the original."""
        markup = convert_html_to_markup(convert_markup_to_html(GUIDE).html)

        assert markup == (
            "# Guide\n\n"
            "Intro with **bold** and [a link](https://example.com).\n\n"
            "> quoted\n\n"
            "```python\nx = 1 < 2\n```\n\n"
            "- one\n- two\n\n"
            "| A | B |\n| --- | --- |\n| 1 | 2 |\n\n"
            "Fact[^f].\n\n"
            "[^f]: Source."
        )

    def test_escaped_text_round_trips(self):
        """Backslash-escaped markup characters come back exactly."""
        assert convert_html_to_markup(convert_markup_to_html(LITERAL).html) == LITERAL

    def test_citations_and_definitions_survive(self):
        """Citations and definition lists are recovered with their metadata."""
        first = convert_markup_to_html(CITED)
        second = convert_markup_to_html(convert_html_to_markup(first.html))

        assert second.metadata.citations == first.metadata.citations
        assert second.metadata.definitions == first.metadata.definitions
