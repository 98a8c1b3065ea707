"""Unit tests for reverse conversion (HTML to markup)."""

from unittest.mock import patch

import pytest

from recordmark.config.models import ConverterConfig
from recordmark.converter import convert_markup_to_html
from recordmark.converter.reverse import REVERSE_PASSES, convert_html_to_markup
from recordmark.converter.reverse.structure import HeadingPass
from tests.fixtures.sample_markup import SAMPLE_MARKUP_KITCHEN_SINK


def _wrap(body: str) -> str:
    return f'<div class="recordmark-content">{body}</div>'


class TestPipelineShape:
    """Test cases for the ordered pass list."""

    def test_passes_are_named_and_unique(self):
        """Every pass has a distinct name."""
        names = [p.name for p in REVERSE_PASSES]
        assert len(names) == len(set(names))

    def test_citations_before_headings_and_lists(self):
        """The references section is claimed before its h2 and ol are rebuilt."""
        names = [p.name for p in REVERSE_PASSES]
        assert names.index("citations") < names.index("headings")
        assert names.index("citations") < names.index("ordered_lists")
        assert names[-1] == "restore"

    def test_text_escaped_before_markup_is_produced(self):
        """Text is escaped straight after unwrapping; definition lists go before other lists."""
        names = [p.name for p in REVERSE_PASSES]
        assert names.index("escape_text") == names.index("unwrap") + 1
        assert names.index("definition_lists") < names.index("ordered_lists")


class TestBasics:
    """Test cases for simple documents."""

    @pytest.mark.parametrize("html", [None, "", "   "])
    def test_empty(self, html):
        """Empty input gives empty markup."""
        assert convert_html_to_markup(html) == ""

    def test_heading_and_emphasis(self):
        """Headings and emphasis become markup."""
        html = _wrap('<h2 id="title">Title</h2>\n<p>Some <em>em</em> and <strong>bold</strong> text.</p>')

        assert convert_html_to_markup(html) == "## Title\n\nSome *em* and **bold** text."

    def test_without_root_container(self):
        """Fragments without the root container are accepted."""
        assert convert_html_to_markup("<p>Hello</p><p>World</p>") == "Hello\n\nWorld"

    def test_entities_become_characters(self):
        """Escaped text is turned back into characters."""
        assert convert_html_to_markup("<p>Tom &amp; Jerry &lt;3 &quot;hi&quot; &nbsp;</p>") == 'Tom & Jerry <3 "hi"'

    def test_unknown_elements_left_as_text(self):
        """Elements outside the vocabulary pass through."""
        assert convert_html_to_markup('<p><span class="x">hi</span></p>') == '<span class="x">hi</span>'

    def test_line_breaks(self):
        """<br> inside a paragraph becomes a newline."""
        assert convert_html_to_markup("<p>one<br/>two</p>") == "one\ntwo"

    def test_horizontal_rule(self):
        """<hr> becomes ---."""
        assert convert_html_to_markup("<p>a</p><hr><p>b</p>") == "a\n\n---\n\nb"


class TestHeadings:
    """Test cases for heading ids."""

    def test_derived_id_dropped(self):
        """Ids that match the text's slug are not written out."""
        assert convert_html_to_markup('<h1 id="hello-world">Hello World</h1>') == "# Hello World"

    def test_collision_suffix_dropped(self):
        """Suffixed collision ids are derived too."""
        assert convert_html_to_markup('<h3 id="intro-2">Intro</h3>') == "### Intro"

    def test_custom_id_kept(self):
        """Other ids are kept as {#id}."""
        assert convert_html_to_markup('<h2 id="install">Setup</h2>') == "## Setup {#install}"

    def test_all_levels(self):
        """h1 to h6 map to one to six hashes."""
        html = "".join(f"<h{level}>H{level}</h{level}>" for level in range(1, 7))
        lines = convert_html_to_markup(html).split("\n\n")

        assert lines == [f"{'#' * level} H{level}" for level in range(1, 7)]


class TestEmphasis:
    """Test cases for inline formatting."""

    @pytest.mark.parametrize("html,expected", [
        ("<b>x</b>", "**x**"),
        ("<i>x</i>", "*x*"),
        ("<strong><em>x</em></strong>", "***x***"),
        ("<del>x</del>", "~~x~~"),
        ("<s>x</s>", "~~x~~"),
        ("<mark>x</mark>", "==x=="),
        ("<strong>a <em>b</em> c</strong>", "**a *b* c**"),
    ])
    def test_forms(self, html, expected):
        """Each element maps to its delimiter."""
        assert convert_html_to_markup(f"<p>{html}</p>") == expected


class TestLinks:
    """Test cases for anchors."""

    def test_external(self):
        """External anchors become [text](url)."""
        html = '<a href="https://example.com" class="external" target="_blank" rel="noopener noreferrer">Docs</a>'
        assert convert_html_to_markup(html) == "[Docs](https://example.com)"

    def test_title(self):
        """Titles are kept."""
        assert convert_html_to_markup('<a href="https://e.com" title="T">x</a>') == '[x](https://e.com "T")'

    def test_autolink(self):
        """Anchors showing their own URL become <url>."""
        assert convert_html_to_markup('<p><a href="https://e.com">https://e.com</a></p>') == "<https://e.com>"

    def test_relative(self):
        """Relative links keep their href."""
        assert convert_html_to_markup('<a href="/page">Page</a>') == "[Page](/page)"

    def test_internal(self):
        """Internal anchors become wiki links."""
        html = '<a href="Main%20Page" class="internal" data-page="Main Page">home</a>'
        assert convert_html_to_markup(html) == "[[Main Page|home]]"

    def test_internal_same_label(self):
        """The label is dropped when it equals the page."""
        html = '<a href="Main%20Page" class="internal" data-page="Main Page">Main Page</a>'
        assert convert_html_to_markup(html) == "[[Main Page]]"

    def test_internal_from_href(self):
        """Without data-page the page comes from href minus the prefix."""
        config = ConverterConfig(internal_link_prefix="/wiki/")
        html = '<a href="/wiki/Main%20Page" class="internal">Main Page</a>'

        assert convert_html_to_markup(html, config) == "[[Main Page]]"


class TestMedia:
    """Test cases for images, players and embeds."""

    def test_image(self):
        """<img> becomes ![alt](src)."""
        assert convert_html_to_markup('<p><img src="a.png" alt="A"></p>') == "![A](a.png)"

    def test_figure(self):
        """Figures keep caption and size."""
        html = (
            '<figure><img src="logo.png" alt="Logo" width="120" height="40" title="The logo">'
            '<figcaption>The logo</figcaption></figure>'
        )
        assert convert_html_to_markup(html) == '![Logo](logo.png "The logo"){120x40}'

    def test_video_src(self):
        """A video element becomes @[video](src)."""
        assert convert_html_to_markup('<video src="clip.mp4" controls></video>') == "@[video](clip.mp4)"

    def test_audio_source_child(self):
        """The first <source> is used when the element has no src."""
        html = '<audio controls><source src="s.mp3" type="audio/mpeg"></audio>'
        assert convert_html_to_markup(html) == "@[audio](s.mp3)"

    def test_youtube(self):
        """YouTube iframes become @[youtube](id)."""
        html = (
            '<div class="video-embed"><iframe src="https://www.youtube.com/embed/dQw4w9WgXcQ" '
            'data-video-id="dQw4w9WgXcQ" allowfullscreen></iframe></div>'
        )
        assert convert_html_to_markup(html) == "@[youtube](dQw4w9WgXcQ)"


class TestCode:
    """Test cases for code and math."""

    def test_code_block_with_header(self):
        """Code blocks become fences with language and file name."""
        html = (
            '<div class="code-block"><div class="code-header">app.py</div>'
            '<pre><code class="language-python">print(&quot;hi&quot;)</code></pre></div>'
        )
        assert convert_html_to_markup(html) == '```python file:app.py\nprint("hi")\n```'

    def test_bare_pre(self):
        """A <pre> without code element is still a fence."""
        assert convert_html_to_markup("<pre>a &lt; b</pre>") == "```\na < b\n```"

    def test_code_contents_untouched(self):
        """Markup-like text in code is not rewritten."""
        html = "<pre><code>&lt;em&gt;x&lt;/em&gt;\n\n\n\ny</code></pre>"
        assert convert_html_to_markup(html) == "```\n<em>x</em>\n\n\n\ny\n```"

    def test_backticks_in_code(self):
        """Fences grow longer than any backtick run inside."""
        assert convert_html_to_markup("<pre><code>```</code></pre>") == "````\n```\n````"

    def test_inline_code(self):
        """<code> becomes backticks."""
        assert convert_html_to_markup("<p>Use <code>a*b</code></p>") == "Use `a*b`"

    def test_inline_code_with_backtick(self):
        """Inline code containing a backtick uses a longer delimiter."""
        assert convert_html_to_markup("<p><code>a`b</code></p>") == "``a`b``"

    def test_mermaid(self):
        """Diagrams become mermaid fences."""
        html = '<div class="diagram mermaid">graph TD;\nA--&gt;B</div>'
        assert convert_html_to_markup(html) == "```mermaid\ngraph TD;\nA-->B\n```"

    def test_math(self):
        """Inline and display math get their dollar delimiters back."""
        html = '<p>Inline <span class="math-inline">x^2</span></p><div class="math-display">E = mc^2</div>'
        assert convert_html_to_markup(html) == "Inline $x^2$\n\n$$E = mc^2$$"


class TestBlocks:
    """Test cases for quotes, callouts, lists and tables."""

    def test_blockquote(self):
        """Quote lines get > prefixes."""
        assert convert_html_to_markup("<blockquote>one<br>two</blockquote>") == "> one\n> two"

    def test_blockquote_paragraphs(self):
        """Paragraphs inside a quote become separate quoted lines."""
        assert convert_html_to_markup("<blockquote><p>one</p><p>two</p></blockquote>") == "> one\n> two"

    def test_callout(self):
        """Callouts become ::: fences."""
        html = '<div class="callout callout-info">\n<p>Heads up.</p>\n</div>'
        assert convert_html_to_markup(html) == ":::info\n\nHeads up.\n\n:::"

    def test_nested_list(self):
        """Mixed nested lists are indented under their parent."""
        html = "<ol><li>a<ul><li>b</li></ul></li><li>c</li></ol>"
        assert convert_html_to_markup(html) == "1. a\n  - b\n2. c"

    def test_task_list(self):
        """Checkbox items get [x] / [ ] prefixes."""
        html = (
            '<ul class="task-list"><li class="task-list-item"><input type="checkbox" disabled checked> done</li>'
            '<li class="task-list-item"><input type="checkbox" disabled> todo</li></ul>'
        )
        assert convert_html_to_markup(html) == "- [x] done\n- [ ] todo"

    def test_list_item_formatting(self):
        """Inline formatting inside items is converted."""
        assert convert_html_to_markup("<ul><li><strong>a</strong> &amp; b</li></ul>") == "- **a** & b"

    def test_table(self):
        """Tables become pipe tables."""
        html = (
            '<table><thead><tr><th style="text-align: left">A</th><th>B</th></tr></thead>'
            "<tbody><tr><td>1</td><td>2</td></tr></tbody></table>"
        )
        assert convert_html_to_markup(html) == "| A | B |\n| :--- | --- |\n| 1 | 2 |"

    def test_ragged_table_preserved(self):
        """Rows are not padded."""
        html = "<table><tr><th>A</th><th>B</th></tr><tr><td>1</td><td>2</td><td>3</td></tr></table>"
        assert convert_html_to_markup(html).split("\n")[2] == "| 1 | 2 | 3 |"


class TestFootnotes:
    """Test cases for citations and the references section."""

    def test_markers_and_definitions(self):
        """Citation markers and the references list become footnote markup."""
        html = convert_markup_to_html("[^n]: Note text\nSee [ref^n] here.").html

        assert convert_html_to_markup(html) == "See [^n] here.\n\n[^n]: Note text"

    def test_definition_order_kept(self):
        """Definitions are written in the order of the references list."""
        html = convert_markup_to_html("[^b]: Two\n[^a]: One\n\nx[^a] y[^b]").html
        markup = convert_html_to_markup(html)

        assert markup.index("[^b]: Two") < markup.index("[^a]: One")
        assert "x[^a] y[^b]" in markup

    def test_section_heading_not_a_heading(self):
        """The references heading is not turned into a markup heading."""
        html = convert_markup_to_html("[^a]: note\nx[^a]").html

        assert "References" not in convert_html_to_markup(html)


class TestLiteralText:
    """Test cases for text that looks like markup."""

    def test_emphasis_and_heading_markers_escaped(self):
        """Literal asterisks and a leading hash are backslash-escaped."""
        html = "<p>Price is *not* bold.</p><p># Not a heading</p>"

        assert convert_html_to_markup(html) == "Price is \\*not\\* bold.\n\n\\# Not a heading"

    def test_ordered_list_marker_escaped(self):
        """A paragraph starting with a number and a period is not a list."""
        assert convert_html_to_markup("<p>1. not a list</p>") == "1\\. not a list"

    def test_pipes_brackets_and_backslashes(self):
        """Pipes, opening brackets and backslashes are escaped anywhere."""
        assert convert_html_to_markup("<p>a | b [c] \\ d</p>") == "a \\| b \\[c] \\\\ d"

    def test_hyphen_after_inline_element_kept(self):
        """A hyphen that does not start a line stays as written."""
        assert convert_html_to_markup("<p><em>x</em>-y</p>") == "*x*-y"

    def test_code_left_alone(self):
        """Code contents are not escaped."""
        assert convert_html_to_markup("<p><code>a*b</code></p>") == "`a*b`"

    def test_named_entities_decoded(self):
        """Named and numeric entities become characters."""
        assert convert_html_to_markup("<p>&copy; 2024 &mdash; Acme &amp; Co</p>") == "© 2024 — Acme & Co"
        assert convert_html_to_markup("<p>a&#8212;b</p>") == "a—b"


class TestDefinitionLists:
    """Test cases for <dl> elements."""

    def test_terms_and_definitions(self):
        """dt becomes a term line and each dd a colon line."""
        html = "<dl><dt>Term</dt><dd>Def</dd><dd>More</dd><dt>Other</dt><dd>Third</dd></dl>"

        assert convert_html_to_markup(html) == "Term\n: Def\n: More\nOther\n: Third"

    def test_formatting_inside_definition(self):
        """Inline formatting in a definition is kept."""
        assert convert_html_to_markup("<dl><dt>Cat</dt><dd>A <em>soft</em> animal</dd></dl>") == "Cat\n: A *soft* animal"


class TestCitations:
    """Test cases for citation markers and the citations section."""

    def test_markers_and_definitions(self):
        """Citation markers and typed entries become citation markup."""
        html = convert_markup_to_html("As shown[@smith].\n\n[@smith]: Smith {book}").html

        assert convert_html_to_markup(html) == "As shown[@smith].\n\n[@smith]: Smith {book}"

    def test_general_type_omitted(self):
        """The default type is not written out."""
        html = convert_markup_to_html("x[@doe]\n\n[@doe]: Doe 2020").html

        assert convert_html_to_markup(html) == "x[@doe]\n\n[@doe]: Doe 2020"

    def test_citations_title_not_a_heading(self):
        """The citations heading is not turned into a markup heading."""
        html = convert_markup_to_html("[@a]: source\nx[@a]").html

        assert "Citations" not in convert_html_to_markup(html)


class TestTemplates:
    """Test cases for template elements."""

    def test_block_template(self):
        """Template divs become invocations with quoted values."""
        html = convert_markup_to_html('{% infobox title="My Page" year=2024 %}').html

        assert convert_html_to_markup(html) == '{% infobox title="My Page" year=2024 %}'

    def test_inline_template(self):
        """Template spans stay inline."""
        html = convert_markup_to_html("Born {% date year=1990 %} here.").html

        assert convert_html_to_markup(html) == "Born {% date year=1990 %} here."

    def test_value_with_double_quote(self):
        """Values containing double quotes are single-quoted."""
        html = convert_markup_to_html("{% quote text='say \"hi\"' %}").html

        assert convert_html_to_markup(html) == "{% quote text='say \"hi\"' %}"


class TestKitchenSink:
    """Test cases for a document using every construct."""

    def test_constructs_recovered(self):
        """Every construct comes back as markup."""
        markup = convert_html_to_markup(convert_markup_to_html(SAMPLE_MARKUP_KITCHEN_SINK).html)

        assert "# Overview {#top}" in markup
        assert "Text with **bold**, *italic*, ~~gone~~ and ==marked== words." in markup
        assert '[Example](https://example.com "Example site")' in markup
        assert "[[Main Page|home]]" in markup
        assert "> Quoted line\n> second line" in markup
        assert ":::info" in markup
        assert '```python file:hello.py\nprint("hi")\n```' in markup
        assert "Inline `code` and $x^2$ math." in markup
        assert "$$E = mc^2$$" in markup
        assert '![Logo](logo.png "The logo"){120x40}' in markup
        assert "@[youtube](dQw4w9WgXcQ)" in markup
        assert "- [x] done\n- [ ] todo" in markup
        assert "| A | B |\n| :--- | ---: |\n| 1 | 2 |" in markup
        assert '{% infobox name="Ada Lovelace" born=1815 %}' in markup
        assert "Claim[^src]." in markup
        assert "[^src]: Some source." in markup
        assert "---" in markup


class TestErrorBoundary:
    """Test cases for failures inside a pass."""

    def test_failure_returns_text(self):
        """A failing pass degrades to the tag-stripped text."""
        with patch.object(HeadingPass, "apply", side_effect=RuntimeError("boom")):
            markup = convert_html_to_markup("<h1>A &amp; B</h1><p>text</p>")

        assert markup == "A & Btext"

    def test_failure_is_logged(self, caplog):
        """The failure is logged."""
        with patch.object(HeadingPass, "apply", side_effect=RuntimeError("boom")):
            with caplog.at_level("ERROR", logger="recordmark"):
                convert_html_to_markup("<h1>A</h1>")

        assert "Reverse conversion failed in pass 'headings'" in caplog.text
