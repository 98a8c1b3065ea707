"""Unit tests for the style sheet and table of contents builder."""

import re

from recordmark.converter import STYLESHEET, STYLESHEET_VERSION, build_toc, convert_markup_to_html
from recordmark.models import Heading


class TestStylesheet:
    """Test cases for the bundled style sheet."""

    def test_version_is_semver(self):
        """The version is a dotted triple."""
        assert re.fullmatch(r"\d+\.\d+\.\d+", STYLESHEET_VERSION)

    def test_is_scoped_to_root_class(self):
        """Rules target the default root container."""
        assert ".recordmark-content" in STYLESHEET

    def test_covers_emitted_classes(self):
        """Every class the forward pipeline emits has a rule."""
        for css_class in (
            "callout-info", "callout-warning", "code-block", "code-header", "math-display",
            "math-inline", "reflist", "backref", "template", "task-list", "video-embed",
            "diagram", "external", "internal", "toc-level-1", "recordmark-toc", "citations",
            "citation-type",
        ):
            assert f".{css_class}" in STYLESHEET, css_class

    def test_covers_definition_lists(self):
        """Definition list elements are styled."""
        for element in ("dl", "dt", "dd"):
            assert f".recordmark-content {element} {{" in STYLESHEET, element

    def test_braces_balanced(self):
        """The CSS is syntactically balanced."""
        assert STYLESHEET.count("{") == STYLESHEET.count("}")


class TestBuildToc:
    """Test cases for build_toc."""

    def test_empty(self):
        """No headings, no TOC."""
        assert build_toc([]) == ""

    def test_entries(self):
        """Each heading links to its anchor with a level class."""
        toc = build_toc([Heading(1, "Intro", "intro"), Heading(2, "A & B", "a-b")], title="On this page")

        assert toc == (
            '<nav class="recordmark-toc"><h2 class="toc-title">On this page</h2><ul>'
            '<li class="toc-level-1"><a href="#intro">Intro</a></li>'
            '<li class="toc-level-2"><a href="#a-b">A &amp; B</a></li>'
            "</ul></nav>"
        )

    def test_from_conversion(self):
        """Heading metadata feeds the TOC directly."""
        result = convert_markup_to_html("# One\n# One")

        assert 'href="#one-2"' in build_toc(result.metadata.headings)
