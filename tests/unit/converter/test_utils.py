"""Unit tests for converter.utils module."""

import pytest

from recordmark.converter.utils import (
    count_words,
    escape_html,
    is_valid_url,
    line_of,
    reading_time,
    slug,
    strip_tags,
    unescape_html,
)


class TestEscapeHtml:
    """Test cases for escape_html and unescape_html."""

    def test_escapes_all_unsafe_characters(self):
        """Each of & < > \" ' ` maps to its entity."""
        assert escape_html("&<>\"'`") == "&amp;&lt;&gt;&quot;&#39;&#96;"

    def test_plain_text_unchanged(self):
        """Text without unsafe characters passes through."""
        assert escape_html("Hello World") == "Hello World"

    def test_escaping_twice_is_visible(self):
        """A second escape changes the text, so escaping must happen exactly once."""
        once = escape_html("Tom & Jerry <3")
        assert escape_html(once) != once
        assert "&amp;amp;" in escape_html(once)

    def test_unescape_is_inverse(self):
        """unescape_html reverses escape_html."""
        text = "<a href=\"x\">'quoted' & `ticked`</a>"
        assert unescape_html(escape_html(text)) == text

    def test_unescape_leaves_other_entities(self):
        """Entities outside the six escaped characters are left alone."""
        assert unescape_html("&copy; &amp;") == "&copy; &"


class TestSlug:
    """Test cases for slug."""

    def test_hello_world(self):
        """Spaces become hyphens and text is lowercased."""
        assert slug("Hello World") == "hello-world"

    def test_deterministic(self):
        """The same text always yields the same slug."""
        assert slug("Hello World") == slug("Hello World")

    def test_punctuation_removed(self):
        """Characters outside the identifier alphabet are dropped."""
        assert slug("What's new? (2024)") == "whats-new-2024"

    def test_dash_runs_collapsed_and_trimmed(self):
        """Repeated and edge hyphens are cleaned up."""
        assert slug("  -- Setup  --  Guide -- ") == "setup-guide"

    def test_no_identifier_characters(self):
        """Text with nothing usable yields an empty slug."""
        assert slug("!!!") == ""


class TestIsValidUrl:
    """Test cases for is_valid_url."""

    @pytest.mark.parametrize("url", [
        "https://example.com",
        "http://example.com/path?q=1#frag",
        "ftp://files.example.org/pub",
        "HTTPS://EXAMPLE.COM",
    ])
    def test_accepts_valid_urls(self, url):
        """Allowed schemes with a host are accepted."""
        assert is_valid_url(url) is True

    @pytest.mark.parametrize("url", [
        "",
        "example.com",
        "javascript:alert(1)",
        "data:text/html;base64,AAAA",
        "https://",
        "https:///path",
        "https://exa mple.com",
        "mailto://someone",
    ])
    def test_rejects_invalid_urls(self, url):
        """Missing hosts, bad schemes and whitespace are rejected."""
        assert is_valid_url(url) is False

    def test_custom_schemes(self):
        """The accepted schemes can be narrowed."""
        assert is_valid_url("http://example.com", ("https",)) is False
        assert is_valid_url("https://example.com", ("https",)) is True


class TestTextHelpers:
    """Test cases for strip_tags, count_words, reading_time and line_of."""

    def test_strip_tags(self):
        """Tags are removed and text kept."""
        assert strip_tags("<p>Hi <em>there</em></p>") == "Hi there"

    def test_count_words(self):
        """Words are whitespace separated."""
        assert count_words("one two\nthree") == 3
        assert count_words("") == 0

    def test_reading_time_rounds_up(self):
        """Reading time is whole minutes, rounded up."""
        assert reading_time(0) == 0
        assert reading_time(1) == 1
        assert reading_time(200) == 1
        assert reading_time(201) == 2
        assert reading_time(300, words_per_minute=100) == 3

    def test_line_of(self):
        """Line numbers are 1-based; missing needles give 0."""
        source = "first\nsecond\nthird"
        assert line_of(source, "first") == 1
        assert line_of(source, "third") == 3
        assert line_of(source, "fourth") == 0
        assert line_of(source, "") == 0
