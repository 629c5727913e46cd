"""Tests for frontmatter extraction and document parsing."""

import pytest
import os
from datetime import date

import sys
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..'))

from kalamos.errors import ContentBeforeFrontmatterError, InvalidFrontmatterError
from kalamos.parser import Document, extract_excerpt, extract_frontmatter, parse


class TestExtractFrontmatter:
    """Test cases for extract_frontmatter."""

    @pytest.mark.parametrize('text', [
        "# Hello, world!",
        "",
        "+++\ntitle = \"only one delimiter\"\n",
        "Some text with +++ inline",
    ])
    def test_fewer_than_two_delimiters(self, text):
        """Without two delimiter lines the whole text is the body."""
        frontmatter, body = extract_frontmatter(text)
        assert frontmatter == {}
        assert body == text

    def test_simple_frontmatter(self):
        frontmatter, body = extract_frontmatter("+++\ntitle = \"Hello, world!\"\n+++\n# Hello, world!")
        assert frontmatter == {'title': 'Hello, world!'}
        assert body == "# Hello, world!"

    def test_typed_values(self):
        """TOML values keep their types."""
        text = (
            "+++\n"
            "title = \"Hello, world!\"\n"
            "date = 2024-01-01\n"
            "draft = false\n"
            "[vars]\n"
            "color = \"blue\"\n"
            "+++\n"
            "# Hello, world!\n"
        )
        frontmatter, body = extract_frontmatter(text)
        assert frontmatter == {
            'title': 'Hello, world!',
            'date': date(2024, 1, 1),
            'draft': False,
            'vars': {'color': 'blue'},
        }
        assert body == "# Hello, world!\n"

    def test_whitespace_before_frontmatter(self):
        frontmatter, body = extract_frontmatter("\n\n   \n+++\ntitle = \"Hello\"\n+++\nbody")
        assert frontmatter == {'title': 'Hello'}
        assert body == "body"

    def test_later_delimiters_stay_in_body(self):
        text = "+++\ntitle = \"Hello, world!\"\n+++\n# Hello, world!\n+++\n\ncontinuing"
        frontmatter, body = extract_frontmatter(text)
        assert frontmatter == {'title': 'Hello, world!'}
        assert body == "# Hello, world!\n\n+++\n\ncontinuing"

    def test_content_before_frontmatter(self):
        text = "before the frontmatter\n+++\ntitle = \"Hello, world!\"\n+++\n# Hello, world!"
        with pytest.raises(ContentBeforeFrontmatterError) as excinfo:
            extract_frontmatter(text)
        assert "before the frontmatter" in str(excinfo.value)
        assert excinfo.value.path is None

    def test_invalid_toml(self):
        with pytest.raises(InvalidFrontmatterError):
            extract_frontmatter("+++\ntitle+++\n# Hello, world!\n+++\ncontinuing")

    def test_empty_frontmatter_block(self):
        frontmatter, body = extract_frontmatter("+++\n+++\nbody")
        assert frontmatter == {}
        assert body == "body"


class TestParse:
    """Test cases for parse."""

    def test_frontmatter_and_body(self):
        document = parse("+++\ntitle = \"Hello, world!\"\n+++\n# Hello, world!")
        assert document.frontmatter == {'title': 'Hello, world!'}
        assert document.body_html == "<h1>Hello, world!</h1>\n"
        assert document.excerpt_html is None

    def test_no_frontmatter(self):
        document = parse("# Hello, world!")
        assert document.frontmatter == {}
        assert document.body_html == "<h1>Hello, world!</h1>\n"

    def test_literal_delimiter_in_body(self):
        document = parse("+++\ntitle = \"Hello, world!\"\n+++\n# Hello, world!\n+++\n\ncontinuing")
        assert document.body_html == "<h1>Hello, world!</h1>\n<p>+++</p>\n<p>continuing</p>\n"

    def test_empty_body(self):
        document = parse("+++\ntitle = \"Empty\"\n+++\n")
        assert document.body_html == ""
        assert document.excerpt_html is None

    def test_parse_is_deterministic(self):
        text = "+++\ntitle = \"Same\"\n+++\nSome *text*.\n\n```python\nx = 1\n```\n"
        assert parse(text) == parse(text)

    def test_errors_propagate(self):
        with pytest.raises(ContentBeforeFrontmatterError):
            parse("oops\n+++\ntitle = \"x\"\n+++\nbody")


class TestExcerpt:
    """Test cases for excerpt extraction."""

    def test_excerpt_before_marker(self):
        document = parse("a\n<!--more-->\nb")
        assert document.excerpt_html == "<p>a</p>\n"
        assert document.body_html.endswith("b</p>\n")

    def test_no_marker(self):
        assert extract_excerpt("a\n\nb") is None

    def test_marker_needs_trailing_newline(self):
        assert extract_excerpt("a\n<!--more-->") is None

    def test_only_first_marker_counts(self):
        assert extract_excerpt("one\n<!--more-->\ntwo\n<!--more-->\nthree\n") == "<p>one</p>\n"

    def test_effective_excerpt_falls_back_to_body(self):
        document = Document(frontmatter={}, body_html="<p>body</p>\n")
        assert document.effective_excerpt == "<p>body</p>\n"

        document = Document(frontmatter={}, body_html="<p>body</p>\n", excerpt_html="<p>short</p>\n")
        assert document.effective_excerpt == "<p>short</p>\n"
