"""Tests for string, HTML and URI utilities."""

import json

import pytest

from webtemplate.utils import (
    Markup,
    escape_attribute,
    html_escape,
    json_for_script,
    multi_replace,
    resolve_relative,
)


class TestMultiReplace:
    def test_single_pass(self):
        assert multi_replace("ab", "a", "b", "b", "a") == "ba"

    def test_earliest_needle_wins(self):
        assert multi_replace("xyz", "yz", "1", "xy", "2") == "2z"

    def test_tie_goes_to_first_pair(self):
        assert multi_replace("abc", "ab", "1", "abc", "2") == "1c"

    def test_no_pairs(self):
        assert multi_replace("same") == "same"

    @pytest.mark.parametrize("pairs", [("a",), ("", "x")])
    def test_invalid_pairs(self, pairs):
        with pytest.raises(ValueError):
            multi_replace("text", *pairs)


class TestHtml:
    def test_html_escape(self):
        assert html_escape("<a & b>") == "&lt;a &amp; b&gt;"
        assert html_escape('"') == '"'

    def test_markup_not_escaped(self):
        assert html_escape(Markup("<b>x</b>")) == "<b>x</b>"

    def test_escape_attribute(self):
        assert escape_attribute('a "b" <c>') == "a &quot;b&quot; &lt;c&gt;"

    def test_json_for_script(self):
        encoded = json_for_script({"html": "</script><!-- x -->"})
        assert "</" not in encoded
        assert "<!--" not in encoded
        assert json.loads(encoded) == {"html": "</script><!-- x -->"}


class TestResolveRelative:
    @pytest.mark.parametrize(
        ("href", "base", "expected"),
        [
            ("page.html", "/docs/", "/docs/page.html"),
            ("../up.html", "/docs/guide/", "/docs/up.html"),
            ("/abs.html", "/docs/", "/abs.html"),
            ("https://example.com/", "/docs/", "https://example.com/"),
            ("#top", "/docs/index.html", "/docs/index.html#top"),
        ],
    )
    def test_resolve(self, href, base, expected):
        assert resolve_relative(href, base) == expected
