"""Tests for dynamic value coercions and marker substitution."""

import json

import pytest

from webtemplate.environment.exceptions import ErrorCode, EvaluationError, TemplateSyntaxError
from webtemplate.template.helpers import (
    UNDEFINED,
    iter_items,
    replace_markers,
    safe_getattr,
    safe_getmethod,
    to_bool,
    to_json,
    to_text,
)
from webtemplate.utils.html import Markup


class TestUndefined:
    def test_renders_empty_and_falsy(self):
        assert str(UNDEFINED) == ""
        assert not UNDEFINED
        assert list(UNDEFINED) == []

    def test_absorbs_access(self):
        assert UNDEFINED.anything.deeper is UNDEFINED
        assert UNDEFINED["key"] is UNDEFINED


class TestCoercions:
    @pytest.mark.parametrize(
        ("value", "expected"),
        [(None, ""), (UNDEFINED, ""), (3, "3"), (True, "True"), ("x", "x")],
    )
    def test_to_text(self, value, expected):
        assert to_text(value) == expected

    @pytest.mark.parametrize(
        ("value", "expected"),
        [(0, False), ("", False), ([], False), ({}, False), ("0", True), ([0], True)],
    )
    def test_to_bool(self, value, expected):
        assert to_bool(value) is expected

    def test_safe_getattr_prefers_keys(self):
        assert safe_getattr({"items": 1}, "items") == 1
        assert safe_getattr(None, "x") is UNDEFINED

    def test_safe_getattr_ignores_mapping_methods(self):
        assert safe_getattr({}, "items") is UNDEFINED

    def test_safe_getmethod(self):
        assert safe_getmethod({"a": 1}, "keys")() == {"a": 1}.keys()
        assert safe_getmethod({"keys": len}, "keys") is len
        assert safe_getmethod(None, "keys") is UNDEFINED


class TestIterItems:
    """Ordered key/value iteration."""

    def test_mapping_yields_items_in_order(self):
        assert list(iter_items({"b": 1, "a": 2})) == [("b", 1), ("a", 2)]

    def test_sequence_yields_indexes(self):
        assert list(iter_items(["x", "y"])) == [(0, "x"), (1, "y")]

    def test_none_and_undefined_are_empty(self):
        assert list(iter_items(None)) == []
        assert list(iter_items(UNDEFINED)) == []

    def test_non_iterable_raises(self):
        with pytest.raises(EvaluationError) as exc_info:
            iter_items(42)
        assert exc_info.value.code is ErrorCode.NOT_ITERABLE


class TestToJson:
    def test_round_trips_plain_data(self):
        value = {"a": [1, 2.5, None, True], "b": "text"}
        assert json.loads(to_json(value)) == value

    def test_escapes_script_breakers(self):
        encoded = to_json("</script><!--")
        assert "</" not in encoded
        assert "<!--" not in encoded
        assert json.loads(encoded) == "</script><!--"

    def test_undefined_is_null(self):
        assert to_json({"x": UNDEFINED}) == '{"x": null}'

    def test_markup_is_a_string(self):
        assert json.loads(to_json(Markup("<b>x</b>"))) == "<b>x</b>"


class TestReplaceMarkers:
    """Left-to-right ``<%= %>`` substitution."""

    def test_no_markers_is_identity(self):
        text = "plain <b> & 100%"
        assert replace_markers(text, lambda expr: "X") is text

    def test_markers_replaced_in_order(self):
        seen = []

        def render(expr):
            seen.append(expr.strip())
            return expr.strip().upper()

        result = replace_markers("a<%= x %>b<%=y%>c", render)
        assert result == "aXbYc"
        assert seen == ["x", "y"]

    def test_adjacent_markers(self):
        assert replace_markers("<%=a%><%=b%>", str.upper) == "AB"

    def test_replacement_not_rescanned(self):
        assert replace_markers("<%= x %>", lambda expr: "<%= y %>") == "<%= y %>"

    def test_unclosed_marker(self):
        with pytest.raises(TemplateSyntaxError) as exc_info:
            replace_markers("a <%= x", str.upper)
        assert exc_info.value.code is ErrorCode.UNCLOSED_MARKER
