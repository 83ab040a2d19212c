"""Property-based tests for the expansion engine.

Uses hypothesis to verify invariants that must hold for *all* inputs:

- Marker-free attribute values survive substitution unchanged
- Fully expanded markup is a fixed point of expansion
- for-each emits one body per item, in order, or the or-else content
- Form population emits a parent placeholder before every nested field
"""

from __future__ import annotations

from hypothesis import given, settings
from hypothesis import strategies as st

from webtemplate import Context, DictLoader, Environment
from webtemplate.dom import Element
from webtemplate.template.forms import form_fields, populate_form
from webtemplate.template.helpers import replace_markers

from .strategies import expanded_markup, identifier, item_lists, marker_free_text, nested_value

_ENV = Environment(loader=DictLoader({}))


def _expand(source: str, bindings: dict | None = None) -> str:
    root = _ENV.parse_template(source, wrap=True).root
    _ENV.expand(root, Context(bindings))
    return root.inner_html


class TestSubstitutionProperties:
    @given(text=marker_free_text)
    @settings(max_examples=200)
    def test_marker_free_text_is_identity(self, text: str) -> None:
        """Without ``<%=`` the render callback is never consulted."""

        def render(expr: str) -> str:
            raise AssertionError(f"unexpected marker {expr!r}")

        assert replace_markers(text, render) == text

    @given(name=identifier, value=st.integers())
    def test_single_marker_substituted(self, name: str, value: int) -> None:
        result = _expand(f'<p data-v="<%= {name} %>"></p>', {name: value})
        assert result == f'<p data-v="{value}"></p>'


class TestExpansionProperties:
    @given(markup=expanded_markup)
    @settings(max_examples=100)
    def test_expanded_markup_is_fixed_point(self, markup: str) -> None:
        root = _ENV.parse_template(markup, wrap=True).root
        before = root.to_html()
        _ENV.expand(root, Context({"unused": 1}))
        assert root.to_html() == before

    @given(items=item_lists)
    @settings(max_examples=100)
    def test_for_each_emits_items_in_order(self, items: list) -> None:
        source = (
            "<for-each over='items' as='item' index='i'><li><%= i %>=<%= item %></li></for-each>"
            "<or-else><p>empty</p></or-else>"
        )
        result = _expand(source, {"items": items})
        if items:
            expected = "".join(f"<li>{i}={_escaped(item)}</li>" for i, item in enumerate(items))
        else:
            expected = "<p>empty</p>"
        assert result == expected

    @given(flag=st.booleans())
    def test_if_true_or_else_exclusive(self, flag: bool) -> None:
        result = _expand("<if-true cond='flag'>A</if-true><or-else>B</or-else>", {"flag": flag})
        assert result == ("A" if flag else "B")


class TestFormProperties:
    @given(value=nested_value)
    @settings(max_examples=150)
    def test_parent_field_precedes_children(self, value) -> None:
        form = Element("form")
        populate_form(form, value, "x")
        names = [name for name, _ in form_fields(form)]
        assert names[0] == "x"
        for position, name in enumerate(names):
            if "[" in name:
                parent = name[: name.rindex("[")]
                assert parent in names[:position]

    @given(value=nested_value)
    def test_scalar_leaves_have_text_values(self, value) -> None:
        form = Element("form")
        populate_form(form, value, "x")
        fields = dict(form_fields(form))
        for name, leaf in _leaves(value, "x"):
            assert fields[name] == str(leaf)


def _escaped(value) -> str:
    return str(value).replace("&", "&amp;").replace("<", "&lt;").replace(">", "&gt;")


def _leaves(value, prefix: str):
    if isinstance(value, dict):
        for key, child in value.items():
            yield from _leaves(child, f"{prefix}[{key}]")
    else:
        yield prefix, value
