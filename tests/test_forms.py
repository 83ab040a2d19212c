"""Tests for form population."""

from webtemplate.dom import Element, parse_markup
from webtemplate.template.forms import (
    derive_field_name,
    form_fields,
    populate_form,
    set_field_value,
)


def _form(markup: str = "") -> Element:
    return parse_markup(f"<form>{markup}</form>").root


class TestPopulateForm:
    """Nested values flatten into bracket-notation fields."""

    def test_nested_object_order(self):
        form = _form()
        populate_form(form, {"a": {"b": 1, "c": 2}}, "x")
        assert form_fields(form) == [
            ("x", ""),
            ("x[a]", ""),
            ("x[a][b]", "1"),
            ("x[a][c]", "2"),
        ]

    def test_scalar_sets_field_directly(self):
        form = _form()
        populate_form(form, 42, "answer")
        assert form_fields(form) == [("answer", "42")]

    def test_none_becomes_empty(self):
        form = _form()
        populate_form(form, None, "x")
        assert form_fields(form) == [("x", "")]

    def test_wildcard_replaced_by_key(self):
        form = _form()
        populate_form(form, {"id": 7, "name": "ada"}, "user_%")
        assert form_fields(form) == [
            ("user_%", ""),
            ("user_id", "7"),
            ("user_name", "ada"),
        ]

    def test_generated_fields_are_hidden_inputs(self):
        form = _form()
        populate_form(form, {"a": 1}, "x")
        assert all(el.attrs["type"] == "hidden" for el in form.find_all("input"))

    def test_derive_field_name(self):
        assert derive_field_name("x", "a") == "x[a]"
        assert derive_field_name("x[%]", 0) == "x[0]"


class TestSetFieldValue:
    """Existing controls are updated in place."""

    def test_text_input(self):
        form = _form('<input type="text" name="q" value="old">')
        set_field_value(form, "q", "new")
        assert form.find("input").attrs["value"] == "new"
        assert len(form.find_all("input")) == 1

    def test_textarea(self):
        form = _form('<textarea name="bio">old</textarea>')
        set_field_value(form, "bio", "hello <world>")
        assert form.find("textarea").text_content == "hello <world>"

    def test_checkbox_checked_when_value_matches(self):
        form = _form('<input type="checkbox" name="ok" value="yes">')
        set_field_value(form, "ok", "yes")
        assert form.find("input").attrs.get("checked") == "checked"
        set_field_value(form, "ok", "no")
        assert "checked" not in form.find("input").attrs

    def test_radio_group(self):
        form = _form(
            '<input type="radio" name="size" value="s" checked>'
            '<input type="radio" name="size" value="m">'
        )
        set_field_value(form, "size", "m")
        small, medium = form.find_all("input")
        assert "checked" not in small.attrs
        assert medium.attrs["checked"] == "checked"

    def test_select(self):
        form = _form(
            '<select name="color">'
            '<option value="r" selected>Red</option>'
            "<option>Green</option>"
            "</select>"
        )
        set_field_value(form, "color", "Green")
        red, green = form.find_all("option")
        assert "selected" not in red.attrs
        assert green.attrs["selected"] == "selected"

    def test_missing_field_appends_hidden_input(self):
        form = _form('<input name="other">')
        set_field_value(form, "token", "abc")
        added = form.child_elements()[-1]
        assert added.attrs == {"type": "hidden", "name": "token", "value": "abc"}
