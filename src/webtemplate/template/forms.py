"""Form population: nested values → flat form fields.

Nested structures are flattened into bracket-notation field names, the
way HTML forms conventionally encode nested data::

    populate_form(form, {"a": {"b": 1, "c": 2}}, "x")

sets, in order: ``x=""``, ``x[a]=""``, ``x[a][b]="1"``, ``x[a][c]="2"``.

A ``%`` in the field name is a wildcard replaced by each key instead of
appending ``[key]``: ``"user_%"`` with ``{"id": 7}`` sets ``user_id``.

"""

from __future__ import annotations

from typing import Any

from webtemplate.dom.nodes import Element
from webtemplate.template.helpers import is_object_shaped, iter_items, to_text
from webtemplate.utils.constants import FORM_FIELD_TAGS

FIELD_WILDCARD = "%"


def derive_field_name(field_name: str, key: Any) -> str:
    key_text = to_text(key)
    if FIELD_WILDCARD in field_name:
        return field_name.replace(FIELD_WILDCARD, key_text)
    return f"{field_name}[{key_text}]"


def populate_form(form: Element, value: Any, field_name: str) -> None:
    """Flatten ``value`` into fields of ``form`` rooted at ``field_name``.

    Object-shaped values first set ``field_name`` itself to empty, so a
    placeholder entry exists even when no scalar lies beneath it, then
    recurse per key. Scalars set ``field_name`` to their text form.
    """
    if is_object_shaped(value):
        set_field_value(form, field_name, "")
        for key, child in iter_items(value):
            populate_form(form, child, derive_field_name(field_name, key))
    else:
        set_field_value(form, field_name, to_text(value))


def set_field_value(form: Element, name: str, value: str) -> None:
    """Set the field called ``name`` in ``form`` to ``value``.

    Existing controls are updated in place (text-like inputs get a value,
    checkboxes/radios are checked when their value matches, selects mark
    the matching option, textareas get text). When no control has that
    name, a hidden input is appended.
    """
    fields = form.find_all(
        predicate=lambda el: el.tag in FORM_FIELD_TAGS and el.attrs.get("name") == name
    )
    if not fields:
        form.append_child(Element("input", {"type": "hidden", "name": name, "value": value}))
        return

    for field in fields:
        if field.tag == "textarea":
            field.text_content = value
        elif field.tag == "select":
            for option in field.find_all("option"):
                option_value = option.attrs.get("value", option.text_content)
                if option_value == value:
                    option.set_attribute("selected", "selected")
                else:
                    option.remove_attribute("selected")
        elif field.attrs.get("type", "text").lower() in ("checkbox", "radio"):
            if field.attrs.get("value", "on") == value:
                field.set_attribute("checked", "checked")
            else:
                field.remove_attribute("checked")
        else:
            field.set_attribute("value", value)


def form_fields(form: Element) -> list[tuple[str, str]]:
    """``(name, value)`` for every hidden or text-like input, in order."""
    return [
        (el.attrs["name"], el.attrs.get("value", ""))
        for el in form.find_all("input")
        if "name" in el.attrs
    ]
