"""Template expansion: the engine, form population and value helpers.

``helpers`` is imported first; the evaluator depends on it and is in
turn used by ``core``.

"""

from webtemplate.template.helpers import UNDEFINED, replace_markers, to_json, to_text
from webtemplate.template.core import (
    ElementRef,
    EmbeddedTagResult,
    EmbeddedTagTranslator,
    TemplateExpander,
)
from webtemplate.template.forms import populate_form, set_field_value

__all__ = [
    "UNDEFINED",
    "ElementRef",
    "EmbeddedTagResult",
    "EmbeddedTagTranslator",
    "TemplateExpander",
    "populate_form",
    "replace_markers",
    "set_field_value",
    "to_json",
    "to_text",
]
