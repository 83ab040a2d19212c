"""Shared constants for webtemplate.

Tag and attribute names the expansion engine and the skeleton composer
give special meaning to, plus the HTML element classes the parser and
serializer need to know about.
"""

from __future__ import annotations

# Inline code markers
MARKER_OPEN = "<%"
MARKER_OUTPUT = "<%="
MARKER_CLOSE = "%>"
HTML_OUTPUT_PREFIX = "HTML"

# Control elements consumed by the expansion engine
IF_TRUE = "if-true"
OR_ELSE = "or-else"
FOR_EACH = "for-each"
RENDER_TEMPLATE = "render-template"
HIDDEN_FORM_DATA = "hidden-form-data"

CONTROL_TAGS: frozenset[str] = frozenset(
    {IF_TRUE, OR_ELSE, FOR_EACH, RENDER_TEMPLATE, HIDDEN_FORM_DATA}
)

# Reserved attribute: evaluated after an element's children are expanded
ONRENDER_ATTR = "onrender"

# Structural names recognised when composing a skeleton and a template
MAIN_TAG = "main"
TITLE_TAG = "title"
HEAD_TAG = "head"
BODY_TAG = "body"
DOCUMENT_FRAGMENT_TAG = "document-fragment"
BODY_CLASS_ATTR = "body-class"
RELATIVE_TO_ATTR = "data-relative-to"
WRAPPER_TAG = "root"

DEFAULT_SKELETON_NAME = "skeleton.html"
DEFAULT_TEMPLATE_DIRECTORY = "templates/"

# Elements whose content is kept verbatim by the parser
DEFAULT_RAW_TAGS: tuple[str, ...] = ("script", "style")

# HTML void elements: never have children, never get an end tag
VOID_TAGS: frozenset[str] = frozenset(
    {
        "area",
        "base",
        "br",
        "col",
        "embed",
        "hr",
        "img",
        "input",
        "link",
        "meta",
        "param",
        "source",
        "track",
        "wbr",
    }
)

# Form controls addressed by the form populator
FORM_FIELD_TAGS: frozenset[str] = frozenset({"input", "select", "textarea"})
