"""HTML escaping and script-safe JSON encoding.

Escaping is single-pass via ``str.translate()``. ``Markup`` marks a string
as already-safe HTML for callers that build markup by hand. Only
``<%=HTML %>`` inserts values as markup; ``<%= %>`` always escapes, Markup
included.
"""

from __future__ import annotations

import json
from typing import Any

from webtemplate.utils.text import multi_replace

_TEXT_ESCAPES = str.maketrans(
    {
        "&": "&amp;",
        "<": "&lt;",
        ">": "&gt;",
    }
)

_ATTR_ESCAPES = str.maketrans(
    {
        "&": "&amp;",
        "<": "&lt;",
        ">": "&gt;",
        '"': "&quot;",
    }
)


class Markup(str):
    """A string that is already HTML and must not be escaped again.

    Example:
        >>> html_escape(Markup("<b>bold</b>"))
        '<b>bold</b>'
    """

    __slots__ = ()

    def __html__(self) -> str:
        return str(self)

    def __repr__(self) -> str:
        return f"Markup({str.__repr__(self)})"


def html_escape(value: Any) -> str:
    """Escape ``value`` for use as HTML text content.

    Objects implementing ``__html__`` are trusted and returned as-is.
    """
    if hasattr(value, "__html__"):
        return value.__html__()
    return str(value).translate(_TEXT_ESCAPES)


def escape_attribute(value: str) -> str:
    """Escape ``value`` for a double-quoted attribute."""
    return value.translate(_ATTR_ESCAPES)


def json_for_script(value: Any, default: Any = None) -> str:
    """Serialize ``value`` as JSON that is safe inside a ``<script>`` body.

    ``</`` and ``<!--`` are escaped so the payload can neither close the
    script element nor open an HTML comment.

    Example:
        >>> json_for_script("</script>")
        '"<\\\\/script>"'
    """
    encoded = json.dumps(value, default=default)
    return multi_replace(encoded, "</", "<\\/", "<!--", "\\u003C!--")
