"""Dynamic value helpers used while expanding templates.

Expressions evaluate to ordinary Python objects. These functions give
them the uniform behaviour the expansion engine relies on: text and
boolean coercion, ordered key/value iteration, script-safe JSON and the
``<%= ... %>`` marker scan shared by attributes, script bodies and
translated text.

Thread-Safety:
All functions are stateless and safe for concurrent use.

"""

from __future__ import annotations

from collections.abc import Callable, Iterator, Mapping
from typing import Any

from webtemplate.environment.exceptions import ErrorCode, EvaluationError, TemplateSyntaxError
from webtemplate.utils.constants import MARKER_CLOSE, MARKER_OUTPUT
from webtemplate.utils.html import json_for_script


class _Undefined:
    """Result of reading a missing attribute or key.

    Renders as ``""``, is falsy, iterates as empty and absorbs further
    attribute access, so ``data.user.name`` on an empty ``data`` is
    simply blank instead of an error.
    """

    __slots__ = ()

    def __str__(self) -> str:
        return ""

    def __repr__(self) -> str:
        return "UNDEFINED"

    def __bool__(self) -> bool:
        return False

    def __iter__(self) -> Iterator[Any]:
        return iter(())

    def __len__(self) -> int:
        return 0

    def __getattr__(self, name: str) -> _Undefined:
        if name.startswith("__"):
            raise AttributeError(name)
        return self

    def __getitem__(self, key: Any) -> _Undefined:
        return self

    def __eq__(self, other: object) -> bool:
        return isinstance(other, _Undefined)

    def __hash__(self) -> int:
        return 0


UNDEFINED = _Undefined()


def safe_getattr(obj: Any, name: str) -> Any:
    """Attribute access as seen by template expressions.

    Resolution order:
    - Mappings: subscript only, so JSON objects read naturally and
      ``data.items`` on an empty ``data`` is ``UNDEFINED``, never
      ``dict.items``. Methods are reached through ``safe_getmethod``.
    - Objects: getattr first, subscript fallback.

    None and missing names yield ``UNDEFINED``.
    """
    if obj is None:
        return UNDEFINED
    if isinstance(obj, Mapping):
        try:
            return obj[name]
        except KeyError:
            return UNDEFINED
    try:
        return getattr(obj, name)
    except AttributeError:
        try:
            return obj[name]
        except (KeyError, TypeError, IndexError):
            return UNDEFINED


def safe_getmethod(obj: Any, name: str) -> Any:
    """Resolve the target of a call such as ``data.get("x")``.

    A mapping key of that name still wins; otherwise the attribute is
    looked up, so ``mapping.keys()`` calls the method.
    """
    if isinstance(obj, Mapping) and name in obj:
        return obj[name]
    if obj is None:
        return UNDEFINED
    return getattr(obj, name, UNDEFINED)


def to_text(value: Any) -> str:
    """Coerce a value to text, treating None and UNDEFINED as empty."""
    if value is None or value is UNDEFINED:
        return ""
    return str(value)


def to_bool(value: Any) -> bool:
    return bool(value)


def is_object_shaped(value: Any) -> bool:
    """True for values that iterate as key → value pairs."""
    return isinstance(value, Mapping)


def iter_items(value: Any) -> Iterator[tuple[Any, Any]]:
    """Iterate a value as ordered ``(key, item)`` pairs.

    Mappings yield their items; other iterables yield ``(index, item)``;
    None and UNDEFINED yield nothing.

    Raises:
        EvaluationError: If the value cannot be iterated
    """
    if value is None or value is UNDEFINED:
        return iter(())
    if isinstance(value, Mapping):
        return iter(value.items())
    try:
        return enumerate(value)
    except TypeError:
        raise EvaluationError(
            f"Cannot iterate over {type(value).__name__}",
            values={"value": value},
            suggestion="Pass a list, a mapping or another iterable",
            code=ErrorCode.NOT_ITERABLE,
        ) from None


def _json_default(value: Any) -> Any:
    if value is UNDEFINED:
        return None
    if isinstance(value, Mapping):
        return dict(value)
    if hasattr(value, "to_html"):
        return value.to_html()
    if isinstance(value, (set, frozenset, tuple)):
        return list(value)
    return str(value)


def to_json(value: Any) -> str:
    """Serialize a value as JSON that can be embedded in a script body."""
    return json_for_script(value, default=_json_default)


def replace_markers(
    text: str,
    render: Callable[[str], str],
    *,
    where: str = "attribute",
) -> str:
    """Replace every ``<%= expr %>`` in ``text`` with ``render(expr)``.

    Markers are resolved left to right and never overlap; text around
    them is kept verbatim. Text without markers is returned unchanged.

    Raises:
        TemplateSyntaxError: If a marker is not closed by ``%>``
    """
    start = text.find(MARKER_OUTPUT)
    if start == -1:
        return text

    out: list[str] = []
    pos = 0
    while start != -1:
        out.append(text[pos:start])
        expr_start = start + len(MARKER_OUTPUT)
        close = text.find(MARKER_CLOSE, expr_start)
        if close == -1:
            raise TemplateSyntaxError(
                f"Unclosed '<%=' marker in {where}: {text[start:start + 40]!r}",
                code=ErrorCode.UNCLOSED_MARKER,
            )
        out.append(render(text[expr_start:close]))
        pos = close + len(MARKER_CLOSE)
        start = text.find(MARKER_OUTPUT, pos)
    out.append(text[pos:])
    return "".join(out)
