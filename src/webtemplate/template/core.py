"""Template expansion engine.

Rewrites one parsed element tree in place against one Context. Every
element goes through the same two passes:

1. **Attribute pass**: ``<%= expr %>`` markers in attribute values are
   replaced by the text of the evaluated expression (``onrender`` is
   left alone until the element is finished).
2. **Child pass**: children are visited in their original order and
   dispatched by kind:

    ```
    if-true cond=...          expand children in place when true
    or-else                   expand children when the last test was false
    for-each over= as= index= expand a clone of the body per item
    render-template file=     load, parse and expand a partial
    hidden-form-data from=    flatten a value into hidden inputs
    <%= %> <%=HTML %> <% %>   text, markup or a bare statement
    script                    markers replaced by script-safe JSON
    registered embedded tag   translator output, optionally rescanned
    anything else             recurse
    ```

After the children, an ``onrender`` attribute is run as a statement with
``this`` bound to the element, then removed.

Conditional Pairing:
Each child pass carries one ``prior`` flag, starting False. ``if-true``
and ``for-each`` set it; ``or-else`` reads it. The flag belongs to the
sibling list being walked: recursive expansions start their own, so an
``or-else`` pairs with the most recent ``if-true``/``for-each`` among
its own siblings, not necessarily the adjacent one.

Scoping:
``for-each`` iterations, partials and ``onrender`` each evaluate in a
child Context whose bindings disappear with it. ``if-true``/``or-else``
bodies share their parent's Context.

Thread-Safety:
A TemplateExpander holds only read-only configuration. The trees and
Contexts it rewrites belong to the single call processing them.

"""

from __future__ import annotations

import json
import logging
from collections.abc import Callable, Mapping
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from webtemplate.dom.nodes import (
    CodeNode,
    Comment,
    Document,
    Element,
    Fragment,
    Node,
    ParentNode,
    TextNode,
)
from webtemplate.dom.parser import parse_fragment, parse_markup
from webtemplate.environment.exceptions import ErrorCode, TemplateSyntaxError
from webtemplate.evaluator import evaluate, execute
from webtemplate.render_context import partial_context
from webtemplate.template.forms import populate_form
from webtemplate.template.helpers import iter_items, replace_markers, to_bool, to_json, to_text
from webtemplate.utils.constants import (
    DEFAULT_RAW_TAGS,
    FOR_EACH,
    HIDDEN_FORM_DATA,
    IF_TRUE,
    ONRENDER_ATTR,
    OR_ELSE,
    RENDER_TEMPLATE,
    WRAPPER_TAG,
)

if TYPE_CHECKING:
    from collections.abc import Iterable

    from webtemplate.context import Context
    from webtemplate.environment.loaders import TemplateLoader

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class EmbeddedTagResult:
    """What an embedded tag translator hands back.

    Attributes:
        node: Replacement node, or None to drop the element
        scan_for_template_content: Expand ``<%= %>`` markers and control
            elements inside the replacement
    """

    node: Node | None
    scan_for_template_content: bool = True


EmbeddedTagTranslator = Callable[[str, dict[str, str]], "EmbeddedTagResult | Node | None"]


class ElementRef:
    """The ``this`` seen by ``onrender`` code.

    Attribute reads and writes go to the wrapped element; the one extra
    operation is ``populate_from``.
    """

    __slots__ = ("_element",)

    def __init__(self, element: Element):
        object.__setattr__(self, "_element", element)

    @property
    def element(self) -> Element:
        return self._element

    def __getattr__(self, name: str) -> Any:
        return getattr(self._element, name)

    def __setattr__(self, name: str, value: Any) -> None:
        setattr(self._element, name, value)

    def populate_from(self, value: Any) -> ElementRef:
        """Fill form fields from ``value``, one top-level key per field.

        Does nothing unless the element is a ``<form>``. Returns ``this``
        so calls can be chained.
        """
        if self._element.tag == "form":
            for key, item in iter_items(value):
                populate_form(self._element, item, to_text(key))
        return self

    def __repr__(self) -> str:
        return f"ElementRef({self._element!r})"


class TemplateExpander:
    """Expands control elements and inline code in a markup tree.

    Args:
        loader: Source of partials for ``render-template``
        embedded_tags: Tag name → translator
        raw_tags: Tags parsed verbatim (embedded tag names are added)
        debug: Surround partial output with ``<!-- name -->`` comments
    """

    __slots__ = ("_handlers", "debug", "embedded_tags", "loader", "raw_tags")

    def __init__(
        self,
        loader: TemplateLoader,
        embedded_tags: Mapping[str, EmbeddedTagTranslator] | None = None,
        raw_tags: Iterable[str] = DEFAULT_RAW_TAGS,
        debug: bool = False,
    ):
        self.loader = loader
        self.embedded_tags: dict[str, EmbeddedTagTranslator] = dict(embedded_tags or {})
        self.raw_tags: tuple[str, ...] = tuple(dict.fromkeys((*raw_tags, *self.embedded_tags)))
        self.debug = debug
        self._handlers: dict[str, Callable[[Element, Context, bool], bool]] = {
            IF_TRUE: self._expand_if_true,
            OR_ELSE: self._expand_or_else,
            FOR_EACH: self._expand_for_each,
            RENDER_TEMPLATE: self._expand_render_template,
            HIDDEN_FORM_DATA: self._expand_hidden_form_data,
        }

    def expand(self, root: ParentNode, context: Context) -> None:
        """Rewrite ``root``'s subtree in place against ``context``.

        Raises:
            TemplateSyntaxError: Malformed marker or control element
            TemplateNotFoundError: A partial cannot be loaded
            EvaluationError: An expression or statement failed
        """
        if isinstance(root, Element):
            self._substitute_attributes(root, context)
        self._expand_children(root, context)
        if isinstance(root, Element) and ONRENDER_ATTR in root.attrs:
            self._run_onrender(root, context)

    # -- passes -------------------------------------------------------------

    def _substitute_attributes(self, element: Element, context: Context) -> None:
        for name, value in list(element.attrs.items()):
            if name == ONRENDER_ATTR:
                continue
            element.attrs[name] = self._substitute_text(value, context, where=f"attribute {name!r}")

    def _substitute_text(self, text: str, context: Context, *, where: str) -> str:
        return replace_markers(text, lambda expr: to_text(evaluate(expr, context)), where=where)

    def _expand_children(self, parent: ParentNode, context: Context) -> None:
        prior = False
        for child in list(parent.children):
            if isinstance(child, CodeNode):
                self._expand_code(child, context)
            elif isinstance(child, Element):
                prior = self._expand_element(child, context, prior)

    def _expand_element(self, element: Element, context: Context, prior: bool) -> bool:
        handler = self._handlers.get(element.tag)
        if handler is not None:
            return handler(element, context, prior)
        if element.tag in self.embedded_tags:
            self._expand_embedded_tag(element, context)
        elif element.tag == "script" and element.raw_source is not None:
            self._expand_script(element, context)
        else:
            self.expand(element, context)
        return prior

    # -- control elements ---------------------------------------------------

    def _expand_if_true(self, element: Element, context: Context, prior: bool) -> bool:
        outcome = to_bool(evaluate(_required(element, "cond"), context))
        if outcome:
            self._expand_children(element, context)
            element.strip_out()
        else:
            element.remove()
        return outcome

    def _expand_or_else(self, element: Element, context: Context, prior: bool) -> bool:
        if prior:
            element.remove()
        else:
            self._expand_children(element, context)
            element.strip_out()
        return prior

    def _expand_for_each(self, element: Element, context: Context, prior: bool) -> bool:
        items = evaluate(_required(element, "over"), context)
        as_name = _required(element, "as")
        index_name = element.attrs.get("index")

        fragment = Fragment()
        iterated = False
        for key, item in iter_items(items):
            iterated = True
            bindings = {as_name: item}
            if index_name:
                bindings[index_name] = key
            body = element.clone()
            self._expand_children(body, context.child(bindings))
            fragment.steal_children(body)

        element.replace_with(fragment)
        return iterated

    def _expand_render_template(self, element: Element, context: Context, prior: bool) -> bool:
        name = _required(element, "file")
        data = element.attrs.get("data")
        logger.debug("Including partial %s", name)

        markup = self.loader.load_markup(name)
        with partial_context(name):
            document = parse_markup(
                f"<{WRAPPER_TAG}>{markup}</{WRAPPER_TAG}>", self.raw_tags, name=name
            )
            root = document.root
            scope = context.child()
            if data is not None:
                scope["data"] = _decode_data(data, name)
            self.expand(root, scope)

        fragment = Fragment()
        if self.debug:
            fragment.append_child(Comment(f" {name} "))
        fragment.steal_children(root)
        if self.debug:
            fragment.append_child(Comment(f" end {name} "))
        element.replace_with(fragment)
        return prior

    def _expand_hidden_form_data(self, element: Element, context: Context, prior: bool) -> bool:
        value = evaluate(_required(element, "from"), context)
        form = Element("form")
        populate_form(form, value, _required(element, "name"))
        fragment = Fragment()
        fragment.steal_children(form)
        element.replace_with(fragment)
        return prior

    # -- inline code, scripts, embedded tags ------------------------------------

    def _expand_code(self, node: CodeNode, context: Context) -> None:
        kind = node.kind
        if kind == "statement":
            execute(node.code, context)
            node.remove()
        elif kind == "output":
            node.replace_with(TextNode(to_text(evaluate(node.code, context))))
        else:
            node.replace_with(self._as_markup(evaluate(node.code, context)))

    def _as_markup(self, value: Any) -> Node:
        if isinstance(value, Document):
            return Fragment(child.clone() for child in value.children)
        if isinstance(value, Node):
            return value.clone() if value.parent is not None else value
        return parse_fragment(to_text(value), self.raw_tags)

    def _expand_script(self, element: Element, context: Context) -> None:
        source = element.raw_source or ""
        expanded = replace_markers(
            source, lambda expr: to_json(evaluate(expr, context)), where="script"
        )
        if expanded != source:
            element.raw_source = expanded

    def _expand_embedded_tag(self, element: Element, context: Context) -> None:
        translator = self.embedded_tags[element.tag]
        logger.debug("Translating embedded <%s>", element.tag)
        result = translator(element.inner_html, dict(element.attrs))
        if not isinstance(result, EmbeddedTagResult):
            result = EmbeddedTagResult(result)

        replacement = result.node
        if replacement is None:
            element.remove()
            return
        if result.scan_for_template_content:
            if isinstance(replacement, TextNode):
                replacement.text = self._substitute_text(
                    replacement.text, context, where=f"<{element.tag}> output"
                )
            elif isinstance(replacement, ParentNode):
                self.expand(replacement, context)
        element.replace_with(replacement)

    def _run_onrender(self, element: Element, context: Context) -> None:
        source = element.attrs[ONRENDER_ATTR]
        execute(source, context.child(this=ElementRef(element)))
        element.remove_attribute(ONRENDER_ATTR)


def _required(element: Element, name: str) -> str:
    value = element.attrs.get(name)
    if value is None:
        raise TemplateSyntaxError(
            f"<{element.tag}> requires a '{name}' attribute",
            code=ErrorCode.MISSING_ATTRIBUTE,
        )
    return value


def _decode_data(text: str, template_name: str) -> Any:
    try:
        return json.loads(text)
    except json.JSONDecodeError as e:
        raise TemplateSyntaxError(
            f"render-template data for {template_name} is not valid JSON: {e.msg}",
            name=template_name,
            source=text,
            col_offset=e.pos,
            code=ErrorCode.INVALID_DATA,
        ) from None
