"""Markup tree nodes.

The expansion engine rewrites templates as trees of these nodes. Every
structural change goes through whole-node replacement or child-list
splicing, and a node is detached from its old parent before it is
inserted anywhere else, so the structure is always a proper tree.

Node Types:
- `Element`: tag name, ordered attributes, children; raw elements
  (``<script>``, embedded tags) keep their content in ``raw_source``
- `TextNode`: unescaped character data
- `CodeNode`: an inline ``<% ... %>`` marker not yet evaluated
- `Comment`, `Doctype`: passed through unchanged
- `Fragment`: transient, tagless list of siblings; inserting a fragment
  splices its children in its place
- `Document`: top-level holder returned by the parser and the composer

"""

from __future__ import annotations

from collections.abc import Callable, Iterator, Mapping
from typing import TYPE_CHECKING

from webtemplate.utils.constants import VOID_TAGS
from webtemplate.utils.html import escape_attribute, html_escape

if TYPE_CHECKING:
    from collections.abc import Iterable


class Node:
    """Base class for all tree nodes."""

    __slots__ = ("parent",)

    def __init__(self) -> None:
        self.parent: ParentNode | None = None

    def to_html(self) -> str:
        raise NotImplementedError

    def __str__(self) -> str:
        return self.to_html()

    @property
    def text_content(self) -> str:
        return ""

    def clone(self, deep: bool = True) -> Node:
        raise NotImplementedError

    def index_in_parent(self) -> int:
        if self.parent is None:
            raise ValueError(f"{self!r} has no parent")
        for i, sibling in enumerate(self.parent.children):
            if sibling is self:
                return i
        raise ValueError(f"{self!r} is not among its parent's children")

    def remove(self) -> Node:
        """Detach this node from its parent and return it."""
        if self.parent is not None:
            del self.parent.children[self.index_in_parent()]
            self.parent = None
        return self

    def replace_with(self, replacement: Node | None) -> None:
        """Put ``replacement`` where this node is.

        A `Fragment` splices its children instead of being inserted
        itself; ``None`` simply removes this node.
        """
        if replacement is self:
            return
        parent = self.parent
        if parent is None:
            raise ValueError(f"cannot replace detached node {self!r}")
        nodes = _take_nodes(replacement)
        index = self.index_in_parent()
        for node in nodes:
            node.parent = parent
        parent.children[index : index + 1] = nodes
        self.parent = None


class TextNode(Node):
    """Character data. Stored unescaped, escaped on output."""

    __slots__ = ("text",)

    def __init__(self, text: str = "") -> None:
        super().__init__()
        self.text = text

    def to_html(self) -> str:
        return html_escape(self.text)

    @property
    def text_content(self) -> str:
        return self.text

    def clone(self, deep: bool = True) -> TextNode:
        return TextNode(self.text)

    def __repr__(self) -> str:
        preview = self.text if len(self.text) <= 30 else self.text[:27] + "..."
        return f"<TextNode {preview!r}>"


class Comment(Node):
    __slots__ = ("text",)

    def __init__(self, text: str = "") -> None:
        super().__init__()
        self.text = text

    def to_html(self) -> str:
        return f"<!--{self.text}-->"

    def clone(self, deep: bool = True) -> Comment:
        return Comment(self.text)

    def __repr__(self) -> str:
        return f"<Comment {self.text!r}>"


class Doctype(Node):
    """A ``<!...>`` declaration such as ``<!DOCTYPE html>``."""

    __slots__ = ("declaration",)

    def __init__(self, declaration: str = "DOCTYPE html") -> None:
        super().__init__()
        self.declaration = declaration

    def to_html(self) -> str:
        return f"<!{self.declaration}>"

    def clone(self, deep: bool = True) -> Doctype:
        return Doctype(self.declaration)


class CodeNode(Node):
    """An inline ``<% ... %>`` marker.

    ``source`` is everything between ``<%`` and ``%>``:

    - ``<%= expr %>`` → kind ``"output"``: escaped text
    - ``<%=HTML expr %>`` → kind ``"html"``: a node or raw markup
    - ``<% stmt %>`` → kind ``"statement"``: side effects only
    """

    __slots__ = ("lineno", "source")

    def __init__(self, source: str, lineno: int | None = None) -> None:
        super().__init__()
        self.source = source
        self.lineno = lineno

    @property
    def kind(self) -> str:
        if not self.source.startswith("="):
            return "statement"
        if len(self.source) > 5 and self.source[1:5] == "HTML":
            return "html"
        return "output"

    @property
    def code(self) -> str:
        """The expression or statement text without its marker prefix."""
        kind = self.kind
        if kind == "html":
            return self.source[5:]
        if kind == "output":
            return self.source[1:]
        return self.source

    def to_html(self) -> str:
        return f"<%{self.source}%>"

    def clone(self, deep: bool = True) -> CodeNode:
        return CodeNode(self.source, self.lineno)

    def __repr__(self) -> str:
        return f"<CodeNode {self.kind} {self.code.strip()!r}>"


class ParentNode(Node):
    """A node that owns an ordered child list."""

    __slots__ = ("children",)

    def __init__(self, children: Iterable[Node] | None = None) -> None:
        super().__init__()
        self.children: list[Node] = []
        if children:
            for child in children:
                self.append_child(child)

    # -- child list surgery -------------------------------------------------

    def append_child(self, node: Node) -> Node:
        for item in _take_nodes(node):
            item.parent = self
            self.children.append(item)
        return node

    def prepend_child(self, node: Node) -> Node:
        return self.insert_child(0, node)

    def insert_child(self, index: int, node: Node) -> Node:
        nodes = _take_nodes(node)
        for item in nodes:
            item.parent = self
        self.children[index:index] = nodes
        return node

    def steal_children(self, other: ParentNode) -> None:
        """Move all of ``other``'s children to the end of this node."""
        moved = other.children
        other.children = []
        for child in moved:
            child.parent = self
        self.children.extend(moved)

    def clear(self) -> None:
        for child in self.children:
            child.parent = None
        self.children = []

    # -- queries ------------------------------------------------------------

    def child_elements(self, tag: str | None = None) -> list[Element]:
        return [
            child
            for child in self.children
            if isinstance(child, Element) and (tag is None or child.tag == tag)
        ]

    def iter_elements(self) -> Iterator[Element]:
        """Yield descendant elements in document order."""
        for child in self.children:
            if isinstance(child, Element):
                yield child
                yield from child.iter_elements()

    def find_all(
        self,
        tag: str | None = None,
        *,
        attr: str | None = None,
        predicate: Callable[[Element], bool] | None = None,
    ) -> list[Element]:
        """Descendant elements matching every given criterion."""
        return [
            element
            for element in self.iter_elements()
            if (tag is None or element.tag == tag)
            and (attr is None or attr in element.attrs)
            and (predicate is None or predicate(element))
        ]

    def find(
        self,
        tag: str | None = None,
        *,
        attr: str | None = None,
        predicate: Callable[[Element], bool] | None = None,
    ) -> Element | None:
        for element in self.iter_elements():
            if (
                (tag is None or element.tag == tag)
                and (attr is None or attr in element.attrs)
                and (predicate is None or predicate(element))
            ):
                return element
        return None

    def get_element_by_id(self, element_id: str) -> Element | None:
        return self.find(predicate=lambda element: element.attrs.get("id") == element_id)

    @property
    def text_content(self) -> str:
        return "".join(child.text_content for child in self.children)

    @property
    def inner_html(self) -> str:
        return "".join(child.to_html() for child in self.children)

    def to_html(self) -> str:
        return self.inner_html


class Element(ParentNode):
    """A tagged node with attributes.

    Attributes:
        tag: Lower-case tag name
        attrs: Ordered attribute name → value mapping
        raw_source: Verbatim content of a raw element (``<script>``,
            embedded tags), or None for ordinary elements
    """

    __slots__ = ("attrs", "raw_source", "tag")

    def __init__(
        self,
        tag: str,
        attrs: Mapping[str, str] | None = None,
        children: Iterable[Node] | None = None,
        raw_source: str | None = None,
    ) -> None:
        super().__init__(children)
        self.tag = tag
        self.attrs: dict[str, str] = dict(attrs) if attrs else {}
        self.raw_source = raw_source

    # -- attributes ---------------------------------------------------------

    def get_attribute(self, name: str, default: str | None = None) -> str | None:
        return self.attrs.get(name, default)

    def set_attribute(self, name: str, value: str) -> None:
        self.attrs[name] = value

    def has_attribute(self, name: str) -> bool:
        return name in self.attrs

    def remove_attribute(self, name: str) -> None:
        self.attrs.pop(name, None)

    @property
    def class_list(self) -> list[str]:
        return self.attrs.get("class", "").split()

    def has_class(self, name: str) -> bool:
        return name in self.class_list

    def add_class(self, names: str) -> None:
        """Add each whitespace-separated class in ``names`` not yet present."""
        classes = self.class_list
        for name in names.split():
            if name not in classes:
                classes.append(name)
        self.attrs["class"] = " ".join(classes)

    # -- tree surgery -------------------------------------------------------

    def strip_out(self) -> None:
        """Replace this element by its own children (unwrap)."""
        fragment = Fragment()
        fragment.steal_children(self)
        self.replace_with(fragment)

    @property
    def inner_html(self) -> str:
        if self.raw_source is not None:
            return self.raw_source
        return super().inner_html

    @inner_html.setter
    def inner_html(self, markup: str) -> None:
        if self.raw_source is not None:
            self.raw_source = markup
            return
        from webtemplate.dom.parser import parse_fragment

        self.clear()
        self.append_child(parse_fragment(markup))

    @property
    def text_content(self) -> str:
        if self.raw_source is not None:
            return self.raw_source
        return super().text_content

    @text_content.setter
    def text_content(self, text: str) -> None:
        if self.raw_source is not None:
            self.raw_source = text
            return
        self.clear()
        self.append_child(TextNode(text))

    def clone(self, deep: bool = True) -> Element:
        copy = Element(self.tag, self.attrs, raw_source=self.raw_source)
        if deep:
            for child in self.children:
                copy.append_child(child.clone(deep=True))
        return copy

    def to_html(self) -> str:
        attrs = "".join(f' {name}="{escape_attribute(value)}"' for name, value in self.attrs.items())
        if self.tag in VOID_TAGS:
            return f"<{self.tag}{attrs}>"
        return f"<{self.tag}{attrs}>{self.inner_html}</{self.tag}>"

    def __repr__(self) -> str:
        return f"<Element {self.tag} {self.attrs!r}>" if self.attrs else f"<Element {self.tag}>"


class Fragment(ParentNode):
    """Ordered siblings without a tag of their own.

    Inserting or replacing with a Fragment moves its children into the
    target position and leaves the fragment empty.
    """

    __slots__ = ()

    def clone(self, deep: bool = True) -> Fragment:
        copy = Fragment()
        if deep:
            for child in self.children:
                copy.append_child(child.clone(deep=True))
        return copy

    def __repr__(self) -> str:
        return f"<Fragment {len(self.children)} nodes>"


class Document(ParentNode):
    """A parsed or composed document.

    Attributes:
        name: Template name the document was loaded from, if any
    """

    __slots__ = ("name",)

    def __init__(self, children: Iterable[Node] | None = None, name: str | None = None) -> None:
        super().__init__(children)
        self.name = name

    @property
    def root(self) -> Element:
        """The first top-level element."""
        for child in self.children:
            if isinstance(child, Element):
                return child
        raise ValueError(f"document {self.name or '<string>'} has no root element")

    def clone(self, deep: bool = True) -> Document:
        copy = Document(name=self.name)
        if deep:
            for child in self.children:
                copy.append_child(child.clone(deep=True))
        return copy

    def __repr__(self) -> str:
        return f"<Document {self.name or '<string>'}>"


def _take_nodes(node: Node | None) -> list[Node]:
    """Detach ``node`` (or a fragment's children) ready for insertion."""
    if node is None:
        return []
    if isinstance(node, Fragment):
        nodes = node.children
        node.children = []
        for child in nodes:
            child.parent = None
        return nodes
    node.remove()
    return [node]
