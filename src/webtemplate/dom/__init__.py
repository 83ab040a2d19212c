"""Markup tree and parser used by the expansion engine."""

from webtemplate.dom.nodes import (
    CodeNode,
    Comment,
    Doctype,
    Document,
    Element,
    Fragment,
    Node,
    ParentNode,
    TextNode,
)
from webtemplate.dom.parser import MarkupParser, parse_fragment, parse_markup

__all__ = [
    "CodeNode",
    "Comment",
    "Doctype",
    "Document",
    "Element",
    "Fragment",
    "MarkupParser",
    "Node",
    "ParentNode",
    "TextNode",
    "parse_fragment",
    "parse_markup",
]
