"""Markup parser: template text → node tree.

A forgiving HTML-ish scanner built for templates rather than for
browsers:

- ``/>`` closes any element, not only void ones
- HTML void elements (``<input>``, ``<br>``, ...) never take children
- stray end tags are ignored; unclosed elements end at end of input
- raw elements keep their content verbatim in ``Element.raw_source``
- outside raw elements, ``<% ... %>`` becomes a `CodeNode`

Raw elements default to ``<script>`` and ``<style>``; the Environment adds
the name of every registered embedded tag so their content reaches the
translator untouched.

Example:
    >>> doc = parse_markup('<p class="x">Hi <%= name %></p>')
    >>> doc.root.children
    [<TextNode 'Hi '>, <CodeNode output 'name'>]

"""

from __future__ import annotations

import html
import re
from collections.abc import Iterable

from webtemplate.dom.nodes import (
    CodeNode,
    Comment,
    Doctype,
    Document,
    Element,
    Fragment,
    ParentNode,
    TextNode,
)
from webtemplate.environment.exceptions import ErrorCode, TemplateSyntaxError
from webtemplate.utils.constants import (
    DEFAULT_RAW_TAGS,
    MARKER_CLOSE,
    MARKER_OPEN,
    VOID_TAGS,
)


class MarkupParser:
    """Single-pass scanner producing a `Document`.

    Attributes:
        source: Template text being parsed
        raw_tags: Lower-case names of elements whose content is verbatim
        name: Template name for error messages
    """

    __slots__ = ("_doc", "_pos", "_stack", "name", "raw_tags", "source")

    # Compiled once at class level (immutable)
    _START_TAG_RE = re.compile(
        r"""<(?P<tag>[A-Za-z][^\s/>]*)"""
        r"""(?P<attrs>(?:\s+[^\s=/>"']+(?:\s*=\s*(?:"[^"]*"|'[^']*'|[^\s"'=<>`]+))?)*)"""
        r"""\s*(?P<self_closing>/?)>""",
        re.S,
    )
    _ATTR_RE = re.compile(
        r"""(?P<name>[^\s=/>"']+)(?:\s*=\s*(?:"(?P<dq>[^"]*)"|'(?P<sq>[^']*)'|(?P<bare>[^\s"'=<>`]+)))?""",
        re.S,
    )
    _END_TAG_RE = re.compile(r"</\s*(?P<tag>[A-Za-z][^\s/>]*)\s*>")

    def __init__(
        self,
        source: str,
        raw_tags: Iterable[str] = DEFAULT_RAW_TAGS,
        name: str | None = None,
    ):
        self.source = source
        self.raw_tags = frozenset(tag.lower() for tag in raw_tags)
        self.name = name
        self._pos = 0
        self._doc = Document(name=name)
        self._stack: list[ParentNode] = [self._doc]

    def parse(self) -> Document:
        source = self.source
        end = len(source)
        while self._pos < end:
            lt = source.find("<", self._pos)
            if lt == -1:
                self._emit_text(source[self._pos :])
                break
            if lt > self._pos:
                self._emit_text(source[self._pos : lt])
            self._pos = lt
            if source.startswith(MARKER_OPEN, lt):
                self._scan_code()
            elif source.startswith("<!--", lt):
                self._scan_comment()
            elif source.startswith("<!", lt):
                self._scan_declaration()
            elif source.startswith("</", lt):
                self._scan_end_tag()
            else:
                self._scan_start_tag()
        return self._doc

    # -- scanners -----------------------------------------------------------

    def _scan_code(self) -> None:
        start = self._pos
        close = self.source.find(MARKER_CLOSE, start + len(MARKER_OPEN))
        if close == -1:
            raise self._error("Unclosed '<%' marker: expected '%>'", start, ErrorCode.UNCLOSED_MARKER)
        code = self.source[start + len(MARKER_OPEN) : close]
        self._append(CodeNode(code, lineno=self._lineno(start)))
        self._pos = close + len(MARKER_CLOSE)

    def _scan_comment(self) -> None:
        start = self._pos + 4
        close = self.source.find("-->", start)
        if close == -1:
            self._append(Comment(self.source[start:]))
            self._pos = len(self.source)
            return
        self._append(Comment(self.source[start:close]))
        self._pos = close + 3

    def _scan_declaration(self) -> None:
        close = self.source.find(">", self._pos)
        if close == -1:
            self._emit_text(self.source[self._pos :])
            self._pos = len(self.source)
            return
        self._append(Doctype(self.source[self._pos + 2 : close]))
        self._pos = close + 1

    def _scan_end_tag(self) -> None:
        match = self._END_TAG_RE.match(self.source, self._pos)
        if match is None:
            self._emit_text("<")
            self._pos += 1
            return
        self._close(match.group("tag").lower())
        self._pos = match.end()

    def _scan_start_tag(self) -> None:
        match = self._START_TAG_RE.match(self.source, self._pos)
        if match is None:
            self._emit_text("<")
            self._pos += 1
            return

        tag = match.group("tag").lower()
        element = Element(tag, self._parse_attributes(match.group("attrs")))
        self._append(element)
        self._pos = match.end()

        if match.group("self_closing") or tag in VOID_TAGS:
            return
        if tag in self.raw_tags:
            self._scan_raw_content(element, match.start())
            return
        self._stack.append(element)

    def _scan_raw_content(self, element: Element, tag_start: int) -> None:
        closing = re.compile(r"</\s*" + re.escape(element.tag) + r"\s*>", re.I)
        match = closing.search(self.source, self._pos)
        if match is None:
            raise self._error(
                f"Unclosed raw element <{element.tag}>: expected </{element.tag}>",
                tag_start,
                ErrorCode.UNCLOSED_RAW_TAG,
            )
        element.raw_source = self.source[self._pos : match.start()]
        self._pos = match.end()

    # -- helpers ------------------------------------------------------------

    def _parse_attributes(self, text: str) -> dict[str, str]:
        attrs: dict[str, str] = {}
        for match in self._ATTR_RE.finditer(text):
            name = match.group("name").lower()
            value = match.group("dq")
            if value is None:
                value = match.group("sq")
            if value is None:
                value = match.group("bare")
            attrs.setdefault(name, html.unescape(value) if value else "")
        return attrs

    def _append(self, node) -> None:
        self._stack[-1].append_child(node)

    def _emit_text(self, raw: str) -> None:
        if not raw:
            return
        text = html.unescape(raw)
        parent = self._stack[-1]
        if parent.children and isinstance(parent.children[-1], TextNode):
            parent.children[-1].text += text
        else:
            parent.append_child(TextNode(text))

    def _close(self, tag: str) -> None:
        for depth in range(len(self._stack) - 1, 0, -1):
            node = self._stack[depth]
            if isinstance(node, Element) and node.tag == tag:
                del self._stack[depth:]
                return

    def _lineno(self, offset: int) -> int:
        return self.source.count("\n", 0, offset) + 1

    def _error(self, message: str, offset: int, code: ErrorCode) -> TemplateSyntaxError:
        line_start = self.source.rfind("\n", 0, offset) + 1
        return TemplateSyntaxError(
            message,
            lineno=self._lineno(offset),
            name=self.name,
            source=self.source,
            col_offset=offset - line_start,
            code=code,
        )


def parse_markup(
    source: str,
    raw_tags: Iterable[str] = DEFAULT_RAW_TAGS,
    *,
    name: str | None = None,
) -> Document:
    """Parse template text into a `Document`."""
    return MarkupParser(source, raw_tags, name).parse()


def parse_fragment(source: str, raw_tags: Iterable[str] = DEFAULT_RAW_TAGS) -> Fragment:
    """Parse template text into a detached `Fragment` of top-level nodes."""
    fragment = Fragment()
    fragment.steal_children(parse_markup(source, raw_tags))
    return fragment
