"""Environment: configuration plus the skeleton composer.

An Environment is the central object of webtemplate. It owns the
template loader, the embedded tag translators and the expansion engine,
and ``render_template()`` composes one finished page from two templates:

    ```
    skeleton.html  ──parse──► expand(skeleton ctx) ──► rebase nav links ─┐
                                                                          ├─► merge ─► post_process
    page.html ──parse in <root>──► expand(content ctx) ───────────────────┘
    ```

Merge Steps (in order):
1. ``body-class`` on the template's top-level ``<main>`` is added to the
   skeleton's ``<body>`` classes and removed from ``<main>``
2. The skeleton's ``<main>`` is replaced by the template's ``<main>``
3. A top-level ``<title>`` in the template replaces the inner markup of
   the skeleton's ``<head><title>``
4. Every other top-level template element with an ``id`` replaces the
   skeleton element with the same id
5. ``<document-fragment>`` wrappers left in the skeleton are unwrapped

Thread-Safety:
Configuration is fixed after construction; every render creates its own
trees and Contexts, so one Environment can serve concurrent renders.

Example:
    >>> env = Environment(loader=DictLoader({
    ...     "skeleton.html": "<html><head><title></title></head><body><main></main></body></html>",
    ...     "hello.html": "<main>Hello, <%= name %>!</main><title>Greeting</title>",
    ... }))
    >>> doc = env.render_template("hello.html", {"name": "World"})
    >>> doc.find("main").text_content
    'Hello, World!'

"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any

from webtemplate.context import Context
from webtemplate.dom.nodes import Comment, Document, Element, ParentNode
from webtemplate.dom.parser import parse_markup
from webtemplate.environment.exceptions import StructuralMergeError, TemplateRenderError
from webtemplate.environment.globals import DEFAULT_GLOBALS
from webtemplate.environment.loaders import FileSystemLoader, TemplateLoader
from webtemplate.render_context import render_context
from webtemplate.template.core import EmbeddedTagTranslator, TemplateExpander
from webtemplate.utils.constants import (
    BODY_CLASS_ATTR,
    BODY_TAG,
    DEFAULT_RAW_TAGS,
    DEFAULT_SKELETON_NAME,
    DEFAULT_TEMPLATE_DIRECTORY,
    DOCUMENT_FRAGMENT_TAG,
    HEAD_TAG,
    MAIN_TAG,
    RELATIVE_TO_ATTR,
    TITLE_TAG,
    WRAPPER_TAG,
)
from webtemplate.utils.uri import resolve_relative

logger = logging.getLogger(__name__)

ContextLike = Context | Mapping[str, Any] | None


def as_context(value: ContextLike) -> Context:
    """Return ``value`` as a Context, wrapping plain mappings."""
    if isinstance(value, Context):
        return value
    return Context(value)


@dataclass
class Environment:
    """Central configuration and entry point for rendering templates.

    Attributes:
        loader: Template source (default: ``FileSystemLoader("templates/")``)
        embedded_tags: Tag name → translator called with the element's raw
            inner source and its attributes
        skeleton_name: Skeleton used when ``render_template()`` gets none
        raw_tags: Tags whose content is parsed verbatim; embedded tag
            names are always added
        debug: Mark partials and the composed page with HTML comments

    Subclasses may override ``add_default_functions()`` to bind more
    names into every render scope and ``post_process()`` to rewrite the
    finished document.
    """

    loader: TemplateLoader | None = None
    embedded_tags: Mapping[str, EmbeddedTagTranslator] = field(default_factory=dict)
    skeleton_name: str = DEFAULT_SKELETON_NAME
    raw_tags: tuple[str, ...] = DEFAULT_RAW_TAGS
    debug: bool = False

    _expander: TemplateExpander = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        if self.loader is None:
            self.loader = FileSystemLoader(DEFAULT_TEMPLATE_DIRECTORY)
        self._expander = TemplateExpander(
            self.loader,
            embedded_tags=self.embedded_tags,
            raw_tags=self.raw_tags,
            debug=self.debug,
        )

    @property
    def all_raw_tags(self) -> tuple[str, ...]:
        """Configured raw tags plus every embedded tag name."""
        return self._expander.raw_tags

    # -- parsing and expansion ------------------------------------------------

    def parse_template(self, text: str, *, wrap: bool = False, name: str | None = None) -> Document:
        """Parse template markup.

        Args:
            text: Template source
            wrap: Enclose the source in a synthetic ``<root>`` element so
                several top-level siblings share one root
            name: Template name for error messages
        """
        if wrap:
            text = f"<{WRAPPER_TAG}>{text}</{WRAPPER_TAG}>"
        return parse_markup(text, self.all_raw_tags, name=name)

    def load_template(self, name: str, *, wrap: bool = False) -> Document:
        """Load ``name`` through the loader and parse it."""
        return self.parse_template(self.loader.load_markup(name), wrap=wrap, name=name)

    def expand(self, root: ParentNode, context: ContextLike = None) -> None:
        """Expand ``root`` in place against ``context``."""
        self._expander.expand(root, as_context(context))

    def add_default_functions(self, context: Context) -> None:
        """Bind the default helpers, ``meta`` and ``data`` into ``context``.

        Names the caller already bound are left alone; ``meta`` and
        ``data`` become empty mappings when unbound or None so templates
        can read ``data.anything`` safely.
        """
        for name, value in DEFAULT_GLOBALS.items():
            context.setdefault(name, value)
        for name in ("meta", "data"):
            if context.get(name) is None:
                context[name] = {}

    def post_process(self, document: Document) -> None:
        """Hook run on the composed document. Does nothing by default."""

    # -- composition ------------------------------------------------------------

    def render_template(
        self,
        template_name: str,
        context: ContextLike = None,
        skeleton_context: ContextLike = None,
        skeleton_name: str | None = None,
    ) -> Document:
        """Render ``template_name`` inside its skeleton.

        Args:
            template_name: Content template; its top-level ``<main>`` is
                required
            context: Bindings for the content template
            skeleton_context: Bindings for the skeleton
            skeleton_name: Skeleton template (default: ``skeleton_name``
                of this Environment)

        Returns:
            The composed skeleton document

        Raises:
            TemplateRenderError: Wrapping whatever failed while loading,
                expanding or merging
        """
        context = as_context(context)
        skeleton_context = as_context(skeleton_context)
        try:
            document = self._compose(
                template_name,
                context,
                skeleton_context,
                skeleton_name or self.skeleton_name,
            )
        except Exception as e:
            raise TemplateRenderError(template_name, context, e) from e
        return document

    def _compose(
        self,
        template_name: str,
        context: Context,
        skeleton_context: Context,
        skeleton_name: str,
    ) -> Document:
        self.add_default_functions(context)
        self.add_default_functions(skeleton_context)

        skeleton = self.load_template(skeleton_name)
        document = self.load_template(template_name, wrap=True)

        logger.debug("Expanding skeleton %s", skeleton_name)
        with render_context(skeleton_name):
            self._expander.expand(skeleton.root, skeleton_context)
        _rebase_links(skeleton)

        logger.debug("Expanding template %s", template_name)
        with render_context(template_name):
            self._expander.expand(document.root, context)

        logger.debug("Merging %s into %s", template_name, skeleton_name)
        _merge(skeleton, document.root, template_name, skeleton_name)

        if self.debug:
            skeleton.root.prepend_child(Comment(f" {template_name} inside {skeleton_name} "))

        self.post_process(skeleton)
        return skeleton


def _rebase_links(skeleton: Document) -> None:
    for container in skeleton.find_all(attr=RELATIVE_TO_ATTR):
        base = container.attrs[RELATIVE_TO_ATTR]
        for anchor in container.find_all("a", attr="href"):
            anchor.attrs["href"] = resolve_relative(anchor.attrs["href"], base)


def _merge(skeleton: Document, content: Element, template_name: str, skeleton_name: str) -> None:
    content_main = _require(content.child_elements(MAIN_TAG), MAIN_TAG, template_name)

    body_class = content_main.attrs.get(BODY_CLASS_ATTR)
    if body_class is not None:
        body = _require(skeleton.find(BODY_TAG), BODY_TAG, skeleton_name)
        body.add_class(body_class)
        content_main.remove_attribute(BODY_CLASS_ATTR)

    _require(skeleton.find(MAIN_TAG), MAIN_TAG, skeleton_name).replace_with(content_main)

    titles = content.child_elements(TITLE_TAG)
    if titles:
        heads = skeleton.root.child_elements(HEAD_TAG)
        head_title = _require(
            heads[0].child_elements(TITLE_TAG) if heads else None,
            f"{HEAD_TAG} > {TITLE_TAG}",
            skeleton_name,
        )
        head_title.inner_html = titles[0].inner_html

    for element in content.child_elements():
        element_id = element.attrs.get("id")
        if element_id is None:
            continue
        target = _require(skeleton.get_element_by_id(element_id), f"#{element_id}", skeleton_name)
        target.replace_with(element)

    for wrapper in skeleton.find_all(DOCUMENT_FRAGMENT_TAG):
        wrapper.strip_out()


def _require(found: Element | list[Element] | None, target: str, document_name: str) -> Element:
    if isinstance(found, list):
        found = found[0] if found else None
    if found is None:
        raise StructuralMergeError(
            "Cannot merge template into skeleton",
            target=target,
            document_name=document_name,
        )
    return found
