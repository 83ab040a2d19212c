"""webtemplate: recursive HTML template expansion with skeleton composition.

Templates are ordinary HTML with a handful of control elements and inline
Python expressions. A page template is expanded against a Context and
merged into a skeleton page that supplies the shared chrome.

Quickstart:
    >>> from webtemplate import DictLoader, Environment
    >>> env = Environment(loader=DictLoader({
    ...     "skeleton.html": "<html><head><title></title></head>"
    ...                      "<body><main></main></body></html>",
    ...     "hello.html": "<main>Hello, <%= name %>!</main><title>Hi</title>",
    ... }))
    >>> str(env.render_template("hello.html", {"name": "World"}))
    '<html><head><title>Hi</title></head><body><main>Hello, World!</main></body></html>'

Template Syntax:
    ```html
    <h1 class="<%= kind %>"><%= title %></h1>
    <if-true cond="user">Welcome back</if-true>
    <or-else>Please sign in</or-else>
    <for-each over="items" as="item" index="i">
        <li><%= i %>: <%= item.name %></li>
    </for-each>
    <or-else><p>Nothing here.</p></or-else>
    <render-template file="card.html" data='{"compact": true}'/>
    <hidden-form-data from="filters" name="f"/>
    <form onrender="this.populate_from(data.form)">...</form>
    <script>const config = <%= config %>;</script>
    ```

Architecture:
Loader → MarkupParser → Element tree → TemplateExpander (in place) →
Environment merges content into skeleton → Document

Pipeline stages:
1. **Loader**: resolves a template name to markup text
2. **Parser**: builds a mutable Element tree (``<% %>`` become CodeNodes)
3. **Expander**: evaluates markers and control elements against a Context
4. **Composer**: merges the expanded template into the expanded skeleton

Errors:
Any failure aborts the render. ``render_template()`` raises a single
``TemplateRenderError`` naming the template, with the original error as
its ``cause``.

"""

from webtemplate.environment import (
    ChoiceLoader,
    DictLoader,
    Environment,
    ErrorCode,
    EvaluationError,
    FileSystemLoader,
    FunctionLoader,
    SourceSnippet,
    StructuralMergeError,
    TemplateError,
    TemplateLoader,
    TemplateNotFoundError,
    TemplateRenderError,
    TemplateSyntaxError,
    UndefinedError,
    build_source_snippet,
)
from webtemplate.context import Context
from webtemplate.dom import Document, Element, Fragment, TextNode, parse_fragment, parse_markup
from webtemplate.render_context import RenderContext, get_render_context, render_context
from webtemplate.template import UNDEFINED, EmbeddedTagResult, populate_form
from webtemplate.utils.html import Markup, html_escape
from webtemplate.utils.text import multi_replace

__version__ = "0.1.0"


def render_template(
    name: str,
    context=None,
    skeleton_context=None,
    skeleton_name: str | None = None,
    loader: TemplateLoader | None = None,
) -> Document:
    """Render ``name`` inside its skeleton with a default Environment.

    Shorthand for ``Environment(loader=loader).render_template(...)``;
    ``loader`` defaults to ``FileSystemLoader("templates/")``.
    """
    return Environment(loader=loader).render_template(
        name,
        context,
        skeleton_context,
        skeleton_name,
    )


__all__ = [
    "UNDEFINED",
    "ChoiceLoader",
    "Context",
    "DictLoader",
    "Document",
    "Element",
    "EmbeddedTagResult",
    "Environment",
    "ErrorCode",
    "EvaluationError",
    "FileSystemLoader",
    "Fragment",
    "FunctionLoader",
    "Markup",
    "RenderContext",
    "SourceSnippet",
    "StructuralMergeError",
    "TemplateError",
    "TemplateLoader",
    "TemplateNotFoundError",
    "TemplateRenderError",
    "TemplateSyntaxError",
    "TextNode",
    "UndefinedError",
    "__version__",
    "build_source_snippet",
    "get_render_context",
    "html_escape",
    "multi_replace",
    "parse_fragment",
    "parse_markup",
    "populate_form",
    "render_context",
    "render_template",
]
