"""Per-render state kept out of the user's Context.

The template name and the chain of partials being expanded are tracked in
a ContextVar so error messages can report where a failure happened without
injecting bookkeeping keys into the variables templates see.

Thread Safety:
    ContextVars are per thread and per async task, so concurrent renders
    never observe each other's state.

"""

from __future__ import annotations

from collections.abc import Iterator
from contextlib import contextmanager
from contextvars import ContextVar, Token
from dataclasses import dataclass, field


@dataclass
class RenderContext:
    """Bookkeeping for one ``render_template()`` or ``expand()`` call.

    Attributes:
        template_name: Template currently being expanded
        template_stack: Names of the templates entered so far, outermost first
    """

    template_name: str | None = None
    template_stack: list[str] = field(default_factory=list)

    def child_context(self, template_name: str) -> RenderContext:
        """Create the state for a nested partial.

        The child shares nothing mutable with its parent except through
        the explicit fields copied here.
        """
        stack = self.template_stack.copy()
        stack.append(template_name)
        return RenderContext(template_name=template_name, template_stack=stack)


_render_context: ContextVar[RenderContext | None] = ContextVar(
    "webtemplate_render_context",
    default=None,
)


def get_render_context() -> RenderContext | None:
    """Current RenderContext, or None outside of a render."""
    return _render_context.get()


@contextmanager
def render_context(template_name: str | None = None) -> Iterator[RenderContext]:
    """Make a fresh RenderContext current for the duration of the block.

    Example:
        with render_context(template_name="page.html") as ctx:
            env.expand(document.root, context)
    """
    stack = [template_name] if template_name else []
    ctx = RenderContext(template_name=template_name, template_stack=stack)
    token: Token[RenderContext | None] = _render_context.set(ctx)
    try:
        yield ctx
    finally:
        _render_context.reset(token)


@contextmanager
def partial_context(template_name: str) -> Iterator[RenderContext]:
    """Enter a partial: push its name for the duration of the block."""
    parent = _render_context.get()
    if parent is None:
        ctx = RenderContext(template_name=template_name, template_stack=[template_name])
    else:
        ctx = parent.child_context(template_name)
    token = _render_context.set(ctx)
    try:
        yield ctx
    finally:
        _render_context.reset(token)
