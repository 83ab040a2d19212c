"""Expression evaluator for inline template code.

Template code is Python: ``<%= user.name %>`` and ``cond="items"`` are
expressions, ``<% total = 0 %>`` and ``onrender="..."`` are statements.
Sources are parsed with ``ast``, rewritten, compiled and cached per
distinct text, then run with the render Context as the locals namespace.

Rewrites:
- Attribute reads ``a.b`` become ``_wt_getattr(a, "b")`` so mappings
  (decoded JSON, plain dicts) can be read with dot syntax and missing
  names give ``UNDEFINED`` instead of raising.
- Call targets ``a.b(...)`` become ``_wt_getmethod(a, "b")(...)``: a
  mapping key named ``b`` wins, otherwise the method is used.
- Dunder attribute access is rejected at compile time.

Scoping:
Reads walk the Context chain, then a restricted builtins table.
Assignments made by statements land in the innermost Context only.

Example:
    >>> ctx = Context({"data": {"x": 1}})
    >>> evaluate("data.x + 1", ctx)
    2
    >>> execute("y = data.x * 10", ctx)
    >>> ctx.local_bindings["y"]
    10

"""

from __future__ import annotations

import ast
import builtins
import textwrap
import types
from functools import lru_cache
from typing import Any

from webtemplate.context import Context
from webtemplate.environment.exceptions import (
    ErrorCode,
    EvaluationError,
    TemplateError,
    TemplateSyntaxError,
    UndefinedError,
)
from webtemplate.render_context import get_render_context
from webtemplate.template.helpers import UNDEFINED, safe_getattr, safe_getmethod

_GETATTR_NAME = "_wt_getattr"
_GETMETHOD_NAME = "_wt_getmethod"

_SAFE_BUILTIN_NAMES = (
    "abs",
    "all",
    "any",
    "bool",
    "dict",
    "divmod",
    "enumerate",
    "filter",
    "float",
    "format",
    "int",
    "isinstance",
    "len",
    "list",
    "map",
    "max",
    "min",
    "range",
    "repr",
    "reversed",
    "round",
    "set",
    "sorted",
    "str",
    "sum",
    "tuple",
    "zip",
)

SAFE_BUILTINS: dict[str, Any] = {name: getattr(builtins, name) for name in _SAFE_BUILTIN_NAMES}
SAFE_BUILTINS.update({"None": None, "True": True, "False": False})


class _AttributeRewriter(ast.NodeTransformer):
    """Route attribute reads through the template getattr."""

    def visit_Call(self, node: ast.Call) -> ast.AST:
        func = node.func
        if (
            not isinstance(func, ast.Attribute)
            or not isinstance(func.ctx, ast.Load)
            or func.attr.startswith("__")
        ):
            self.generic_visit(node)
            return node
        target = ast.Call(
            func=ast.Name(id=_GETMETHOD_NAME, ctx=ast.Load()),
            args=[self.visit(func.value), ast.Constant(value=func.attr)],
            keywords=[],
        )
        node.func = ast.copy_location(target, func)
        node.args = [self.visit(arg) for arg in node.args]
        node.keywords = [self.visit(keyword) for keyword in node.keywords]
        return node

    def visit_Attribute(self, node: ast.Attribute) -> ast.AST:
        self.generic_visit(node)
        if node.attr.startswith("__"):
            raise TemplateSyntaxError(
                f"Access to attribute '{node.attr}' is not allowed",
                lineno=node.lineno,
                col_offset=node.col_offset,
                code=ErrorCode.INVALID_EXPRESSION,
            )
        if not isinstance(node.ctx, ast.Load):
            return node
        call = ast.Call(
            func=ast.Name(id=_GETATTR_NAME, ctx=ast.Load()),
            args=[node.value, ast.Constant(value=node.attr)],
            keywords=[],
        )
        return ast.copy_location(call, node)


@lru_cache(maxsize=1024)
def compile_source(source: str, mode: str = "eval") -> types.CodeType:
    """Compile template code once per distinct ``(source, mode)``.

    Args:
        source: Expression (``mode="eval"``) or statements (``mode="exec"``)
        mode: ``"eval"`` or ``"exec"``

    Raises:
        TemplateSyntaxError: If the source is empty or not valid Python
    """
    text = textwrap.dedent(source).strip()
    kind = "expression" if mode == "eval" else "statement"
    if not text:
        raise TemplateSyntaxError(f"Empty {kind}", code=ErrorCode.INVALID_EXPRESSION)
    try:
        tree = ast.parse(text, mode=mode)
    except SyntaxError as e:
        raise TemplateSyntaxError(
            f"Invalid {kind} {text!r}: {e.msg}",
            lineno=e.lineno,
            source=text,
            col_offset=(e.offset - 1) if e.offset else None,
            code=ErrorCode.INVALID_EXPRESSION,
        ) from None
    tree = _AttributeRewriter().visit(tree)
    ast.fix_missing_locations(tree)
    return compile(tree, "<template>", mode)


def _namespace(context: Context) -> dict[str, Any]:
    # Nested scopes (lambdas, generator expressions) resolve through
    # globals, so visible bindings are mirrored there as well.
    namespace = context.flatten()
    namespace["__builtins__"] = SAFE_BUILTINS
    namespace[_GETATTR_NAME] = safe_getattr
    namespace[_GETMETHOD_NAME] = safe_getmethod
    return namespace


def _run(source: str, context: Context, mode: str) -> Any:
    code = compile_source(source, mode)
    render_ctx = get_render_context()
    template_name = render_ctx.template_name if render_ctx else None
    template_stack = list(render_ctx.template_stack) if render_ctx else None
    try:
        if mode == "eval":
            return eval(code, _namespace(context), context)
        exec(code, _namespace(context), context)
        return None
    except TemplateError:
        raise
    except NameError as e:
        name = getattr(e, "name", None) or str(e)
        raise UndefinedError(
            name,
            expression=source.strip(),
            template_name=template_name,
            available_names=context.names(),
            template_stack=template_stack,
        ) from None
    except Exception as e:
        raise EvaluationError(
            f"{type(e).__name__}: {e}",
            expression=source.strip(),
            template_name=template_name,
            template_stack=template_stack,
        ) from e


def evaluate(source: str, context: Context) -> Any:
    """Evaluate an expression against ``context`` and return its value.

    Raises:
        TemplateSyntaxError: If the expression does not parse
        UndefinedError: If it references an unbound name
        EvaluationError: If evaluation raises anything else
    """
    return _run(source, context, "eval")


def execute(source: str, context: Context) -> None:
    """Run statements against ``context`` for their side effects."""
    _run(source, context, "exec")


__all__ = [
    "SAFE_BUILTINS",
    "UNDEFINED",
    "compile_source",
    "evaluate",
    "execute",
]
