"""Exceptions for the webtemplate expansion engine.

Exception Hierarchy:
TemplateError (base)
├── TemplateSyntaxError       # Malformed marker, control element or markup
├── TemplateNotFoundError     # Loader cannot resolve a template name
├── EvaluationError           # Expression/statement failed while expanding
│   └── UndefinedError        # Unknown name in an expression
├── StructuralMergeError      # Skeleton/template lacks a merge target
└── TemplateRenderError       # Top-level wrapper raised by render_template()

Nothing inside expansion or composition recovers from an error. The first
failure aborts the render and ``Environment.render_template()`` wraps it
exactly once in a ``TemplateRenderError`` that carries the template name,
the content context and the underlying cause:

    ```
    TemplateRenderError: Exception in template page.html: W-RUN-001: Undefined
    variable 'titel' in page.html. Did you mean 'title'?
    ```

"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING, Any

from webtemplate.environment import terminal

if TYPE_CHECKING:
    from webtemplate.context import Context


class ErrorCode(Enum):
    """Searchable error codes.

    Format: W-{CATEGORY}-{NUMBER}
    Categories: LEX (markup scanning), PAR (template structure),
    RUN (evaluation), TPL (template loading/rendering), MRG (skeleton merge)
    """

    UNCLOSED_MARKER = "W-LEX-001"
    UNCLOSED_RAW_TAG = "W-LEX-002"

    MISSING_ATTRIBUTE = "W-PAR-001"
    INVALID_EXPRESSION = "W-PAR-002"
    INVALID_DATA = "W-PAR-003"

    UNDEFINED_VARIABLE = "W-RUN-001"
    EVALUATION_FAILED = "W-RUN-002"
    NOT_ITERABLE = "W-RUN-003"

    TEMPLATE_NOT_FOUND = "W-TPL-001"
    RENDER_FAILED = "W-TPL-002"

    MISSING_MERGE_TARGET = "W-MRG-001"

    @property
    def category(self) -> str:
        """Error category (e.g., 'runtime', 'lexer', 'merge')."""
        prefix = self.value.split("-")[1]
        return {
            "LEX": "lexer",
            "PAR": "parser",
            "RUN": "runtime",
            "TPL": "template",
            "MRG": "merge",
        }.get(prefix, "unknown")


# ---------------------------------------------------------------------------
# Source snippets
# ---------------------------------------------------------------------------


def format_template_stack(stack: list[str] | None) -> str:
    """Format the chain of partials being rendered when an error occurred.

    Example:
        >>> print(format_template_stack(["page.html", "partials/nav.html"]))
        Template stack:
          • page.html
          • partials/nav.html
    """
    if not stack:
        return ""
    lines = [terminal.dim_text("Template stack:")]
    for name in stack:
        lines.append(f"  • {terminal.location(name)}")
    return "\n".join(lines)


@dataclass(frozen=True, slots=True)
class SourceSnippet:
    """Template source lines around an error, for display.

    Attributes:
        lines: Tuple of (line_number, line_content) pairs around the error.
        error_line: The 1-based line number where the error occurred.
        column: Optional column offset for a caret pointer.
    """

    lines: tuple[tuple[int, str], ...]
    error_line: int
    column: int | None = None

    def format(self) -> str:
        parts: list[str] = [terminal.dim_text("   |")]
        for lineno, content in self.lines:
            parts.append(
                terminal.format_source_line(lineno, content, is_error=lineno == self.error_line)
            )
        if self.column is not None:
            caret = " " * self.column + "^"
            parts.append(f"{terminal.dim_text('     |')} {terminal.colorize(caret, 'bright_red')}")
        parts.append(terminal.dim_text("   |"))
        return "\n".join(parts)


def build_source_snippet(
    source: str,
    error_line: int,
    *,
    context_lines: int = 2,
    column: int | None = None,
) -> SourceSnippet:
    """Build a SourceSnippet showing ``context_lines`` around ``error_line``."""
    all_lines = source.splitlines()
    start = max(0, error_line - 1 - context_lines)
    end = min(len(all_lines), error_line + context_lines)
    lines = tuple((i + 1, all_lines[i]) for i in range(start, end))
    return SourceSnippet(lines=lines, error_line=error_line, column=column)


class TemplateError(Exception):
    """Base exception for all webtemplate errors.

    Attributes:
        code: Optional ErrorCode for searchable error identification.
    """

    code: ErrorCode | None = None

    def format_compact(self) -> str:
        """Format the error as a short diagnostic without traceback noise."""
        header = str(self)
        if self.code and self.code.value not in header:
            header = f"{self.code.value}: {header}"
        return header


class TemplateNotFoundError(TemplateError):
    """The loader could not resolve a template name.

    Example:
        >>> DictLoader({"page.html": ""}).load_markup("pgae.html")
        TemplateNotFoundError: Template 'pgae.html' not found. Did you mean 'page.html'?
    """

    code: ErrorCode | None = ErrorCode.TEMPLATE_NOT_FOUND


class TemplateSyntaxError(TemplateError):
    """Malformed template: bad marker, control element or markup.

    When ``source`` and ``lineno`` are provided the message includes the
    offending line, with a caret when ``col_offset`` is known.
    """

    code: ErrorCode | None = ErrorCode.INVALID_EXPRESSION

    def __init__(
        self,
        message: str,
        lineno: int | None = None,
        name: str | None = None,
        source: str | None = None,
        col_offset: int | None = None,
        *,
        code: ErrorCode | None = None,
    ):
        self.message = message
        self.lineno = lineno
        self.name = name
        self.source = source
        self.col_offset = col_offset
        if code is not None:
            self.code = code
        super().__init__(self._format_message())

    def _location(self) -> str:
        location = self.name or "<template>"
        if self.lineno:
            location += f":{self.lineno}"
            if self.col_offset is not None:
                location += f":{self.col_offset}"
        return location

    def _format_message(self) -> str:
        header = f"Syntax Error: {self.message}\n  --> {self._location()}"
        if self.source and self.lineno:
            lines = self.source.splitlines()
            if 0 < self.lineno <= len(lines):
                snippet = f"\n   |\n{self.lineno:>3} | {lines[self.lineno - 1]}"
                if self.col_offset is not None:
                    snippet += f"\n   | {' ' * self.col_offset}^"
                return header + snippet
        return header

    def format_compact(self) -> str:
        parts = [terminal.format_error_header(self.code.value if self.code else None, self.message)]
        parts.append(f"  --> {terminal.location(self._location())}")
        if self.source and self.lineno:
            parts.append(
                build_source_snippet(self.source, self.lineno, column=self.col_offset).format()
            )
        return "\n".join(parts)


class EvaluationError(TemplateError):
    """An embedded expression or statement failed.

    Output Format:
        ```
        Evaluation Error: 'NoneType' object is not subscriptable
          Location: page.html
          Expression: user["name"]
          Values:
            user = None (NoneType)
          Suggestion: Check that 'user' is bound before this point
        ```

    Attributes:
        message: Error description
        expression: Source of the expression that failed
        values: Names → values relevant to the failure
        template_name: Template being rendered
        suggestion: Actionable fix suggestion
        template_stack: Chain of partials being rendered
    """

    code: ErrorCode | None = ErrorCode.EVALUATION_FAILED

    def __init__(
        self,
        message: str,
        *,
        expression: str | None = None,
        values: dict[str, Any] | None = None,
        template_name: str | None = None,
        suggestion: str | None = None,
        template_stack: list[str] | None = None,
        code: ErrorCode | None = None,
    ):
        self.message = message
        self.expression = expression
        self.values = values or {}
        self.template_name = template_name
        self.suggestion = suggestion
        self.template_stack = template_stack or []
        if code is not None:
            self.code = code
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        parts = [f"Evaluation Error: {self.message}"]
        if self.template_name:
            parts.append(f"  Location: {terminal.location(self.template_name)}")
        if self.template_stack:
            parts.append(format_template_stack(self.template_stack))
        if self.expression:
            parts.append(f"  Expression: {self.expression}")
        if self.values:
            parts.append("  Values:")
            for name, value in self.values.items():
                value_repr = repr(value)
                if len(value_repr) > 80:
                    value_repr = value_repr[:77] + "..."
                parts.append(f"    {name} = {value_repr} ({type(value).__name__})")
        if self.suggestion:
            parts.append(f"  {terminal.hint('Suggestion:')} {self.suggestion}")
        return "\n".join(parts)

    def format_compact(self) -> str:
        parts = [terminal.format_error_header(self.code.value if self.code else None, self.message)]
        if self.template_name:
            parts.append(f"  Location: {terminal.location(self.template_name)}")
        if self.expression:
            parts.append(f"  Expression: {self.expression}")
        if self.suggestion:
            parts.append(f"  {terminal.hint('Hint:')} {self.suggestion}")
        return "\n".join(parts)


class UndefinedError(EvaluationError):
    """An expression referenced a name bound nowhere in the context chain.

    A "Did you mean?" hint is added when ``available_names`` holds a close
    match (``difflib.get_close_matches``).
    """

    code: ErrorCode | None = ErrorCode.UNDEFINED_VARIABLE

    def __init__(
        self,
        name: str,
        *,
        expression: str | None = None,
        template_name: str | None = None,
        available_names: frozenset[str] | None = None,
        template_stack: list[str] | None = None,
    ):
        self.name = name
        self.available_names = available_names or frozenset()
        message = f"Undefined variable '{name}'"
        if template_name:
            message += f" in {template_name}"

        from difflib import get_close_matches

        matches = get_close_matches(name, sorted(self.available_names), n=1, cutoff=0.6)
        if matches:
            message += f". Did you mean '{terminal.suggestion(matches[0])}'?"
        super().__init__(
            message,
            expression=expression,
            template_name=template_name,
            suggestion=f"Bind '{name}' in the render context before this point",
            template_stack=template_stack,
        )


class StructuralMergeError(TemplateError):
    """A required merge target is missing from the skeleton or template.

    Raised while merging an expanded template into its skeleton when
    ``<main>``, the head ``<title>``, ``<body>`` or an element referenced
    by id cannot be found.
    """

    code: ErrorCode | None = ErrorCode.MISSING_MERGE_TARGET

    def __init__(self, message: str, *, target: str, document_name: str | None = None):
        self.message = message
        self.target = target
        self.document_name = document_name
        location = f" in {document_name}" if document_name else ""
        super().__init__(f"{message}{location} (missing {target})")


class TemplateRenderError(TemplateError):
    """The single error a failed ``render_template()`` call raises.

    Attributes:
        template_name: The template that was being rendered
        context: The content Context the render was given
        cause: The underlying exception (also chained as ``__cause__``)
    """

    code: ErrorCode | None = ErrorCode.RENDER_FAILED

    def __init__(self, template_name: str, context: Context | None, cause: BaseException):
        self.template_name = template_name
        self.context = context
        self.cause = cause
        super().__init__(f"Exception in template {template_name}: {cause}")

    def format_compact(self) -> str:
        header = terminal.format_error_header(
            self.code.value if self.code else None,
            f"Exception in template {terminal.location(self.template_name)}",
        )
        if isinstance(self.cause, TemplateError):
            detail = self.cause.format_compact()
        else:
            detail = f"{type(self.cause).__name__}: {self.cause}"
        return f"{header}\n{detail}"
