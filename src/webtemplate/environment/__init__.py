"""Environment, loaders, default globals and the error taxonomy.

``exceptions`` and ``loaders`` are imported before ``core``: the markup
parser and the expansion engine import the exceptions module directly.

"""

from webtemplate.environment.exceptions import (
    ErrorCode,
    EvaluationError,
    SourceSnippet,
    StructuralMergeError,
    TemplateError,
    TemplateNotFoundError,
    TemplateRenderError,
    TemplateSyntaxError,
    UndefinedError,
    build_source_snippet,
)
from webtemplate.environment.loaders import (
    ChoiceLoader,
    DictLoader,
    FileSystemLoader,
    FunctionLoader,
    TemplateLoader,
)
from webtemplate.environment.globals import DEFAULT_GLOBALS
from webtemplate.environment.core import Environment, as_context

__all__ = [
    "DEFAULT_GLOBALS",
    "ChoiceLoader",
    "DictLoader",
    "Environment",
    "ErrorCode",
    "EvaluationError",
    "FileSystemLoader",
    "FunctionLoader",
    "SourceSnippet",
    "StructuralMergeError",
    "TemplateError",
    "TemplateLoader",
    "TemplateNotFoundError",
    "TemplateRenderError",
    "TemplateSyntaxError",
    "UndefinedError",
    "as_context",
    "build_source_snippet",
]
