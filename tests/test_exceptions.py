"""Tests for error codes and error message formatting."""

import pytest

from webtemplate.environment import terminal
from webtemplate.environment.exceptions import (
    ErrorCode,
    EvaluationError,
    StructuralMergeError,
    TemplateError,
    TemplateRenderError,
    TemplateSyntaxError,
    UndefinedError,
    build_source_snippet,
    format_template_stack,
)


@pytest.fixture(autouse=True)
def _no_colors(monkeypatch):
    monkeypatch.setattr(terminal, "_USE_COLORS", False)


class TestErrorCodes:
    def test_format(self):
        for code in ErrorCode:
            prefix, category, number = code.value.split("-")
            assert prefix == "W"
            assert number.isdigit()

    @pytest.mark.parametrize(
        ("code", "category"),
        [
            (ErrorCode.UNCLOSED_MARKER, "lexer"),
            (ErrorCode.MISSING_ATTRIBUTE, "parser"),
            (ErrorCode.UNDEFINED_VARIABLE, "runtime"),
            (ErrorCode.TEMPLATE_NOT_FOUND, "template"),
            (ErrorCode.MISSING_MERGE_TARGET, "merge"),
        ],
    )
    def test_category(self, code, category):
        assert code.category == category

    def test_hierarchy(self):
        assert issubclass(UndefinedError, EvaluationError)
        for cls in (TemplateSyntaxError, EvaluationError, StructuralMergeError, TemplateRenderError):
            assert issubclass(cls, TemplateError)


class TestSyntaxErrorFormatting:
    def test_snippet_with_caret(self):
        err = TemplateSyntaxError(
            "Unclosed marker",
            lineno=2,
            name="page.html",
            source="<p>\n<%= x\n</p>",
            col_offset=0,
        )
        message = str(err)
        assert "--> page.html:2:0" in message
        assert "  2 | <%= x" in message
        assert "   | ^" in message

    def test_compact(self):
        err = TemplateSyntaxError("bad", code=ErrorCode.MISSING_ATTRIBUTE)
        assert err.format_compact().startswith("W-PAR-001: bad")


class TestEvaluationErrorFormatting:
    def test_full_message(self):
        err = EvaluationError(
            "boom",
            expression="user.name",
            values={"user": None},
            template_name="page.html",
            suggestion="Bind user",
            template_stack=["page.html", "card.html"],
        )
        message = str(err)
        assert "Evaluation Error: boom" in message
        assert "Location: page.html" in message
        assert "Expression: user.name" in message
        assert "user = None (NoneType)" in message
        assert "card.html" in message
        assert "Suggestion: Bind user" in message

    def test_undefined_suggestion(self):
        err = UndefinedError("usr", available_names=frozenset({"user", "items"}))
        assert "Did you mean 'user'?" in str(err)

    def test_undefined_without_match(self):
        err = UndefinedError("zzz", available_names=frozenset({"user"}))
        assert "Did you mean" not in str(err)


class TestComposerErrors:
    def test_structural_merge_message(self):
        err = StructuralMergeError("Cannot merge", target="main", document_name="page.html")
        assert str(err) == "Cannot merge in page.html (missing main)"
        assert err.code is ErrorCode.MISSING_MERGE_TARGET

    def test_render_error_wraps_plain_exception(self):
        err = TemplateRenderError("page.html", None, RuntimeError("disk"))
        assert str(err) == "Exception in template page.html: disk"
        assert "RuntimeError: disk" in err.format_compact()


class TestHelpers:
    def test_template_stack(self):
        text = format_template_stack(["a.html", "b.html"])
        assert text.splitlines() == ["Template stack:", "  • a.html", "  • b.html"]
        assert format_template_stack([]) == ""

    def test_source_snippet_window(self):
        source = "\n".join(f"line {i}" for i in range(1, 11))
        snippet = build_source_snippet(source, 5, context_lines=1)
        assert [n for n, _ in snippet.lines] == [4, 5, 6]
        assert snippet.error_line == 5
