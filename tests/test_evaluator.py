"""Tests for the inline expression evaluator."""

import pytest

from webtemplate import UNDEFINED, Context
from webtemplate.environment.exceptions import (
    ErrorCode,
    EvaluationError,
    TemplateSyntaxError,
    UndefinedError,
)
from webtemplate.evaluator import compile_source, evaluate, execute
from webtemplate.render_context import render_context


class TestExpressions:
    """Expressions read the Context chain."""

    def test_arithmetic(self):
        assert evaluate("a + b * 2", Context({"a": 1, "b": 3})) == 7

    def test_parent_chain(self):
        ctx = Context({"site": "docs"}).child(page="intro")
        assert evaluate("site + '/' + page", ctx) == "docs/intro"

    def test_dot_reads_mapping_keys(self):
        ctx = Context({"data": {"items": [1, 2], "user": {"name": "ada"}}})
        assert evaluate("data.items", ctx) == [1, 2]
        assert evaluate("data.user.name", ctx) == "ada"

    def test_dot_falls_back_to_methods(self):
        ctx = Context({"data": {"a": 1}})
        assert evaluate("list(data.keys())", ctx) == ["a"]
        assert evaluate("data.get('a')", ctx) == 1

    def test_method_names_without_call_are_undefined(self):
        ctx = Context({"data": {}})
        assert evaluate("data.items", ctx) is UNDEFINED
        assert evaluate("data.get", ctx) is UNDEFINED

    def test_callable_key_wins_over_method(self):
        ctx = Context({"helpers": {"items": lambda: ["k"]}})
        assert evaluate("helpers.items()", ctx) == ["k"]

    def test_missing_attribute_is_undefined(self):
        ctx = Context({"data": {}})
        assert evaluate("data.user.name", ctx) is UNDEFINED
        assert not evaluate("data.missing", ctx)

    def test_object_attributes(self):
        class User:
            name = "ada"

        assert evaluate("user.name.upper()", Context({"user": User()})) == "ADA"

    def test_safe_builtins_available(self):
        assert evaluate("len(sorted(xs))", Context({"xs": [3, 1]})) == 2

    def test_comprehension_sees_bindings(self):
        ctx = Context({"xs": [1, 2, 3], "factor": 10})
        assert evaluate("[x * factor for x in xs]", ctx) == [10, 20, 30]

    def test_compilation_cached(self):
        assert compile_source("1 + 1") is compile_source("1 + 1")


class TestStatements:
    """Statements write the innermost scope only."""

    def test_assignment_is_local(self):
        parent = Context({"total": 0})
        child = parent.child()
        execute("total = total + 5", child)
        assert child.local_bindings["total"] == 5
        assert parent["total"] == 0

    def test_multiline_statement(self):
        ctx = Context({"xs": [1, 2, 3]})
        execute(
            """
            total = 0
            for x in xs:
                total += x
            """,
            ctx,
        )
        assert ctx["total"] == 6


class TestErrors:
    """Failures surface as template errors."""

    def test_undefined_name(self):
        with pytest.raises(UndefinedError) as exc_info:
            evaluate("titel", Context({"title": "x"}))
        err = exc_info.value
        assert err.name == "titel"
        assert err.code is ErrorCode.UNDEFINED_VARIABLE
        assert "Did you mean" in str(err)

    def test_undefined_error_reports_template(self):
        with render_context("page.html"), pytest.raises(UndefinedError) as exc_info:
            evaluate("nope", Context())
        assert exc_info.value.template_name == "page.html"
        assert exc_info.value.template_stack == ["page.html"]

    def test_runtime_failure_wrapped(self):
        with pytest.raises(EvaluationError) as exc_info:
            evaluate("1 / zero", Context({"zero": 0}))
        err = exc_info.value
        assert err.code is ErrorCode.EVALUATION_FAILED
        assert err.expression == "1 / zero"
        assert isinstance(err.__cause__, ZeroDivisionError)

    def test_syntax_error(self):
        with pytest.raises(TemplateSyntaxError) as exc_info:
            evaluate("a +", Context({"a": 1}))
        assert exc_info.value.code is ErrorCode.INVALID_EXPRESSION

    def test_empty_expression(self):
        with pytest.raises(TemplateSyntaxError):
            evaluate("   ", Context())

    def test_dunder_access_rejected(self):
        with pytest.raises(TemplateSyntaxError):
            evaluate("x.__class__", Context({"x": 1}))

    def test_import_not_available(self):
        with pytest.raises(EvaluationError):
            execute("import os", Context())
