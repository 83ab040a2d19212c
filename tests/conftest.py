"""Pytest configuration and fixtures for webtemplate tests."""

import pytest

from webtemplate import Context, DictLoader, Environment

SKELETON = (
    "<html>"
    "<head><title>Default</title></head>"
    "<body><main>placeholder</main></body>"
    "</html>"
)


@pytest.fixture
def templates():
    """Template sources shared by the composer and partial tests."""
    return {
        "skeleton.html": SKELETON,
        "hello.html": "<main>Hello, <%= name %>!</main><title>Greeting</title>",
        "card.html": '<div class="card"><%= data.title %></div>',
        "greeting.html": "<p><%= greeting %>, <%= data.who %></p>",
    }


@pytest.fixture
def env(templates):
    """An Environment backed by an in-memory loader."""
    return Environment(loader=DictLoader(templates))


@pytest.fixture
def debug_env(templates):
    """An Environment that emits debug comments."""
    return Environment(loader=DictLoader(templates), debug=True)


def expand_html(env: Environment, source: str, context=None) -> str:
    """Expand ``source`` as a wrapped template and return its markup."""
    document = env.parse_template(source, wrap=True)
    root = document.root
    env.expand(root, context if isinstance(context, Context) else Context(context))
    return root.inner_html


def assert_html_equal(actual: str, expected: str) -> None:
    """Assert two markup strings are equal, normalizing whitespace.

    Args:
        actual: The expanded markup.
        expected: The expected markup.
    """
    actual_normalized = " ".join(actual.split())
    expected_normalized = " ".join(expected.split())
    assert actual_normalized == expected_normalized, (
        f"Markup mismatch:\n"
        f"  Actual: {actual_normalized!r}\n"
        f"  Expected: {expected_normalized!r}"
    )


def assert_contains(result: str, *expected_parts: str) -> None:
    """Assert the markup contains all expected parts."""
    for part in expected_parts:
        assert part in result, (
            f"Markup missing expected content:\n"
            f"  Missing: {part!r}\n"
            f"  Actual: {result!r}"
        )
