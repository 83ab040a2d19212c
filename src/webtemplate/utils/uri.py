"""URI helpers used by the skeleton composer."""

from __future__ import annotations

from urllib.parse import quote, urljoin


def resolve_relative(href: str, base: str) -> str:
    """Resolve ``href`` against ``base`` following RFC 3986.

    Absolute links are returned unchanged; relative ones are rebased.

    Example:
        >>> resolve_relative("page.html", "/docs/")
        '/docs/page.html'
        >>> resolve_relative("https://example.com/", "/docs/")
        'https://example.com/'
    """
    return urljoin(base, href)


def encode_uri_component(value: str) -> str:
    """Percent-encode ``value`` like JavaScript's ``encodeURIComponent``."""
    return quote(str(value), safe="-_.!~*'()")
