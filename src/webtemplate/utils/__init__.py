"""Shared utilities for webtemplate."""

from webtemplate.utils.html import Markup, escape_attribute, html_escape, json_for_script
from webtemplate.utils.text import multi_replace
from webtemplate.utils.uri import encode_uri_component, resolve_relative

__all__ = [
    "Markup",
    "encode_uri_component",
    "escape_attribute",
    "html_escape",
    "json_for_script",
    "multi_replace",
    "resolve_relative",
]
