"""Default functions bound into every render scope.

``Environment.add_default_functions()`` copies these into the content
and skeleton contexts before expansion, so templates can write::

    <span><%= format_date(post.created) %></span>
    <a href="/tag/<%= encode_uri_component(tag) %>">...</a>
    <for-each over="filter_keys(data, ['-password', '*'])" as="v" index="k">

Date and time helpers take ISO-8601 text (``2024-03-09T14:05:00Z``) as
stored in JSON and are deliberately forgiving: input too short to hold
the fields they need is returned unchanged.

"""

from __future__ import annotations

import datetime
from collections.abc import Iterable, Mapping
from fnmatch import fnmatchcase
from typing import Any

from webtemplate.template.helpers import iter_items, to_text
from webtemplate.utils.uri import encode_uri_component

WEEKDAY_NAMES = (
    "Monday",
    "Tuesday",
    "Wednesday",
    "Thursday",
    "Friday",
    "Saturday",
    "Sunday",
)


def filter_keys(mapping: Mapping[str, Any], patterns: Iterable[str]) -> dict[str, Any]:
    """Keep the entries whose key is accepted by ``patterns``.

    Each key is tested against the glob patterns in order; the first
    match decides. A ``-`` prefix makes a pattern reject instead of
    accept. Keys matching nothing are rejected, so end the list with
    ``"*"`` to keep everything not explicitly removed::

        filter_keys(data, ["-password", "*"])

    Raises:
        ValueError: If a pattern is empty
    """
    rules: list[tuple[str, bool]] = []
    for pattern in patterns:
        if not pattern:
            raise ValueError("filter_keys: empty pattern")
        if pattern.startswith("-"):
            rules.append((pattern[1:], False))
        else:
            rules.append((pattern, True))

    kept: dict[str, Any] = {}
    for key, value in iter_items(mapping):
        name = to_text(key)
        for pattern, accept in rules:
            if fnmatchcase(name, pattern):
                if accept:
                    kept[name] = value
                break
    return kept


def format_date(value: str) -> str:
    """``YYYY-MM-DD...`` → ``MM/DD/YYYY``."""
    text = to_text(value)
    if len(text) < 10:
        return text
    return f"{text[5:7]}/{text[8:10]}/{text[0:4]}"


def day_of_week(value: str) -> str:
    """Full English weekday name of an ISO date, e.g. ``"Saturday"``."""
    date = datetime.date.fromisoformat(to_text(value)[:10])
    return WEEKDAY_NAMES[date.weekday()]


def format_time(value: str) -> str:
    """``YYYY-MM-DDTHH:MM:SS...`` → ``h:MM AM``/``h:MM PM``.

    Hours after noon are shown on the 12-hour clock; midnight stays
    ``0``. Input shorter than a full timestamp is returned unchanged.
    """
    text = to_text(value)
    if len(text) < 20:
        return text
    hour = int(text[11:13])
    minutes = int(text[14:16])
    suffix = "PM" if hour >= 12 else "AM"
    if hour > 12:
        hour -= 12
    return f"{hour}:{minutes:02d} {suffix}"


DEFAULT_GLOBALS: dict[str, Any] = {
    "day_of_week": day_of_week,
    "encode_uri_component": encode_uri_component,
    "filter_keys": filter_keys,
    "format_date": format_date,
    "format_time": format_time,
}
