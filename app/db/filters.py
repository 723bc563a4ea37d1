"""Builders for Notion database query filters and sorts.

Each helper returns the plain dict the Notion API expects, so filters can be
composed with ``and_`` / ``or_`` and compared directly in tests.

The ``kind`` argument is the Notion property type the condition applies to
(``status``, ``select``, ``date``, ``checkbox``, ``created_time`` ...).
"""

from __future__ import annotations

from typing import Any, Literal

Filter = dict[str, Any]
Sort = dict[str, str]


def and_(*conditions: Filter) -> Filter:
    """All conditions must hold."""
    return {"and": list(conditions)}


def or_(*conditions: Filter) -> Filter:
    """At least one condition must hold."""
    return {"or": list(conditions)}


def _condition(prop: str, kind: str, operator: str, value: Any) -> Filter:
    return {"property": prop, kind: {operator: value}}


def equals(prop: str, kind: str, value: Any) -> Filter:
    return _condition(prop, kind, "equals", value)


def does_not_equal(prop: str, kind: str, value: Any) -> Filter:
    return _condition(prop, kind, "does_not_equal", value)


def on_or_after(prop: str, iso_timestamp: str, kind: str = "date") -> Filter:
    return _condition(prop, kind, "on_or_after", iso_timestamp)


def is_empty(prop: str, kind: str) -> Filter:
    return _condition(prop, kind, "is_empty", True)


def is_not_empty(prop: str, kind: str) -> Filter:
    return _condition(prop, kind, "is_not_empty", True)


def sort(prop: str, direction: Literal["ascending", "descending"] = "ascending") -> Sort:
    return {"property": prop, "direction": direction}
