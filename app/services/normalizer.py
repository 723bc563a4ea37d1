"""Notion page normalization.

Turns a raw Notion page (``properties`` keyed by human-readable property
name, each value tagged with its Notion ``type``) into an immutable
``Candidate``.

The functions here are total: any property payload, however malformed,
produces a ``Candidate``.  Anything that cannot be read resolves to
``None``.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Mapping
from datetime import datetime
from typing import Any

from app.core.constants import (
    CANDIDATE_FIELDS,
    HOT_CANDIDATE_LABEL,
    UNKNOWN_NAME,
    VALUE_TYPES,
)
from app.models.candidate import Candidate
from app.services.aggregation import round_half_up
from app.services.timestamps import parse_timestamp

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Per-type extractors
# Each receives the payload stored under the property's own type key,
# e.g. ``prop["select"]`` for a select property.
# ---------------------------------------------------------------------------

def _rich_text(segments: Any) -> str | None:
    if not isinstance(segments, list):
        return None
    text = "".join(
        seg["plain_text"]
        for seg in segments
        if isinstance(seg, Mapping) and isinstance(seg.get("plain_text"), str)
    )
    return text or None


def _option_name(option: Any) -> str | None:
    if not isinstance(option, Mapping):
        return None
    name = option.get("name")
    return name if isinstance(name, str) and name else None


def _number(value: Any) -> float | int | None:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return None
    return value


def _checkbox(value: Any) -> bool | None:
    return value if isinstance(value, bool) else None


def _string(value: Any) -> str | None:
    return value if isinstance(value, str) and value else None


def _date_start(value: Any) -> str | None:
    if not isinstance(value, Mapping):
        return None
    return _string(value.get("start"))


def _formula(value: Any) -> Any:
    if not isinstance(value, Mapping):
        return None
    result_type = value.get("type")
    if result_type == "number":
        return _number(value.get("number"))
    if result_type == "string":
        result = value.get("string")
        return result if isinstance(result, str) else None
    if result_type == "boolean":
        return _checkbox(value.get("boolean"))
    if result_type == "date":
        return _date_start(value.get("date"))
    return None


_EXTRACTORS: dict[str, Callable[[Any], Any]] = {
    "title": _rich_text,
    "rich_text": _rich_text,
    "select": _option_name,
    "status": _option_name,
    "number": _number,
    "checkbox": _checkbox,
    "url": _string,
    "email": _string,
    "phone_number": _string,
    "date": _date_start,
    "created_time": _string,
    "last_edited_time": _string,
    "formula": _formula,
}


def extract_property_value(properties: Any, key: str) -> Any:
    """Return the plain value of property *key*, or ``None``.

    A missing property, an unknown Notion type and a malformed payload are
    all treated the same way: ``None``.
    """
    if not isinstance(properties, Mapping):
        return None
    prop = properties.get(key)
    if not isinstance(prop, Mapping):
        return None
    kind = prop.get("type")
    if not isinstance(kind, str) or kind not in _EXTRACTORS:
        return None
    return _EXTRACTORS[kind](prop.get(kind))


# ---------------------------------------------------------------------------
# Declared schema
# ---------------------------------------------------------------------------

_TYPE_CHECKS: dict[str, Callable[[Any], bool]] = {
    "text": lambda v: isinstance(v, str),
    "number": lambda v: isinstance(v, (int, float)) and not isinstance(v, bool),
    "boolean": lambda v: isinstance(v, bool),
    "timestamp": lambda v: isinstance(v, str),
}


def _validate_schema() -> None:
    """Fail at import if ``CANDIDATE_FIELDS`` drifts from ``Candidate``."""
    model_fields = Candidate.model_fields
    for prop_name, (attribute, value_type) in CANDIDATE_FIELDS.items():
        if value_type not in VALUE_TYPES:
            raise ValueError(f"Unknown value type {value_type!r} for property {prop_name!r}")
        if attribute not in model_fields:
            raise ValueError(f"Property {prop_name!r} maps to unknown attribute {attribute!r}")


_validate_schema()


def read_fields(properties: Any) -> dict[str, Any]:
    """Extract every schema property into ``{attribute: value}``.

    Values whose shape does not match the declared value type become
    ``None``.
    """
    values: dict[str, Any] = {}
    for prop_name, (attribute, value_type) in CANDIDATE_FIELDS.items():
        value = extract_property_value(properties, prop_name)
        if value is not None and not _TYPE_CHECKS[value_type](value):
            logger.debug(
                "Discarding property value of unexpected type",
                extra={"property": prop_name, "expected": value_type},
            )
            value = None
        values[attribute] = value
    return values


# ---------------------------------------------------------------------------
# Page -> Candidate
# ---------------------------------------------------------------------------

def hours_since(timestamp: str | None, now: datetime) -> int | None:
    """Whole hours from *timestamp* to *now*, rounded half-up.

    Not clamped: a timestamp in the future yields a negative value.
    """
    parsed = parse_timestamp(timestamp)
    if parsed is None:
        return None
    return int(round_half_up((now - parsed).total_seconds() / 3600))


def map_page_to_candidate(page: Mapping[str, Any], now: datetime) -> Candidate:
    """Normalize one Notion page into a ``Candidate``.

    *now* must be timezone-aware; it is the single reference instant used
    for every derived "hours since" field in a request.
    """
    values = read_fields(page.get("properties"))

    # "Date Added" may be unset on older rows; fall back to page creation
    if values["date_added"] is None:
        values["date_added"] = _string(page.get("created_time"))

    hot_label = values.pop("hot_candidate")
    name = values.pop("name")
    passed_human_filter = values.pop("passed_human_filter")

    return Candidate(
        id=str(page.get("id") or ""),
        notion_url=str(page.get("url") or ""),
        name=name or UNKNOWN_NAME,
        hot_candidate=hot_label == HOT_CANDIDATE_LABEL,
        passed_human_filter=bool(passed_human_filter),
        hours_since_ai_review=hours_since(values["ai_processed_at"], now),
        hours_in_pipeline=hours_since(values["date_added"], now),
        **values,
    )


def normalize_pages(pages: list[Mapping[str, Any]], now: datetime) -> list[Candidate]:
    """Normalize a fetched result set, preserving order."""
    return [map_page_to_candidate(page, now) for page in pages]
