"""Timestamp parsing shared by the normalizer and the aggregators.

Notion hands out ISO-8601 strings in several shapes: date-only
(``2026-10-01``), UTC with a ``Z`` suffix, or with an explicit offset.
"""

from __future__ import annotations

from datetime import date, datetime, timezone, tzinfo


def _parse(value: str | None) -> datetime | None:
    if not value or not isinstance(value, str):
        return None
    try:
        return datetime.fromisoformat(value.strip().replace("Z", "+00:00"))
    except ValueError:
        return None


def parse_timestamp(value: str | None) -> datetime | None:
    """Parse an ISO-8601 string into an aware datetime.

    Date-only and naive values are taken as UTC.  Returns ``None`` for
    missing or unparseable input.
    """
    parsed = _parse(value)
    if parsed is not None and parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def day_of(value: str | None, tz: tzinfo) -> date | None:
    """Calendar day a timestamp falls on in *tz*.

    Aware timestamps are converted to *tz* first; date-only and naive values
    already name their day and are used as-is.
    """
    parsed = _parse(value)
    if parsed is None:
        return None
    if parsed.tzinfo is not None:
        parsed = parsed.astimezone(tz)
    return parsed.date()
