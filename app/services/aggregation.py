"""Generic bucketing, grouping and rounding helpers.

The dashboard metrics are all built from the same few shapes:

* ``bucket_by_day``  -- one bucket per day of a trailing window, gap-filled
* ``bucket_by_week`` -- Monday-start weeks, only weeks that have records
* ``group_by``       -- partition by a categorical key
* ``running_total``  -- cumulative series over per-day increments

Each takes a key function and a *combine* function (``count``,
``average(...)``, or any callable over a list of items), so a named metric is
a one-line instantiation rather than a hand-rolled loop.

Rounding follows the dashboard's conventions: half-up (never banker's
rounding), whole numbers for hours and days, one decimal for score deltas.
"""

from __future__ import annotations

import math
from collections.abc import Callable, Hashable, Iterable, Sequence
from datetime import date, timedelta
from itertools import accumulate
from typing import TypeVar

T = TypeVar("T")
K = TypeVar("K", bound=Hashable)
R = TypeVar("R")

Number = int | float


# ---------------------------------------------------------------------------
# Rounding
# ---------------------------------------------------------------------------

def round_half_up(value: float) -> int:
    """Round to the nearest integer, halves towards +infinity."""
    return math.floor(value + 0.5)


def round_one_decimal(value: float) -> float:
    """Round to one decimal place, halves towards +infinity."""
    return math.floor(value * 10 + 0.5) / 10


def percentage(count: int, total: int) -> int:
    """``count / total * 100`` as a whole number; 0 when *total* is 0."""
    if total <= 0:
        return 0
    return round_half_up(count / total * 100)


# ---------------------------------------------------------------------------
# Calendar
# ---------------------------------------------------------------------------

def trailing_days(today: date, n: int) -> list[date]:
    """The *n* calendar days ending with *today*, oldest first."""
    return [today - timedelta(days=offset) for offset in range(n - 1, -1, -1)]


def week_start(day: date) -> date:
    """Monday of the week containing *day* (Sunday belongs to the week before)."""
    return day - timedelta(days=day.weekday())


# ---------------------------------------------------------------------------
# Combiners
# ---------------------------------------------------------------------------

def count(items: Sequence[object]) -> int:
    return len(items)


def mean(values: Iterable[Number | None]) -> float | None:
    """Arithmetic mean of the non-null values, ``None`` if there are none."""
    present = [v for v in values if v is not None]
    if not present:
        return None
    return sum(present) / len(present)


def average(
    extract: Callable[[T], Number | None],
    rounding: Callable[[float], Number] = round_half_up,
) -> Callable[[Sequence[T]], Number | None]:
    """Build a combiner averaging ``extract(item)`` over a bucket.

    Null values are ignored; a bucket with no non-null values yields
    ``None`` rather than 0.
    """
    def combine(items: Sequence[T]) -> Number | None:
        value = mean(extract(item) for item in items)
        return None if value is None else rounding(value)

    return combine


# ---------------------------------------------------------------------------
# Grouping
# ---------------------------------------------------------------------------

def group_by(items: Iterable[T], key: Callable[[T], K | None]) -> dict[K, list[T]]:
    """Partition *items* by *key*, in first-seen key order.

    Items whose key is ``None`` are left out.
    """
    groups: dict[K, list[T]] = {}
    for item in items:
        k = key(item)
        if k is None:
            continue
        groups.setdefault(k, []).append(item)
    return groups


def bucket_by_day(
    items: Iterable[T],
    days: Sequence[date],
    key: Callable[[T], date | None],
    combine: Callable[[Sequence[T]], R],
) -> list[tuple[date, R]]:
    """One ``(day, combine(bucket))`` pair per entry of *days*, in order.

    Days without matching items are still emitted, with ``combine([])``.
    Items keyed outside *days* are ignored.
    """
    groups = group_by(items, key)
    return [(day, combine(groups.get(day, []))) for day in days]


def bucket_by_week(
    items: Iterable[T],
    key: Callable[[T], date | None],
    combine: Callable[[Sequence[T]], R],
) -> list[tuple[date, R]]:
    """``(week_start, combine(bucket))`` for each week that has items.

    Weeks start on Monday and are returned in ascending order; empty weeks
    are not emitted.
    """
    def week_key(item: T) -> date | None:
        day = key(item)
        return None if day is None else week_start(day)

    groups = group_by(items, week_key)
    return [(week, combine(groups[week])) for week in sorted(groups)]


def running_total(increments: Iterable[Number]) -> list[Number]:
    """Cumulative sums: each entry is the previous total plus its increment."""
    return list(accumulate(increments))
