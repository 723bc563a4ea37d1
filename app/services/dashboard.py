"""Dashboard response assembly.

One coroutine per endpoint.  Each follows the same three steps:

1. fetch every matching Notion page (server-side filter) and normalize it,
2. re-apply the policy predicates client-side,
3. sort / aggregate into the endpoint's response payload.

Nothing is cached between calls.  *now* is captured once per request and
threaded through every derived value so a request is internally consistent.
"""

from __future__ import annotations

import calendar
import logging
from datetime import datetime, timedelta, timezone, tzinfo
from zoneinfo import ZoneInfo

from app.core.config import settings
from app.core.constants import (
    HIGH_STRATIFICATION,
    HOT_CANDIDATE_LABEL,
    INTERVIEW_COMPLETED,
    PROP_AI_PROCESSED_AT,
    PROP_AI_SCORE,
    PROP_CV_VERIFIED,
    PROP_DATE_ADDED,
    PROP_HOT_CANDIDATE,
    PROP_HOURS_SINCE_LAST_ACTIVITY,
    PROP_INTERVIEW_STATUS,
    PROP_PASSED_HUMAN_FILTER,
    PROP_PRIORITY,
    PROP_STATUS,
    PROP_STRATIFICATION,
    STATUS_ACCEPTED,
    STATUS_CANDIDATE_REJECTED,
    STATUS_COMPANY_REJECTED,
    TOP_PRIORITY,
)
from app.db import filters as f
from app.db.notion import NotionStore
from app.models.candidate import AwaitingReviewCandidate, Candidate
from app.models.metrics import CEOMetrics
from app.services.metrics import build_ceo_metrics
from app.services.normalizer import normalize_pages
from app.services.predicates import (
    is_awaiting_verification,
    is_pending_human_review,
    needs_followup,
)

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def resolve_timezone(name: str) -> tzinfo:
    """Timezone used for day buckets."""
    if name.upper() == "UTC":
        return timezone.utc
    return ZoneInfo(name)


def one_month_before(moment: datetime) -> datetime:
    """Same time one calendar month earlier, clamped to the month's last day."""
    year, month = (moment.year - 1, 12) if moment.month == 1 else (moment.year, moment.month - 1)
    day = min(moment.day, calendar.monthrange(year, month)[1])
    return moment.replace(year=year, month=month, day=day)


def _iso_utc(moment: datetime) -> str:
    return moment.astimezone(timezone.utc).isoformat()


def _added_since(moment: datetime) -> f.Filter:
    return f.on_or_after(PROP_DATE_ADDED, _iso_utc(moment), kind="created_time")


def _not_rejected() -> list[f.Filter]:
    return [
        f.does_not_equal(PROP_STATUS, "status", STATUS_COMPANY_REJECTED),
        f.does_not_equal(PROP_STATUS, "status", STATUS_CANDIDATE_REJECTED),
    ]


async def fetch_candidates(
    store: NotionStore,
    query_filter: f.Filter,
    sorts: list[f.Sort] | None,
    now: datetime,
) -> list[Candidate]:
    """Fetch every page matching *query_filter* and normalize it."""
    pages = await store.fetch_all(filter=query_filter, sorts=sorts)
    return normalize_pages(pages, now)


def _now(now: datetime | None) -> datetime:
    return now if now is not None else datetime.now(timezone.utc)


# ---------------------------------------------------------------------------
# GET /api/candidates
# ---------------------------------------------------------------------------

async def get_candidates_needing_followup(
    store: NotionStore,
    now: datetime | None = None,
) -> list[Candidate]:
    """High-value, active candidates added in the last month with no
    activity for more than 24 hours (or none recorded at all).

    Ordered by hours since last activity, longest first.
    """
    now = _now(now)
    query_filter = f.and_(
        _added_since(one_month_before(now)),
        f.does_not_equal(PROP_STATUS, "status", STATUS_COMPANY_REJECTED),
        f.does_not_equal(PROP_STATUS, "status", STATUS_ACCEPTED),
        f.does_not_equal(PROP_INTERVIEW_STATUS, "select", INTERVIEW_COMPLETED),
        f.or_(
            f.equals(PROP_HOT_CANDIDATE, "select", HOT_CANDIDATE_LABEL),
            f.equals(PROP_PRIORITY, "select", TOP_PRIORITY),
            f.equals(PROP_STRATIFICATION, "select", HIGH_STRATIFICATION),
        ),
    )
    sorts = [f.sort(PROP_HOURS_SINCE_LAST_ACTIVITY, "descending")]

    candidates = await fetch_candidates(store, query_filter, sorts, now)
    overdue = [c for c in candidates if needs_followup(c)]

    logger.info(
        "Built follow-up list",
        extra={"fetched": len(candidates), "overdue": len(overdue)},
    )
    return overdue


# ---------------------------------------------------------------------------
# GET /api/pending-review
# ---------------------------------------------------------------------------

async def get_pending_human_review(
    store: NotionStore,
    now: datetime | None = None,
) -> list[Candidate]:
    """AI-reviewed candidates still waiting for a human, longest wait first."""
    now = _now(now)
    query_filter = f.and_(
        f.is_not_empty(PROP_AI_PROCESSED_AT, "date"),
        f.is_empty(PROP_CV_VERIFIED, "date"),
        f.equals(PROP_PASSED_HUMAN_FILTER, "checkbox", False),
        *_not_rejected(),
    )
    sorts = [f.sort(PROP_AI_PROCESSED_AT, "ascending")]

    candidates = await fetch_candidates(store, query_filter, sorts, now)
    pending = [c for c in candidates if is_pending_human_review(c)]
    pending.sort(
        key=lambda c: (c.hours_since_ai_review is None, -(c.hours_since_ai_review or 0))
    )

    logger.info("Built pending review list", extra={"pending": len(pending)})
    return pending


# ---------------------------------------------------------------------------
# GET /api/ceo-metrics
# ---------------------------------------------------------------------------

async def get_ceo_metrics(
    store: NotionStore,
    now: datetime | None = None,
) -> CEOMetrics:
    """Every CEO dashboard chart over candidates added in the metrics window."""
    now = _now(now)
    tz = resolve_timezone(settings.DASHBOARD_TIMEZONE)
    window_days = settings.METRICS_WINDOW_DAYS

    candidates = await fetch_candidates(
        store, _added_since(now - timedelta(days=window_days)), None, now
    )
    metrics = build_ceo_metrics(
        candidates,
        today=now.astimezone(tz).date(),
        tz=tz,
        window_days=window_days,
    )

    logger.info(
        "Built CEO metrics",
        extra={
            "candidates": len(candidates),
            "window_days": window_days,
        },
    )
    return metrics


# ---------------------------------------------------------------------------
# GET /api/awaiting-review
# ---------------------------------------------------------------------------

async def get_awaiting_review(
    store: NotionStore,
    now: datetime | None = None,
) -> list[AwaitingReviewCandidate]:
    """Recent candidates without human CV verification, best AI score first."""
    now = _now(now)
    query_filter = f.and_(
        _added_since(now - timedelta(days=settings.METRICS_WINDOW_DAYS)),
        f.is_empty(PROP_CV_VERIFIED, "date"),
        *_not_rejected(),
    )
    sorts = [f.sort(PROP_AI_SCORE, "descending")]

    candidates = await fetch_candidates(store, query_filter, sorts, now)
    awaiting = [c for c in candidates if is_awaiting_verification(c)]
    awaiting.sort(key=lambda c: (c.ai_score is None, -(c.ai_score or 0)))

    return [
        AwaitingReviewCandidate(
            id=c.id,
            name=c.name,
            role=c.role,
            ai_score=c.ai_score,
            date_added=c.date_added,
            notion_url=c.notion_url,
        )
        for c in awaiting
    ]
