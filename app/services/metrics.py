"""Named dashboard metrics.

Every chart on the CEO dashboard is one function here, built from the
generic helpers in ``app.services.aggregation``.  All functions are pure:
they take the normalized candidates plus the day window / timezone resolved
once per request and return response models.
"""

from __future__ import annotations

from collections import Counter
from collections.abc import Callable, Sequence
from datetime import date, tzinfo

from app.core.constants import REJECTED_STATUSES, UNKNOWN_ROLE
from app.models.candidate import Candidate, HrBacklogCandidate
from app.models.metrics import (
    AiHumanDeltaPoint,
    ApplicationsDay,
    BacklogPoint,
    CEOMetrics,
    DailyFlowPoint,
    MetricsSummary,
    ResponseTimePoint,
    StageDwellTime,
    TimeToInterviewPoint,
)
from app.services.aggregation import (
    average,
    bucket_by_day,
    bucket_by_week,
    count,
    group_by,
    mean,
    percentage,
    round_half_up,
    round_one_decimal,
    running_total,
    trailing_days,
)
from app.services.predicates import (
    has_comparable_scores,
    has_reached_interview,
    is_at_interview_stage,
    is_awaiting_verification,
    is_in_hr_backlog,
)
from app.services.timestamps import day_of


# ---------------------------------------------------------------------------
# Extractors
# ---------------------------------------------------------------------------

def _added_on(tz: tzinfo) -> Callable[[Candidate], date | None]:
    return lambda c: day_of(c.date_added, tz)


def _verified_on(tz: tzinfo) -> Callable[[Candidate], date | None]:
    return lambda c: day_of(c.cv_verified_by_lynn, tz)


def _activity_hours(candidate: Candidate) -> float | None:
    return candidate.hours_since_last_activity


def _days_in_system(candidate: Candidate) -> float:
    # No activity value counts as zero days, not as missing
    return (candidate.hours_since_last_activity or 0) / 24


def _score_delta(candidate: Candidate) -> float | None:
    if candidate.ai_score is None or candidate.human_score is None:
        return None
    return candidate.human_score - candidate.ai_score


def _role(candidate: Candidate) -> str:
    return candidate.role or UNKNOWN_ROLE


def _has_activity(candidate: Candidate) -> bool:
    return candidate.hours_since_last_activity is not None


# ---------------------------------------------------------------------------
# Week buckets
# ---------------------------------------------------------------------------

def time_to_interview_trend(
    candidates: Sequence[Candidate],
    tz: tzinfo,
) -> list[TimeToInterviewPoint]:
    """Average days in system for at-interview candidates, per week added.

    Approximated from hours since last activity: there is no interview date
    in the database.
    """
    at_interview = [c for c in candidates if is_at_interview_stage(c)]
    weeks = bucket_by_week(at_interview, _added_on(tz), list)
    return [
        TimeToInterviewPoint(
            week=week.isoformat(),
            avg_days=round_half_up(mean(_days_in_system(c) for c in bucket) or 0),
            count=len(bucket),
        )
        for week, bucket in weeks
    ]


# ---------------------------------------------------------------------------
# Day buckets
# ---------------------------------------------------------------------------

def ai_vs_human_trend(
    candidates: Sequence[Candidate],
    days: Sequence[date],
    tz: tzinfo,
) -> list[AiHumanDeltaPoint]:
    """Average (human - AI) score per day, for high-AI-score candidates."""
    scored = [c for c in candidates if has_comparable_scores(c)]
    avg_delta = average(_score_delta, round_one_decimal)
    buckets = bucket_by_day(scored, days, _added_on(tz), lambda b: (avg_delta(b), len(b)))
    return [
        AiHumanDeltaPoint(date=day.isoformat(), avg_delta=delta, count=n)
        for day, (delta, n) in buckets
    ]


def response_time_trend(
    candidates: Sequence[Candidate],
    days: Sequence[date],
    tz: tzinfo,
) -> list[ResponseTimePoint]:
    """Average hours since last activity for candidates added each day."""
    tracked = [c for c in candidates if _has_activity(c)]
    avg_hours = average(_activity_hours)
    buckets = bucket_by_day(tracked, days, _added_on(tz), lambda b: (avg_hours(b), len(b)))
    return [
        ResponseTimePoint(date=day.isoformat(), avg_hours=hours, count=n)
        for day, (hours, n) in buckets
    ]


def applications_by_day(
    candidates: Sequence[Candidate],
    days: Sequence[date],
    tz: tzinfo,
) -> list[ApplicationsDay]:
    """Applications per day, split by role for the stacked chart."""
    buckets = bucket_by_day(
        candidates, days, _added_on(tz), lambda b: Counter(_role(c) for c in b)
    )
    return [
        ApplicationsDay.model_validate(
            {**by_role, "date": day.isoformat(), "total": sum(by_role.values())}
        )
        for day, by_role in buckets
    ]


def daily_flow(
    candidates: Sequence[Candidate],
    days: Sequence[date],
    tz: tzinfo,
) -> list[DailyFlowPoint]:
    """New candidates versus human verifications, per day."""
    added = bucket_by_day(candidates, days, _added_on(tz), count)
    verified = bucket_by_day(candidates, days, _verified_on(tz), count)
    response = bucket_by_day(candidates, days, _added_on(tz), average(_activity_hours))
    return [
        DailyFlowPoint(
            date=day.isoformat(),
            day=day.strftime("%a"),
            new_candidates=n_added,
            verified=n_verified,
            avg_response_hours=hours,
        )
        for (day, n_added), (_, n_verified), (_, hours) in zip(added, verified, response)
    ]


def backlog_trend(
    candidates: Sequence[Candidate],
    days: Sequence[date],
    tz: tzinfo,
) -> list[BacklogPoint]:
    """Candidates added and verified per day, and the backlog as of each day's end.

    The backlog moves by (added - verified) each day. Rejected candidates
    never enter it.
    """
    open_pipeline = [c for c in candidates if c.status not in REJECTED_STATUSES]
    added = bucket_by_day(open_pipeline, days, _added_on(tz), count)
    verified = bucket_by_day(open_pipeline, days, _verified_on(tz), count)
    totals = running_total(
        n_added - n_verified for (_, n_added), (_, n_verified) in zip(added, verified)
    )
    return [
        BacklogPoint(
            date=day.isoformat(), added=n_added, verified=n_verified, backlog=int(total)
        )
        for (day, n_added), (_, n_verified), total in zip(added, verified, totals)
    ]


# ---------------------------------------------------------------------------
# Category groups
# ---------------------------------------------------------------------------

def stage_dwell_time(candidates: Sequence[Candidate]) -> list[StageDwellTime]:
    """Average hours since last activity per status, worst first."""
    tracked = [c for c in candidates if _has_activity(c)]
    avg_hours = average(_activity_hours)
    rows = [
        StageDwellTime(status=status, avg_hours=avg_hours(bucket), count=len(bucket))
        for status, bucket in group_by(tracked, lambda c: c.status).items()
    ]
    rows.sort(key=lambda row: row.avg_hours, reverse=True)
    return rows


def role_breakdown(candidates: Sequence[Candidate]) -> dict[str, int]:
    """Candidate count per role, keyed alphabetically."""
    counts = Counter(_role(c) for c in candidates)
    return {role: counts[role] for role in sorted(counts)}


# ---------------------------------------------------------------------------
# Scalars
# ---------------------------------------------------------------------------

def summarize(candidates: Sequence[Candidate]) -> MetricsSummary:
    avg_hours = mean(_activity_hours(c) for c in candidates)
    return MetricsSummary(
        total_applications=len(candidates),
        total_hr_backlog=sum(1 for c in candidates if is_in_hr_backlog(c)),
        avg_response_hours=0 if avg_hours is None else round_half_up(avg_hours),
        candidates_at_interview=sum(1 for c in candidates if is_at_interview_stage(c)),
        hvcs_with_scores=sum(1 for c in candidates if has_comparable_scores(c)),
        total_verified=sum(1 for c in candidates if c.cv_verified_by_lynn is not None),
        awaiting_verification=sum(1 for c in candidates if is_awaiting_verification(c)),
        conversion_rate=percentage(
            sum(1 for c in candidates if has_reached_interview(c)), len(candidates)
        ),
    )


def hr_backlog_candidates(candidates: Sequence[Candidate]) -> list[HrBacklogCandidate]:
    return [
        HrBacklogCandidate(
            id=c.id,
            name=c.name,
            role=_role(c),
            ai_score=c.ai_score,
            status=c.status,
            date_added=c.date_added,
            notion_url=c.notion_url,
        )
        for c in candidates
        if is_in_hr_backlog(c)
    ]


# ---------------------------------------------------------------------------
# Bundle
# ---------------------------------------------------------------------------

def build_ceo_metrics(
    candidates: Sequence[Candidate],
    today: date,
    tz: tzinfo,
    window_days: int = 30,
) -> CEOMetrics:
    """Compute every CEO dashboard metric over one fetched candidate set."""
    days = trailing_days(today, window_days)
    breakdown = role_breakdown(candidates)
    return CEOMetrics(
        summary=summarize(candidates),
        time_to_interview_trend=time_to_interview_trend(candidates, tz),
        ai_vs_human_trend=ai_vs_human_trend(candidates, days, tz),
        stage_dwell_time=stage_dwell_time(candidates),
        response_time_trend=response_time_trend(candidates, days, tz),
        applications_by_day=applications_by_day(candidates, days, tz),
        daily_flow=daily_flow(candidates, days, tz),
        backlog_trend=backlog_trend(candidates, days, tz),
        roles=list(breakdown),
        role_breakdown=breakdown,
        hr_backlog_candidates=hr_backlog_candidates(candidates),
    )
