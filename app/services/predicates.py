"""Boolean filters over normalized candidates.

Each predicate takes one ``Candidate`` and is safe on any combination of
missing fields.  The same policies are also pushed down to Notion as query
filters where the API allows it; these functions remain the source of truth
and are re-applied to every fetched result set.
"""

from __future__ import annotations

from app.core.constants import (
    HIGH_AI_SCORE,
    HIGH_STRATIFICATION,
    HR_BACKLOG_STATUSES,
    INTERVIEW_COMPLETED,
    INTERVIEW_PROGRESS_MARKERS,
    INTERVIEW_STAGE_STATUSES,
    OVERDUE_AFTER_HOURS,
    REJECTED_STATUSES,
    TERMINAL_STATUSES,
    TOP_PRIORITY,
)
from app.models.candidate import Candidate


def is_high_value(candidate: Candidate) -> bool:
    """Hot, top priority, or high stratification."""
    return (
        candidate.hot_candidate
        or candidate.priority == TOP_PRIORITY
        or candidate.stratification == HIGH_STRATIFICATION
    )


def is_overdue(candidate: Candidate) -> bool:
    """More than 24h since last activity.

    A candidate with no tracked activity counts as overdue.
    """
    hours = candidate.hours_since_last_activity
    return hours is None or hours > OVERDUE_AFTER_HOURS


def is_active(candidate: Candidate) -> bool:
    """Not in a terminal status and interview not completed."""
    return (
        candidate.status not in TERMINAL_STATUSES
        and candidate.interview_status != INTERVIEW_COMPLETED
    )


def needs_followup(candidate: Candidate) -> bool:
    return is_high_value(candidate) and is_active(candidate) and is_overdue(candidate)


def is_pending_human_review(candidate: Candidate) -> bool:
    """AI-reviewed, not yet verified by a human, and not rejected."""
    return (
        candidate.ai_processed_at is not None
        and candidate.cv_verified_by_lynn is None
        and not candidate.passed_human_filter
        and candidate.status not in REJECTED_STATUSES
    )


def is_awaiting_verification(candidate: Candidate) -> bool:
    return candidate.cv_verified_by_lynn is None and candidate.status not in REJECTED_STATUSES


def has_reached_interview(candidate: Candidate) -> bool:
    """Interview status mentions any positive stage (substring match)."""
    if not candidate.interview_status:
        return False
    lowered = candidate.interview_status.lower()
    return any(marker in lowered for marker in INTERVIEW_PROGRESS_MARKERS)


def is_at_interview_stage(candidate: Candidate) -> bool:
    return candidate.status in INTERVIEW_STAGE_STATUSES


def has_comparable_scores(candidate: Candidate) -> bool:
    """High AI score with a human score to compare it against."""
    return (
        candidate.ai_score is not None
        and candidate.ai_score >= HIGH_AI_SCORE
        and candidate.human_score is not None
    )


def is_in_hr_backlog(candidate: Candidate) -> bool:
    """High AI score still sitting in an HR / HM screening status."""
    return (
        candidate.ai_score is not None
        and candidate.ai_score >= HIGH_AI_SCORE
        and candidate.status in HR_BACKLOG_STATUSES
    )
