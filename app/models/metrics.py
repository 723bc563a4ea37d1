"""Response models for the CEO metrics bundle.

These are API-layer response schemas, not Notion property mappings.
Day and week keys are ``YYYY-MM-DD`` strings in the dashboard timezone.
"""

from pydantic import ConfigDict

from app.models.base import CamelModel
from app.models.candidate import HrBacklogCandidate


# --- Summary ---

class MetricsSummary(CamelModel):
    """Scalar KPIs shown above the charts."""
    total_applications: int = 0
    total_hr_backlog: int = 0
    avg_response_hours: int = 0
    candidates_at_interview: int = 0
    hvcs_with_scores: int = 0
    total_verified: int = 0
    awaiting_verification: int = 0
    conversion_rate: int = 0


# --- Time series ---

class TimeToInterviewPoint(CamelModel):
    """Average days in system for at-interview candidates added that week."""
    week: str
    avg_days: int
    count: int


class AiHumanDeltaPoint(CamelModel):
    """Average (human score - AI score) for candidates added that day."""
    date: str
    avg_delta: float | None = None
    count: int = 0


class ResponseTimePoint(CamelModel):
    """Average hours since last activity for candidates added that day."""
    date: str
    avg_hours: int | None = None
    count: int = 0


class ApplicationsDay(CamelModel):
    """Applications received on one day.

    Besides ``date`` and ``total`` the payload carries one extra key per
    role seen that day, holding that role's count.
    """
    model_config = ConfigDict(extra="allow")

    date: str
    total: int = 0


class DailyFlowPoint(CamelModel):
    """Inflow versus human verification on one day."""
    date: str
    day: str
    new_candidates: int = 0
    verified: int = 0
    avg_response_hours: int | None = None


class BacklogPoint(CamelModel):
    """Candidates added and verified that day, and the backlog at day end."""
    date: str
    added: int = 0
    verified: int = 0
    backlog: int = 0


# --- Grouped ---

class StageDwellTime(CamelModel):
    """Average hours since last activity per pipeline status."""
    status: str
    avg_hours: int
    count: int


# --- Bundle ---

class CEOMetrics(CamelModel):
    """Full payload for GET /api/ceo-metrics."""
    summary: MetricsSummary = MetricsSummary()
    time_to_interview_trend: list[TimeToInterviewPoint] = []
    ai_vs_human_trend: list[AiHumanDeltaPoint] = []
    stage_dwell_time: list[StageDwellTime] = []
    response_time_trend: list[ResponseTimePoint] = []
    applications_by_day: list[ApplicationsDay] = []
    daily_flow: list[DailyFlowPoint] = []
    backlog_trend: list[BacklogPoint] = []
    roles: list[str] = []
    role_breakdown: dict[str, int] = {}
    hr_backlog_candidates: list[HrBacklogCandidate] = []
