"""Pydantic models for candidate records read from the Notion database.

``Candidate`` is the normalized, immutable snapshot of one Notion page.
The smaller list-item models are the trimmed shapes some endpoints return.
"""

from pydantic import ConfigDict

from app.models.base import CamelModel


class Candidate(CamelModel):
    """Full candidate record, rebuilt from Notion on every request."""
    model_config = ConfigDict(frozen=True)

    id: str
    name: str
    role: str | None = None
    status: str | None = None
    priority: str | None = None
    stratification: str | None = None
    hot_candidate: bool = False
    hours_since_last_activity: int | float | None = None
    latest_communication: str | None = None
    linkedin_profile: str | None = None
    notion_url: str
    interview_status: str | None = None
    ai_score: int | float | None = None
    human_score: int | float | None = None
    date_added: str | None = None
    ai_processed_at: str | None = None
    cv_verified_by_lynn: str | None = None
    passed_human_filter: bool = False
    hours_since_ai_review: int | None = None  # derived from ai_processed_at
    hours_in_pipeline: int | None = None  # derived from date_added


class AwaitingReviewCandidate(CamelModel):
    """List item for GET /api/awaiting-review."""
    id: str
    name: str
    role: str | None = None
    ai_score: int | float | None = None
    date_added: str | None = None
    notion_url: str


class HrBacklogCandidate(CamelModel):
    """List item for the HR backlog table in the CEO metrics bundle."""
    id: str
    name: str
    role: str | None = None
    ai_score: int | float | None = None
    status: str | None = None
    date_added: str | None = None
    notion_url: str
