"""Dashboard data endpoints.

Four GET endpoints, one per dashboard view.  Every response uses the
``{success, data, error, timestamp}`` envelope; any failure below this layer
(missing configuration, Notion errors, anything unexpected) is logged and
returned as HTTP 500 with ``success: false``.
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Any

from fastapi import APIRouter, Depends
from starlette.responses import JSONResponse

from app.db.notion import NotionStore, get_store
from app.models.candidate import AwaitingReviewCandidate, Candidate
from app.models.envelope import ApiResponse
from app.models.metrics import CEOMetrics
from app.services.dashboard import (
    get_awaiting_review,
    get_candidates_needing_followup,
    get_ceo_metrics,
    get_pending_human_review,
)

logger = logging.getLogger(__name__)

router = APIRouter()


def _timestamp(now: datetime) -> str:
    return now.astimezone(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def _failure(event: str, exc: Exception) -> JSONResponse:
    """Log *exc* and wrap it in the standard error envelope."""
    logger.error(event, extra={"error_message": str(exc)}, exc_info=True)
    body = ApiResponse(success=False, error=str(exc) or "Unknown error")
    return JSONResponse(status_code=500, content=body.model_dump(mode="json", by_alias=True))


# ---------------------------------------------------------------------------
# GET /api/candidates
# ---------------------------------------------------------------------------

@router.get("/candidates", response_model=ApiResponse[list[Candidate]])
async def candidates_needing_followup(
    store: NotionStore = Depends(get_store),
) -> Any:
    """High-value candidates with no follow-up in the last 24 hours."""
    now = datetime.now(timezone.utc)
    try:
        data = await get_candidates_needing_followup(store, now)
    except Exception as exc:
        return _failure("candidates_fetch_failed", exc)
    return ApiResponse(success=True, data=data, timestamp=_timestamp(now))


# ---------------------------------------------------------------------------
# GET /api/pending-review
# ---------------------------------------------------------------------------

@router.get("/pending-review", response_model=ApiResponse[list[Candidate]])
async def pending_review(
    store: NotionStore = Depends(get_store),
) -> Any:
    """AI-reviewed candidates awaiting human review, longest wait first."""
    now = datetime.now(timezone.utc)
    try:
        data = await get_pending_human_review(store, now)
    except Exception as exc:
        return _failure("pending_review_fetch_failed", exc)
    return ApiResponse(success=True, data=data, timestamp=_timestamp(now))


# ---------------------------------------------------------------------------
# GET /api/ceo-metrics
# ---------------------------------------------------------------------------

@router.get("/ceo-metrics", response_model=ApiResponse[CEOMetrics])
async def ceo_metrics(
    store: NotionStore = Depends(get_store),
) -> Any:
    """Time-series and summary KPIs for the metrics window."""
    now = datetime.now(timezone.utc)
    try:
        data = await get_ceo_metrics(store, now)
    except Exception as exc:
        return _failure("ceo_metrics_failed", exc)
    return ApiResponse(success=True, data=data, timestamp=_timestamp(now))


# ---------------------------------------------------------------------------
# GET /api/awaiting-review
# ---------------------------------------------------------------------------

@router.get("/awaiting-review", response_model=ApiResponse[list[AwaitingReviewCandidate]])
async def awaiting_review(
    store: NotionStore = Depends(get_store),
) -> Any:
    """Recent candidates without CV verification, highest AI score first."""
    now = datetime.now(timezone.utc)
    try:
        data = await get_awaiting_review(store, now)
    except Exception as exc:
        return _failure("awaiting_review_failed", exc)
    return ApiResponse(success=True, data=data, timestamp=_timestamp(now))
