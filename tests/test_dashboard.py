"""Tests for the dashboard assemblers and their HTTP endpoints."""

from __future__ import annotations

from datetime import datetime
from typing import Any
from unittest.mock import MagicMock

import pytest
from fastapi.testclient import TestClient

from app.core.exceptions import FetchError
from app.db.notion import NotionStore, get_store
from app.services.dashboard import (
    get_awaiting_review,
    get_candidates_needing_followup,
    get_ceo_metrics,
    get_pending_human_review,
    one_month_before,
    resolve_timezone,
)
from tests.builders import candidate_page


def _query_args(store: MagicMock) -> tuple[dict[str, Any], list[dict[str, str]] | None]:
    kwargs = store.fetch_all.call_args.kwargs
    return kwargs["filter"], kwargs["sorts"]


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


class TestHelpers:
    @pytest.mark.parametrize(
        ("moment", "expected"),
        [
            (datetime(2026, 10, 17, 12), datetime(2026, 9, 17, 12)),
            (datetime(2026, 3, 31, 8), datetime(2026, 2, 28, 8)),
            (datetime(2026, 1, 15), datetime(2025, 12, 15)),
        ],
    )
    def test_one_month_before(self, moment: datetime, expected: datetime) -> None:
        assert one_month_before(moment) == expected

    def test_resolve_timezone(self) -> None:
        assert resolve_timezone("UTC").utcoffset(None).total_seconds() == 0
        assert str(resolve_timezone("Europe/London")) == "Europe/London"


# ---------------------------------------------------------------------------
# Assemblers
# ---------------------------------------------------------------------------


class TestCandidatesNeedingFollowup:
    """GET /api/candidates data."""

    @pytest.mark.asyncio
    async def test_only_overdue_high_value(self, mock_store: MagicMock, now: datetime) -> None:
        mock_store.fetch_all.return_value = [
            candidate_page("A", hot="Hot Candidate 🔥", hours=10),
            candidate_page("B", priority="1st", hours=None),
            candidate_page("C", priority="3rd", stratification="L", hours=30),
        ]

        result = await get_candidates_needing_followup(mock_store, now)

        assert [c.id for c in result] == ["B"]

    @pytest.mark.asyncio
    async def test_keeps_server_order(self, mock_store: MagicMock, now: datetime) -> None:
        mock_store.fetch_all.return_value = [
            candidate_page("x", stratification="H", hours=90),
            candidate_page("y", stratification="H", hours=40),
            candidate_page("z", stratification="H", hours=26),
        ]

        result = await get_candidates_needing_followup(mock_store, now)

        assert [c.id for c in result] == ["x", "y", "z"]

    @pytest.mark.asyncio
    async def test_query_filter_and_sort(self, mock_store: MagicMock, now: datetime) -> None:
        await get_candidates_needing_followup(mock_store, now)

        query_filter, sorts = _query_args(mock_store)
        conditions = query_filter["and"]
        assert conditions[0] == {
            "property": "Date Added",
            "created_time": {"on_or_after": "2026-09-17T12:00:00+00:00"},
        }
        assert {"property": "Status", "status": {"does_not_equal": "Accepted"}} in conditions
        assert {
            "property": "Interview Status",
            "select": {"does_not_equal": "Completed"},
        } in conditions
        assert conditions[-1] == {
            "or": [
                {"property": "Hot Candidate?", "select": {"equals": "Hot Candidate 🔥"}},
                {"property": "Priority", "select": {"equals": "1st"}},
                {"property": "Stratification", "select": {"equals": "H"}},
            ]
        }
        assert sorts == [{"property": "Hours Since Last Activity", "direction": "descending"}]

    @pytest.mark.asyncio
    async def test_fetch_error_propagates(self, mock_store: MagicMock, now: datetime) -> None:
        mock_store.fetch_all.side_effect = FetchError("Notion API error (502): Bad Gateway", 502)

        with pytest.raises(FetchError):
            await get_candidates_needing_followup(mock_store, now)


class TestPendingHumanReview:
    """GET /api/pending-review data."""

    @pytest.mark.asyncio
    async def test_longest_wait_first(self, mock_store: MagicMock, now: datetime) -> None:
        mock_store.fetch_all.return_value = [
            candidate_page("recent", ai_processed_at="2026-10-17T10:00:00.000Z"),
            candidate_page("oldest", ai_processed_at="2026-10-14T12:00:00.000Z"),
            candidate_page("middle", ai_processed_at="2026-10-16T12:00:00.000Z"),
        ]

        result = await get_pending_human_review(mock_store, now)

        assert [c.id for c in result] == ["oldest", "middle", "recent"]
        assert [c.hours_since_ai_review for c in result] == [72, 24, 2]

    @pytest.mark.asyncio
    async def test_reapplies_predicate(self, mock_store: MagicMock, now: datetime) -> None:
        mock_store.fetch_all.return_value = [
            candidate_page("ok", ai_processed_at="2026-10-16T12:00:00.000Z"),
            candidate_page("passed", ai_processed_at="2026-10-16T12:00:00.000Z",
                           passed_human_filter=True),
            candidate_page("rejected", ai_processed_at="2026-10-16T12:00:00.000Z",
                           status_name="Candidate Rejected"),
            candidate_page("not-reviewed"),
        ]

        result = await get_pending_human_review(mock_store, now)

        assert [c.id for c in result] == ["ok"]

    @pytest.mark.asyncio
    async def test_query_filter(self, mock_store: MagicMock, now: datetime) -> None:
        await get_pending_human_review(mock_store, now)

        query_filter, sorts = _query_args(mock_store)
        assert query_filter["and"][:3] == [
            {"property": "AI Processed At", "date": {"is_not_empty": True}},
            {"property": "CV Verified by Lynn", "date": {"is_empty": True}},
            {"property": "Passed Human Filter", "checkbox": {"equals": False}},
        ]
        assert sorts == [{"property": "AI Processed At", "direction": "ascending"}]


class TestAwaitingReview:
    """GET /api/awaiting-review data."""

    @pytest.mark.asyncio
    async def test_best_score_first_nulls_last(self, mock_store: MagicMock, now: datetime) -> None:
        mock_store.fetch_all.return_value = [
            candidate_page("mid", ai_score=5),
            candidate_page("none", ai_score=None),
            candidate_page("top", ai_score=9),
            candidate_page("verified", ai_score=10, cv_verified="2026-10-16"),
        ]

        result = await get_awaiting_review(mock_store, now)

        assert [c.id for c in result] == ["top", "mid", "none"]

    @pytest.mark.asyncio
    async def test_trimmed_shape(self, mock_store: MagicMock, now: datetime) -> None:
        mock_store.fetch_all.return_value = [candidate_page("p-1", role="Engineer", ai_score=8)]

        result = await get_awaiting_review(mock_store, now)

        assert set(result[0].model_dump(by_alias=True)) == {
            "id",
            "name",
            "role",
            "aiScore",
            "dateAdded",
            "notionUrl",
        }

    @pytest.mark.asyncio
    async def test_whole_number_score_serialises_as_integer(
        self, mock_store: MagicMock, now: datetime
    ) -> None:
        mock_store.fetch_all.return_value = [candidate_page("p-1", ai_score=8)]

        result = await get_awaiting_review(mock_store, now)

        assert '"aiScore":8,' in result[0].model_dump_json(by_alias=True)

    @pytest.mark.asyncio
    async def test_window_filter(self, mock_store: MagicMock, now: datetime) -> None:
        await get_awaiting_review(mock_store, now)

        query_filter, sorts = _query_args(mock_store)
        assert query_filter["and"][0] == {
            "property": "Date Added",
            "created_time": {"on_or_after": "2026-09-17T12:00:00+00:00"},
        }
        assert sorts == [{"property": "AI Score", "direction": "descending"}]


class TestCeoMetrics:
    """GET /api/ceo-metrics data."""

    @pytest.mark.asyncio
    async def test_thirty_day_window(self, mock_store: MagicMock, now: datetime) -> None:
        mock_store.fetch_all.return_value = [
            candidate_page("p-1", role="Engineer", hours=12),
        ]

        metrics = await get_ceo_metrics(mock_store, now)

        assert len(metrics.response_time_trend) == 30
        assert metrics.response_time_trend[-1].date == "2026-10-17"
        assert metrics.response_time_trend[-1].avg_hours == 12
        assert metrics.summary.total_applications == 1
        query_filter, sorts = _query_args(mock_store)
        assert query_filter == {
            "property": "Date Added",
            "created_time": {"on_or_after": "2026-09-17T12:00:00+00:00"},
        }
        assert sorts is None


# ---------------------------------------------------------------------------
# Endpoints
# ---------------------------------------------------------------------------


class TestEndpoints:
    """Envelope and status codes over HTTP."""

    @pytest.mark.parametrize(
        "path",
        ["/api/candidates", "/api/pending-review", "/api/awaiting-review"],
    )
    def test_empty_list_success(self, test_client: TestClient, path: str) -> None:
        response = test_client.get(path)

        assert response.status_code == 200
        body = response.json()
        assert body["success"] is True
        assert body["data"] == []
        assert body["timestamp"].endswith("Z")
        assert "error" not in body

    def test_candidates_camel_case(
        self, test_client: TestClient, mock_store: MagicMock
    ) -> None:
        mock_store.fetch_all.return_value = [
            candidate_page("p-1", hot="Hot Candidate 🔥", hours=48, role="Engineer"),
        ]

        body = test_client.get("/api/candidates").json()

        item = body["data"][0]
        assert item["id"] == "p-1"
        assert item["hotCandidate"] is True
        assert item["hoursSinceLastActivity"] == 48
        assert item["notionUrl"] == "https://www.notion.so/p-1"

    def test_ceo_metrics_payload(self, test_client: TestClient) -> None:
        response = test_client.get("/api/ceo-metrics")

        assert response.status_code == 200
        data = response.json()["data"]
        assert len(data["responseTimeTrend"]) == 30
        assert len(data["dailyFlow"]) == 30
        assert data["summary"]["totalApplications"] == 0
        assert data["roles"] == []
        assert data["roleBreakdown"] == {}
        assert data["hrBacklogCandidates"] == []

    @pytest.mark.parametrize(
        "path",
        ["/api/candidates", "/api/pending-review", "/api/ceo-metrics", "/api/awaiting-review"],
    )
    def test_fetch_error_is_500(
        self, test_client: TestClient, mock_store: MagicMock, path: str
    ) -> None:
        mock_store.fetch_all.side_effect = FetchError(
            "Notion API error (429): You have been rate limited.", 429
        )

        response = test_client.get(path)

        assert response.status_code == 500
        body = response.json()
        assert body == {
            "success": False,
            "error": "Notion API error (429): You have been rate limited.",
        }

    def test_missing_api_key_reported(self, test_client: TestClient) -> None:
        from app.main import app

        unconfigured = NotionStore("", "db-123")
        app.dependency_overrides[get_store] = lambda: unconfigured

        response = test_client.get("/api/candidates")

        assert response.status_code == 500
        assert response.json() == {
            "success": False,
            "error": "NOTION_API_KEY environment variable is not set",
        }
