"""Notion database client.

``NotionStore`` wraps a single ``httpx.AsyncClient`` and exposes the one
operation the dashboard needs from Notion: querying the candidates database,
either one page at a time (``query``) or exhaustively (``fetch_all``).

One instance is built in the FastAPI lifespan, kept on ``app.state`` and
handed to routes through the ``get_store`` dependency.
"""

from __future__ import annotations

import logging
from typing import Any

import httpx
from fastapi import Request

from app.core.config import Settings, settings
from app.core.exceptions import ConfigurationError, FetchError
from app.db.filters import Filter, Sort

logger = logging.getLogger(__name__)

# Notion rejects page_size above 100
MAX_PAGE_SIZE = 100


class NotionStore:
    """Read-only access to one Notion database."""

    def __init__(
        self,
        api_key: str,
        database_id: str,
        *,
        base_url: str = "https://api.notion.com/v1",
        notion_version: str = "2022-06-28",
        page_size: int = MAX_PAGE_SIZE,
        timeout: float | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._api_key = api_key
        self._database_id = database_id
        self._notion_version = notion_version
        self.page_size = max(1, min(page_size, MAX_PAGE_SIZE))
        self._http = httpx.AsyncClient(
            base_url=base_url,
            timeout=timeout,
            transport=transport,
        )

    @classmethod
    def from_settings(cls, config: Settings = settings) -> NotionStore:
        """Build a store from application settings.

        Missing credentials are not checked here: the app must boot without
        them and report the problem on the first request instead.
        """
        return cls(
            config.NOTION_API_KEY,
            config.NOTION_DATABASE_ID,
            base_url=config.NOTION_API_BASE_URL,
            notion_version=config.NOTION_VERSION,
            page_size=config.NOTION_PAGE_SIZE,
            timeout=config.NOTION_TIMEOUT_SECONDS,
        )

    # ------------------------------------------------------------------
    # Configuration
    # ------------------------------------------------------------------

    def _headers(self) -> dict[str, str]:
        if not self._api_key:
            raise ConfigurationError("NOTION_API_KEY environment variable is not set")
        return {
            "Authorization": f"Bearer {self._api_key}",
            "Notion-Version": self._notion_version,
            "Content-Type": "application/json",
        }

    def _require_database_id(self) -> str:
        if not self._database_id:
            raise ConfigurationError("NOTION_DATABASE_ID environment variable is not set")
        return self._database_id

    # ------------------------------------------------------------------
    # HTTP
    # ------------------------------------------------------------------

    async def _request(
        self,
        method: str,
        path: str,
        payload: dict[str, Any] | None = None,
    ) -> dict[str, Any]:
        """Send one request to Notion and return the decoded JSON body.

        Raises ``FetchError`` for HTTP error statuses, transport failures and
        bodies that are not a JSON object.
        """
        headers = self._headers()
        try:
            response = await self._http.request(method, path, headers=headers, json=payload)
            response.raise_for_status()
            body = response.json()
        except httpx.HTTPStatusError as exc:
            status = exc.response.status_code
            raise FetchError(
                f"Notion API error ({status}): {_error_message(exc.response)}",
                status_code=status,
            ) from exc
        except httpx.HTTPError as exc:
            raise FetchError(f"Notion request failed: {exc}") from exc
        except ValueError as exc:
            raise FetchError("Notion returned a response that is not valid JSON") from exc

        if not isinstance(body, dict):
            raise FetchError("Notion returned an unexpected response body")
        return body

    async def query(
        self,
        filter: Filter | None = None,
        sorts: list[Sort] | None = None,
        start_cursor: str | None = None,
        page_size: int | None = None,
    ) -> dict[str, Any]:
        """Run one database query and return the raw response page."""
        database_id = self._require_database_id()
        payload: dict[str, Any] = {"page_size": page_size or self.page_size}
        if filter is not None:
            payload["filter"] = filter
        if sorts:
            payload["sorts"] = sorts
        if start_cursor:
            payload["start_cursor"] = start_cursor
        return await self._request("POST", f"/databases/{database_id}/query", payload)

    async def fetch_all(
        self,
        filter: Filter | None = None,
        sorts: list[Sort] | None = None,
    ) -> list[dict[str, Any]]:
        """Return every page matching *filter*, following ``next_cursor``.

        Pages are requested one after another; a failure on any of them
        aborts the whole fetch with ``FetchError``.
        """
        pages: list[dict[str, Any]] = []
        cursor: str | None = None
        requests_made = 0

        while True:
            body = await self.query(filter=filter, sorts=sorts, start_cursor=cursor)
            requests_made += 1
            results = body.get("results") or []
            pages.extend(item for item in results if _is_page(item))
            logger.debug(
                "Fetched Notion result page",
                extra={"page_number": requests_made, "results": len(results)},
            )

            cursor = body.get("next_cursor")
            if not body.get("has_more") or not cursor:
                break

        logger.info(
            "Notion query complete",
            extra={"pages_requested": requests_made, "records": len(pages)},
        )
        return pages

    async def ping(self) -> None:
        """Retrieve the database metadata; raises if Notion is unreachable."""
        database_id = self._require_database_id()
        await self._request("GET", f"/databases/{database_id}")

    async def close(self) -> None:
        await self._http.aclose()


def _is_page(item: Any) -> bool:
    """True for full page objects (partial results carry no properties)."""
    return (
        isinstance(item, dict)
        and item.get("object") == "page"
        and isinstance(item.get("properties"), dict)
    )


def _error_message(response: httpx.Response) -> str:
    """Extract Notion's error message from an error response."""
    try:
        body = response.json()
    except ValueError:
        return response.text or response.reason_phrase
    if isinstance(body, dict) and body.get("message"):
        return str(body["message"])
    return response.reason_phrase


def get_store(request: Request) -> NotionStore:
    """FastAPI dependency returning the store built in the app lifespan."""
    return request.app.state.notion_store
