"""Health check endpoint.

Reports whether the configured Notion database is reachable.
"""

import logging
from typing import Any

from fastapi import APIRouter, Depends
from starlette.responses import JSONResponse

from app.db.notion import NotionStore, get_store

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/health")
async def health_check(store: NotionStore = Depends(get_store)) -> Any:
    """Return 200 when Notion answers, 503 otherwise."""
    notion_status = "disconnected"

    try:
        await store.ping()
        notion_status = "connected"
    except Exception:
        logger.warning("Health check: Notion connection failed", exc_info=True)

    payload: dict[str, str] = {
        "status": "ok" if notion_status == "connected" else "degraded",
        "notion": notion_status,
    }

    if notion_status != "connected":
        return JSONResponse(status_code=503, content=payload)

    return payload
