"""FastAPI application entry point.

Wires the lifespan-managed Notion client, CORS for the dashboard frontend,
and the health and dashboard routers.
"""

import logging
from contextlib import asynccontextmanager
from collections.abc import AsyncIterator

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from app.core.config import settings
from app.core.logging import setup_logging
from app.db.notion import NotionStore
from app.routers import dashboard, health

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(application: FastAPI) -> AsyncIterator[None]:
    """Build the one Notion client shared by every request; close it on exit."""
    setup_logging()
    store = NotionStore.from_settings(settings)
    application.state.notion_store = store
    logger.info(
        "Dashboard API starting",
        extra={
            "notion_configured": bool(settings.NOTION_API_KEY and settings.NOTION_DATABASE_ID),
            "timezone": settings.DASHBOARD_TIMEZONE,
        },
    )
    try:
        yield
    finally:
        await store.close()
        logger.info("Dashboard API stopped")


app = FastAPI(
    title="Recruiting Pipeline Dashboard API",
    description="Recruiting pipeline metrics computed from the candidates Notion database",
    version="0.1.0",
    lifespan=lifespan,
)

# Read-only API: the dashboard only ever issues GETs
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=False,
    allow_methods=["GET"],
    allow_headers=["*"],
)

app.include_router(health.router, tags=["Health"])
app.include_router(dashboard.router, prefix="/api", tags=["Dashboard"])
