"""Shared test fixtures.

Provides a fixed request instant, a mock Notion store, and a FastAPI
``TestClient`` wired to that mock through the ``get_store`` dependency.
"""

from collections.abc import Generator
from datetime import datetime, timezone
from unittest.mock import AsyncMock, MagicMock

import pytest
from fastapi.testclient import TestClient

from app.db.notion import NotionStore, get_store


@pytest.fixture()
def now() -> datetime:
    """Saturday 2026-10-17, noon UTC."""
    return datetime(2026, 10, 17, 12, 0, tzinfo=timezone.utc)


@pytest.fixture()
def mock_store() -> MagicMock:
    """A ``NotionStore`` stand-in whose queries return no pages."""
    store = MagicMock(spec=NotionStore)
    store.fetch_all = AsyncMock(return_value=[])
    store.ping = AsyncMock(return_value=None)
    return store


@pytest.fixture()
def test_client(mock_store: MagicMock) -> Generator[TestClient, None, None]:
    """Provide a FastAPI TestClient using ``mock_store``."""
    from app.main import app

    app.dependency_overrides[get_store] = lambda: mock_store
    with TestClient(app) as client:
        yield client
    app.dependency_overrides.clear()
