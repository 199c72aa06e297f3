"""
pytest configuration and shared fixtures for the LaunchSite API tests.

Tests must not require a live MongoDB, Gemini key or OpenStreetMap access:
  1. connect_to_mongo / close_mongo_connection are patched to no-ops and
     db_client is left disconnected, so persistence-backed routes either
     get a FakeDB via dependency_overrides or answer 503.
  2. AI_MOCK_MODE=true makes GeminiClient return canned JSON.
  3. POI_PROVIDER=static keeps zone validation on the built-in hazard table.
"""

import os
from unittest.mock import AsyncMock, patch

import pytest
from httpx import ASGITransport, AsyncClient

# Set env vars BEFORE importing the app so Settings picks them up correctly
os.environ.setdefault("AI_MOCK_MODE", "true")
os.environ.setdefault("ENVIRONMENT", "test")
os.environ.setdefault("POI_PROVIDER", "static")
os.environ.setdefault("NARRATIVE_ENABLED", "true")


@pytest.fixture(autouse=True)
async def mock_db():
    """Keep the MongoDB lifecycle offline for every test."""
    with (
        patch("launchsite.core.database.connect_to_mongo", new_callable=AsyncMock),
        patch("launchsite.core.database.close_mongo_connection", new_callable=AsyncMock),
    ):
        import launchsite.core.database as db_module

        original_client = db_module.db_client.client
        original_db = db_module.db_client.db

        db_module.db_client.client = None
        db_module.db_client.db = None

        yield

        db_module.db_client.client = original_client
        db_module.db_client.db = original_db


@pytest.fixture()
async def client(mock_db):  # noqa: ARG001 — mock_db must run first
    """HTTPX async test client wired to the FastAPI app."""
    from launchsite.core.rate_limit import limiter
    from launchsite.main import app

    # Reset in-memory rate-limit counters so tests are independent.
    limiter.reset()

    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac
