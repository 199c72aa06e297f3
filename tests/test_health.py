"""
Tests for the /health and / endpoints.

All tests run without a live MongoDB (db is mocked as disconnected in conftest).
"""

from unittest.mock import AsyncMock, MagicMock


async def test_health_returns_200(client):
    response = await client.get("/health")
    assert response.status_code == 200


async def test_health_response_schema(client):
    data = (await client.get("/health")).json()

    assert data["status"] == "ok"
    assert data["version"] == "0.1.0"
    assert data["environment"] == "test"
    assert data["poi_provider"] == "static"


async def test_health_disconnected_when_no_db(client):
    data = (await client.get("/health")).json()
    assert data["database"] == "disconnected"


async def test_health_connected_when_ping_succeeds(client):
    import launchsite.core.database as db_module

    fake = MagicMock()
    fake.admin.command = AsyncMock(return_value={"ok": 1})
    db_module.db_client.client = fake

    data = (await client.get("/health")).json()
    assert data["database"] == "connected"


async def test_health_ping_failure_is_disconnected(client):
    import launchsite.core.database as db_module

    fake = MagicMock()
    fake.admin.command = AsyncMock(side_effect=RuntimeError("timeout"))
    db_module.db_client.client = fake

    response = await client.get("/health")
    assert response.status_code == 200
    assert response.json()["database"] == "disconnected"


async def test_root_endpoint(client):
    response = await client.get("/")
    assert response.status_code == 200

    data = response.json()
    assert data["status"] == "running"
    assert data["name"] == "LaunchSite Feasibility API"


async def test_docs_available_in_test_env(client):
    response = await client.get("/docs")
    assert response.status_code == 200


async def test_unknown_route_returns_404(client):
    response = await client.get("/does-not-exist")
    assert response.status_code == 404
