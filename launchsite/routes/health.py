"""
Health check endpoint.

Returns status + DB connectivity so callers can distinguish between
"API down" and "API up but DB unreachable", plus which POI provider the
zone validator is using.
"""

import logging

from fastapi import APIRouter
from pydantic import BaseModel

from launchsite import __version__
from launchsite.core import database as db_module
from launchsite.core.config import settings

logger = logging.getLogger(__name__)
router = APIRouter()


class HealthResponse(BaseModel):
    status: str  # Always "ok" if the API process is alive
    version: str
    database: str  # "connected" | "disconnected"
    environment: str
    poi_provider: str


@router.get("", response_model=HealthResponse, summary="API health check")
async def health_check() -> HealthResponse:
    """
    Liveness status of the API and its database connection.

    The API is healthy (HTTP 200) even when the database is disconnected;
    analyses still run, they just aren't saved.
    """
    db_status = "disconnected"
    try:
        # Access via module reference so tests can patch db_module.db_client
        if db_module.db_client.client is not None:
            await db_module.db_client.client.admin.command("ping")
            db_status = "connected"
    except Exception as exc:
        logger.warning("DB ping failed: %s", exc)

    return HealthResponse(
        status="ok",
        version=__version__,
        database=db_status,
        environment=settings.environment,
        poi_provider=settings.poi_provider,
    )
