"""
LaunchSite API — Application entry point.

Bootstraps FastAPI, wires up middleware, registers route groups,
and manages the MongoDB connection lifecycle.

Run locally:
  uvicorn launchsite.main:app --reload
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded

from launchsite import __version__
from launchsite.core import database as db_module
from launchsite.core.config import settings
from launchsite.core.database import close_mongo_connection, connect_to_mongo
from launchsite.core.rate_limit import limiter
from launchsite.routes.analysis import router as analysis_router
from launchsite.routes.geocode import router as geocode_router
from launchsite.routes.health import router as health_router
from launchsite.services import analysis_store

# ─── Logging ───────────────────────────────────────────────────────────────────
logging.basicConfig(
    level=logging.DEBUG if settings.debug else logging.INFO,
    format="%(asctime)s | %(levelname)-8s | %(name)s | %(message)s",
)
logger = logging.getLogger(__name__)


# ─── Lifespan ──────────────────────────────────────────────────────────────────
@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info(
        "Starting LaunchSite API (env: %s, poi provider: %s)",
        settings.environment,
        settings.poi_provider,
    )
    await connect_to_mongo()
    if db_module.db_client.db is not None:
        try:
            await analysis_store.ensure_indexes(db_module.db_client.db)
        except Exception as exc:
            logger.warning("Could not create analysis indexes: %s", exc)
    yield
    logger.info("Shutting down LaunchSite API")
    await close_mongo_connection()


# ─── App ───────────────────────────────────────────────────────────────────────
app = FastAPI(
    title="LaunchSite Feasibility API",
    description=(
        "Launch site safety validation and feasibility scoring for model and "
        "industrial rockets. Scores are heuristic estimates, not regulatory advice."
    ),
    version=__version__,
    lifespan=lifespan,
    docs_url="/docs" if settings.environment != "production" else None,
    redoc_url="/redoc" if settings.environment != "production" else None,
)


# ─── Rate limiting ─────────────────────────────────────────────────────────────
# Routes opt-in with @limiter.limit(...) + request: Request parameter.
app.state.limiter = limiter
app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)

# ─── Middleware ─────────────────────────────────────────────────────────────────
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# ─── Routes ────────────────────────────────────────────────────────────────────
app.include_router(health_router, prefix="/health", tags=["health"])
app.include_router(analysis_router)
app.include_router(geocode_router)


@app.get("/", tags=["root"])
async def root():
    """API root — basic metadata."""
    return {
        "name": "LaunchSite Feasibility API",
        "version": __version__,
        "status": "running",
        "environment": settings.environment,
        "docs": "/docs",
    }
