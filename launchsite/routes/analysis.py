"""
analysis.py — Launch feasibility routes.

Routes:
  POST /api/v1/analyze             — run a full analysis (saved when the DB is up)
  POST /api/v1/validate-zone       — zone safety check only
  GET  /api/v1/analyses            — history, newest first (?session_id=&limit=)
  GET  /api/v1/analyses/recent     — most recent N analyses (?n=)
  GET  /api/v1/analyses/{id}       — a single saved analysis

Sessions are opaque: the front-end sends the same X-Session-ID header on
every request and later filters its history with ?session_id=.
"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, Header, HTTPException, Query, Request

from launchsite.core.config import settings
from launchsite.core.database import get_db
from launchsite.core.rate_limit import limiter
from launchsite.models.analysis import (
    AnalysisListResponse,
    AnalysisResult,
    AnalyzeLocationRequest,
    ValidateZoneRequest,
    ZoneValidation,
)
from launchsite.services import analysis_store
from launchsite.services.analysis_engine import AnalysisEngine, get_analysis_engine

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/v1", tags=["analysis"])


@router.post("/analyze", response_model=AnalysisResult)
@limiter.limit(settings.analyze_rate_limit)
async def analyze_location(
    request: Request,
    payload: AnalyzeLocationRequest,
    x_session_id: Optional[str] = Header(default=None),
    engine: AnalysisEngine = Depends(get_analysis_engine),
    db=Depends(get_db),
):
    """Score a launch site across six categories and persist the result."""
    result = await engine.analyze(payload.location, payload.rocket_config)

    if db is not None:
        try:
            await analysis_store.save_analysis(db, result, session_id=x_session_id)
        except Exception as exc:
            # The analysis is still valid; history just won't include it.
            logger.error("Failed to save analysis %s: %s", result.id, exc)
    else:
        logger.debug("Database unavailable; analysis %s not persisted", result.id)

    return result


@router.post("/validate-zone", response_model=ZoneValidation)
async def validate_zone(
    payload: ValidateZoneRequest,
    engine: AnalysisEngine = Depends(get_analysis_engine),
):
    """Proximity check against airports, schools, military sites and dense areas."""
    return await engine.validate(payload.location)


@router.get("/analyses", response_model=AnalysisListResponse)
async def list_analyses(
    session_id: Optional[str] = Query(default=None),
    limit: int = Query(default=50, ge=1, le=200),
    db=Depends(get_db),
):
    if db is None:
        raise HTTPException(status_code=503, detail="Database unavailable")

    items, total = await analysis_store.list_analyses(db, session_id=session_id, limit=limit)
    return AnalysisListResponse(items=items, total=total, limit=limit)


@router.get("/analyses/recent", response_model=list[AnalysisResult])
async def recent_analyses(
    n: int = Query(default=5, ge=1, le=50),
    db=Depends(get_db),
):
    if db is None:
        raise HTTPException(status_code=503, detail="Database unavailable")
    return await analysis_store.recent_analyses(db, n=n)


@router.get("/analyses/{analysis_id}", response_model=AnalysisResult)
async def get_analysis(analysis_id: str, db=Depends(get_db)):
    if db is None:
        raise HTTPException(status_code=503, detail="Database unavailable")

    result = await analysis_store.get_analysis(db, analysis_id)
    if result is None:
        raise HTTPException(status_code=404, detail="Analysis not found")
    return result
