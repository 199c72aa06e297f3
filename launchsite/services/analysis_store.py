"""
analysis_store.py — Persistence of completed analyses in MongoDB.

Collection `analyses`, one document per AnalysisResult:

  {
    "analysis_id": "<uuid>",          ← lookup key (unique index)
    "session_id": "<opaque>|null",    ← optional browser session
    "overall_score": 72,
    "created_at": ISODate(...),       ← sort key, newest first
    "analysis": { ...AnalysisResult JSON... }
  }

Every function takes the Motor database handed out by core.database.get_db
so routes and tests can inject their own.
"""

import logging
from typing import Optional

from launchsite.models.analysis import AnalysisResult

logger = logging.getLogger(__name__)

COLLECTION = "analyses"


def _to_doc(result: AnalysisResult, session_id: Optional[str]) -> dict:
    return {
        "analysis_id": result.id,
        "session_id": session_id,
        "overall_score": result.overall_score,
        "created_at": result.created_at,
        "analysis": result.model_dump(mode="json"),
    }


def _from_doc(doc: dict) -> AnalysisResult:
    return AnalysisResult.model_validate(doc["analysis"])


async def _collect(cursor) -> list[AnalysisResult]:
    items = []
    async for doc in cursor:
        try:
            items.append(_from_doc(doc))
        except Exception as exc:
            logger.warning("Skipping malformed analysis doc: %s", exc)
    return items


async def ensure_indexes(db) -> None:
    await db[COLLECTION].create_index("analysis_id", unique=True)
    await db[COLLECTION].create_index([("session_id", 1), ("created_at", -1)])


async def save_analysis(db, result: AnalysisResult, session_id: Optional[str] = None) -> AnalysisResult:
    await db[COLLECTION].insert_one(_to_doc(result, session_id))
    return result


async def get_analysis(db, analysis_id: str) -> Optional[AnalysisResult]:
    doc = await db[COLLECTION].find_one({"analysis_id": analysis_id})
    return _from_doc(doc) if doc else None


async def list_analyses(
    db, session_id: Optional[str] = None, limit: int = 50
) -> tuple[list[AnalysisResult], int]:
    """Return (newest-first page, total matching) optionally scoped to one session."""
    query: dict = {}
    if session_id:
        query["session_id"] = session_id

    total = await db[COLLECTION].count_documents(query)
    cursor = db[COLLECTION].find(query).sort("created_at", -1).limit(limit)
    return await _collect(cursor), total


async def recent_analyses(db, n: int = 5) -> list[AnalysisResult]:
    cursor = db[COLLECTION].find({}).sort("created_at", -1).limit(n)
    return await _collect(cursor)
