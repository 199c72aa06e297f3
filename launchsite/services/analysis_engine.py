"""
analysis_engine.py — Orchestrates one feasibility analysis.

  location + rocket config
        │
        ▼
  validate_zone  (awaits the POI provider)
        │
        ├──► narrative task started (Gemini, runs concurrently)
        ▼
  heuristics → six category scorers → deterministic recommendation
        │
        ▼
  await narrative, apply insights → AnalysisResult

The engine never raises for external-service failure: POI outages become
a zone warning and narrative outages become fallback text. With no
narrative provider configured the result is purely deterministic.
"""

import asyncio
import logging
from datetime import datetime
from typing import Optional

from launchsite.ai.narrative import NarrativeInput, NarrativeProvider, apply_insights
from launchsite.core.config import settings
from launchsite.integrations.facilities import PoiProvider
from launchsite.integrations.overpass_adapter import overpass_adapter
from launchsite.integrations.static_hazards import StaticHazardProvider
from launchsite.models.analysis import AnalysisResult, Location, RocketConfig, ZoneValidation
from launchsite.services.feasibility_scorer import (
    assemble_result,
    build_context,
    build_recommendation,
    score_location,
)
from launchsite.services.zone_validator import validate_zone

logger = logging.getLogger(__name__)


class AnalysisEngine:
    def __init__(
        self,
        poi_provider: PoiProvider,
        narrative: Optional[NarrativeProvider] = None,
        radius_m: Optional[float] = None,
    ) -> None:
        self.poi_provider = poi_provider
        self.narrative = narrative
        self.radius_m = radius_m

    async def validate(self, location: Location) -> ZoneValidation:
        return await validate_zone(location, self.poi_provider, self.radius_m)

    async def analyze(
        self,
        location: Location,
        rocket_config: RocketConfig,
        now: Optional[datetime] = None,
    ) -> AnalysisResult:
        zone = await self.validate(location)

        insights_task = None
        if self.narrative is not None:
            insights_task = asyncio.create_task(
                self.narrative.generate_insights(
                    NarrativeInput(
                        location=location,
                        rocket_type=rocket_config.label,
                        zone_warnings=[w.message for w in zone.warnings],
                    )
                )
            )

        ctx = build_context(location, rocket_config, zone, month=now.month if now else None)
        categories = score_location(ctx)
        recommendation = build_recommendation(ctx, categories)

        if insights_task is not None:
            insights = await insights_task
            categories = apply_insights(categories, insights)
            recommendation = insights.recommendation

        result = assemble_result(ctx, categories, recommendation, created_at=now)
        logger.info(
            "Analysis %s at %.4f,%.4f (%s): overall=%d severity=%s",
            result.id,
            location.latitude,
            location.longitude,
            rocket_config.category,
            result.overall_score,
            zone.severity,
        )
        return result


def build_engine() -> AnalysisEngine:
    """Wire an engine from settings."""
    if settings.poi_provider == "static":
        provider: PoiProvider = StaticHazardProvider()
    else:
        provider = overpass_adapter
    narrative = NarrativeProvider() if settings.narrative_enabled else None
    return AnalysisEngine(provider, narrative, radius_m=settings.zone_search_radius_m)


# Module-level singleton
analysis_engine = build_engine()


def get_analysis_engine() -> AnalysisEngine:
    """FastAPI dependency — override in tests via app.dependency_overrides."""
    return analysis_engine
