"""
feasibility_scorer.py — Deterministic category scoring and aggregation.

Six independent scorers turn a ScoringContext (zone verdict + heuristic
estimates + rocket configuration + month) into category analyses. Every
category overall is the half-up rounded mean of its named sub-scores and
the analysis overall is the rounded mean of the six category overalls.

This module never calls out to any service: the narrative layer
(launchsite.ai.narrative) decorates its output afterwards.

USAGE
─────
    ctx = build_context(location, rocket_config, zone_validation)
    categories = score_location(ctx)
    result = assemble_result(ctx, categories, build_recommendation(ctx, categories))
"""

from __future__ import annotations

import uuid
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Optional

from launchsite.models.analysis import (
    AnalysisResult,
    FeasibilityScore,
    GeographicalAnalysis,
    GeopoliticalAnalysis,
    LegalAnalysis,
    Location,
    PracticalityAnalysis,
    ResourcesAnalysis,
    RocketConfig,
    TimingAnalysis,
    ZoneValidation,
)
from launchsite.services.heuristics import (
    ClimateAssessment,
    assess_climate,
    assess_development_level,
    assess_political_stability,
    round_half_up,
)

# Northern-hemisphere launch season, calendar months (June–September)
NORTHERN_SEASON_MONTHS = range(6, 10)

_RESTRICTION_SCORES = {"safe": 85, "caution": 55, "danger": 20}
_SAFETY_BONUS = {"advanced": 15, "intermediate": 5}
_DEFAULT_SAFETY_BONUS = -5


@dataclass(frozen=True)
class ScoringContext:
    location: Location
    rocket_config: RocketConfig
    zone_validation: ZoneValidation
    development_level: int
    climate: ClimateAssessment
    political_stability: int
    month: int  # 1–12

    @property
    def is_model(self) -> bool:
        return self.rocket_config.is_model


def build_context(
    location: Location,
    rocket_config: RocketConfig,
    zone_validation: ZoneValidation,
    month: Optional[int] = None,
) -> ScoringContext:
    """Run the heuristic estimators and bundle everything the scorers need."""
    if month is None:
        month = datetime.now(tz=timezone.utc).month
    return ScoringContext(
        location=location,
        rocket_config=rocket_config,
        zone_validation=zone_validation,
        development_level=assess_development_level(location),
        climate=assess_climate(location),
        political_stability=assess_political_stability(location),
        month=month,
    )


def feasibility_score(score: float, details: str) -> FeasibilityScore:
    return FeasibilityScore(score=max(0.0, min(100.0, score)), details=details)


def _overall(details: str, *parts: FeasibilityScore) -> FeasibilityScore:
    mean = sum(p.score for p in parts) / len(parts)
    return feasibility_score(round_half_up(mean), details)


# ── Category scorers ──────────────────────────────────────────────────────────

def score_resources(ctx: ScoringContext) -> ResourcesAnalysis:
    dev = ctx.development_level
    model = ctx.is_model
    advanced = ctx.rocket_config.safety_level == "advanced"

    materials = feasibility_score(
        min(95, 60 + dev * 0.3 + (20 if model else 0)),
        "Model rocket materials are widely available through hobby suppliers and online retailers."
        if model else
        "Industrial rocket components require specialized suppliers and manufacturing facilities.",
    )
    expertise = feasibility_score(
        min(95, 50 + dev * 0.4 + (15 if advanced else 0)),
        "Technical expertise availability varies by location. "
        "Consider proximity to aerospace hubs or universities.",
    )
    facilities = feasibility_score(
        min(95, 40 + dev * 0.5 + (25 if model else 0)),
        "Model rockets require minimal facilities - open space and basic launch equipment."
        if model else
        "Industrial rockets need extensive infrastructure including launch pads and mission control.",
    )
    return ResourcesAnalysis(
        materials=materials,
        expertise=expertise,
        facilities=facilities,
        overall=_overall(
            "Overall resource availability assessment based on location development and rocket type.",
            materials, expertise, facilities,
        ),
    )


def score_legal(ctx: ScoringContext) -> LegalAnalysis:
    model = ctx.is_model
    zone = ctx.zone_validation

    permits = feasibility_score(
        max(30, 70 - len(zone.warnings) * 15 + (10 if model else -20)),
        "Model rockets typically require minimal permits for hobby use, but check local regulations."
        if model else
        "Industrial launches require extensive permits from aviation, space, and environmental agencies.",
    )
    regulations = feasibility_score(
        max(25, 65 + ctx.political_stability * 0.2 - (0 if model else 15)),
        "Regulatory framework varies significantly by country. Some regions have established space laws.",
    )
    restrictions = feasibility_score(
        _RESTRICTION_SCORES[zone.severity],
        "Location has proximity restrictions that may limit launch activities."
        if zone.warnings else
        "No major restrictions identified for this location.",
    )
    return LegalAnalysis(
        permits=permits,
        regulations=regulations,
        restrictions=restrictions,
        overall=_overall(
            "Legal and regulatory assessment for rocket launch activities at this location.",
            permits, regulations, restrictions,
        ),
    )


def score_geographical(ctx: ScoringContext) -> GeographicalAnalysis:
    terrain = feasibility_score(
        min(90, 70 + (10 if abs(ctx.location.latitude) < 30 else -5)),
        "Terrain suitability based on latitude and regional characteristics.",
    )
    weather = feasibility_score(ctx.climate.score, ctx.climate.details)
    accessibility = feasibility_score(
        min(95, 55 + ctx.development_level * 0.35),
        "Accessibility depends on local infrastructure and transportation networks.",
    )
    return GeographicalAnalysis(
        terrain=terrain,
        weather=weather,
        accessibility=accessibility,
        overall=_overall(
            "Geographical suitability assessment including terrain, weather, and access.",
            terrain, weather, accessibility,
        ),
    )


def score_geopolitical(ctx: ScoringContext) -> GeopoliticalAnalysis:
    stab = ctx.political_stability

    stability = feasibility_score(
        stab,
        "Political stability affects long-term project viability and regulatory consistency.",
    )
    cooperation = feasibility_score(
        min(90, 50 + stab * 0.4),
        "International cooperation level influences technology transfer and partnerships.",
    )
    risks = feasibility_score(
        min(95, 85 - (100 - stab) * 0.3),
        "Geopolitical risk assessment for aerospace activities in the region.",
    )
    return GeopoliticalAnalysis(
        stability=stability,
        cooperation=cooperation,
        risks=risks,
        overall=_overall(
            "Geopolitical environment assessment for sustained rocket operations.",
            stability, cooperation, risks,
        ),
    )


def is_favorable_season(latitude: float, month: int) -> bool:
    northern_summer = month in NORTHERN_SEASON_MONTHS
    return northern_summer if latitude >= 0 else not northern_summer


def score_timing(ctx: ScoringContext) -> TimingAnalysis:
    favorable = is_favorable_season(ctx.location.latitude, ctx.month)

    seasonality = feasibility_score(
        80 if favorable else 60,
        "Current season generally favorable for launch activities with stable weather patterns."
        if favorable else
        "Off-season may present weather challenges. Consider scheduling for warmer months.",
    )
    current_conditions = feasibility_score(
        75,
        "Real-time conditions should be verified closer to launch date. Monitor weather forecasts.",
    )
    optimal_window = (
        "June through September offers the most stable conditions for this location."
        if ctx.location.latitude >= 0 else
        "December through March provides optimal weather windows in the Southern Hemisphere."
    )
    return TimingAnalysis(
        seasonality=seasonality,
        current_conditions=current_conditions,
        optimal_window=optimal_window,
        overall=_overall(
            "Timing assessment based on seasonal patterns and current conditions.",
            seasonality, current_conditions,
        ),
    )


def score_practicality(ctx: ScoringContext) -> PracticalityAnalysis:
    model = ctx.is_model
    safety_bonus = _SAFETY_BONUS.get(ctx.rocket_config.safety_level, _DEFAULT_SAFETY_BONUS)
    zone_bonus = 10 if ctx.zone_validation.severity == "safe" else -10
    category_bonus = 10 if model else -15

    cost = feasibility_score(
        85 if model else max(30, 40 + ctx.development_level * 0.3),
        "Model rockets are highly cost-effective, with kits starting under $100."
        if model else
        "Industrial rockets require significant capital investment in millions of dollars.",
    )
    timeline = feasibility_score(
        90 if model else 50 + ctx.political_stability * 0.3,
        "Model rocket projects can be completed in weeks to months."
        if model else
        "Industrial rocket development typically requires 2-5 years from planning to launch.",
    )
    success_probability = feasibility_score(
        max(35, 60 + safety_bonus + zone_bonus + category_bonus),
        "Success probability based on experience level, location suitability, and project scope.",
    )
    return PracticalityAnalysis(
        cost=cost,
        timeline=timeline,
        success_probability=success_probability,
        overall=_overall(
            "Practical feasibility considering cost, timeline, and success factors.",
            cost, timeline, success_probability,
        ),
    )


# ── Aggregation ───────────────────────────────────────────────────────────────

@dataclass(frozen=True)
class ScoredCategories:
    resources: ResourcesAnalysis
    legal: LegalAnalysis
    geographical: GeographicalAnalysis
    geopolitical: GeopoliticalAnalysis
    timing: TimingAnalysis
    practicality: PracticalityAnalysis

    @property
    def overall_score(self) -> int:
        overalls = (
            self.resources.overall.score,
            self.legal.overall.score,
            self.geographical.overall.score,
            self.geopolitical.overall.score,
            self.timing.overall.score,
            self.practicality.overall.score,
        )
        return round_half_up(sum(overalls) / len(overalls))


def score_location(ctx: ScoringContext) -> ScoredCategories:
    return ScoredCategories(
        resources=score_resources(ctx),
        legal=score_legal(ctx),
        geographical=score_geographical(ctx),
        geopolitical=score_geopolitical(ctx),
        timing=score_timing(ctx),
        practicality=score_practicality(ctx),
    )


def build_recommendation(ctx: ScoringContext, categories: ScoredCategories) -> str:
    score = categories.overall_score
    zone = ctx.zone_validation

    if score >= 70:
        return (
            f"This location shows strong feasibility for {ctx.rocket_config.label} activities. "
            "The combination of favorable conditions, adequate resources, and manageable "
            "regulatory requirements makes this a viable launch site. Proceed with detailed "
            "planning and ensure all permits are obtained before launch."
        )

    if score >= 40:
        zone_note = "Zone restrictions require careful navigation. " if zone.warnings else ""
        return (
            "This location presents moderate feasibility with some challenges that need to be "
            f"addressed. {zone_note}Consider developing mitigation strategies for identified "
            "risks and consulting with local authorities to ensure compliance. Additional "
            "resources or partnerships may be needed."
        )

    danger_note = (
        "Critical zone violations make this location unsuitable. "
        if zone.severity == "danger" else ""
    )
    factors = ""
    if categories.legal.overall.score < 50:
        factors += "regulatory barriers, "
    if categories.resources.overall.score < 50:
        factors += "resource limitations, "
    factors += (
        "and geographical constraints "
        if categories.geographical.overall.score < 50 else
        "and other challenges "
    )
    return (
        f"This location faces significant challenges for rocket launch activities. {danger_note}"
        f"Multiple factors including {factors}suggest exploring alternative locations would be "
        "advisable."
    )


def assemble_result(
    ctx: ScoringContext,
    categories: ScoredCategories,
    recommendation: str,
    analysis_id: Optional[str] = None,
    created_at: Optional[datetime] = None,
) -> AnalysisResult:
    return AnalysisResult(
        id=analysis_id or str(uuid.uuid4()),
        location=ctx.location,
        rocket_config=ctx.rocket_config,
        zone_validation=ctx.zone_validation,
        resources=categories.resources,
        legal=categories.legal,
        geographical=categories.geographical,
        geopolitical=categories.geopolitical,
        timing=categories.timing,
        practicality=categories.practicality,
        overall_score=categories.overall_score,
        recommendation=recommendation,
        created_at=created_at or datetime.now(tz=timezone.utc),
    )
