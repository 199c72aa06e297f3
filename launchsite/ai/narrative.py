"""
narrative.py — Location-specific prose for a scored analysis.

Flow:
  1. NarrativeProvider builds a consultant prompt from the place metadata,
     the rocket type and the zone warning messages.
  2. Gemini answers with a JSON object of five free-text fields
     (resourcesInsight, legalInsight, geographicalInsight,
     geopoliticalInsight, recommendation).
  3. apply_insights() swaps the generic `details` text of the resources,
     legal, geographical and geopolitical categories for those insights;
     the engine uses the recommendation as the final verdict text.

Any failure (missing API key, SDK error, timeout, reply without a JSON
object) yields fallback_insights(), built only from data we already hold. Missing or
blank fields in an otherwise valid reply are filled from the same
fallback, so no caller ever sees an empty string.
"""

import asyncio
import json
import logging
import re
from dataclasses import dataclass, field
from typing import Any, Optional

from pydantic import BaseModel

from launchsite.ai.gemini_client import GeminiClient, gemini_client
from launchsite.core.config import settings
from launchsite.models.analysis import FeasibilityScore, Location
from launchsite.services.feasibility_scorer import ScoredCategories

logger = logging.getLogger(__name__)


# ── Data classes ──────────────────────────────────────────────────────────────

@dataclass
class NarrativeInput:
    location: Location
    rocket_type: str
    zone_warnings: list[str] = field(default_factory=list)


@dataclass
class LocationInsights:
    resources: str
    legal: str
    geographical: str
    geopolitical: str
    recommendation: str


# Reply key → LocationInsights attribute
_REPLY_KEYS = {
    "resourcesInsight": "resources",
    "legalInsight": "legal",
    "geographicalInsight": "geographical",
    "geopoliticalInsight": "geopolitical",
    "recommendation": "recommendation",
}


# ── Prompt ────────────────────────────────────────────────────────────────────

_SYSTEM_PREAMBLE = (
    "You are an expert aerospace consultant specializing in rocket launch site feasibility "
    "analysis. Provide accurate, location-specific insights based on real geographical, "
    "political, and infrastructure data."
)

_NARRATIVE_PROMPT = """\
{preamble}

Location Details:
- Coordinates: {lat:.6f}, {lon:.6f}
- Location: {display_name}
- City: {city}
- State/Region: {state}
- Country: {country}

Rocket Type: {rocket_type}

Zone Safety Warnings:
{warnings}

Provide a realistic, detailed feasibility analysis. Respond with valid JSON and nothing else:
{{
  "resourcesInsight": "<local availability of materials, expertise, and facilities>",
  "legalInsight": "<regulatory environment, permits, and legal requirements for this country/region>",
  "geographicalInsight": "<terrain, weather patterns, and accessibility at these coordinates>",
  "geopoliticalInsight": "<political stability, international cooperation, and regional factors>",
  "recommendation": "<overall recommendation for this specific location (2-3 sentences)>"
}}

Be specific to the actual location. Reference real geographical features, climate, political \
situation, and infrastructure of the area. Do not mention airports or facilities unless they \
were identified in the zone warnings."""


def build_prompt(data: NarrativeInput) -> str:
    loc = data.location
    return _NARRATIVE_PROMPT.format(
        preamble=_SYSTEM_PREAMBLE,
        lat=loc.latitude,
        lon=loc.longitude,
        display_name=loc.display_name or "Unknown",
        city=loc.city or "N/A",
        state=loc.state or "N/A",
        country=loc.country or "N/A",
        rocket_type=data.rocket_type,
        warnings="\n".join(data.zone_warnings) if data.zone_warnings else "No major safety warnings detected",
    )


# ── Fallback ──────────────────────────────────────────────────────────────────

def fallback_insights(data: NarrativeInput) -> LocationInsights:
    """Deterministic insights from place name, country and warning presence."""
    loc = data.location
    place = loc.display_name or f"{loc.latitude:.2f}, {loc.longitude:.2f}"
    in_country = f"In {loc.country}, " if loc.country else ""
    has_warnings = bool(data.zone_warnings)

    return LocationInsights(
        resources=(
            f"Standard assessment for {place}. {in_country}resource availability depends on "
            "local infrastructure and proximity to aerospace suppliers."
        ),
        legal=(
            "Zone restrictions detected at this location. Regulatory approval required. "
            "Consult local aviation authorities and obtain necessary permits before any "
            "launch activities."
            if has_warnings else
            "Standard regulatory requirements apply. Check local aviation regulations and "
            f"obtain necessary permits for {data.rocket_type} launches."
        ),
        geographical=(
            f"Location at {loc.latitude:.4f}°, {loc.longitude:.4f}°. Geographical assessment "
            "based on regional climate patterns and terrain characteristics."
        ),
        geopolitical=(
            f"Regional analysis for {loc.country}. Political and regulatory environment "
            "affects launch feasibility and permit requirements."
            if loc.country else
            "Regional stability and regulatory framework should be evaluated for long-term "
            "operations."
        ),
        recommendation=(
            "This location has zone restrictions that significantly impact launch feasibility. "
            "Review all safety warnings and consult with local authorities before proceeding."
            if has_warnings else
            "Standard feasibility applies to this location. Verify local regulations and ensure "
            f"all safety protocols are followed for {data.rocket_type} activities."
        ),
    )


def parse_insights(raw: str, fallback: LocationInsights) -> Optional[LocationInsights]:
    """Extract insights from a Gemini reply; None when no usable JSON object is present."""
    m = re.search(r"\{[\s\S]*\}", raw or "")
    if not m:
        return None
    try:
        data = json.loads(m.group())
    except json.JSONDecodeError:
        return None
    if not isinstance(data, dict):
        return None

    values: dict[str, str] = {}
    for key, attr in _REPLY_KEYS.items():
        text = data.get(key)
        if isinstance(text, str) and text.strip():
            values[attr] = text.strip()
        else:
            values[attr] = getattr(fallback, attr)
    return LocationInsights(**values)


# ── Provider ──────────────────────────────────────────────────────────────────

class NarrativeProvider:
    """Gemini-backed insight generator that never raises."""

    def __init__(self, client: Optional[GeminiClient] = None, timeout: Optional[float] = None) -> None:
        self.client = client or gemini_client
        self.timeout = timeout if timeout is not None else settings.narrative_timeout_seconds

    async def generate_insights(self, data: NarrativeInput) -> LocationInsights:
        fallback = fallback_insights(data)
        if self.client.key_missing:
            logger.debug("Gemini key not configured; using fallback insights")
            return fallback
        try:
            raw = await asyncio.wait_for(
                self.client.generate_json(build_prompt(data), response_key="launch_narrative"),
                timeout=self.timeout,
            )
        except asyncio.TimeoutError:
            logger.warning("Narrative generation timed out after %.1fs; using fallback", self.timeout)
            return fallback
        except Exception as exc:
            logger.warning("Narrative generation failed: %s; using fallback", exc)
            return fallback

        insights = parse_insights(raw, fallback)
        if insights is None:
            logger.warning("Narrative reply had no JSON object; using fallback")
            return fallback
        return insights


# ── Decoration of scored output ───────────────────────────────────────────────

def _with_details(analysis: BaseModel, text: str) -> Any:
    updates = {
        name: getattr(analysis, name).model_copy(update={"details": text})
        for name in type(analysis).model_fields
        if isinstance(getattr(analysis, name), FeasibilityScore)
    }
    return analysis.model_copy(update=updates)


def apply_insights(categories: ScoredCategories, insights: LocationInsights) -> ScoredCategories:
    """Replace the generic details of four categories with their insight text."""
    return ScoredCategories(
        resources=_with_details(categories.resources, insights.resources),
        legal=_with_details(categories.legal, insights.legal),
        geographical=_with_details(categories.geographical, insights.geographical),
        geopolitical=_with_details(categories.geopolitical, insights.geopolitical),
        timing=categories.timing,
        practicality=categories.practicality,
    )
