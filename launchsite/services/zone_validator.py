"""
zone_validator.py — Proximity safety check for a launch coordinate.

Pulls nearby facilities from a POI provider, applies two-tier distance
thresholds per hazard category and condenses the resulting warnings into
a ZoneValidation (severity + validity).

USAGE
─────
    from launchsite.integrations.static_hazards import StaticHazardProvider
    from launchsite.services.zone_validator import validate_zone

    verdict = await validate_zone(location, StaticHazardProvider())
    # verdict.severity → "danger" | "caution" | "safe"

Warnings are emitted in a fixed order so the same inputs always give the
same output: provider failure, airports, military, schools, hospitals,
high latitude, urban density.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Iterable, Optional

from launchsite.core.config import settings
from launchsite.integrations.facilities import Facility, PoiProvider
from launchsite.models.analysis import Location, ZoneValidation, ZoneWarning
from launchsite.services.geodesy import distance_m

logger = logging.getLogger(__name__)


# ── Thresholds (metres) ───────────────────────────────────────────────────────

@dataclass(frozen=True)
class ProximityTier:
    critical_m: Optional[float]
    caution_m: float


THRESHOLDS: dict[str, ProximityTier] = {
    "airport":  ProximityTier(critical_m=8_000, caution_m=15_000),
    "military": ProximityTier(critical_m=5_000, caution_m=10_000),
    "school":   ProximityTier(critical_m=500,   caution_m=2_000),
    "hospital": ProximityTier(critical_m=None,  caution_m=1_500),
}

# (minimum population, maximum distance) pairs for urban_dense
URBAN_RULES = ((100_000, 10_000), (50_000, 5_000))
SUBURB_DISTANCE_M = 2_000

HIGH_LATITUDE_DEG = 60.0

# Warning types that invalidate a site at any tier
_BLOCKING_TYPES = {"airport", "military", "school"}

_CRITICAL_MARKER = "CRITICAL"

VERIFICATION_UNAVAILABLE_MESSAGE = (
    "Zone verification could not be completed: nearby facility data is unavailable. "
    "Check airspace, school and military restrictions manually before launching."
)
HIGH_LATITUDE_MESSAGE = (
    "High latitude location may have challenging weather conditions and limited infrastructure."
)

_DISCOVERY_ORDER = ("airport", "military", "school", "hospital")


# ── Warning builders ──────────────────────────────────────────────────────────

def _km(meters: float) -> str:
    return f"{meters / 1000:.1f}km"


def _airport_warning(f: Facility, d: float) -> Optional[ZoneWarning]:
    tier = THRESHOLDS["airport"]
    if d < tier.critical_m:
        return ZoneWarning(
            type="airport",
            message=(
                f"CRITICAL: Within {_km(tier.critical_m)} exclusion zone of {f.display_name} "
                f"({_km(d)} away). Launch activities prohibited."
            ),
            distance=d,
        )
    if d < tier.caution_m:
        return ZoneWarning(
            type="airport",
            message=(
                f"Near {f.display_name} ({_km(d)} away). "
                "Exercise caution and check airspace regulations."
            ),
            distance=d,
        )
    return None


def _military_warning(f: Facility, d: float) -> Optional[ZoneWarning]:
    tier = THRESHOLDS["military"]
    if d < tier.critical_m:
        return ZoneWarning(
            type="military",
            message=(
                f"CRITICAL: Within {_km(tier.critical_m)} of {f.display_name}. "
                "Military restricted zone - launches strictly prohibited."
            ),
            distance=d,
        )
    if d < tier.caution_m:
        return ZoneWarning(
            type="military",
            message=(
                f"Military facility {f.display_name} is {_km(d)} away. "
                "Coordinate with the responsible authority before any launch."
            ),
            distance=d,
        )
    return None


def _school_warning(f: Facility, d: float) -> Optional[ZoneWarning]:
    tier = THRESHOLDS["school"]
    label = f.subtype or "school"
    if d < tier.critical_m:
        return ZoneWarning(
            type="school",
            message=(
                f"CRITICAL: Within {int(tier.critical_m)}m of {f.display_name} ({label}). "
                "Launch activities near educational facilities are prohibited."
            ),
            distance=d,
        )
    if d < tier.caution_m:
        return ZoneWarning(
            type="school",
            message=(
                f"Near {f.display_name} ({_km(d)} away). "
                "Ensure proper safety protocols for nearby educational institutions."
            ),
            distance=d,
        )
    return None


def _hospital_warning(f: Facility, d: float) -> Optional[ZoneWarning]:
    if d < THRESHOLDS["hospital"].caution_m:
        return ZoneWarning(
            type="other",
            message=(
                f"Hospital {f.display_name} is {_km(d)} away. "
                "Keep flight paths clear of medical helicopter approaches."
            ),
            distance=d,
        )
    return None


def _urban_warning(f: Facility, d: float) -> Optional[ZoneWarning]:
    dense = any(f.population > pop and d < max_d for pop, max_d in URBAN_RULES)
    if not dense and f.subtype == "suburb" and d < SUBURB_DISTANCE_M:
        dense = True
    if not dense:
        return None
    population = f" (population ~{f.population:,})" if f.population else ""
    return ZoneWarning(
        type="urban_dense",
        message=(
            f"Densely populated area: {f.display_name}{population} is {_km(d)} away. "
            "Crowds and property increase launch risk."
        ),
        distance=d,
    )


_BUILDERS = {
    "airport": _airport_warning,
    "military": _military_warning,
    "school": _school_warning,
    "hospital": _hospital_warning,
}


# ── Summary ───────────────────────────────────────────────────────────────────

def is_critical(warning: ZoneWarning) -> bool:
    """
    True when the warning sits inside a critical tier.

    A message that starts with the CRITICAL marker also counts, even
    without a distance; providers that cannot measure distance rely on it.
    Only the prefix is checked because messages embed facility names.
    """
    tier = THRESHOLDS.get(warning.type)
    if tier is not None and tier.critical_m is not None and warning.distance is not None:
        if warning.distance < tier.critical_m:
            return True
    return warning.message.startswith(_CRITICAL_MARKER)


def is_verification_failure(warning: ZoneWarning) -> bool:
    return warning.type == "other" and warning.message == VERIFICATION_UNAVAILABLE_MESSAGE


def summarize_warnings(warnings: Iterable[ZoneWarning]) -> ZoneValidation:
    warnings = list(warnings)
    has_critical = any(is_critical(w) for w in warnings)
    unverified = any(is_verification_failure(w) for w in warnings)
    blocking = any(w.type in _BLOCKING_TYPES for w in warnings)

    if has_critical:
        severity = "danger"
    elif warnings:
        severity = "caution"
    else:
        severity = "safe"

    return ZoneValidation(
        is_valid=not (has_critical or unverified or blocking),
        warnings=warnings,
        severity=severity,
    )


# ── Entry point ───────────────────────────────────────────────────────────────

def _dedupe(facilities: Iterable[Facility]) -> list[Facility]:
    seen: set[tuple[str, str]] = set()
    unique: list[Facility] = []
    for f in facilities:
        if f.identity in seen:
            continue
        seen.add(f.identity)
        unique.append(f)
    return unique


async def _fetch(provider: PoiProvider, location: Location, radius_m: float) -> Optional[list[Facility]]:
    try:
        return await provider.find_facilities(location.latitude, location.longitude, radius_m)
    except Exception as exc:
        logger.error("POI provider %s failed: %s", getattr(provider, "name", provider), exc)
        return None


async def validate_zone(
    location: Location,
    provider: PoiProvider,
    radius_m: Optional[float] = None,
) -> ZoneValidation:
    radius = radius_m if radius_m is not None else settings.zone_search_radius_m
    facilities = await _fetch(provider, location, radius)

    warnings: list[ZoneWarning] = []
    if facilities is None:
        warnings.append(ZoneWarning(type="other", message=VERIFICATION_UNAVAILABLE_MESSAGE))
        facilities = []

    unique = _dedupe(facilities)
    distances = {
        f.identity: distance_m(location.latitude, location.longitude, f.lat, f.lon)
        for f in unique
    }

    for kind in _DISCOVERY_ORDER:
        build = _BUILDERS[kind]
        for f in unique:
            if f.kind != kind:
                continue
            warning = build(f, distances[f.identity])
            if warning is not None:
                warnings.append(warning)

    if abs(location.latitude) > HIGH_LATITUDE_DEG:
        warnings.append(ZoneWarning(type="other", message=HIGH_LATITUDE_MESSAGE))

    for f in unique:
        if f.kind == "place":
            warning = _urban_warning(f, distances[f.identity])
            if warning is not None:
                warnings.append(warning)

    result = summarize_warnings(warnings)
    logger.info(
        "Zone check %.4f,%.4f: %d facilities, %d warnings, severity=%s",
        location.latitude, location.longitude, len(unique), len(warnings), result.severity,
    )
    return result
