"""
heuristics.py — Coordinate-only proxy estimators.

Three pure functions, no I/O:

  assess_development_level   — infrastructure maturity from the nearest
                               major-city anchor (decays to 60 over 5,000 km)
  assess_political_stability — governance stability from the nearest
                               stable-region anchor (decays to 65 over 8,000 km)
  assess_climate             — latitude band → weather score

The anchor tables are plain data; pass a different table to re-target the
estimators without touching the interpolation.
"""

from __future__ import annotations

from dataclasses import dataclass
from math import floor
from typing import NamedTuple, Sequence

from launchsite.models.analysis import Location
from launchsite.services.geodesy import distance_m


class Anchor(NamedTuple):
    name: str
    lat: float
    lon: float
    score: int


DEVELOPED_CITIES: tuple[Anchor, ...] = (
    Anchor("New York", 40.7128, -74.0060, 95),
    Anchor("London", 51.5074, -0.1278, 95),
    Anchor("Tokyo", 35.6762, 139.6503, 95),
    Anchor("Paris", 48.8566, 2.3522, 90),
    Anchor("Sydney", -33.8688, 151.2093, 90),
    Anchor("Singapore", 1.3521, 103.8198, 92),
)

STABLE_REGIONS: tuple[Anchor, ...] = (
    Anchor("Scandinavia", 60.0, 10.0, 95),
    Anchor("Switzerland", 46.0, 8.0, 95),
    Anchor("Benelux", 52.0, 5.0, 90),
    Anchor("Japan", 35.6, 139.6, 88),
    Anchor("Eastern Australia", -33.8, 151.2, 90),
    Anchor("Southern Ontario", 43.6, -79.3, 92),
    Anchor("US Mid-Atlantic", 38.9, -77.0, 85),
)

DEVELOPMENT_DEFAULT = 60
DEVELOPMENT_DECAY_M = 5_000_000
STABILITY_DEFAULT = 65
STABILITY_DECAY_M = 8_000_000


def round_half_up(value: float) -> int:
    """Round .5 upwards (82.5 → 83), unlike Python's banker's round()."""
    return int(floor(value + 0.5))


def _nearest(location: Location, anchors: Sequence[Anchor]) -> tuple[Anchor | None, float]:
    # Strict "<" keeps the first anchor when two are equidistant.
    best: Anchor | None = None
    best_d = float("inf")
    for anchor in anchors:
        d = distance_m(location.latitude, location.longitude, anchor.lat, anchor.lon)
        if d < best_d:
            best, best_d = anchor, d
    return best, best_d


def _interpolate(location: Location, anchors: Sequence[Anchor], default: int, decay_m: float) -> int:
    anchor, d = _nearest(location, anchors)
    if anchor is None:
        return default
    factor = max(0.0, 1 - d / decay_m)
    return round_half_up(anchor.score * factor + default * (1 - factor))


def assess_development_level(location: Location, anchors: Sequence[Anchor] = DEVELOPED_CITIES) -> int:
    return _interpolate(location, anchors, DEVELOPMENT_DEFAULT, DEVELOPMENT_DECAY_M)


def assess_political_stability(location: Location, anchors: Sequence[Anchor] = STABLE_REGIONS) -> int:
    return _interpolate(location, anchors, STABILITY_DEFAULT, STABILITY_DECAY_M)


@dataclass(frozen=True)
class ClimateAssessment:
    score: int
    details: str


# (upper |latitude| bound, score, description); last band catches the rest
CLIMATE_BANDS = (
    (23.5, 70, "Tropical climate with consistent temperatures but potential for heavy "
               "rainfall and storms during wet season."),
    (40.0, 85, "Temperate climate generally favorable for launches with seasonal "
               "variations to consider."),
    (60.0, 65, "Mid-latitude location with variable weather patterns. Winter conditions "
               "may limit launch windows."),
    (float("inf"), 45, "High-latitude location with extreme weather conditions and limited "
                       "favorable launch windows."),
)


def assess_climate(location: Location) -> ClimateAssessment:
    lat = abs(location.latitude)
    for upper, score, details in CLIMATE_BANDS:
        if lat < upper:
            return ClimateAssessment(score=score, details=details)
    # |lat| == inf cannot happen for a validated Location
    _, score, details = CLIMATE_BANDS[-1]
    return ClimateAssessment(score=score, details=details)
