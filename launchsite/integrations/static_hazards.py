"""
StaticHazardProvider — offline POI provider backed by a fixed hazard table.

Useful for local development, tests and deployments that cannot reach
Overpass. It honours the same contract as OverpassAdapter, so the zone
validator applies identical thresholds to both. Coverage is limited to
the well-known sites listed below; anywhere else reads as hazard-free.
"""

from typing import Optional, Sequence

from launchsite.integrations.facilities import Facility
from launchsite.services.geodesy import distance_m

# (name, lat, lon)
AIRPORTS = (
    ("JFK International Airport", 40.6413, -73.7781),
    ("LAX Airport", 33.9416, -118.4085),
    ("Heathrow Airport", 51.4700, -0.4543),
    ("Dubai International", 25.2532, 55.3657),
    ("Tokyo Haneda", 35.5494, 139.7798),
    ("O'Hare International", 41.9742, -87.9073),
    ("Charles de Gaulle", 49.0097, 2.5479),
    ("Singapore Changi", 1.3644, 103.9915),
)

MILITARY_SITES = (
    ("Pentagon", 38.8719, -77.0563),
    ("Edwards Air Force Base", 34.9054, -117.8840),
    ("RAF Lakenheath", 52.4093, 0.5610),
)

UNIVERSITIES = (
    ("Harvard University", 42.3770, -71.1167),
    ("Stanford University", 37.4275, -122.1697),
    ("MIT", 42.3601, -71.0942),
    ("Oxford University", 51.7548, -1.2544),
    ("Cambridge University", 52.2043, 0.1218),
    ("Tokyo University", 35.7136, 139.7625),
    ("Tsinghua University", 40.0037, 116.3261),
    ("UCLA", 34.0689, -118.4452),
    ("Columbia University", 40.8075, -73.9626),
    ("ETH Zurich", 47.3769, 8.5417),
)


def default_hazards() -> list[Facility]:
    hazards: list[Facility] = []
    for name, lat, lon in AIRPORTS:
        hazards.append(Facility("static", name, "airport", lat, lon, name=name, subtype="airport"))
    for name, lat, lon in MILITARY_SITES:
        hazards.append(Facility("static", name, "military", lat, lon, name=name))
    for name, lat, lon in UNIVERSITIES:
        hazards.append(Facility("static", name, "school", lat, lon, name=name, subtype="university"))
    return hazards


class StaticHazardProvider:
    name = "static"

    def __init__(self, hazards: Optional[Sequence[Facility]] = None) -> None:
        self.hazards = list(hazards) if hazards is not None else default_hazards()

    async def find_facilities(
        self, lat: float, lon: float, radius_m: float
    ) -> Optional[list[Facility]]:
        return [
            f for f in self.hazards
            if distance_m(lat, lon, f.lat, f.lon) <= radius_m
        ]
