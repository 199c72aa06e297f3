"""
OverpassAdapter — hazard facility lookup via the OpenStreetMap Overpass API.

One Overpass QL query per validation collects every feature the zone
validator cares about within the search radius:

  aeroway=aerodrome|airport           → airport
  military=* or landuse=military      → military
  amenity=school|college|university   → school
  amenity=hospital                    → hospital
  place=city|town|suburb              → place (population from tags)

Ways and relations are reduced to their center with `out center tags`.

Graceful degradation: mirrors are tried in order; when every mirror fails
or answers with something that is not JSON (or with a runtime-error
remark such as a query timeout), find_facilities() returns None
so the caller can flag the zone as unverified instead of calling it safe.
"""

import logging
import re
from typing import Any, Optional

import httpx

from launchsite.core.config import settings
from launchsite.integrations.facilities import Facility, FacilityKind

logger = logging.getLogger(__name__)

_PLACE_TYPES = {"city", "town", "suburb"}
_SCHOOL_TYPES = {"school", "college", "university"}
_AIRPORT_TYPES = {"aerodrome", "airport"}

_POPULATION_DIGITS = re.compile(r"\d[\d,.\s]*")


def build_query(lat: float, lon: float, radius_m: float, timeout_s: int = 25) -> str:
    around = f"(around:{int(radius_m)},{lat},{lon})"
    return f"""
    [out:json][timeout:{timeout_s}];
    (
      nwr["aeroway"~"^(aerodrome|airport)$"]{around};
      nwr["military"]{around};
      nwr["landuse"="military"]{around};
      nwr["amenity"~"^(school|college|university)$"]{around};
      nwr["amenity"="hospital"]{around};
      node["place"~"^(city|town|suburb)$"]{around};
    );
    out center tags;
    """


def _classify(tags: dict[str, str]) -> Optional[tuple[FacilityKind, Optional[str]]]:
    """Map OSM tags to (kind, subtype). Airports win over military airfields."""
    aeroway = tags.get("aeroway")
    if aeroway in _AIRPORT_TYPES:
        return "airport", aeroway
    if "military" in tags or tags.get("landuse") == "military":
        return "military", tags.get("military")
    amenity = tags.get("amenity")
    if amenity in _SCHOOL_TYPES:
        return "school", amenity
    if amenity == "hospital":
        return "hospital", amenity
    place = tags.get("place")
    if place in _PLACE_TYPES:
        return "place", place
    return None


def parse_population(raw: Optional[str]) -> int:
    """OSM population tags are free text ("12,345", "ca. 5000"); default 0."""
    if not raw:
        return 0
    m = _POPULATION_DIGITS.search(str(raw))
    if not m:
        return 0
    digits = re.sub(r"[^\d]", "", m.group())
    return int(digits) if digits else 0


def parse_elements(elements: list[dict[str, Any]]) -> list[Facility]:
    """Convert raw Overpass elements into Facility records, skipping unusable ones."""
    facilities: list[Facility] = []
    for el in elements:
        tags = el.get("tags") or {}
        classified = _classify(tags)
        if classified is None:
            continue
        kind, subtype = classified

        if "lat" in el and "lon" in el:
            plat, plon = el["lat"], el["lon"]
        else:
            center = el.get("center")
            if not center:
                continue
            plat, plon = center["lat"], center["lon"]

        facilities.append(
            Facility(
                element_type=str(el.get("type", "node")),
                element_id=str(el.get("id")),
                kind=kind,
                lat=float(plat),
                lon=float(plon),
                name=tags.get("name"),
                subtype=subtype,
                population=parse_population(tags.get("population")) if kind == "place" else 0,
            )
        )
    return facilities


class OverpassAdapter:
    """Thin async wrapper around the Overpass interpreter endpoint."""

    name = "overpass"

    def __init__(self, transport: Optional[httpx.AsyncBaseTransport] = None) -> None:
        self.urls = settings.overpass_urls
        self.timeout = settings.overpass_timeout_seconds
        self._transport = transport

    async def find_facilities(
        self, lat: float, lon: float, radius_m: float
    ) -> Optional[list[Facility]]:
        query = build_query(lat, lon, radius_m, timeout_s=int(self.timeout))
        data = await self._post(query)
        if data is None:
            return None
        facilities = parse_elements(data.get("elements", []))
        logger.debug("Overpass returned %d facilities near %.4f,%.4f", len(facilities), lat, lon)
        return facilities

    async def _post(self, query: str) -> Optional[dict[str, Any]]:
        headers = {"User-Agent": settings.http_user_agent, "Accept": "application/json"}
        async with httpx.AsyncClient(
            timeout=self.timeout + 5, headers=headers, transport=self._transport
        ) as client:
            for url in self.urls:
                try:
                    response = await client.post(url, data={"data": query})
                    response.raise_for_status()
                    data = response.json()
                    if not isinstance(data, dict):
                        logger.warning("Overpass mirror %s returned non-object JSON", url)
                        continue
                    # Timeouts and out-of-memory come back as 200 with a remark
                    remark = data.get("remark")
                    if isinstance(remark, str) and "error" in remark.lower():
                        logger.warning("Overpass mirror %s query failed: %s", url, remark[:200])
                        continue
                    return data
                except httpx.HTTPStatusError as exc:
                    logger.warning(
                        "Overpass mirror %s error: %s — %s",
                        url,
                        exc.response.status_code,
                        exc.response.text[:200],
                    )
                except (httpx.HTTPError, ValueError) as exc:
                    logger.warning("Overpass mirror %s request failed: %s", url, exc)

        logger.error("All Overpass mirrors failed; zone cannot be verified")
        return None


# Module-level singleton
overpass_adapter = OverpassAdapter()
