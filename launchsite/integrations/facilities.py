"""
facilities.py — Facility records and the POI provider interface.

A POI provider answers one question: which hazard-relevant facilities lie
within `radius_m` of a coordinate. The zone validator only depends on this
protocol, so the live Overpass adapter and the static hazard table are
interchangeable.

Contract:
  - return a list (possibly empty) when the lookup succeeded
  - return None when the data source could not be reached or answered
    with garbage; the validator turns that into a verification warning
"""

from dataclasses import dataclass
from typing import Literal, Optional, Protocol

FacilityKind = Literal["airport", "school", "military", "hospital", "place"]


@dataclass(frozen=True)
class Facility:
    element_type: str          # provider element type, e.g. "node" / "way"
    element_id: str            # provider element id
    kind: FacilityKind
    lat: float
    lon: float
    name: Optional[str] = None
    subtype: Optional[str] = None   # university / college / city / town / suburb ...
    population: int = 0

    @property
    def identity(self) -> tuple[str, str]:
        return (self.element_type, self.element_id)

    @property
    def display_name(self) -> str:
        return self.name or f"unnamed {self.subtype or self.kind}"


class PoiProvider(Protocol):
    name: str

    async def find_facilities(
        self, lat: float, lon: float, radius_m: float
    ) -> Optional[list[Facility]]:
        ...
