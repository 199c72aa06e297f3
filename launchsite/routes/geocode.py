"""
geocode.py — Reverse geocoding for the location picker.

Route:
  POST /api/v1/reverse-geocode — coordinates → country / city / state / display name

The front-end merges the answer into the Location it later submits to
/api/v1/analyze. Analyses work without it, so an upstream failure is
reported as 502 rather than blocking anything.
"""

import logging

from fastapi import APIRouter, HTTPException

from launchsite.integrations.nominatim_adapter import nominatim_adapter
from launchsite.models.analysis import ReverseGeocodeRequest, ReverseGeocodeResponse

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/v1", tags=["geocode"])


@router.post("/reverse-geocode", response_model=ReverseGeocodeResponse)
async def reverse_geocode(payload: ReverseGeocodeRequest):
    place = await nominatim_adapter.reverse(payload.latitude, payload.longitude)
    if place is None:
        raise HTTPException(status_code=502, detail="Geocoding service unavailable")
    return place
