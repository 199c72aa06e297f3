"""
NominatimAdapter — reverse geocoding via OpenStreetMap Nominatim.

Fills the optional place fields of a Location (country, city, state,
display name) before analysis. The engine works without them, so this
adapter returns None on any failure and lets the route decide how to
report it.
"""

import logging
from typing import Optional

import httpx

from launchsite.core.config import settings
from launchsite.models.analysis import ReverseGeocodeResponse

logger = logging.getLogger(__name__)


class NominatimAdapter:
    def __init__(self, transport: Optional[httpx.AsyncBaseTransport] = None) -> None:
        self.url = settings.nominatim_url
        self._transport = transport

    async def reverse(self, lat: float, lon: float) -> Optional[ReverseGeocodeResponse]:
        async with httpx.AsyncClient(
            timeout=10.0,
            headers={"User-Agent": settings.http_user_agent},
            transport=self._transport,
        ) as client:
            try:
                response = await client.get(
                    self.url, params={"lat": lat, "lon": lon, "format": "json"}
                )
                response.raise_for_status()
                data = response.json()
            except httpx.HTTPStatusError as exc:
                logger.error(
                    "Nominatim error: %s — %s",
                    exc.response.status_code,
                    exc.response.text[:200],
                )
                return None
            except (httpx.HTTPError, ValueError) as exc:
                logger.error("Nominatim request failed: %s", exc)
                return None

        if not isinstance(data, dict) or "error" in data:
            logger.warning("Nominatim could not resolve %.5f,%.5f", lat, lon)
            return None

        address = data.get("address") or {}
        return ReverseGeocodeResponse(
            country=address.get("country"),
            city=address.get("city") or address.get("town") or address.get("village"),
            state=address.get("state"),
            display_name=data.get("display_name"),
        )


# Module-level singleton
nominatim_adapter = NominatimAdapter()
