"""Great-circle distance on a spherical Earth."""

from math import atan2, cos, radians, sin, sqrt

EARTH_RADIUS_M = 6_371_000.0


def distance_m(lat1: float, lon1: float, lat2: float, lon2: float) -> float:
    """Haversine distance in metres between two (lat, lon) points in degrees."""
    phi1, phi2 = radians(lat1), radians(lat2)
    dphi = radians(lat2 - lat1)
    dlambda = radians(lon2 - lon1)

    a = sin(dphi / 2) ** 2 + cos(phi1) * cos(phi2) * sin(dlambda / 2) ** 2
    # Rounding can push a just outside [0, 1] near antipodal points
    a = min(1.0, max(0.0, a))
    return EARTH_RADIUS_M * 2 * atan2(sqrt(a), sqrt(1 - a))
