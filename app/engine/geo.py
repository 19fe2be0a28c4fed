"""Great-circle distance helpers."""
from __future__ import annotations

import math

from app.schemas import Coordinate

EARTH_RADIUS_M = 6_371_000.0


def distance(a: Coordinate, b: Coordinate) -> float:
    """Return the haversine distance between ``a`` and ``b`` in metres.

    NaN or infinite inputs yield NaN; nothing here raises.
    """
    if not all(math.isfinite(v) for v in (a.lat, a.lon, b.lat, b.lon)):
        return math.nan
    phi1, phi2 = math.radians(a.lat), math.radians(b.lat)
    dphi = math.radians(b.lat - a.lat)
    dlmb = math.radians(b.lon - a.lon)
    h = math.sin(dphi / 2) ** 2 + math.cos(phi1) * math.cos(phi2) * math.sin(dlmb / 2) ** 2
    if h > 1.0:
        # rounding near antipodal points
        h = 1.0
    return 2 * EARTH_RADIUS_M * math.asin(math.sqrt(h))
