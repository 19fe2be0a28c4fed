from typing import Optional
import logging
import os

import httpx

from app.schemas import Coordinate

logger = logging.getLogger(__name__)
if not logger.handlers:
    handler = logging.StreamHandler()
    handler.setFormatter(logging.Formatter("[%(levelname)s] %(name)s: %(message)s"))
    logger.addHandler(handler)
_level = os.getenv("RIDE_WIZARD_LOG_LEVEL", "INFO").upper()
logger.setLevel(getattr(logging, _level, logging.INFO))
logger.propagate = False

NWS_API_BASE = os.getenv("NWS_API_BASE") or "https://api.weather.gov/points"
UNAVAILABLE = "Weather: Data unavailable."
NOT_AVAILABLE = "Weather: Not available."


async def fetch_forecast(coords: Coordinate, *, timeout: float = 10.0, base_url: Optional[str] = None) -> str:
    """Return a one-line forecast for ``coords`` from the National Weather Service.

    Failures return a placeholder string rather than raising.
    """
    points_url = f"{(base_url or NWS_API_BASE).rstrip('/')}/{coords.lat:.4f},{coords.lon:.4f}"
    headers = {"User-Agent": "ride-wizard/1.0", "Accept": "application/geo+json"}
    try:
        async with httpx.AsyncClient(timeout=timeout, follow_redirects=True) as client:
            points = await client.get(points_url, headers=headers)
            points.raise_for_status()
            forecast_url = points.json()["properties"]["forecast"]

            forecast = await client.get(forecast_url, headers=headers)
            forecast.raise_for_status()
            periods = forecast.json()["properties"]["periods"]
    except (httpx.HTTPError, KeyError, TypeError, ValueError):
        logger.warning("Weather lookup failed for %s", points_url, exc_info=True)
        return UNAVAILABLE

    if not isinstance(periods, list) or not periods or not isinstance(periods[0], dict):
        return NOT_AVAILABLE
    period = periods[0]
    return f"Forecast: {period.get('temperature')}°{period.get('temperatureUnit') or 'F'}, {period.get('shortForecast') or 'conditions unknown'}"
