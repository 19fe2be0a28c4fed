# app/orchestrator.py
from __future__ import annotations

import os
from datetime import datetime, timezone
from typing import List, Mapping, Optional, Tuple
import asyncio
import logging

from app.config import (
    DEFAULT_CATALOG,
    DEFAULT_ENGINE_CONFIG,
    WEIGHT_PROFILES,
    EngineConfig,
    ParkCatalog,
    ParkConfig,
    WeightProfile,
)
from app.engine.pipeline import mode_for, recommend
from app.engine.schedule import resolve_park_status, unknown_status, windows_for_today
from app.engine.scoring import resolve_profile
from app.errors import UpstreamDataError
from app.llm import NO_MATCHES_SUMMARY, default_summary, generate_summary
from app.schemas import (
    AttractionEntity,
    LiveStatusEntry,
    ParkContext,
    ParkStatus,
    WizardRequest,
    WizardResponse,
)
from app.tools.themeparks import ThemeParksClient
from app.tools.weather import fetch_forecast

logger = logging.getLogger(__name__)
if not logger.handlers:
    handler = logging.StreamHandler()
    handler.setFormatter(logging.Formatter("[%(levelname)s] %(name)s: %(message)s"))
    logger.addHandler(handler)
_level = os.getenv("RIDE_WIZARD_LOG_LEVEL", "INFO").upper()
logger.setLevel(getattr(logging, _level, logging.INFO))
logger.propagate = False


# ---------- park hours ----------
async def fetch_park_status(
    park: ParkConfig,
    client: ThemeParksClient,
    now: Optional[datetime] = None,
) -> ParkStatus:
    """Fetch today's schedule and resolve it; a failed fetch reads as UNKNOWN."""
    now = now or datetime.now(timezone.utc)
    try:
        windows = await client.get_schedule(park.park_id)
    except UpstreamDataError as exc:
        logger.warning("Schedule unavailable for %s: %s", park.key, exc.detail)
        return unknown_status()
    todays = windows_for_today(windows, now, park.time_zone)
    status = resolve_park_status(todays, now, park.time_zone, park.time_zone_abbr)
    logger.info(
        "Park %s is %s (%d window(s) today)%s",
        park.key,
        status.state,
        len(todays),
        f"; event: {status.active_event.description}" if status.active_event else "",
    )
    return status


def _status_from_request(req: WizardRequest) -> Optional[ParkStatus]:
    # The UI already resolved the hours when it rendered the form.
    if req.park_status is None or req.park_status == "UNKNOWN":
        return None
    event = req.ticketed_event if req.park_status == "OPEN" else None
    return ParkStatus(state=req.park_status, active_event=event, human_message=req.hours or "")


# ---------- provider data ----------
async def _load_attractions(
    park: ParkConfig,
    client: ThemeParksClient,
    with_live: bool,
) -> Tuple[List[AttractionEntity], List[LiveStatusEntry]]:
    """Fetch the children listing (and the live feed when open) as one unit.

    A failure on either side fails the whole load; a partial join is never
    attempted.
    """
    calls = [client.get_children(park.park_id)]
    if with_live:
        calls.append(client.get_live(park.park_id))
    results = await asyncio.gather(*calls, return_exceptions=True)

    failures = [r for r in results if isinstance(r, BaseException)]
    for failure in failures:
        if not isinstance(failure, UpstreamDataError):
            raise failure
    if failures:
        detail = "; ".join(f.detail for f in failures)
        logger.error("Attraction data unavailable for %s: %s", park.key, detail, exc_info=failures[0])
        raise UpstreamDataError(detail) from failures[0]

    entities = results[0]
    live = results[1] if with_live else []
    logger.info("Loaded %d entities and %d live entries for %s", len(entities), len(live), park.key)
    return entities, live


# ---------- recommendations ----------
async def orchestrate_recommendations(
    req: WizardRequest,
    *,
    catalog: ParkCatalog = DEFAULT_CATALOG,
    profiles: Mapping[str, WeightProfile] = WEIGHT_PROFILES,
    engine_config: EngineConfig = DEFAULT_ENGINE_CONFIG,
    client: Optional[ThemeParksClient] = None,
    now: Optional[datetime] = None,
) -> WizardResponse:
    """Resolve park state, run the engine and attach the narrative summary."""
    # Configuration errors surface before any network traffic.
    park = catalog.get(req.park)
    land = park.land(req.user_prefs.land)
    profile = resolve_profile(req.user_prefs.priority_mode, profiles)
    client = client or ThemeParksClient()

    logger.info(
        "Recommendation request: park=%s land=%s priority=%s max_distance=%s",
        park.key,
        land.key,
        profile.name,
        req.user_prefs.max_distance_meters,
    )

    status = _status_from_request(req) or await fetch_park_status(park, client, now)
    mode = mode_for(status)
    entities, live = await _load_attractions(park, client, with_live=(mode == "OPEN"))

    records = recommend(
        mode,
        entities,
        land.coords,
        profile,
        live_entries=live,
        max_distance_meters=req.user_prefs.max_distance_meters,
        config=engine_config,
    )

    try:
        summary = generate_summary(
            park.name,
            status,
            records,
            land=land.label,
            priority=profile.label,
            weather=req.weather,
        )
    except Exception as exc:
        logger.exception("Summary generation failed: %s", exc)
        summary = default_summary(status.is_open, has_results=bool(records))

    return WizardResponse(
        park=park.key,
        park_name=park.name,
        mode=mode,
        priority_mode=profile.name,
        park_status=status,
        weather=req.weather,
        ticketed_event=status.active_event,
        recommendations=records,
        summary=summary,
        message=None if records else NO_MATCHES_SUMMARY,
    )


# ---------- park context ----------
async def orchestrate_park_context(
    park_key: str,
    *,
    catalog: ParkCatalog = DEFAULT_CATALOG,
    client: Optional[ThemeParksClient] = None,
    now: Optional[datetime] = None,
) -> ParkContext:
    """Hours and weather for the form screen, fetched side by side."""
    park = catalog.get(park_key)
    client = client or ThemeParksClient()
    status, weather = await asyncio.gather(
        fetch_park_status(park, client, now),
        fetch_forecast(park.coords),
    )
    return ParkContext(park=park.key, park_name=park.name, status=status, weather=weather)
