from __future__ import annotations

import os
from typing import Any, Dict

from fastapi import Body, FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from pydantic import ValidationError

from app.config import DEFAULT_CATALOG, priority_options
from app.errors import ConfigurationError, UpstreamDataError
from app.orchestrator import orchestrate_park_context, orchestrate_recommendations
from app.schemas import LandOption, ParkContext, ParkListing, ParkOption, WizardRequest, WizardResponse

app = FastAPI(title="Ride Wizard API")

# Browser front-ends call this API directly; narrow the origins with
# RIDE_WIZARD_ALLOWED_ORIGINS when deploying.
raw_origins = os.getenv("RIDE_WIZARD_ALLOWED_ORIGINS") or "*"
allowed_origins = [origin.strip() for origin in raw_origins.split(",") if origin.strip()]
if not allowed_origins:
    allowed_origins = ["*"]
app.add_middleware(
    CORSMiddleware,
    allow_origins=allowed_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.get("/api/parks", response_model=ParkListing)
async def api_parks() -> ParkListing:
    """Parks, lands and priority modes for the selection screens."""
    return ParkListing(
        parks=[
            ParkOption(
                key=park.key,
                name=park.name,
                time_zone=park.time_zone,
                lands=[LandOption(key=land.key, label=land.label) for land in park.lands],
            )
            for park in DEFAULT_CATALOG
        ],
        priority_modes=priority_options(),
    )


@app.get("/api/parks/{park}/context", response_model=ParkContext)
async def api_park_context(park: str) -> ParkContext:
    """Today's hours and the current forecast for one park."""
    try:
        return await orchestrate_park_context(park)
    except ConfigurationError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc


@app.post("/api/wizard", response_model=WizardResponse)
async def api_wizard(payload: Dict[str, Any] = Body(...)) -> WizardResponse:
    """Primary endpoint consumed by the ride wizard front-end."""
    try:
        req = WizardRequest.model_validate(payload)
    except ValidationError as exc:
        raise HTTPException(status_code=422, detail=exc.errors(include_url=False)) from exc

    try:
        return await orchestrate_recommendations(req)
    except ConfigurationError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    except UpstreamDataError as exc:
        # exc.detail was logged by the orchestrator; only the generic text leaves.
        raise HTTPException(status_code=502, detail=str(exc)) from exc
