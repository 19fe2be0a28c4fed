"""Weight-profile scoring for open-park recommendations."""
from __future__ import annotations

import logging
import os
from typing import Mapping, Optional

from app.config import DEFAULT_PROFILE, PROFILE_ALIASES, WEIGHT_PROFILES, WeightProfile

logger = logging.getLogger(__name__)
if not logger.handlers:
    handler = logging.StreamHandler()
    handler.setFormatter(logging.Formatter("[%(levelname)s] %(name)s: %(message)s"))
    logger.addHandler(handler)
_level = os.getenv("RIDE_WIZARD_LOG_LEVEL", "INFO").upper()
logger.setLevel(getattr(logging, _level, logging.INFO))
logger.propagate = False

# 0-1000 m and 0-60 min both map onto roughly 0-10 points.
DISTANCE_HORIZON_M = 1000.0
DISTANCE_DIVISOR = 100.0
WAIT_HORIZON_MIN = 60.0
WAIT_DIVISOR = 6.0


def resolve_profile(
    name: Optional[str],
    profiles: Mapping[str, WeightProfile] = WEIGHT_PROFILES,
    aliases: Mapping[str, str] = PROFILE_ALIASES,
) -> WeightProfile:
    """Look up a weight profile, falling back to BALANCED for unknown names."""
    key = (name or "").strip().upper()
    key = aliases.get(key, key)
    profile = profiles.get(key)
    if profile is None:
        logger.warning("Unknown priority mode %r; using %s", name, DEFAULT_PROFILE)
        profile = profiles[DEFAULT_PROFILE]
    return profile


def distance_score(distance_meters: float) -> float:
    return max(0.0, (DISTANCE_HORIZON_M - distance_meters) / DISTANCE_DIVISOR)


def wait_score(wait_minutes: float) -> float:
    return max(0.0, (WAIT_HORIZON_MIN - wait_minutes) / WAIT_DIVISOR)


def score(distance_meters: float, wait_minutes: float, profile: WeightProfile) -> float:
    """Higher is better."""
    return (
        distance_score(distance_meters) * profile.distance_factor
        + wait_score(wait_minutes) * profile.wait_factor
    )
