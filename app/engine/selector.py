"""Rank snapshot entries and cut them down to the returned set."""
from __future__ import annotations

import math
from typing import List, Sequence

from app.config import DEFAULT_ENGINE_CONFIG, EngineConfig
from app.engine.snapshot import SnapshotEntry
from app.schemas import Mode, RecommendationRecord


def select(
    entries: Sequence[SnapshotEntry],
    mode: Mode,
    config: EngineConfig = DEFAULT_ENGINE_CONFIG,
) -> List[RecommendationRecord]:
    """Return a new ranked list; ``entries`` is left untouched.

    OPEN ranks by score (highest first), CLOSED by distance alone. Ties fall
    back to distance and then to provider order.
    """
    if mode == "OPEN":
        ranked = sorted(entries, key=lambda e: (-e.score, e.distance_meters, e.order))
        limit = config.open_limit
    else:
        ranked = sorted(entries, key=lambda e: (e.distance_meters, e.order))
        limit = config.closed_limit
    return [_to_record(entry) for entry in ranked[:limit]]


def _to_record(entry: SnapshotEntry) -> RecommendationRecord:
    return RecommendationRecord(
        id=entry.id,
        name=entry.name,
        entity_type=entry.entity_type,
        status=entry.status,
        # halves round up
        distance_meters=int(math.floor(entry.distance_meters + 0.5)),
        listed_wait_minutes=entry.listed_wait_minutes,
        score=entry.score,
    )
