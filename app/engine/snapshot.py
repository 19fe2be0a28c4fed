"""Join attraction metadata with live status into scoreable snapshot entries."""
from __future__ import annotations

import logging
import math
import os
from dataclasses import dataclass
from typing import Dict, Iterable, List, Optional, Sequence

from app.engine.geo import distance
from app.schemas import AttractionEntity, Coordinate, LiveStatusEntry, Mode

logger = logging.getLogger(__name__)
if not logger.handlers:
    handler = logging.StreamHandler()
    handler.setFormatter(logging.Formatter("[%(levelname)s] %(name)s: %(message)s"))
    logger.addHandler(handler)
_level = os.getenv("RIDE_WIZARD_LOG_LEVEL", "INFO").upper()
logger.setLevel(getattr(logging, _level, logging.INFO))
logger.propagate = False


@dataclass(frozen=True)
class SnapshotEntry:
    id: str
    name: str
    entity_type: str
    status: str
    distance_meters: float
    listed_wait_minutes: int
    order: int  # position in the provider's listing
    score: float = 0.0


def index_live_entries(entries: Iterable[LiveStatusEntry]) -> Dict[str, LiveStatusEntry]:
    """Map live entries by id; a repeated id keeps the last entry seen."""
    index: Dict[str, LiveStatusEntry] = {}
    duplicates: List[str] = []
    for entry in entries:
        if entry.id in index:
            duplicates.append(entry.id)
        index[entry.id] = entry
    if duplicates:
        logger.warning(
            "Live feed repeated %d attraction id(s); keeping the last entry for %s",
            len(duplicates),
            ", ".join(sorted(set(duplicates))),
        )
    return index


def build_snapshot(
    mode: Mode,
    entities: Sequence[AttractionEntity],
    reference: Coordinate,
    live_entries: Optional[Iterable[LiveStatusEntry]] = None,
    max_distance_meters: Optional[float] = None,
) -> List[SnapshotEntry]:
    if mode == "OPEN":
        return _build_open(entities, reference, live_entries or [], max_distance_meters)
    return _build_closed(entities, reference)


def _build_open(
    entities: Sequence[AttractionEntity],
    reference: Coordinate,
    live_entries: Iterable[LiveStatusEntry],
    max_distance_meters: Optional[float],
) -> List[SnapshotEntry]:
    live = index_live_entries(live_entries)
    snapshot: List[SnapshotEntry] = []
    dropped = {"type": 0, "not_operating": 0, "location": 0, "wait": 0, "radius": 0}

    for order, entity in enumerate(entities):
        if entity.entity_type != "ATTRACTION":
            dropped["type"] += 1
            continue
        entry = live.get(entity.id)
        if entry is None or entry.status != "OPERATING":
            dropped["not_operating"] += 1
            continue
        if not _has_location(entity):
            dropped["location"] += 1
            continue
        # Unknown wait cannot be scored; it is not the same as no wait.
        if entry.standby_wait_minutes is None:
            dropped["wait"] += 1
            continue
        meters = distance(reference, entity.location)
        if max_distance_meters is not None and meters > max_distance_meters:
            dropped["radius"] += 1
            continue
        snapshot.append(
            SnapshotEntry(
                id=entity.id,
                name=entity.name,
                entity_type=entity.entity_type,
                status="OPERATING",
                distance_meters=meters,
                listed_wait_minutes=entry.standby_wait_minutes,
                order=order,
            )
        )

    logger.info(
        "Open snapshot kept %d of %d entities (dropped: %s)",
        len(snapshot),
        len(entities),
        ", ".join(f"{reason}={count}" for reason, count in dropped.items() if count) or "none",
    )
    return snapshot


def _build_closed(entities: Sequence[AttractionEntity], reference: Coordinate) -> List[SnapshotEntry]:
    snapshot: List[SnapshotEntry] = []
    for order, entity in enumerate(entities):
        if entity.entity_type != "ATTRACTION" or not _has_location(entity):
            continue
        snapshot.append(
            SnapshotEntry(
                id=entity.id,
                name=entity.name,
                entity_type=entity.entity_type,
                status="CLOSED",
                distance_meters=distance(reference, entity.location),
                listed_wait_minutes=0,
                order=order,
            )
        )
    logger.info("Closed snapshot kept %d of %d entities", len(snapshot), len(entities))
    return snapshot


def _has_location(entity: AttractionEntity) -> bool:
    # A zero or non-finite latitude or longitude counts as missing.
    location = entity.location
    if location is None or not location.lat or not location.lon:
        return False
    return math.isfinite(location.lat) and math.isfinite(location.lon)
