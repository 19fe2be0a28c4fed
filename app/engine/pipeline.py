"""Single recommendation pipeline, switched on park mode."""
from __future__ import annotations

import logging
import os
from dataclasses import replace
from typing import Iterable, List, Optional, Sequence

from app.config import DEFAULT_ENGINE_CONFIG, EngineConfig, WeightProfile
from app.engine.scoring import score
from app.engine.selector import select
from app.engine.snapshot import build_snapshot
from app.schemas import AttractionEntity, Coordinate, LiveStatusEntry, Mode, ParkStatus, RecommendationRecord

logger = logging.getLogger(__name__)
if not logger.handlers:
    handler = logging.StreamHandler()
    handler.setFormatter(logging.Formatter("[%(levelname)s] %(name)s: %(message)s"))
    logger.addHandler(handler)
_level = os.getenv("RIDE_WIZARD_LOG_LEVEL", "INFO").upper()
logger.setLevel(getattr(logging, _level, logging.INFO))
logger.propagate = False


def mode_for(status: ParkStatus) -> Mode:
    """OPEN only when the park is open; CLOSED and UNKNOWN both plan ahead."""
    return "OPEN" if status.state == "OPEN" else "CLOSED"


def recommend(
    mode: Mode,
    entities: Sequence[AttractionEntity],
    reference: Coordinate,
    profile: WeightProfile,
    live_entries: Optional[Iterable[LiveStatusEntry]] = None,
    max_distance_meters: Optional[float] = None,
    config: EngineConfig = DEFAULT_ENGINE_CONFIG,
) -> List[RecommendationRecord]:
    """Build, score and select recommendations for one request.

    CLOSED mode ignores ``live_entries`` and ``max_distance_meters``: a closed
    park is for planning, so every located attraction is a candidate.
    """
    if mode == "OPEN":
        snapshot = build_snapshot(
            "OPEN",
            entities,
            reference,
            live_entries=live_entries,
            max_distance_meters=max_distance_meters,
        )
        snapshot = [
            replace(entry, score=score(entry.distance_meters, entry.listed_wait_minutes, profile))
            for entry in snapshot
        ]
    else:
        snapshot = build_snapshot("CLOSED", entities, reference)

    records = select(snapshot, mode, config)
    logger.info(
        "%s mode (%s) returned %d of %d candidates; top: %s",
        mode,
        profile.name,
        len(records),
        len(snapshot),
        records[0].name if records else "n/a",
    )
    return records
