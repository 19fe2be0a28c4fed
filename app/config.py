"""Static park, land and scoring configuration."""
from __future__ import annotations

from dataclasses import dataclass
from types import MappingProxyType
from typing import Dict, Iterable, List, Mapping, Tuple

from pydantic import BaseModel, ConfigDict

from app.errors import ConfigurationError
from app.schemas import Coordinate, Land


class ParkConfig(BaseModel):
    model_config = ConfigDict(frozen=True)

    key: str
    name: str
    park_id: str
    coords: Coordinate
    time_zone: str
    time_zone_abbr: str
    lands: Tuple[Land, ...] = ()

    def land(self, key: str) -> Land:
        for land in self.lands:
            if land.key == key:
                return land
        raise ConfigurationError(f"Unknown land '{key}' for park '{self.key}'")


class ParkCatalog:
    """Read-only lookup of the parks the service knows about."""

    def __init__(self, parks: Iterable[ParkConfig]):
        self._parks: Mapping[str, ParkConfig] = MappingProxyType({park.key: park for park in parks})

    def get(self, key: str) -> ParkConfig:
        park = self._parks.get(key)
        if park is None:
            raise ConfigurationError(f"Unknown park '{key}'")
        return park

    def __iter__(self):
        return iter(self._parks.values())

    def __len__(self) -> int:
        return len(self._parks)


@dataclass(frozen=True)
class WeightProfile:
    name: str
    label: str
    wait_factor: float
    distance_factor: float


@dataclass(frozen=True)
class EngineConfig:
    open_limit: int = 7
    closed_limit: int = 10


def _land(key: str, label: str, lat: float, lon: float) -> Land:
    return Land(key=key, label=label, coords=Coordinate(lat=lat, lon=lon))


MAGIC_KINGDOM = ParkConfig(
    key="magic_kingdom",
    name="Magic Kingdom (FL)",
    park_id="75ea578a-adc8-4116-a54d-dccb60765ef9",
    coords=Coordinate(lat=28.417666, lon=-81.581216),
    time_zone="America/New_York",
    time_zone_abbr="ET",
    lands=(
        # Cinderella Castle hub, centre of the park
        _land("castle_hub", "Cinderella Castle Hub", 28.417714, -81.581335),
        _land("adventureland", "Adventureland", 28.418298, -81.583307),
        _land("frontierland", "Frontierland", 28.418915, -81.584742),
        _land("fantasyland", "Fantasyland", 28.420653, -81.580211),
        _land("tomorrowland", "Tomorrowland", 28.419266, -81.578330),
        _land("liberty_square", "Liberty Square", 28.418903, -81.582498),
    ),
)

DISNEYLAND = ParkConfig(
    key="disneyland",
    name="Disneyland Park (CA)",
    park_id="7340550b-c14d-4def-80bb-acdb51d49a66",
    coords=Coordinate(lat=33.81209, lon=-117.91897),
    time_zone="America/Los_Angeles",
    time_zone_abbr="PT",
    lands=(
        _land("main_street", "Main Street U.S.A.", 33.810149, -117.918991),
        _land("adventureland", "Adventureland", 33.811822, -117.920803),
        _land("frontierland", "Frontierland/Critter Country", 33.812999, -117.922099),
        _land("fantasyland", "Fantasyland", 33.814343, -117.917711),
        _land("tomorrowland", "Tomorrowland", 33.812613, -117.915720),
        _land("new_orleans", "New Orleans Square", 33.811984, -117.921601),
    ),
)

DEFAULT_CATALOG = ParkCatalog([MAGIC_KINGDOM, DISNEYLAND])

DEFAULT_PROFILE = "BALANCED"

WEIGHT_PROFILES: Mapping[str, WeightProfile] = MappingProxyType(
    {
        "BALANCED": WeightProfile("BALANCED", "Balanced (Wait & Distance)", wait_factor=1.0, distance_factor=1.0),
        "WAIT_ONLY": WeightProfile("WAIT_ONLY", "Shortest Wait Only", wait_factor=100.0, distance_factor=0.001),
        "DISTANCE_ONLY": WeightProfile("DISTANCE_ONLY", "Closest Ride Only", wait_factor=0.001, distance_factor=100.0),
    }
)

# Older clients still send the pre-rename value.
PROFILE_ALIASES: Mapping[str, str] = MappingProxyType({"SCORE_BALANCED": "BALANCED"})

DEFAULT_ENGINE_CONFIG = EngineConfig()


def priority_options(profiles: Mapping[str, WeightProfile] = WEIGHT_PROFILES) -> List[Dict[str, str]]:
    return [{"value": profile.name, "label": profile.label} for profile in profiles.values()]
