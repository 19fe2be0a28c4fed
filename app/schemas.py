from datetime import datetime
from typing import Any, List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

EntityType = Literal["ATTRACTION", "SHOW", "RESTAURANT", "OTHER"]
RideStatus = Literal["OPERATING", "CLOSED", "DOWN", "REFURBISHMENT", "UNKNOWN"]
WindowKind = Literal["OPERATING", "TICKETED_EVENT", "OTHER"]
ParkState = Literal["OPEN", "CLOSED", "UNKNOWN"]
Mode = Literal["OPEN", "CLOSED"]

_ENTITY_TYPES = ("ATTRACTION", "SHOW", "RESTAURANT")
_RIDE_STATUSES = ("OPERATING", "CLOSED", "DOWN", "REFURBISHMENT")


class _CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


# ------- Reference data -------
class Coordinate(BaseModel):
    model_config = ConfigDict(frozen=True)

    lat: float
    lon: float


class Land(BaseModel):
    model_config = ConfigDict(frozen=True)

    key: str
    label: str
    coords: Coordinate


# ------- Provider data -------
class AttractionEntity(_CamelModel):
    id: str
    name: str = ""
    entity_type: EntityType = "OTHER"
    location: Optional[Coordinate] = None

    @field_validator("entity_type", mode="before")
    @classmethod
    def _coerce_entity_type(cls, value: Any) -> str:
        value = str(value or "").upper()
        return value if value in _ENTITY_TYPES else "OTHER"


class LiveStatusEntry(_CamelModel):
    id: str
    status: RideStatus = "UNKNOWN"
    standby_wait_minutes: Optional[int] = None

    @field_validator("status", mode="before")
    @classmethod
    def _coerce_status(cls, value: Any) -> str:
        value = str(value or "").upper()
        return value if value in _RIDE_STATUSES else "UNKNOWN"


class ScheduleWindow(_CamelModel):
    open_time: datetime
    close_time: datetime
    kind: WindowKind = "OTHER"
    description: Optional[str] = None
    date: Optional[str] = None  # provider's calendar day, park-local

    @field_validator("kind", mode="before")
    @classmethod
    def _coerce_kind(cls, value: Any) -> str:
        value = str(value or "").upper()
        return value if value in ("OPERATING", "TICKETED_EVENT") else "OTHER"


# ------- Derived status -------
class ActiveEvent(_CamelModel):
    description: Optional[str] = None
    opening_time: Optional[datetime] = None
    closing_time: Optional[datetime] = None


class ParkStatus(_CamelModel):
    model_config = ConfigDict(frozen=True)

    state: ParkState
    active_event: Optional[ActiveEvent] = None
    human_message: str = ""

    @property
    def is_open(self) -> bool:
        return self.state == "OPEN"


# ------- Request models -------
class UserPreferences(_CamelModel):
    land: str
    # Unrecognised modes resolve to BALANCED in the scorer.
    priority_mode: str = "BALANCED"
    max_distance_meters: Optional[int] = Field(default=None, ge=0)


class WizardRequest(_CamelModel):
    model_config = ConfigDict(extra="ignore")

    park: str
    user_prefs: UserPreferences
    weather: Optional[str] = None
    park_status: Optional[ParkState] = None
    hours: Optional[str] = None
    ticketed_event: Optional[ActiveEvent] = None


# ------- Response models -------
class RecommendationRecord(_CamelModel):
    model_config = ConfigDict(frozen=True)

    id: str
    name: str
    entity_type: EntityType
    status: str
    distance_meters: int
    listed_wait_minutes: int
    score: float


class WizardResponse(_CamelModel):
    park: str
    park_name: str
    mode: Mode
    priority_mode: str
    park_status: ParkStatus
    weather: Optional[str] = None
    ticketed_event: Optional[ActiveEvent] = None
    recommendations: List[RecommendationRecord] = Field(default_factory=list)
    summary: str
    message: Optional[str] = None


class ParkContext(_CamelModel):
    park: str
    park_name: str
    status: ParkStatus
    weather: str


class LandOption(_CamelModel):
    key: str
    label: str


class ParkOption(_CamelModel):
    key: str
    name: str
    time_zone: str
    lands: List[LandOption] = Field(default_factory=list)


class PriorityOption(_CamelModel):
    value: str
    label: str


class ParkListing(_CamelModel):
    parks: List[ParkOption] = Field(default_factory=list)
    priority_modes: List[PriorityOption] = Field(default_factory=list)
