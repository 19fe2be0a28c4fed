from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional
import logging
import os

import httpx
from pydantic import ValidationError

from app.errors import UpstreamDataError
from app.schemas import AttractionEntity, LiveStatusEntry, ScheduleWindow

logger = logging.getLogger(__name__)
if not logger.handlers:
    handler = logging.StreamHandler()
    handler.setFormatter(logging.Formatter("[%(levelname)s] %(name)s: %(message)s"))
    logger.addHandler(handler)
_level = os.getenv("RIDE_WIZARD_LOG_LEVEL", "INFO").upper()
logger.setLevel(getattr(logging, _level, logging.INFO))
logger.propagate = False

DEFAULT_BASE_URL = "https://api.themeparks.wiki/v1/entity"


@dataclass
class ClientOptions:
    base_url: str = field(default_factory=lambda: os.getenv("THEMEPARKS_API_BASE") or DEFAULT_BASE_URL)
    timeout: float = 10.0
    user_agent: str = "ride-wizard/1.0"


class ThemeParksClient:
    """
    Thin async wrapper around the ThemeParks.wiki entity endpoints.
    Every failure surfaces as ``UpstreamDataError``.
    """

    def __init__(self, options: Optional[ClientOptions] = None):
        self.options = options or ClientOptions()

    async def get_children(self, park_id: str) -> List[AttractionEntity]:
        return parse_children(await self._get_json(f"{park_id}/children"))

    async def get_live(self, park_id: str) -> List[LiveStatusEntry]:
        return parse_live(await self._get_json(f"{park_id}/live"))

    async def get_schedule(self, park_id: str) -> List[ScheduleWindow]:
        return parse_schedule(await self._get_json(f"{park_id}/schedule"))

    async def _get_json(self, path: str) -> Any:
        url = f"{self.options.base_url.rstrip('/')}/{path}"
        try:
            async with httpx.AsyncClient(timeout=self.options.timeout) as client:
                response = await client.get(url, headers={"User-Agent": self.options.user_agent})
                response.raise_for_status()
                return response.json()
        except httpx.HTTPError as exc:
            raise UpstreamDataError(f"GET {url} failed: {exc!r}") from exc
        except ValueError as exc:
            raise UpstreamDataError(f"GET {url} returned invalid JSON") from exc


def parse_children(payload: Any) -> List[AttractionEntity]:
    items = _expect_list(payload, "children")
    entities: List[AttractionEntity] = []
    for item in items:
        raw = _as_dict(item)
        location = _as_dict(raw.get("location"))
        lat, lon = location.get("latitude"), location.get("longitude")
        try:
            entities.append(
                AttractionEntity(
                    id=raw.get("id"),
                    name=raw.get("name") or "",
                    entity_type=raw.get("entityType"),
                    location={"lat": lat, "lon": lon} if lat is not None and lon is not None else None,
                )
            )
        except ValidationError:
            logger.warning("Skipping malformed attraction entry: %s", _preview(item))
    return entities


def parse_live(payload: Any) -> List[LiveStatusEntry]:
    items = _expect_list(payload, "liveData")
    entries: List[LiveStatusEntry] = []
    for item in items:
        raw = _as_dict(item)
        standby = _as_dict(_as_dict(raw.get("queue")).get("STANDBY"))
        try:
            entries.append(
                LiveStatusEntry(
                    id=raw.get("id"),
                    status=raw.get("status"),
                    standby_wait_minutes=standby.get("waitTime"),
                )
            )
        except ValidationError:
            logger.warning("Skipping malformed live entry: %s", _preview(item))
    return entries


def parse_schedule(payload: Any) -> List[ScheduleWindow]:
    items = _expect_list(payload, "schedule")
    windows: List[ScheduleWindow] = []
    for item in items:
        raw = _as_dict(item)
        try:
            windows.append(
                ScheduleWindow(
                    open_time=raw.get("openingTime"),
                    close_time=raw.get("closingTime"),
                    kind=raw.get("type"),
                    description=raw.get("description"),
                    date=raw.get("date"),
                )
            )
        except ValidationError:
            logger.warning("Skipping malformed schedule entry: %s", _preview(item))
    return windows


def _expect_list(payload: Any, key: str) -> List[Any]:
    if not isinstance(payload, dict) or not isinstance(payload.get(key), list):
        raise UpstreamDataError(f"Provider payload is missing the '{key}' array")
    return payload[key]


def _as_dict(value: Any) -> Dict[str, Any]:
    return value if isinstance(value, dict) else {}


def _preview(item: Any) -> str:
    return repr(item)[:200]
