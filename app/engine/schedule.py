"""Resolve whether a park is open right now from its daily schedule.

All comparisons happen in the park's own time zone. Provider timestamps
normally carry an offset; naive ones are read as park-local wall time.
"""
from __future__ import annotations

from datetime import datetime, tzinfo
from typing import Iterable, List, Optional, Union
from zoneinfo import ZoneInfo

from app.schemas import ActiveEvent, ParkStatus, ScheduleWindow

UNKNOWN_MESSAGE = "Hours: Data unavailable."
NO_HOURS_MESSAGE = "Hours: No operating hours today."


def unknown_status() -> ParkStatus:
    return ParkStatus(state="UNKNOWN", human_message=UNKNOWN_MESSAGE)


def windows_for_today(
    windows: Iterable[ScheduleWindow],
    now: datetime,
    tz: Union[str, tzinfo],
) -> List[ScheduleWindow]:
    """Keep only the windows that belong to today's date in the park zone."""
    zone = _zone(tz)
    today = _localize(now, zone).date()
    kept: List[ScheduleWindow] = []
    for window in windows:
        if window.date:
            day = window.date[:10]
        else:
            day = _localize(window.open_time, zone).date().isoformat()
        if day == today.isoformat():
            kept.append(window)
    return kept


def resolve_park_status(
    windows: Iterable[ScheduleWindow],
    now: datetime,
    tz: Union[str, tzinfo],
    tz_abbr: str = "",
) -> ParkStatus:
    """Derive the park's state from today's windows and the current instant."""
    zone = _zone(tz)
    local_now = _localize(now, zone)
    todays = list(windows)
    if not todays:
        return unknown_status()

    operating = sorted(
        (w for w in todays if w.kind == "OPERATING"),
        key=lambda w: _localize(w.open_time, zone),
    )
    if not operating:
        return ParkStatus(state="CLOSED", human_message=NO_HOURS_MESSAGE)

    current = next((w for w in operating if _contains(w, local_now, zone)), None)
    if current is not None:
        event = next(
            (w for w in todays if w.kind == "TICKETED_EVENT" and _contains(w, local_now, zone)),
            None,
        )
        message = (
            f"Hours: {_clock(current.open_time, zone)} - {_clock(current.close_time, zone)} (Currently Open)"
        )
        active_event: Optional[ActiveEvent] = None
        if event is not None:
            message += f" | Ticketed Event: {event.description or 'Special event'}"
            active_event = ActiveEvent(
                description=event.description,
                opening_time=event.open_time,
                closing_time=event.close_time,
            )
        return ParkStatus(state="OPEN", active_event=active_event, human_message=message)

    upcoming = next(
        (w for w in operating if _has_duration(w, zone) and local_now < _localize(w.open_time, zone)),
        None,
    )
    if upcoming is not None:
        return ParkStatus(
            state="CLOSED",
            human_message=_with_abbr(f"Hours: Opens at {_clock(upcoming.open_time, zone)}", tz_abbr),
        )

    last_close = max(_localize(w.close_time, zone) for w in operating)
    return ParkStatus(
        state="CLOSED",
        human_message=_with_abbr(f"Hours: Park closed since {_clock(last_close, zone)}", tz_abbr),
    )


def _zone(tz: Union[str, tzinfo]) -> tzinfo:
    return ZoneInfo(tz) if isinstance(tz, str) else tz


def _localize(value: datetime, zone: tzinfo) -> datetime:
    if value.tzinfo is None:
        return value.replace(tzinfo=zone)
    return value.astimezone(zone)


def _has_duration(window: ScheduleWindow, zone: tzinfo) -> bool:
    return _localize(window.open_time, zone) < _localize(window.close_time, zone)


def _contains(window: ScheduleWindow, instant: datetime, zone: tzinfo) -> bool:
    # Zero-length and inverted windows never contain anything.
    if not _has_duration(window, zone):
        return False
    return _localize(window.open_time, zone) <= instant <= _localize(window.close_time, zone)


def _clock(value: datetime, zone: tzinfo) -> str:
    return _localize(value, zone).strftime("%I:%M %p").lstrip("0")


def _with_abbr(message: str, tz_abbr: str) -> str:
    return f"{message} {tz_abbr}" if tz_abbr else message
