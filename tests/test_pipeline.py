import math

import pytest

from app.config import EngineConfig
from app.engine.geo import EARTH_RADIUS_M
from app.engine.pipeline import mode_for, recommend
from app.engine.scoring import resolve_profile
from app.schemas import AttractionEntity, Coordinate, LiveStatusEntry, ParkStatus

HUB = Coordinate(lat=33.810149, lon=-117.918991)
BALANCED = resolve_profile("BALANCED")


def _north(meters: float) -> Coordinate:
    return Coordinate(lat=HUB.lat + math.degrees(meters / EARTH_RADIUS_M), lon=HUB.lon)


def _park(n: int = 12):
    entities, live = [], []
    for i in range(n):
        ride_id = f"ride-{i}"
        entities.append(
            AttractionEntity(id=ride_id, name=f"Ride {i}", entity_type="ATTRACTION", location=_north(80 * (i + 1)))
        )
        live.append(LiveStatusEntry(id=ride_id, status="OPERATING", standby_wait_minutes=(i * 7) % 60))
    entities.append(AttractionEntity(id="show", name="Fantasmic!", entity_type="SHOW", location=_north(10)))
    live.append(LiveStatusEntry(id="show", status="OPERATING", standby_wait_minutes=0))
    return entities, live


def test_scenario_a_single_open_attraction():
    entities = [AttractionEntity(id="a", name="Matterhorn", entity_type="ATTRACTION", location=_north(200))]
    live = [LiveStatusEntry(id="a", status="OPERATING", standby_wait_minutes=10)]

    records = recommend("OPEN", entities, HUB, BALANCED, live_entries=live)

    assert len(records) == 1
    record = records[0]
    assert record.name == "Matterhorn"
    assert record.status == "OPERATING"
    assert record.distance_meters == 200
    assert record.listed_wait_minutes == 10
    assert record.score == pytest.approx(16.333, abs=1e-3)


def test_open_mode_excludes_closest_ride_when_not_operating_or_unknown_wait():
    entities = [
        AttractionEntity(id="down", name="Closest Down", entity_type="ATTRACTION", location=_north(10)),
        AttractionEntity(id="unknown", name="Closest Unknown", entity_type="ATTRACTION", location=_north(20)),
        AttractionEntity(id="ok", name="Far Away", entity_type="ATTRACTION", location=_north(900)),
    ]
    live = [
        LiveStatusEntry(id="down", status="DOWN", standby_wait_minutes=0),
        LiveStatusEntry(id="unknown", status="OPERATING", standby_wait_minutes=None),
        LiveStatusEntry(id="ok", status="OPERATING", standby_wait_minutes=55),
    ]

    records = recommend("OPEN", entities, HUB, BALANCED, live_entries=live)

    assert [r.id for r in records] == ["ok"]


def test_open_mode_bounds_and_types():
    entities, live = _park()

    records = recommend("OPEN", entities, HUB, BALANCED, live_entries=live)

    assert len(records) <= 7
    assert all(r.entity_type == "ATTRACTION" for r in records)
    assert [r.score for r in records] == sorted((r.score for r in records), reverse=True)


def test_closed_mode_lists_nearest_without_live_or_radius_filters():
    entities, live = _park()
    live = [LiveStatusEntry(id=e.id, status="CLOSED") for e in entities]

    records = recommend("CLOSED", entities, HUB, BALANCED, live_entries=live, max_distance_meters=100)

    assert len(records) == 10
    assert records[0].id == "ride-0"
    assert [r.distance_meters for r in records] == sorted(r.distance_meters for r in records)
    assert all(r.status == "CLOSED" and r.listed_wait_minutes == 0 for r in records)
    assert all(r.entity_type == "ATTRACTION" for r in records)


def test_scenario_e_missing_location_excluded_in_both_modes():
    entities = [
        AttractionEntity(id="ghost", name="No Location", entity_type="ATTRACTION", location=None),
        AttractionEntity(id="real", name="Has Location", entity_type="ATTRACTION", location=_north(500)),
    ]
    live = [
        LiveStatusEntry(id="ghost", status="OPERATING", standby_wait_minutes=0),
        LiveStatusEntry(id="real", status="OPERATING", standby_wait_minutes=30),
    ]

    open_records = recommend("OPEN", entities, HUB, BALANCED, live_entries=live)
    closed_records = recommend("CLOSED", entities, HUB, BALANCED)

    assert [r.id for r in open_records] == ["real"]
    assert [r.id for r in closed_records] == ["real"]


def test_radius_limits_open_mode():
    entities, live = _park()

    records = recommend("OPEN", entities, HUB, BALANCED, live_entries=live, max_distance_meters=250)

    assert {r.id for r in records} == {"ride-0", "ride-1", "ride-2"}


def test_repeated_runs_are_byte_identical():
    entities, live = _park()
    profile = resolve_profile("WAIT_ONLY")

    first = [r.model_dump_json() for r in recommend("OPEN", entities, HUB, profile, live_entries=live)]
    second = [r.model_dump_json() for r in recommend("OPEN", entities, HUB, profile, live_entries=live)]

    assert first == second


def test_engine_config_is_injected():
    entities, live = _park()

    records = recommend("OPEN", entities, HUB, BALANCED, live_entries=live, config=EngineConfig(open_limit=3))

    assert len(records) == 3


def test_mode_for_park_states():
    assert mode_for(ParkStatus(state="OPEN")) == "OPEN"
    assert mode_for(ParkStatus(state="CLOSED")) == "CLOSED"
    assert mode_for(ParkStatus(state="UNKNOWN")) == "CLOSED"


@pytest.mark.parametrize("bad", [float("nan"), float("inf")])
def test_non_finite_location_is_treated_as_missing(bad):
    entities = [
        AttractionEntity(id="broken", name="Bad Coordinates", entity_type="ATTRACTION", location=Coordinate(lat=bad, lon=HUB.lon)),
        AttractionEntity(id="real", name="Has Location", entity_type="ATTRACTION", location=_north(300)),
    ]
    live = [
        LiveStatusEntry(id="broken", status="OPERATING", standby_wait_minutes=5),
        LiveStatusEntry(id="real", status="OPERATING", standby_wait_minutes=30),
    ]

    open_records = recommend("OPEN", entities, HUB, BALANCED, live_entries=live, max_distance_meters=1000)
    closed_records = recommend("CLOSED", entities, HUB, BALANCED)

    assert [r.id for r in open_records] == ["real"]
    assert [r.id for r in closed_records] == ["real"]
