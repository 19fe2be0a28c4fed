from unittest.mock import AsyncMock

from fastapi.testclient import TestClient

from app.errors import ConfigurationError, UpstreamDataError
from app.main import app
from app.schemas import ParkContext, ParkStatus, RecommendationRecord, WizardResponse


def _sample_payload() -> dict:
    return {
        "park": "disneyland",
        "weather": "Forecast: 72°F, Sunny",
        "parkStatus": "OPEN",
        "hours": "Hours: 8:00 AM - 11:00 PM (Currently Open)",
        "ticketedEvent": None,
        "userPrefs": {"land": "fantasyland", "priorityMode": "WAIT_ONLY"},
    }


def _sample_response() -> WizardResponse:
    return WizardResponse(
        park="disneyland",
        park_name="Disneyland Park (CA)",
        mode="OPEN",
        priority_mode="WAIT_ONLY",
        park_status=ParkStatus(state="OPEN", human_message="Hours: 8:00 AM - 11:00 PM (Currently Open)"),
        weather="Forecast: 72°F, Sunny",
        recommendations=[
            RecommendationRecord(
                id="small-world",
                name="it's a small world",
                entity_type="ATTRACTION",
                status="OPERATING",
                distance_meters=120,
                listed_wait_minutes=5,
                score=912.5,
            )
        ],
        summary="Sail away on it's a small world.",
    )


def test_wizard_endpoint_returns_camel_case(monkeypatch):
    client = TestClient(app)
    orchestrator = AsyncMock(return_value=_sample_response())
    monkeypatch.setattr("app.main.orchestrate_recommendations", orchestrator)

    response = client.post("/api/wizard", json=_sample_payload())

    assert response.status_code == 200
    orchestrator.assert_awaited_once()
    called_request = orchestrator.await_args.args[0]
    assert called_request.user_prefs.priority_mode == "WAIT_ONLY"
    assert called_request.park_status == "OPEN"
    body = response.json()
    assert body["parkName"] == "Disneyland Park (CA)"
    assert body["parkStatus"]["humanMessage"].startswith("Hours: 8:00 AM")
    assert body["recommendations"][0]["listedWaitMinutes"] == 5
    assert body["recommendations"][0]["distanceMeters"] == 120
    assert body["recommendations"][0]["entityType"] == "ATTRACTION"


def test_wizard_rejects_invalid_payload(monkeypatch):
    client = TestClient(app)
    orchestrator = AsyncMock()
    monkeypatch.setattr("app.main.orchestrate_recommendations", orchestrator)

    missing_prefs = client.post("/api/wizard", json={"park": "disneyland"})
    negative_radius = client.post(
        "/api/wizard",
        json={"park": "disneyland", "userPrefs": {"land": "fantasyland", "maxDistanceMeters": -5}},
    )

    assert missing_prefs.status_code == 422
    assert negative_radius.status_code == 422
    orchestrator.assert_not_awaited()


def test_wizard_maps_configuration_error_to_400(monkeypatch):
    client = TestClient(app)
    monkeypatch.setattr(
        "app.main.orchestrate_recommendations",
        AsyncMock(side_effect=ConfigurationError("Unknown land 'toontown' for park 'disneyland'")),
    )

    response = client.post("/api/wizard", json=_sample_payload())

    assert response.status_code == 400
    assert "toontown" in response.json()["detail"]


def test_wizard_hides_upstream_detail(monkeypatch):
    client = TestClient(app)
    monkeypatch.setattr(
        "app.main.orchestrate_recommendations",
        AsyncMock(side_effect=UpstreamDataError("GET https://api.themeparks.wiki/... failed: 500")),
    )

    response = client.post("/api/wizard", json=_sample_payload())

    assert response.status_code == 502
    assert response.json() == {"detail": "Recommendation data unavailable."}


def test_parks_listing():
    client = TestClient(app)

    response = client.get("/api/parks")

    assert response.status_code == 200
    body = response.json()
    assert [p["key"] for p in body["parks"]] == ["magic_kingdom", "disneyland"]
    disneyland = body["parks"][1]
    assert disneyland["timeZone"] == "America/Los_Angeles"
    assert {"key": "new_orleans", "label": "New Orleans Square"} in disneyland["lands"]
    assert [m["value"] for m in body["priorityModes"]] == ["BALANCED", "WAIT_ONLY", "DISTANCE_ONLY"]


def test_park_context_endpoint(monkeypatch):
    client = TestClient(app)
    context = ParkContext(
        park="magic_kingdom",
        park_name="Magic Kingdom (FL)",
        status=ParkStatus(state="CLOSED", human_message="Hours: Opens at 9:00 AM ET"),
        weather="Weather: Data unavailable.",
    )
    mock = AsyncMock(return_value=context)
    monkeypatch.setattr("app.main.orchestrate_park_context", mock)

    response = client.get("/api/parks/magic_kingdom/context")

    assert response.status_code == 200
    mock.assert_awaited_once_with("magic_kingdom")
    assert response.json()["status"]["humanMessage"] == "Hours: Opens at 9:00 AM ET"


def test_park_context_unknown_park_is_400():
    client = TestClient(app)

    response = client.get("/api/parks/epcot/context")

    assert response.status_code == 400
