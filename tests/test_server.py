"""API tests using FastAPI's TestClient with a mocked NeoWs transport."""
import httpx
import pytest
from fastapi.testclient import TestClient

from neo_assessment.config import Settings, get_settings
from neo_assessment.feed import NeoFeedClient, get_client
from neo_assessment.server import app


def _feed(make_record):
    return {
        "near_earth_objects": {
            "2026-10-19": [
                make_record(id="close"),
                make_record(id="broken", velocity="??", is_pha=False),
            ],
            "2026-10-20": [
                make_record(id="far", size=10.0, velocity="5.0", miss_distance="0.3", is_pha=False),
            ],
        },
    }


@pytest.fixture
def api(make_record):
    state = {"status": 200, "settings": Settings()}

    def handler(request):
        if state["status"] != 200:
            return httpx.Response(state["status"])
        return httpx.Response(200, json=_feed(make_record))

    app.dependency_overrides[get_settings] = lambda: state["settings"]
    app.dependency_overrides[get_client] = lambda: NeoFeedClient(
        state["settings"], transport=httpx.MockTransport(handler)
    )
    yield TestClient(app), state
    app.dependency_overrides.clear()


def test_health(api):
    client, _ = api
    response = client.get("/api/health")
    assert response.status_code == 200
    assert response.json() == {"status": "ok"}


def test_asteroids(api):
    client, _ = api
    response = client.get("/api/asteroids", params={"range": "day"})
    assert response.status_code == 200
    body = response.json()
    assert body["skipped"] == 0
    assert [a["id"] for a in body["asteroids"]] == ["close", "broken", "far"]
    close = body["asteroids"][0]
    assert close["torinoScale"] in (5, 6, 7)
    assert close["hazardLevel"] == "threatening"
    assert close["moonCollisionData"]["comparisonToEarth"]["interpretation"]
    assert close["orbit"]["isInnerOrbit"] is True


def test_nan_fields_serialize_as_null(api):
    client, _ = api
    broken = client.get("/api/asteroids").json()["asteroids"][1]
    assert broken["risk"] is None
    assert broken["velocity"] is None
    assert broken["torinoScale"] == 6


def test_skip_policy_reports_count(api):
    client, state = api
    state["settings"] = Settings(validation_policy="skip")
    body = client.get("/api/asteroids").json()
    assert body["skipped"] == 1
    assert [a["id"] for a in body["asteroids"]] == ["close", "far"]


def test_reject_policy_is_unprocessable(api):
    client, state = api
    state["settings"] = Settings(validation_policy="reject")
    response = client.get("/api/asteroids")
    assert response.status_code == 422
    assert "broken" in response.json()["detail"]


def test_unknown_range(api):
    client, _ = api
    assert client.get("/api/asteroids", params={"range": "year"}).status_code == 422


def test_seed_is_reproducible(api):
    client, _ = api
    first = client.get("/api/asteroids", params={"seed": 5}).json()
    second = client.get("/api/asteroids", params={"seed": 5}).json()
    unseeded = client.get("/api/asteroids").json()
    assert first == second
    assert first["asteroids"][0]["orbit"]["phase"] != unseeded["asteroids"][0]["orbit"]["phase"]


def test_feed_failure_is_bad_gateway(api):
    client, state = api
    state["status"] = 500
    response = client.get("/api/asteroids")
    assert response.status_code == 502
    assert response.json()["detail"] == "Failed to fetch asteroids"


def test_feed_failure_with_mock_fallback(api):
    client, state = api
    state["status"] = 500
    state["settings"] = Settings(use_mock_fallback=True)
    body = client.get("/api/asteroids").json()
    assert len(body["asteroids"]) == 15


def test_moon_context(api):
    client, _ = api
    body = client.get("/api/moon/context").json()
    assert len(body["famousImpacts"]) == 3
    assert body["averageImpactRate"]["perCentury"] == 100


def test_monitoring(api):
    client, _ = api
    response = client.get("/api/monitoring", params={"dry_run": "true"})
    assert response.status_code == 200
    body = response.json()
    assert body["counts"]["total"] == 3
    assert body["alerts"] == {"enabled": False, "dryRun": True}
    assert set(body["range"]) == {"start", "end"}
    assert "broken" in [c["id"] for c in body["critical"]]


def test_monitoring_feed_failure(api):
    client, state = api
    state["status"] = 503
    response = client.get("/api/monitoring")
    assert response.status_code == 502
    assert response.json()["detail"] == "Monitoring run failed"


@pytest.mark.parametrize("params", [{"dryRun": "1"}, {"dry": "1"}, {"dry_run": "true"}])
def test_monitoring_dry_run_spellings(api, params):
    client, _ = api
    body = client.get("/api/monitoring", params=params).json()
    assert body["alerts"]["dryRun"] is True


def test_non_object_feed_is_bad_gateway(api):
    client, _ = api
    app.dependency_overrides[get_client] = lambda: NeoFeedClient(
        transport=httpx.MockTransport(lambda request: httpx.Response(200, json=[]))
    )
    response = client.get("/api/asteroids")
    assert response.status_code == 502
