"""
HTTP relay tests. ThingSpeak is replaced by an httpx MockTransport.
"""
import pytest
from fastapi.testclient import TestClient

from battery_monitor.config import MissingCredentialsError
from battery_monitor.main import create_app
from battery_monitor.models.api import INVALID_MODE_MESSAGE

from conftest import feed_entry


@pytest.fixture
def api(settings, thingspeak_client):
    with TestClient(create_app(settings, thingspeak_client)) as client:
        yield client


class TestHealth:
    def test_health(self, api):
        resp = api.get("/api/health")

        assert resp.status_code == 200
        body = resp.json()
        assert body["success"] is True
        assert body["message"] == "EV Battery Monitor API is running"
        assert body["timestamp"]


class TestData:
    def test_latest_snapshot(self, api, fake_thingspeak):
        fake_thingspeak.feeds = [feed_entry(1, field5="10"), feed_entry(2, field8="1")]

        resp = api.get("/api/data")

        assert resp.status_code == 200
        body = resp.json()
        assert body["success"] is True
        data = body["data"]
        assert data["voltage"] == 48.2
        assert data["stateOfCharge"] == 80.0
        assert data["stateOfHealth"] == 95.0
        assert data["chargingState"] == 1
        assert data["chargingStatus"] == 1
        assert data["estimatedRange"] == 80.0
        assert data["timestamp"] == "2024-05-01T12:00:00Z"

        request = fake_thingspeak.requests[-1]
        assert request.url.path == "/channels/123456/feeds.json"
        assert request.url.params["api_key"] == "READKEY"
        assert request.url.params["results"] == "1"

    def test_no_data(self, api):
        resp = api.get("/api/data")

        assert resp.status_code == 404
        assert resp.json() == {"success": False, "message": "No data available from ThingSpeak"}

    def test_upstream_failure(self, api, fake_thingspeak):
        fake_thingspeak.fail = True

        resp = api.get("/api/data")

        assert resp.status_code == 500
        body = resp.json()
        assert body["success"] is False
        assert body["message"] == "Failed to fetch data from ThingSpeak"
        assert "connection refused" in body["error"]

    def test_malformed_feed_payload(self, api, fake_thingspeak):
        fake_thingspeak.feeds_payload = {"feeds": ["garbage"]}

        resp = api.get("/api/data")

        assert resp.status_code == 500
        assert resp.json() == {
            "success": False,
            "message": "Failed to fetch data from ThingSpeak",
            "error": "Unexpected feed payload from ThingSpeak",
        }


class TestHistory:
    def test_returns_recent_window_oldest_first(self, api, fake_thingspeak):
        fake_thingspeak.feeds = [
            feed_entry(i, field5=str(i), created_at=f"2024-05-01T12:{i:02d}:00Z")
            for i in range(1, 13)
        ]

        resp = api.get("/api/history")

        assert resp.status_code == 200
        data = resp.json()["data"]
        assert len(data) == 10
        assert [entry["stateOfCharge"] for entry in data] == [float(i) for i in range(3, 13)]
        assert data[0]["timestamp"] == "2024-05-01T12:03:00Z"
        assert set(data[0]) == {"timestamp", "stateOfCharge", "stateOfHealth"}
        assert fake_thingspeak.requests[-1].url.params["results"] == "10"

    def test_empty_history(self, api):
        resp = api.get("/api/history")

        assert resp.status_code == 404
        assert resp.json()["success"] is False


class TestMode:
    @pytest.mark.parametrize("mode, state", [(0, "ON"), (1, "OFF")])
    def test_sends_motor_mode(self, api, fake_thingspeak, mode, state):
        resp = api.post("/api/mode", json={"mode": mode})

        assert resp.status_code == 200
        assert resp.json() == {
            "success": True,
            "message": f"Motor {state} mode sent successfully",
            "entryId": 42,
        }
        request = fake_thingspeak.requests[-1]
        assert request.method == "POST"
        assert request.url.path == "/update.json"
        assert request.url.params["api_key"] == "WRITEKEY"
        assert request.url.params["field7"] == str(mode)

    @pytest.mark.parametrize("mode, field", [(0.0, "0"), (1.0, "1")])
    def test_whole_number_float_mode(self, api, fake_thingspeak, mode, field):
        resp = api.post("/api/mode", json={"mode": mode})

        assert resp.status_code == 200
        assert resp.json()["success"] is True
        assert fake_thingspeak.requests[-1].url.params["field7"] == field

    @pytest.mark.parametrize("body", [
        {"mode": 2},
        {"mode": -1},
        {"mode": 0.5},
        {"mode": "1"},
        {"mode": True},
        {"mode": None},
        {},
    ])
    def test_invalid_mode_rejected_before_upstream(self, api, fake_thingspeak, body):
        resp = api.post("/api/mode", json=body)

        assert resp.status_code == 400
        assert resp.json() == {"success": False, "message": INVALID_MODE_MESSAGE}
        assert fake_thingspeak.requests == []

    def test_refused_write(self, api, fake_thingspeak):
        fake_thingspeak.update_reply = 0

        resp = api.post("/api/mode", json={"mode": 0})

        assert resp.status_code == 400
        assert resp.json()["message"] == "Failed to update ThingSpeak. Check your WRITE API key."

    def test_upstream_failure(self, api, fake_thingspeak):
        fake_thingspeak.fail = True

        resp = api.post("/api/mode", json={"mode": 1})

        assert resp.status_code == 500
        assert resp.json()["message"] == "Failed to send mode to ThingSpeak"


class TestDashboard:
    def test_initial_view_is_disconnected(self, api):
        resp = api.get("/api/dashboard")

        assert resp.status_code == 200
        assert resp.json()["connected"] is False

    def test_refresh_then_view(self, api, fake_thingspeak):
        fake_thingspeak.feeds = [feed_entry(field4="52")]

        refresh = api.post("/api/dashboard/refresh")
        view = api.get("/api/dashboard").json()

        assert refresh.json() == {"success": True, "refreshed": True}
        assert view["connected"] is True
        assert view["statusText"] == "Active"
        assert view["snapshot"]["temperature"] == 52.0
        assert view["alert"]["showBanner"] is True
        assert view["warnings"][0]["metric"] == "temperature"
        assert view["warnings"][0]["severity"] == "critical"


class TestStartup:
    def test_missing_credentials_are_fatal(self, monkeypatch):
        for key in ("THINGSPEAK_CHANNEL_ID", "THINGSPEAK_READ_API_KEY", "THINGSPEAK_WRITE_API_KEY"):
            monkeypatch.delenv(key, raising=False)

        with pytest.raises(MissingCredentialsError):
            with TestClient(create_app()):
                pass
