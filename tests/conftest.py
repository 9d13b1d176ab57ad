import httpx
import pytest

from battery_monitor.config import Settings
from battery_monitor.models.telemetry import TelemetrySnapshot
from battery_monitor.telemetry.thresholds import build_threshold_table
from battery_monitor.thingspeak.client import ThingSpeakClient

# Voltage bounds for a single Li-ion cell, used by the cell-level scenarios.
CELL_VOLTAGE = {
    "voltage": {
        "critical_low": 3.0,
        "warning_low": 3.3,
        "warning_high": 4.1,
        "critical_high": 4.2,
    }
}


class FakeThingSpeak:
    """Serves canned ThingSpeak replies and records every request it sees."""

    def __init__(self):
        self.feeds = []
        self.update_reply = {"entry_id": 42}
        self.feeds_payload = None
        self.fail = False
        self.requests = []

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.fail:
            raise httpx.ConnectError("connection refused", request=request)

        if request.url.path.endswith("/feeds.json"):
            if self.feeds_payload is not None:
                return httpx.Response(200, json=self.feeds_payload)
            results = int(request.url.params.get("results", "1"))
            feeds = self.feeds[-results:] if self.feeds else []
            return httpx.Response(200, json={"channel": {"id": 123456}, "feeds": feeds})

        if request.url.path == "/update.json":
            return httpx.Response(200, json=self.update_reply)

        return httpx.Response(404, json={"error": "not found"})


def feed_entry(entry_id: int = 1, **fields):
    entry = {
        "created_at": "2024-05-01T12:00:00Z",
        "entry_id": entry_id,
        "field1": "48.20",
        "field2": "-20.5",
        "field3": "0.98",
        "field4": "25.0",
        "field5": "80",
        "field6": "95",
        "field7": "0",
        "field8": "0",
    }
    entry.update(fields)
    return entry


@pytest.fixture
def settings():
    return Settings(
        channel_id="123456",
        read_api_key="READKEY",
        write_api_key="WRITEKEY",
        base_url="https://api.thingspeak.test",
        dashboard_polling=False,
        static_dir=None,
    )


@pytest.fixture
def fake_thingspeak():
    return FakeThingSpeak()


@pytest.fixture
def thingspeak_client(settings, fake_thingspeak):
    return ThingSpeakClient.from_settings(
        settings, transport=httpx.MockTransport(fake_thingspeak.handler)
    )


@pytest.fixture
def cell_thresholds():
    return build_threshold_table(CELL_VOLTAGE)


@pytest.fixture
def make_snapshot():
    def _make(**overrides):
        values = {
            "voltage": 48.0,
            "current": -20.0,
            "temperature": 25.0,
            "state_of_charge": 80.0,
            "state_of_health": 95.0,
            "charging_state": 0,
            "timestamp": "2024-05-01T12:00:00Z",
            "estimated_range": 80.0,
        }
        values.update(overrides)
        return TelemetrySnapshot(**values)

    return _make
