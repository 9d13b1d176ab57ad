# battery_monitor/thingspeak/decoder.py

import math
from dataclasses import dataclass
from typing import Any, Dict, Optional

from battery_monitor.models.telemetry import HistoryEntry, TelemetrySnapshot


@dataclass(frozen=True)
class FieldLayout:
    """Which ThingSpeak channel field carries which reading."""

    voltage: str = "field1"
    current: str = "field2"
    power: Optional[str] = "field3"
    temperature: str = "field4"
    state_of_charge: str = "field5"
    state_of_health: str = "field6"
    motor_state: str = "field7"
    charging_state: str = "field8"
    timestamp: str = "created_at"


DEFAULT_LAYOUT = FieldLayout()


def parse_float(value: Any) -> float:
    try:
        number = float(value)
    except (TypeError, ValueError):
        return 0.0
    return number if math.isfinite(number) else 0.0


def parse_int(value: Any) -> int:
    return int(parse_float(value))


class FeedDecoder:
    """
    Decodes raw ThingSpeak feed entries into snapshots.
    A missing or malformed field becomes 0; the rest of the record still decodes.
    """

    @staticmethod
    def decode(feed: Dict[str, Any], layout: FieldLayout = DEFAULT_LAYOUT) -> TelemetrySnapshot:
        return TelemetrySnapshot(
            voltage=parse_float(feed.get(layout.voltage)),
            current=parse_float(feed.get(layout.current)),
            power=parse_float(feed.get(layout.power)) if layout.power else None,
            temperature=parse_float(feed.get(layout.temperature)),
            state_of_charge=parse_float(feed.get(layout.state_of_charge)),
            state_of_health=parse_float(feed.get(layout.state_of_health)),
            motor_state=parse_int(feed.get(layout.motor_state)),
            charging_state=parse_int(feed.get(layout.charging_state)),
            timestamp=str(feed.get(layout.timestamp) or ""),
        )

    @staticmethod
    def decode_history(feed: Dict[str, Any], layout: FieldLayout = DEFAULT_LAYOUT) -> HistoryEntry:
        return HistoryEntry(
            timestamp=str(feed.get(layout.timestamp) or ""),
            state_of_charge=parse_float(feed.get(layout.state_of_charge)),
            state_of_health=parse_float(feed.get(layout.state_of_health)),
        )
