# battery_monitor/models/telemetry.py

from typing import Optional

from pydantic import BaseModel, ConfigDict, computed_field  # type: ignore
from pydantic.alias_generators import to_camel  # type: ignore


class TelemetrySnapshot(BaseModel):
    """
    One normalized battery reading.
    Serialized with camelCase keys (stateOfCharge, estimatedRange, ...).
    """

    model_config = ConfigDict(
        frozen=True,
        alias_generator=to_camel,
        populate_by_name=True,
    )

    voltage: float = 0.0             # V
    current: float = 0.0             # mA, sign = direction
    power: Optional[float] = None    # W, not every channel carries it
    temperature: float = 0.0         # °C
    state_of_charge: float = 0.0     # %
    state_of_health: float = 0.0     # %
    motor_state: int = 0
    charging_state: int = 0          # 0 = discharging, 1 = charging
    timestamp: str = ""
    estimated_range: Optional[float] = None

    @computed_field(alias="chargingStatus")  # type: ignore[misc]
    @property
    def charging_status(self) -> int:
        return self.charging_state

    @property
    def is_charging(self) -> bool:
        return self.charging_state == 1


class HistoryEntry(BaseModel):
    model_config = ConfigDict(
        frozen=True,
        alias_generator=to_camel,
        populate_by_name=True,
    )

    timestamp: str = ""
    state_of_charge: float = 0.0
    state_of_health: float = 0.0
