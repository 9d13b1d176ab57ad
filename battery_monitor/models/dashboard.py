# battery_monitor/models/dashboard.py

from typing import Dict, List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field  # type: ignore
from pydantic.alias_generators import to_camel  # type: ignore

from battery_monitor.models.telemetry import TelemetrySnapshot
from battery_monitor.models.warnings import BatteryWarning, CriticalAlertView


class _CamelModel(BaseModel):
    model_config = ConfigDict(
        frozen=True,
        alias_generator=to_camel,
        populate_by_name=True,
    )


class Evaluation(_CamelModel):
    """Output of one refresh cycle: enriched snapshot, warnings and banner."""

    snapshot: TelemetrySnapshot
    warnings: List[BatteryWarning] = Field(default_factory=list)
    alert: CriticalAlertView = CriticalAlertView()


class BatteryGauge(_CamelModel):
    percent: int = 0
    level: Literal["low", "medium", "high"] = "low"


class ChargingIndicator(_CamelModel):
    charging: bool = False
    icon: str = "⚡"
    label: str = "Discharging"


class DashboardView(_CamelModel):
    connected: bool = False
    status_text: str = "Disconnected"
    snapshot: Optional[TelemetrySnapshot] = None
    battery: BatteryGauge = BatteryGauge()
    gauges: Dict[str, float] = Field(default_factory=dict)
    charging: ChargingIndicator = ChargingIndicator()
    warnings: List[BatteryWarning] = Field(default_factory=list)
    alert: CriticalAlertView = CriticalAlertView()
    last_update: Optional[str] = None
    error: Optional[str] = None
