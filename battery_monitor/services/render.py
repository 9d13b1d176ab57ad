# battery_monitor/services/render.py

from datetime import datetime, timezone
from typing import Dict, Optional, Tuple

from battery_monitor.models.dashboard import (
    BatteryGauge,
    ChargingIndicator,
    DashboardView,
    Evaluation,
)
from battery_monitor.models.telemetry import TelemetrySnapshot
from battery_monitor.models.warnings import BatteryWarning, Metric, Severity

# Display scale (min, max) of each gauge bar.
GAUGE_RANGES: Dict[str, Tuple[float, float]] = {
    "voltage": (0, 60),
    "current": (0, 150),
    "temperature": (0, 60),
    "stateOfCharge": (0, 100),
    "stateOfHealth": (0, 100),
    "estimatedRange": (0, 100),
}

ALL_CLEAR = BatteryWarning(
    metric=Metric.SYSTEM,
    severity=Severity.INFO,
    icon="✅",
    message="All systems normal - No warnings detected",
)


def clamp(x: float, lo: float, hi: float) -> float:
    return max(lo, min(hi, x))


def gauge_percent(value: float, lo: float, hi: float) -> float:
    return round(clamp((value - lo) / (hi - lo) * 100, 0, 100), 1)


def battery_gauge(state_of_charge: float) -> BatteryGauge:
    percent = clamp(state_of_charge, 0, 100)
    if percent <= 20:
        level = "low"
    elif percent <= 50:
        level = "medium"
    else:
        level = "high"
    return BatteryGauge(percent=int(round(percent)), level=level)


def charging_indicator(snapshot: TelemetrySnapshot) -> ChargingIndicator:
    if snapshot.is_charging:
        return ChargingIndicator(charging=True, icon="🔌", label="Charging")
    return ChargingIndicator(charging=False, icon="⚡", label="Discharging")


def gauges(snapshot: TelemetrySnapshot) -> Dict[str, float]:
    values = {
        "voltage": snapshot.voltage,
        "current": abs(snapshot.current),
        "temperature": snapshot.temperature,
        "stateOfCharge": snapshot.state_of_charge,
        "stateOfHealth": snapshot.state_of_health,
        "estimatedRange": snapshot.estimated_range or 0.0,
    }
    return {
        name: gauge_percent(value, *GAUGE_RANGES[name])
        for name, value in values.items()
    }


def format_time_ago(timestamp: str, now: datetime) -> Optional[str]:
    try:
        ts = datetime.fromisoformat(timestamp.replace("Z", "+00:00"))
    except ValueError:
        return None
    if ts.tzinfo is None:
        ts = ts.replace(tzinfo=timezone.utc)

    seconds = max(0, int((now - ts).total_seconds()))
    if seconds < 60:
        return f"{seconds}s ago"
    if seconds < 3600:
        return f"{seconds // 60}m ago"
    return f"{seconds // 3600}h ago"


def render_dashboard(
    evaluation: Optional[Evaluation],
    previous: Optional[DashboardView] = None,
    now: Optional[datetime] = None,
    error: Optional[str] = None,
) -> DashboardView:
    """
    Describe what the dashboard should show.

    Without an evaluation (failed refresh) the previous values are kept and
    only the connection status changes.
    """
    if evaluation is None:
        base = previous or DashboardView()
        return base.model_copy(
            update={"connected": False, "status_text": "Disconnected", "error": error}
        )

    now = now or datetime.now(timezone.utc)
    snapshot = evaluation.snapshot

    return DashboardView(
        connected=True,
        status_text="Active",
        snapshot=snapshot,
        battery=battery_gauge(snapshot.state_of_charge),
        gauges=gauges(snapshot),
        charging=charging_indicator(snapshot),
        warnings=evaluation.warnings or [ALL_CLEAR],
        alert=evaluation.alert,
        last_update=format_time_ago(snapshot.timestamp, now),
        error=None,
    )
