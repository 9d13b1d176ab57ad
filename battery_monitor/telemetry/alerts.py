# battery_monitor/telemetry/alerts.py

from typing import Iterable

from battery_monitor.models.warnings import BatteryWarning, CriticalAlertView, Severity


def aggregate(warnings: Iterable[BatteryWarning]) -> CriticalAlertView:
    messages = [w.message for w in warnings if w.severity == Severity.CRITICAL]
    return CriticalAlertView(show_banner=bool(messages), messages=messages)
