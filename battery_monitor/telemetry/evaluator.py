# battery_monitor/telemetry/evaluator.py

from typing import List, Optional

from battery_monitor.models.telemetry import TelemetrySnapshot
from battery_monitor.models.warnings import BatteryWarning, Metric, Severity
from battery_monitor.telemetry.thresholds import (
    DEFAULT_THRESHOLD_TABLE,
    MetricThresholds,
    ThresholdTable,
)


def _at_or_below(value: float, bound: Optional[float]) -> bool:
    return bound is not None and value <= bound


def _at_or_above(value: float, bound: Optional[float]) -> bool:
    return bound is not None and value >= bound


def _critical(metric: Metric, icon: str, message: str) -> BatteryWarning:
    return BatteryWarning(metric=metric, severity=Severity.CRITICAL, icon=icon, message=message)


def _warning(metric: Metric, icon: str, message: str) -> BatteryWarning:
    return BatteryWarning(metric=metric, severity=Severity.WARNING, icon=icon, message=message)


class WarningEvaluator:
    """
    Maps a snapshot to at most one warning per metric.

    Checks within a metric are tiers: the first matching bound wins.
    Bounds are taken as configured; inverted tables are not corrected here.
    """

    @staticmethod
    def evaluate(
        snapshot: TelemetrySnapshot,
        thresholds: ThresholdTable = DEFAULT_THRESHOLD_TABLE,
    ) -> List[BatteryWarning]:
        checks = (
            WarningEvaluator._temperature(snapshot.temperature, thresholds.temperature),
            WarningEvaluator._voltage(snapshot.voltage, thresholds.voltage),
            WarningEvaluator._state_of_charge(snapshot.state_of_charge, thresholds.state_of_charge),
            WarningEvaluator._state_of_health(snapshot.state_of_health, thresholds.state_of_health),
            WarningEvaluator._current(snapshot, thresholds.current),
            WarningEvaluator._range(snapshot, thresholds.range),
        )
        return [warning for warning in checks if warning is not None]

    @staticmethod
    def _temperature(value: Optional[float], t: MetricThresholds) -> Optional[BatteryWarning]:
        if value is None:
            return None

        if _at_or_above(value, t.critical_high):
            return _critical(
                Metric.TEMPERATURE, "🔥",
                f"Critical Temperature: {value:.1f}°C - Immediate cooling required!",
            )
        if _at_or_above(value, t.warning_high):
            return _warning(
                Metric.TEMPERATURE, "🌡️",
                f"High Temperature: {value:.1f}°C - Monitor closely",
            )
        if _at_or_below(value, t.warning_low):
            return _warning(
                Metric.TEMPERATURE, "❄️",
                f"Low Temperature: {value:.1f}°C - Performance may be reduced",
            )
        return None

    @staticmethod
    def _voltage(value: Optional[float], t: MetricThresholds) -> Optional[BatteryWarning]:
        if value is None:
            return None

        if _at_or_below(value, t.critical_low):
            return _critical(
                Metric.VOLTAGE, "⚡",
                f"Critical Low Voltage: {value:.2f}V - Battery damage risk!",
            )
        if _at_or_below(value, t.warning_low):
            return _warning(Metric.VOLTAGE, "⚡", f"Low Voltage: {value:.2f}V - Charge soon")
        if _at_or_above(value, t.critical_high):
            return _critical(
                Metric.VOLTAGE, "⚡",
                f"Critical High Voltage: {value:.2f}V - Stop charging immediately!",
            )
        if _at_or_above(value, t.warning_high):
            return _warning(Metric.VOLTAGE, "⚡", f"High Voltage: {value:.2f}V - Nearly full")
        return None

    @staticmethod
    def _state_of_charge(value: Optional[float], t: MetricThresholds) -> Optional[BatteryWarning]:
        if value is None:
            return None

        if _at_or_below(value, t.critical_low):
            return _critical(
                Metric.STATE_OF_CHARGE, "🔋",
                f"Critical Battery Level: {value:.1f}% - Charge immediately!",
            )
        if _at_or_below(value, t.warning_low):
            return _warning(Metric.STATE_OF_CHARGE, "🔋", f"Low Battery: {value:.1f}% - Charge soon")
        return None

    @staticmethod
    def _state_of_health(value: Optional[float], t: MetricThresholds) -> Optional[BatteryWarning]:
        if value is None:
            return None

        if _at_or_below(value, t.critical_low):
            return _critical(
                Metric.STATE_OF_HEALTH, "💔",
                f"Critical Battery Health: {value:.1f}% - Battery replacement needed!",
            )
        if _at_or_below(value, t.warning_low):
            return _warning(
                Metric.STATE_OF_HEALTH, "💚",
                f"Degraded Battery Health: {value:.1f}% - Consider replacement soon",
            )
        return None

    @staticmethod
    def _current(snapshot: TelemetrySnapshot, t: MetricThresholds) -> Optional[BatteryWarning]:
        # discharge-only check
        if snapshot.current is None or snapshot.charging_state != 0:
            return None

        magnitude = abs(snapshot.current)
        if _at_or_above(magnitude, t.warning_high):
            return _warning(
                Metric.CURRENT, "⚡",
                f"High Discharge Rate: {magnitude:.2f}mA - Reduce load",
            )
        return None

    @staticmethod
    def _range(snapshot: TelemetrySnapshot, t: MetricThresholds) -> Optional[BatteryWarning]:
        if snapshot.estimated_range is None or snapshot.charging_state != 0:
            return None

        value = snapshot.estimated_range
        if _at_or_below(value, t.critical_low):
            return _critical(
                Metric.RANGE, "🛑",
                f"Critical Range: {value:.1f}km - Find charging station now!",
            )
        if _at_or_below(value, t.warning_low):
            return _warning(Metric.RANGE, "🔍", f"Low Range: {value:.1f}km - Plan charging stop")
        return None


evaluate = WarningEvaluator.evaluate
