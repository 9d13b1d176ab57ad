from battery_monitor.models.warnings import BatteryWarning, Metric, Severity
from battery_monitor.telemetry.alerts import aggregate


def warning(metric, severity, message):
    return BatteryWarning(metric=metric, severity=severity, icon="⚡", message=message)


def test_no_warnings_no_banner():
    alert = aggregate([])
    assert alert.show_banner is False
    assert alert.messages == []


def test_only_non_critical_warnings_no_banner():
    alert = aggregate([
        warning(Metric.STATE_OF_CHARGE, Severity.WARNING, "Low Battery"),
        warning(Metric.CURRENT, Severity.WARNING, "High Discharge Rate"),
    ])
    assert alert.show_banner is False


def test_banner_keeps_critical_messages_in_order():
    alert = aggregate([
        warning(Metric.TEMPERATURE, Severity.WARNING, "High Temperature"),
        warning(Metric.VOLTAGE, Severity.CRITICAL, "Critical Low Voltage"),
        warning(Metric.STATE_OF_CHARGE, Severity.WARNING, "Low Battery"),
        warning(Metric.RANGE, Severity.CRITICAL, "Critical Range"),
    ])

    assert alert.show_banner is True
    assert alert.messages == ["Critical Low Voltage", "Critical Range"]


def test_serializes_for_the_front_end():
    alert = aggregate([warning(Metric.VOLTAGE, Severity.CRITICAL, "Critical Low Voltage")])
    assert alert.model_dump(by_alias=True) == {
        "showBanner": True,
        "messages": ["Critical Low Voltage"],
    }
