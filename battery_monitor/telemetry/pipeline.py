# battery_monitor/telemetry/pipeline.py

from battery_monitor.models.dashboard import Evaluation
from battery_monitor.models.telemetry import TelemetrySnapshot
from battery_monitor.telemetry.alerts import aggregate
from battery_monitor.telemetry.evaluator import evaluate
from battery_monitor.telemetry.range_estimator import (
    DEFAULT_RANGE_CONFIG,
    RangeConfig,
    estimate_range,
)
from battery_monitor.telemetry.thresholds import DEFAULT_THRESHOLD_TABLE, ThresholdTable


def enrich_snapshot(
    snapshot: TelemetrySnapshot,
    range_config: RangeConfig = DEFAULT_RANGE_CONFIG,
) -> TelemetrySnapshot:
    estimated = estimate_range(snapshot.state_of_charge, snapshot.temperature, range_config)
    return snapshot.model_copy(update={"estimated_range": estimated})


def run_evaluation(
    snapshot: TelemetrySnapshot,
    thresholds: ThresholdTable = DEFAULT_THRESHOLD_TABLE,
    range_config: RangeConfig = DEFAULT_RANGE_CONFIG,
) -> Evaluation:
    """Range estimation -> warning evaluation -> alert aggregation."""
    enriched = enrich_snapshot(snapshot, range_config)
    warnings = evaluate(enriched, thresholds)
    return Evaluation(snapshot=enriched, warnings=warnings, alert=aggregate(warnings))
