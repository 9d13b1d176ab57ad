# battery_monitor/telemetry/thresholds.py

import copy
import json
import logging
from pathlib import Path
from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict, ValidationError, model_validator  # type: ignore

from battery_monitor.data import DEFAULT_THRESHOLDS

logger = logging.getLogger(__name__)

# Bound names in ascending order.
BOUND_ORDER = ("critical_low", "warning_low", "warning_high", "critical_high")

# Bounds each metric is evaluated against.
SUPPORTED_BOUNDS = {
    "temperature": {"warning_low", "warning_high", "critical_high"},
    "voltage": set(BOUND_ORDER),
    "state_of_charge": {"critical_low", "warning_low"},
    "state_of_health": {"critical_low", "warning_low"},
    "current": {"warning_high"},
    "range": {"critical_low", "warning_low"},
}


class ThresholdConfigError(ValueError):
    pass


class MetricThresholds(BaseModel):
    model_config = ConfigDict(frozen=True, extra="forbid")

    critical_low: Optional[float] = None
    warning_low: Optional[float] = None
    warning_high: Optional[float] = None
    critical_high: Optional[float] = None

    def configured(self) -> Dict[str, float]:
        return {
            name: getattr(self, name)
            for name in BOUND_ORDER
            if getattr(self, name) is not None
        }

    @model_validator(mode="after")
    def check_ascending(self):
        bounds = list(self.configured().items())
        for (low_name, low), (high_name, high) in zip(bounds, bounds[1:]):
            if low > high:
                raise ValueError(
                    f"{low_name} ({low}) must not exceed {high_name} ({high})"
                )
        return self


class ThresholdTable(BaseModel):
    """
    Warning/critical boundaries per metric.

    Built once at startup and shared read-only by every evaluation.
    A metric without any bound never produces a warning.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    temperature: MetricThresholds = MetricThresholds()
    voltage: MetricThresholds = MetricThresholds()
    state_of_charge: MetricThresholds = MetricThresholds()
    state_of_health: MetricThresholds = MetricThresholds()
    current: MetricThresholds = MetricThresholds()
    range: MetricThresholds = MetricThresholds()

    @model_validator(mode="after")
    def check_supported_bounds(self):
        for metric, allowed in SUPPORTED_BOUNDS.items():
            unsupported = set(getattr(self, metric).configured()) - allowed
            if unsupported:
                raise ValueError(
                    f"{metric} does not support bound(s): {', '.join(sorted(unsupported))}"
                )
        return self


def deep_merge(base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
    result = copy.deepcopy(base)
    for key, value in override.items():
        if isinstance(value, dict) and isinstance(result.get(key), dict):
            result[key] = deep_merge(result[key], value)
        else:
            result[key] = value
    return result


def build_threshold_table(overrides: Optional[Dict[str, Any]] = None) -> ThresholdTable:
    merged = deep_merge(DEFAULT_THRESHOLDS, overrides or {})
    try:
        return ThresholdTable.model_validate(merged)
    except ValidationError as e:
        raise ThresholdConfigError(f"Invalid threshold configuration: {e}") from e


def load_threshold_table(path: Optional[str] = None) -> ThresholdTable:
    """
    Load the packaged defaults, optionally overridden by a JSON file.
    Override files only need the bounds they change; null removes a bound.
    """
    if not path:
        return build_threshold_table()

    try:
        overrides = json.loads(Path(path).read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError) as e:
        raise ThresholdConfigError(f"Cannot read thresholds file {path}: {e}") from e

    if not isinstance(overrides, dict):
        raise ThresholdConfigError(f"Thresholds file {path} must contain a JSON object")

    logger.info(f"Loaded threshold overrides from {path}")
    return build_threshold_table(overrides)


DEFAULT_THRESHOLD_TABLE = build_threshold_table()
