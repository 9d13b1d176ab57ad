# battery_monitor/telemetry/range_estimator.py

from dataclasses import dataclass
from typing import Literal

RangeMode = Literal["model", "percent"]

COLD_DERATING = 0.8
HEAT_DERATING = 0.9


@dataclass(frozen=True)
class RangeConfig:
    capacity_kwh: float = 2.0
    efficiency_km_per_kwh: float = 50.0
    min_temp: float = 0.0
    max_temp: float = 45.0
    mode: RangeMode = "model"


DEFAULT_RANGE_CONFIG = RangeConfig()


def temperature_factor(temperature: float, config: RangeConfig) -> float:
    if temperature < config.min_temp:
        return COLD_DERATING
    if temperature > config.max_temp:
        return HEAT_DERATING
    return 1.0


def estimate_range(
    state_of_charge: float,
    temperature: float,
    config: RangeConfig = DEFAULT_RANGE_CONFIG,
) -> float:
    """
    Estimated remaining range in km, rounded to one decimal.

    "percent" mode reports the state of charge itself as the range.
    """
    if config.mode == "percent":
        return round(state_of_charge, 1)

    base_range = (state_of_charge / 100) * config.capacity_kwh * config.efficiency_km_per_kwh
    return round(base_range * temperature_factor(temperature, config), 1)
