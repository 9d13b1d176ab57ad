# battery_monitor/models/warnings.py

from enum import Enum
from typing import List

from pydantic import BaseModel, ConfigDict, Field  # type: ignore
from pydantic.alias_generators import to_camel  # type: ignore


class Severity(str, Enum):
    INFO = "info"
    WARNING = "warning"
    CRITICAL = "critical"


class Metric(str, Enum):
    TEMPERATURE = "temperature"
    VOLTAGE = "voltage"
    STATE_OF_CHARGE = "state_of_charge"
    STATE_OF_HEALTH = "state_of_health"
    CURRENT = "current"
    RANGE = "range"
    SYSTEM = "system"


class BatteryWarning(BaseModel):
    model_config = ConfigDict(frozen=True)

    metric: Metric
    severity: Severity
    icon: str
    message: str


class CriticalAlertView(BaseModel):
    model_config = ConfigDict(
        frozen=True,
        alias_generator=to_camel,
        populate_by_name=True,
    )

    show_banner: bool = False
    messages: List[str] = Field(default_factory=list)
