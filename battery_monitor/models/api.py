# battery_monitor/models/api.py

from typing import List, Optional, Union

from pydantic import BaseModel, ConfigDict, StrictFloat, StrictInt, field_validator  # type: ignore
from pydantic.alias_generators import to_camel  # type: ignore

from battery_monitor.models.telemetry import HistoryEntry, TelemetrySnapshot

MOTOR_ON = 0
MOTOR_OFF = 1

INVALID_MODE_MESSAGE = "Invalid mode. Use 0 for Motor ON or 1 for Motor OFF"


class ModeRequest(BaseModel):
    # JSON numbers only: 1.0 is the number 1, but true and "1" are rejected.
    mode: Union[StrictInt, StrictFloat]

    @field_validator("mode")
    @classmethod
    def check_known_mode(cls, value: Union[int, float]) -> int:
        if value not in (MOTOR_ON, MOTOR_OFF):
            raise ValueError(INVALID_MODE_MESSAGE)
        return int(value)


class ErrorResponse(BaseModel):
    success: bool = False
    message: str
    error: Optional[str] = None


class DataResponse(BaseModel):
    success: bool
    data: Optional[TelemetrySnapshot] = None
    message: Optional[str] = None


class HistoryResponse(BaseModel):
    success: bool
    data: Optional[List[HistoryEntry]] = None
    message: Optional[str] = None


class ModeResponse(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    success: bool
    message: str
    entry_id: Optional[int] = None


class HealthResponse(BaseModel):
    success: bool = True
    message: str
    timestamp: str


class RefreshResponse(BaseModel):
    success: bool = True
    refreshed: bool
