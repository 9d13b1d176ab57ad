import logging
from typing import Optional

from fastapi import APIRouter, Depends  # type: ignore
from fastapi.responses import JSONResponse  # type: ignore

from battery_monitor.config import Settings
from battery_monitor.dependencies import get_settings, get_thingspeak
from battery_monitor.models.api import (
    MOTOR_ON,
    DataResponse,
    ErrorResponse,
    HistoryResponse,
    ModeRequest,
    ModeResponse,
)
from battery_monitor.services.battery_service import (
    fetch_history,
    fetch_snapshot,
    send_motor_mode,
)
from battery_monitor.telemetry.pipeline import enrich_snapshot
from battery_monitor.telemetry.refresh import NO_DATA_MESSAGE
from battery_monitor.thingspeak.client import ThingSpeakClient, ThingSpeakError

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/api",
    tags=["Battery"]
)


def _failure(status_code: int, message: str, error: Optional[str] = None) -> JSONResponse:
    body = ErrorResponse(message=message, error=error)
    return JSONResponse(status_code=status_code, content=body.model_dump(exclude_none=True))


@router.get("/data", response_model=DataResponse, response_model_exclude_none=True)
async def get_battery_data(
    client: ThingSpeakClient = Depends(get_thingspeak),
    settings: Settings = Depends(get_settings),
):
    try:
        snapshot = await fetch_snapshot(client, settings.layout)
    except ThingSpeakError as e:
        return _failure(500, "Failed to fetch data from ThingSpeak", str(e))

    if snapshot is None:
        return _failure(404, NO_DATA_MESSAGE)

    return DataResponse(success=True, data=enrich_snapshot(snapshot, settings.range))


@router.get("/history", response_model=HistoryResponse, response_model_exclude_none=True)
async def get_battery_history(
    client: ThingSpeakClient = Depends(get_thingspeak),
    settings: Settings = Depends(get_settings),
):
    try:
        entries = await fetch_history(client, settings.history_results, settings.layout)
    except ThingSpeakError as e:
        return _failure(500, "Failed to fetch history from ThingSpeak", str(e))

    if not entries:
        return _failure(404, "No history available from ThingSpeak")

    return HistoryResponse(success=True, data=entries)


@router.post("/mode", response_model=ModeResponse, response_model_exclude_none=True)
async def set_motor_mode(
    req: ModeRequest,
    client: ThingSpeakClient = Depends(get_thingspeak),
    settings: Settings = Depends(get_settings),
):
    try:
        entry_id = await send_motor_mode(client, req.mode, settings.layout)
    except ThingSpeakError as e:
        return _failure(500, "Failed to send mode to ThingSpeak", str(e))

    if entry_id is None:
        return _failure(400, "Failed to update ThingSpeak. Check your WRITE API key.")

    state = "ON" if req.mode == MOTOR_ON else "OFF"
    return ModeResponse(
        success=True,
        message=f"Motor {state} mode sent successfully",
        entry_id=entry_id,
    )
