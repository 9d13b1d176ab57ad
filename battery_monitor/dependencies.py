from fastapi import Request  # type: ignore

from battery_monitor.config import Settings
from battery_monitor.services.dashboard_service import DashboardMonitor
from battery_monitor.thingspeak.client import ThingSpeakClient


def get_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_thingspeak(request: Request) -> ThingSpeakClient:
    return request.app.state.thingspeak


def get_monitor(request: Request) -> DashboardMonitor:
    return request.app.state.monitor
