from fastapi import APIRouter, Depends  # type: ignore

from battery_monitor.dependencies import get_monitor
from battery_monitor.models.api import RefreshResponse
from battery_monitor.models.dashboard import DashboardView
from battery_monitor.services.dashboard_service import DashboardMonitor

router = APIRouter(
    prefix="/api/dashboard",
    tags=["Dashboard"]
)


@router.get("", response_model=DashboardView)
async def get_dashboard(monitor: DashboardMonitor = Depends(get_monitor)):
    return monitor.view


# runs one cycle now unless a fetch is already in flight
@router.post("/refresh", response_model=RefreshResponse)
async def refresh_dashboard(monitor: DashboardMonitor = Depends(get_monitor)):
    refreshed = await monitor.refresh()
    return RefreshResponse(refreshed=refreshed)
