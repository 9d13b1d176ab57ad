import logging

from battery_monitor.models.dashboard import DashboardView, Evaluation
from battery_monitor.models.telemetry import TelemetrySnapshot
from battery_monitor.services.battery_service import fetch_snapshot
from battery_monitor.services.render import render_dashboard
from battery_monitor.telemetry.pipeline import run_evaluation
from battery_monitor.telemetry.range_estimator import DEFAULT_RANGE_CONFIG, RangeConfig
from battery_monitor.telemetry.refresh import RefreshLoop
from battery_monitor.telemetry.thresholds import DEFAULT_THRESHOLD_TABLE, ThresholdTable
from battery_monitor.thingspeak.client import ThingSpeakClient
from battery_monitor.thingspeak.decoder import DEFAULT_LAYOUT, FieldLayout

logger = logging.getLogger(__name__)


class DashboardMonitor:
    """
    Owns the last rendered dashboard view.
    The view is only replaced by the refresh loop once a fetch has completed.
    """

    def __init__(
        self,
        client: ThingSpeakClient,
        thresholds: ThresholdTable = DEFAULT_THRESHOLD_TABLE,
        range_config: RangeConfig = DEFAULT_RANGE_CONFIG,
        layout: FieldLayout = DEFAULT_LAYOUT,
        interval: float = 15.0,
    ):
        self.client = client
        self.thresholds = thresholds
        self.range_config = range_config
        self.layout = layout
        self.view = DashboardView()
        self.loop = RefreshLoop(
            fetch=self._fetch,
            process=self._process,
            on_update=self._on_update,
            on_failure=self._on_failure,
            interval=interval,
        )

    async def _fetch(self):
        return await fetch_snapshot(self.client, self.layout)

    def _process(self, snapshot: TelemetrySnapshot) -> Evaluation:
        return run_evaluation(snapshot, self.thresholds, self.range_config)

    def _on_update(self, evaluation: Evaluation) -> None:
        self.view = render_dashboard(evaluation, self.view)
        if evaluation.alert.show_banner:
            logger.warning(f"Critical battery alert: {'; '.join(evaluation.alert.messages)}")

    def _on_failure(self, reason: str) -> None:
        self.view = render_dashboard(None, self.view, error=reason)

    def start(self) -> None:
        self.loop.start()

    async def stop(self) -> None:
        await self.loop.stop()

    async def refresh(self) -> bool:
        return await self.loop.tick()
