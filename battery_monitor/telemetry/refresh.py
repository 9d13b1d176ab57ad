# battery_monitor/telemetry/refresh.py

import asyncio
import logging
from typing import Awaitable, Callable, Optional

from battery_monitor.models.dashboard import Evaluation
from battery_monitor.models.telemetry import TelemetrySnapshot
from battery_monitor.thingspeak.client import ThingSpeakError

logger = logging.getLogger(__name__)

NO_DATA_MESSAGE = "No data available from ThingSpeak"

FetchSnapshot = Callable[[], Awaitable[Optional[TelemetrySnapshot]]]


class RefreshLoop:
    """
    Periodically fetches a snapshot and runs it through the evaluation chain.

    At most one fetch is in flight: a tick that fires while one is running is
    skipped, and ticks missed by a slow fetch are dropped rather than queued.
    """

    def __init__(
        self,
        fetch: FetchSnapshot,
        process: Callable[[TelemetrySnapshot], Evaluation],
        on_update: Callable[[Evaluation], None],
        on_failure: Callable[[str], None],
        interval: float = 15.0,
    ):
        if interval <= 0:
            raise ValueError(f"Refresh interval must be positive, got {interval}")
        self.fetch = fetch
        self.process = process
        self.on_update = on_update
        self.on_failure = on_failure
        self.interval = interval
        self._in_flight = False
        self._task: Optional[asyncio.Task] = None

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    @property
    def in_flight(self) -> bool:
        return self._in_flight

    async def tick(self) -> bool:
        """Run one cycle. Returns False when skipped because a fetch is outstanding."""
        if self._in_flight:
            logger.debug("Refresh skipped: previous fetch still in flight")
            return False

        self._in_flight = True
        try:
            try:
                snapshot = await self.fetch()
            except ThingSpeakError as e:
                logger.error(f"Refresh failed: {e}")
                self.on_failure(str(e))
                return True
            except Exception as e:
                logger.exception("Unexpected error fetching snapshot")
                self.on_failure(f"Unexpected error: {e}")
                return True

            if snapshot is None:
                logger.warning(NO_DATA_MESSAGE)
                self.on_failure(NO_DATA_MESSAGE)
                return True

            self.on_update(self.process(snapshot))
            return True
        finally:
            self._in_flight = False

    async def _run(self) -> None:
        loop = asyncio.get_running_loop()
        next_tick = loop.time()

        while True:
            try:
                await self.tick()
            except Exception:
                logger.exception("Unexpected error in refresh cycle")

            next_tick += self.interval
            now = loop.time()
            if now > next_tick:
                missed = int((now - next_tick) // self.interval) + 1
                logger.warning(f"Refresh overran its interval, skipping {missed} tick(s)")
                next_tick += missed * self.interval

            await asyncio.sleep(next_tick - now)

    def start(self) -> None:
        if self.running:
            return
        logger.info(f"Starting refresh loop every {self.interval}s")
        self._task = asyncio.create_task(self._run())

    async def stop(self) -> None:
        if self._task is None:
            return

        task, self._task = self._task, None
        task.cancel()
        try:
            await task
        except asyncio.CancelledError:
            pass
        logger.info("Refresh loop stopped")
