import logging
from typing import List, Optional

from battery_monitor.models.telemetry import HistoryEntry, TelemetrySnapshot
from battery_monitor.thingspeak.client import ThingSpeakClient
from battery_monitor.thingspeak.decoder import DEFAULT_LAYOUT, FeedDecoder, FieldLayout

logger = logging.getLogger(__name__)


async def fetch_snapshot(
    client: ThingSpeakClient,
    layout: FieldLayout = DEFAULT_LAYOUT,
) -> Optional[TelemetrySnapshot]:
    """Latest reading, or None when the channel has no entries."""
    feed = await client.fetch_latest()
    if feed is None:
        return None
    return FeedDecoder.decode(feed, layout)


async def fetch_history(
    client: ThingSpeakClient,
    results: int = 10,
    layout: FieldLayout = DEFAULT_LAYOUT,
) -> List[HistoryEntry]:
    feeds = await client.fetch_feeds(results=results)
    return [FeedDecoder.decode_history(feed, layout) for feed in feeds]


async def send_motor_mode(
    client: ThingSpeakClient,
    mode: int,
    layout: FieldLayout = DEFAULT_LAYOUT,
) -> Optional[int]:
    """Write the motor command; returns the ThingSpeak entry id or None if refused."""
    entry_id = await client.write_fields({layout.motor_state: mode})
    if entry_id is None:
        logger.warning(f"ThingSpeak refused motor mode {mode}")
    else:
        logger.info(f"Motor mode {mode} written as entry {entry_id}")
    return entry_id
