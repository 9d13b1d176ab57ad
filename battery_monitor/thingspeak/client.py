# battery_monitor/thingspeak/client.py

import logging
from typing import Any, Dict, List, Optional

import httpx  # type: ignore

logger = logging.getLogger(__name__)

THINGSPEAK_BASE_URL = "https://api.thingspeak.com"


class ThingSpeakError(Exception):
    """Transport, HTTP or payload failure talking to ThingSpeak."""


class ThingSpeakClient:
    """
    Thin async wrapper over the two ThingSpeak calls the monitor needs:
    read the latest N feed entries and write field values.
    """

    def __init__(
        self,
        channel_id: str,
        read_api_key: str,
        write_api_key: str,
        base_url: str = THINGSPEAK_BASE_URL,
        timeout: float = 10.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.channel_id = channel_id
        self._read_api_key = read_api_key
        self._write_api_key = write_api_key
        self._client = httpx.AsyncClient(
            base_url=base_url,
            timeout=timeout,
            transport=transport,
        )

    @classmethod
    def from_settings(cls, settings, transport: Optional[httpx.AsyncBaseTransport] = None):
        return cls(
            channel_id=settings.channel_id,
            read_api_key=settings.read_api_key,
            write_api_key=settings.write_api_key,
            base_url=settings.base_url,
            timeout=settings.timeout,
            transport=transport,
        )

    async def __aenter__(self):
        return self

    async def __aexit__(self, *exc_info):
        await self.aclose()

    async def aclose(self) -> None:
        await self._client.aclose()

    async def fetch_feeds(self, results: int = 1) -> List[Dict[str, Any]]:
        """Most recent `results` entries, oldest first. Empty list when the channel has none."""
        try:
            resp = await self._client.get(
                f"/channels/{self.channel_id}/feeds.json",
                params={"api_key": self._read_api_key, "results": results},
            )
            resp.raise_for_status()
            payload = resp.json()
        except httpx.HTTPError as e:
            logger.error(f"Error fetching feeds from ThingSpeak: {e}")
            raise ThingSpeakError(str(e)) from e
        except ValueError as e:
            logger.error(f"ThingSpeak returned a non-JSON feed payload: {e}")
            raise ThingSpeakError(f"Invalid JSON from ThingSpeak: {e}") from e

        feeds = payload.get("feeds") if isinstance(payload, dict) else payload
        if not feeds:
            return []
        if not isinstance(feeds, list) or not all(isinstance(feed, dict) for feed in feeds):
            logger.error(f"ThingSpeak returned an unexpected feed payload: {payload!r}")
            raise ThingSpeakError("Unexpected feed payload from ThingSpeak")
        return feeds

    async def fetch_latest(self) -> Optional[Dict[str, Any]]:
        feeds = await self.fetch_feeds(results=1)
        return feeds[-1] if feeds else None

    async def write_fields(self, fields: Dict[str, Any]) -> Optional[int]:
        """
        Write field values to the channel.
        Returns the new entry id, or None when ThingSpeak refused the update (replies 0).
        """
        params = {"api_key": self._write_api_key, **fields}
        try:
            resp = await self._client.post("/update.json", params=params)
            resp.raise_for_status()
            payload = resp.json()
        except httpx.HTTPError as e:
            logger.error(f"Error writing to ThingSpeak: {e}")
            raise ThingSpeakError(str(e)) from e
        except ValueError as e:
            logger.error(f"ThingSpeak returned a non-JSON update reply: {e}")
            raise ThingSpeakError(f"Invalid JSON from ThingSpeak: {e}") from e

        if isinstance(payload, dict):
            entry_id = payload.get("entry_id")
        else:
            entry_id = payload

        try:
            entry_id = int(entry_id)
        except (TypeError, ValueError):
            return None
        return entry_id or None
