import httpx
import pytest

from battery_monitor.thingspeak.client import ThingSpeakClient, ThingSpeakError


def client_for(handler):
    return ThingSpeakClient(
        channel_id="123456",
        read_api_key="READKEY",
        write_api_key="WRITEKEY",
        base_url="https://api.thingspeak.test",
        transport=httpx.MockTransport(handler),
    )


class TestFeeds:
    @pytest.mark.asyncio
    async def test_missing_feeds_key_is_empty(self):
        async with client_for(lambda request: httpx.Response(200, json={"channel": {}})) as client:
            assert await client.fetch_feeds(5) == []
            assert await client.fetch_latest() is None

    @pytest.mark.asyncio
    async def test_http_error_status(self):
        async with client_for(lambda request: httpx.Response(401, json={"status": "401"})) as client:
            with pytest.raises(ThingSpeakError):
                await client.fetch_latest()

    @pytest.mark.asyncio
    @pytest.mark.parametrize("payload", [
        {"feeds": {"oops": 1}},
        {"feeds": ["garbage"]},
        {"feeds": [{"field1": "48"}, 7]},
        -1,
    ])
    async def test_unexpected_feed_payload(self, payload):
        async with client_for(lambda request: httpx.Response(200, json=payload)) as client:
            with pytest.raises(ThingSpeakError, match="Unexpected feed payload"):
                await client.fetch_latest()

    @pytest.mark.asyncio
    async def test_non_json_body(self):
        async with client_for(lambda request: httpx.Response(200, text="<html>")) as client:
            with pytest.raises(ThingSpeakError):
                await client.fetch_feeds()


class TestWrite:
    @pytest.mark.asyncio
    @pytest.mark.parametrize("reply, expected", [
        ({"entry_id": 17, "field7": "1"}, 17),
        (23, 23),
        (0, None),
        ({"entry_id": None}, None),
    ])
    async def test_entry_id(self, reply, expected):
        async with client_for(lambda request: httpx.Response(200, json=reply)) as client:
            assert await client.write_fields({"field7": 1}) == expected

    @pytest.mark.asyncio
    async def test_timeout_is_wrapped(self):
        def handler(request):
            raise httpx.ReadTimeout("timed out", request=request)

        async with client_for(handler) as client:
            with pytest.raises(ThingSpeakError, match="timed out"):
                await client.write_fields({"field7": 0})
