import asyncio
import time
from contextlib import asynccontextmanager

import httpx
import pytest

from city_weather.weather.client import OpenMeteoClient
from city_weather.weather.errors import UpstreamHttpError, UpstreamUnavailable
from city_weather.weather.models import Coordinates

from conftest import CURRENT_PAYLOAD, FORECAST_PAYLOAD, GEOCODE_LONDON

LONDON = Coordinates(latitude=51.5085, longitude=-0.1257)


@pytest.mark.asyncio
async def test_resolve_coordinates_requests_single_candidate(make_client):
    seen = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(200, json=GEOCODE_LONDON)

    async with make_client(handler) as client:
        coords = await client.resolve_coordinates("London")

    assert coords == LONDON
    assert seen[0].url.host == "geo.test"
    assert seen[0].url.path == "/v1/search"
    assert seen[0].url.params["name"] == "London"
    assert seen[0].url.params["count"] == "1"


@pytest.mark.asyncio
@pytest.mark.parametrize("body", [{"results": []}, {}, {"generationtime_ms": 0.4}])
async def test_resolve_coordinates_returns_none_without_results(make_client, body):
    async with make_client(lambda request: httpx.Response(200, json=body)) as client:
        assert await client.resolve_coordinates("Atlantis") is None


@pytest.mark.asyncio
async def test_resolve_coordinates_returns_none_on_error_status(make_client):
    async with make_client(lambda request: httpx.Response(500, text="oops")) as client:
        assert await client.resolve_coordinates("London") is None


@pytest.mark.asyncio
async def test_resolve_coordinates_returns_none_on_timeout(make_client):
    def handler(request):
        raise httpx.ReadTimeout("timed out", request=request)

    async with make_client(handler) as client:
        assert await client.resolve_coordinates("London") is None


@pytest.mark.asyncio
async def test_resolve_coordinates_raises_on_transport_error(make_client):
    def handler(request):
        raise httpx.ConnectError("name resolution failed", request=request)

    async with make_client(handler) as client:
        with pytest.raises(UpstreamUnavailable):
            await client.resolve_coordinates("London")


@pytest.mark.asyncio
async def test_alt_geocode_tries_broader_lookups(make_client):
    seen = []

    def handler(request):
        seen.append(dict(request.url.params))
        if request.url.params.get("language") == "en":
            return httpx.Response(200, json=GEOCODE_LONDON)
        return httpx.Response(200, json={"results": []})

    async with make_client(handler, alt_geocode=True) as client:
        coords = await client.resolve_coordinates("Londres")

    assert coords == LONDON
    assert [params["count"] for params in seen] == ["1", "10", "10"]
    assert seen[2]["language"] == "en"


@pytest.mark.asyncio
async def test_fetch_current_query(make_client):
    seen = []

    def handler(request):
        seen.append(request)
        return httpx.Response(200, json=CURRENT_PAYLOAD)

    async with make_client(handler) as client:
        payload = await client.fetch_current(LONDON)

    assert payload == CURRENT_PAYLOAD
    params = seen[0].url.params
    assert seen[0].url.path == "/v1/forecast"
    assert params["current_weather"] == "true"
    assert float(params["latitude"]) == LONDON.latitude
    assert float(params["longitude"]) == LONDON.longitude


@pytest.mark.asyncio
async def test_fetch_forecast_query(make_client):
    seen = []

    def handler(request):
        seen.append(request)
        return httpx.Response(200, json=FORECAST_PAYLOAD)

    async with make_client(handler) as client:
        payload = await client.fetch_forecast(LONDON)

    assert payload == FORECAST_PAYLOAD
    params = seen[0].url.params
    assert params["daily"] == "temperature_2m_max,temperature_2m_min,weathercode"
    assert params["forecast_days"] == "5"
    assert params["timezone"] == "auto"


@pytest.mark.asyncio
async def test_fetch_raises_http_error_with_status(make_client):
    async with make_client(lambda request: httpx.Response(429, text="slow down")) as client:
        with pytest.raises(UpstreamHttpError) as excinfo:
            await client.fetch_forecast(LONDON)

    assert excinfo.value.status == 429


@pytest.mark.asyncio
async def test_fetch_timeout_is_upstream_unavailable(make_client):
    def handler(request):
        raise httpx.ReadTimeout("timed out", request=request)

    async with make_client(handler) as client:
        with pytest.raises(UpstreamUnavailable):
            await client.fetch_current(LONDON)


@pytest.mark.asyncio
async def test_fetch_invalid_json_is_upstream_unavailable(make_client):
    async with make_client(lambda request: httpx.Response(200, text="<html>")) as client:
        with pytest.raises(UpstreamUnavailable):
            await client.fetch_current(LONDON)


@pytest.mark.asyncio
@pytest.mark.parametrize("body", [
    b'{"results": [{"latitude": 95, "longitude": 0}]}',
    b'{"results": [{"latitude": NaN, "longitude": 0}]}',
])
async def test_resolve_coordinates_rejects_out_of_range_result(make_client, body):
    async with make_client(lambda request: httpx.Response(200, content=body)) as client:
        assert await client.resolve_coordinates("London") is None


async def stalled(request):
    await asyncio.sleep(5)
    return httpx.Response(200, json=FORECAST_PAYLOAD)


@pytest.mark.asyncio
async def test_fetch_is_cancelled_after_timeout(make_client):
    async with make_client(stalled) as client:
        started = time.monotonic()
        with pytest.raises(UpstreamUnavailable):
            await client.fetch_forecast(LONDON)

    assert time.monotonic() - started < 1.5


@asynccontextmanager
async def trickling_server(body: bytes, interval: float = 0.3):
    """Local HTTP server that sends its response body one byte at a time."""
    handlers = []

    async def handle(reader, writer):
        handlers.append(asyncio.current_task())
        try:
            await reader.readuntil(b"\r\n\r\n")
            writer.write(
                b"HTTP/1.1 200 OK\r\nContent-Type: application/json\r\n"
                + f"Content-Length: {len(body)}\r\n\r\n".encode()
            )
            for i in range(len(body)):
                if writer.is_closing() or reader.at_eof():
                    break
                writer.write(body[i:i + 1])
                await writer.drain()
                await asyncio.sleep(interval)
        except (ConnectionError, asyncio.IncompleteReadError):
            pass
        finally:
            writer.close()

    server = await asyncio.start_server(handle, "127.0.0.1", 0)
    port = server.sockets[0].getsockname()[1]
    try:
        yield f"http://127.0.0.1:{port}/v1"
    finally:
        server.close()
        for task in handlers:
            task.cancel()
        await asyncio.gather(*handlers, return_exceptions=True)
        await server.wait_closed()


@pytest.mark.asyncio
async def test_slow_response_body_is_bounded_by_timeout(settings):
    async with trickling_server(b'{"daily": {"time": []}}') as base:
        client_settings = settings.model_copy(update={"geo_api_base": base, "weather_api_base": base})
        async with OpenMeteoClient(client_settings, client=httpx.AsyncClient(trust_env=False)) as client:
            started = time.monotonic()
            with pytest.raises(UpstreamUnavailable):
                await client.fetch_forecast(LONDON)
            assert time.monotonic() - started < 1.5

            started = time.monotonic()
            assert await client.resolve_coordinates("London") is None
            assert time.monotonic() - started < 1.5
