"""Pytest configuration and fixtures."""

import logging
from typing import Callable, List

import httpx
import pytest

from city_weather.config import WeatherSettings
from city_weather.logging_config import THIRD_PARTY_LOGGERS
from city_weather.weather.client import OpenMeteoClient
from city_weather.weather.service import WeatherResolver

GEO_BASE = "https://geo.test/v1"
WEATHER_BASE = "https://weather.test/v1"

GEOCODE_LONDON = {
    "results": [{"latitude": 51.5085, "longitude": -0.1257, "name": "London", "country": "United Kingdom"}]
}

CURRENT_PAYLOAD = {
    "latitude": 51.5,
    "longitude": -0.12,
    "current_weather": {
        "temperature": 12.3,
        "windspeed": 10.2,
        "winddirection": 250,
        "weathercode": 3,
        "time": "2026-10-18T14:00"
    }
}

FORECAST_PAYLOAD = {
    "latitude": 51.5,
    "longitude": -0.12,
    "daily": {
        "time": ["2026-10-18", "2026-10-19", "2026-10-20", "2026-10-21", "2026-10-22"],
        "temperature_2m_max": [15.1, 16.0, 14.2, 13.8, 17.5],
        "temperature_2m_min": [8.2, 9.0, 7.5, 6.9, 10.1],
        "weathercode": [3, 61, 2, 0, 80]
    }
}


class RecordingSleep:
    """Stand-in for asyncio.sleep that records requested delays."""

    def __init__(self):
        self.delays: List[float] = []

    async def __call__(self, seconds: float) -> None:
        self.delays.append(seconds)


@pytest.fixture
def settings() -> WeatherSettings:
    """Settings pointing at fake upstream hosts."""
    return WeatherSettings(
        geo_api_base=GEO_BASE,
        weather_api_base=WEATHER_BASE,
        timeout_seconds=0.5,
        alt_geocode=False,
        forecast_days=5,
        retry_attempts=3,
        retry_base_delay_ms=200
    )


@pytest.fixture
def make_client(settings) -> Callable[..., OpenMeteoClient]:
    """Factory for clients whose requests are answered by a handler function."""
    def _make(handler, **overrides) -> OpenMeteoClient:
        client_settings = settings.model_copy(update=overrides) if overrides else settings
        http_client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
        return OpenMeteoClient(client_settings, client=http_client)
    return _make


@pytest.fixture
def sleep() -> RecordingSleep:
    return RecordingSleep()


@pytest.fixture
def make_resolver(settings, make_client, sleep) -> Callable[..., WeatherResolver]:
    """Factory for resolvers backed by a fake upstream handler."""
    def _make(handler, **kwargs) -> WeatherResolver:
        return WeatherResolver(settings, client=make_client(handler), sleep=sleep, **kwargs)
    return _make


@pytest.fixture
def restore_logging():
    """Restore logger state after tests that reconfigure logging."""
    names = [None, *THIRD_PARTY_LOGGERS]
    saved = {
        name: (logging.getLogger(name).handlers[:], logging.getLogger(name).level, logging.getLogger(name).propagate)
        for name in names
    }
    yield
    for name, (handlers, level, propagate) in saved.items():
        target = logging.getLogger(name)
        for handler in target.handlers[:]:
            if handler not in handlers:
                target.removeHandler(handler)
                handler.close()
        for handler in handlers:
            if handler not in target.handlers:
                target.addHandler(handler)
        target.setLevel(level)
        target.propagate = propagate
