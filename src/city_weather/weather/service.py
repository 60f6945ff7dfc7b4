"""Weather resolver: city name in, provenance-tagged weather out."""

import asyncio
import logging
from typing import Any, Awaitable, Callable, Dict, List, Optional, TypeVar

from city_weather.config import WeatherSettings
from city_weather.weather.client import OpenMeteoClient
from city_weather.weather.errors import UpstreamUnavailable
from city_weather.weather.events import EventRecorder, LoggingEventRecorder, ResolutionEvent
from city_weather.weather.mock_data import MockDataProvider
from city_weather.weather.models import (
    Coordinates, CurrentWeather, ForecastDay,
    ResolvedResult, Source
)
from city_weather.weather.normalizer import normalize_current, normalize_forecast
from city_weather.weather.retry import with_retry
from city_weather.weather.sanitizer import sanitize_city

logger = logging.getLogger(__name__)

T = TypeVar("T")

NOTE_CITY_NOT_FOUND = "city not found / no real data available"
NOTE_GEOCODING_UNAVAILABLE = "geocoding service unavailable / no real data available"
NOTE_UPSTREAM_EXHAUSTED = "upstream unavailable after retries"
NOTE_MALFORMED_UPSTREAM = "upstream returned malformed data"


class WeatherResolver:
    """Resolves a free-text city into current weather or a daily forecast.

    Once the city name passes sanitization every path ends in a
    ResolvedResult: upstream failures are absorbed into mock data whose
    note explains why real data is missing.
    """

    def __init__(
        self,
        settings: WeatherSettings,
        client: Optional[OpenMeteoClient] = None,
        mock_provider: Optional[MockDataProvider] = None,
        recorder: Optional[EventRecorder] = None,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep
    ):
        """Initialize the resolver.

        Args:
            settings: Timeout, retry and upstream settings
            client: Upstream client (creates default if None)
            mock_provider: Fallback data source (creates default if None)
            recorder: Event sink (logs events if None)
            sleep: Coroutine used for retry backoff
        """
        self.settings = settings
        self.client = client or OpenMeteoClient(settings)
        self.mock_provider = mock_provider or MockDataProvider()
        self.recorder = recorder or LoggingEventRecorder()
        self.sleep = sleep

    async def resolve_current(self, city: str) -> ResolvedResult[CurrentWeather]:
        """Resolve current weather for a city.

        Raises:
            InvalidInput: If the city name is empty after sanitization
        """
        return await self._resolve(
            city,
            kind="current",
            fetch=self.client.fetch_current,
            normalize=normalize_current,
            mock=self.mock_provider.mock_current
        )

    async def resolve_forecast(self, city: str) -> ResolvedResult[List[ForecastDay]]:
        """Resolve the daily forecast for a city.

        Raises:
            InvalidInput: If the city name is empty after sanitization
        """
        return await self._resolve(
            city,
            kind="forecast",
            fetch=self.client.fetch_forecast,
            normalize=lambda payload, _city: normalize_forecast(payload),
            mock=self.mock_provider.mock_forecast
        )

    async def _resolve(
        self,
        raw_city: str,
        kind: str,
        fetch: Callable[[Coordinates], Awaitable[Dict[str, Any]]],
        normalize: Callable[[Dict[str, Any], str], T],
        mock: Callable[[str], T]
    ) -> ResolvedResult[T]:
        city = sanitize_city(raw_city)
        self._record(f"{kind} request raw='{raw_city}' sanitized='{city}'", logging.DEBUG)

        try:
            coords = await self.client.resolve_coordinates(city)
        except UpstreamUnavailable as e:
            self._record(f"geocoding failed for '{city}': {e}", logging.ERROR)
            return self._fallback(city, mock, NOTE_GEOCODING_UNAVAILABLE)

        if coords is None:
            # A "no match" is deterministic, retrying it only adds latency
            self._record(f"geocode miss for '{city}', returning mock data")
            return self._fallback(city, mock, NOTE_CITY_NOT_FOUND)

        try:
            payload = await with_retry(
                lambda: fetch(coords),
                max_attempts=self.settings.retry_attempts,
                base_delay_ms=self.settings.retry_base_delay_ms,
                retry_on=(UpstreamUnavailable,),
                sleep=self.sleep
            )
        except UpstreamUnavailable as e:
            self._record(f"{kind} for '{city}' failed after retries, falling back to mock: {e}", logging.ERROR)
            return self._fallback(city, mock, NOTE_UPSTREAM_EXHAUSTED)

        try:
            data = normalize(payload, city)
        except (ValueError, TypeError) as e:
            self._record(f"could not normalize {kind} for '{city}': {e}", logging.ERROR)
            return self._fallback(city, mock, NOTE_MALFORMED_UPSTREAM)

        self._record(f"resolved {kind} for '{city}' from upstream")
        return ResolvedResult(source=Source.UPSTREAM, data=data)

    def _fallback(self, city: str, mock: Callable[[str], T], note: str) -> ResolvedResult[T]:
        return ResolvedResult(source=Source.MOCK, note=note, data=mock(city))

    def _record(self, message: str, level: int = logging.INFO) -> None:
        """Hand an event to the recorder without letting it fail the resolution."""
        try:
            self.recorder.record(ResolutionEvent(message=message, level=level))
        except Exception as e:
            logger.warning(f"Event recorder failed: {e!r}")

    async def aclose(self):
        """Close the upstream client."""
        if self.client:
            try:
                await self.client.aclose()
            except Exception as e:
                logger.error(f"Error closing weather client: {e}")

    async def __aenter__(self):
        """Async context manager entry."""
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        """Async context manager exit."""
        await self.aclose()
