"""HTTP client for the Open-Meteo geocoding and forecast APIs."""

import asyncio
import logging
from typing import Any, Dict, Optional

import httpx
from pydantic import ValidationError

from city_weather.config import WeatherSettings
from city_weather.weather.errors import UpstreamHttpError, UpstreamUnavailable
from city_weather.weather.models import Coordinates, GeocodingResponse

logger = logging.getLogger(__name__)

DAILY_FIELDS = "temperature_2m_max,temperature_2m_min,weathercode"


class OpenMeteoClient:
    """Async client for geocoding a city and fetching its weather."""

    def __init__(self, settings: WeatherSettings, client: Optional[httpx.AsyncClient] = None):
        """Initialize the weather client.

        Args:
            settings: Upstream base URLs, timeout and geocoding options
            client: HTTP client to use (creates one if None)
        """
        self.settings = settings
        self.client = client or httpx.AsyncClient(
            headers={"User-Agent": settings.user_agent},
            timeout=settings.timeout_seconds
        )

    async def resolve_coordinates(self, city: str) -> Optional[Coordinates]:
        """Look up the coordinates of a city.

        Args:
            city: Sanitized city name

        Returns:
            Coordinates of the best match, or None if the city is unknown,
            the lookup timed out or the provider answered with an error status

        Raises:
            UpstreamUnavailable: On transport failures other than timeouts
        """
        coords = await self._geocode(city, {"count": 1})

        if coords is None and self.settings.alt_geocode:
            logger.info(f"Trying broader geocoding lookup for '{city}'")
            coords = await self._geocode(city, {"count": 10})
            if coords is None:
                coords = await self._geocode(city, {"count": 10, "language": "en"})

        if coords is None:
            logger.info(f"No geocoding results for '{city}'")
        return coords

    async def _geocode(self, city: str, extra_params: Dict[str, Any]) -> Optional[Coordinates]:
        url = f"{self.settings.geo_api_base}/search"
        params = {"name": city, **extra_params}

        try:
            response = await self._get(url, params)
            response.raise_for_status()
            data = GeocodingResponse(**response.json())
            if not data.results:
                return None
            best = data.results[0]
            coords = Coordinates(latitude=best.latitude, longitude=best.longitude)

        except (httpx.TimeoutException, asyncio.TimeoutError) as e:
            logger.warning(f"Geocoding timed out for '{city}': {e!r}")
            return None
        except httpx.HTTPStatusError as e:
            logger.warning(f"Geocoding HTTP {e.response.status_code} for '{city}'")
            return None
        except httpx.RequestError as e:
            logger.error(f"Geocoding request failed for '{city}': {e!r}")
            raise UpstreamUnavailable(f"Geocoding service unreachable: {e!r}") from e
        except (ValueError, TypeError, ValidationError) as e:
            logger.warning(f"Invalid geocoding response for '{city}': {e}")
            return None

        logger.info(f"Geocoded '{city}' to ({coords.latitude}, {coords.longitude})")
        return coords

    async def fetch_current(self, coords: Coordinates) -> Dict[str, Any]:
        """Fetch current weather for coordinates.

        Raises:
            UpstreamHttpError: On a non-2xx response
            UpstreamUnavailable: On timeouts, transport failures or a non-JSON body
        """
        params = {
            "latitude": coords.latitude,
            "longitude": coords.longitude,
            "current_weather": "true"
        }
        return await self._get_forecast_json(params)

    async def fetch_forecast(self, coords: Coordinates) -> Dict[str, Any]:
        """Fetch the daily forecast for coordinates.

        Raises:
            UpstreamHttpError: On a non-2xx response
            UpstreamUnavailable: On timeouts, transport failures or a non-JSON body
        """
        params = {
            "latitude": coords.latitude,
            "longitude": coords.longitude,
            "daily": DAILY_FIELDS,
            "forecast_days": self.settings.forecast_days,
            "timezone": "auto"
        }
        return await self._get_forecast_json(params)

    async def _get_forecast_json(self, params: Dict[str, Any]) -> Dict[str, Any]:
        url = f"{self.settings.weather_api_base}/forecast"
        logger.info(f"Fetching weather for lat={params['latitude']}, lon={params['longitude']}")

        try:
            response = await self._get(url, params)
        except (httpx.TimeoutException, asyncio.TimeoutError) as e:
            logger.error(f"Weather request timed out: {e!r}")
            raise UpstreamUnavailable("Weather service timed out") from e
        except httpx.RequestError as e:
            logger.error(f"Request error to weather API: {e!r}")
            raise UpstreamUnavailable(f"Weather service unreachable: {e!r}") from e

        if not response.is_success:
            logger.error(f"HTTP error from weather API: {response.status_code} - {response.text}")
            raise UpstreamHttpError(response.status_code, str(response.url))

        try:
            return response.json()
        except ValueError as e:
            logger.error(f"Weather API returned invalid JSON: {e}")
            raise UpstreamUnavailable("Weather service returned invalid JSON") from e

    async def _get(self, url: str, params: Dict[str, Any]) -> httpx.Response:
        # httpx bounds each connect/read step; wait_for bounds the whole call
        return await asyncio.wait_for(
            self.client.get(url, params=params, timeout=self.settings.timeout_seconds),
            self.settings.timeout_seconds
        )

    async def aclose(self):
        """Close the async HTTP client."""
        await self.client.aclose()

    async def __aenter__(self):
        """Async context manager entry."""
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        """Async context manager exit."""
        await self.aclose()
