"""API endpoints for the city weather service."""

import logging
from typing import AsyncGenerator, List

from fastapi import APIRouter, Depends, HTTPException, Query
from fastapi.responses import PlainTextResponse

from city_weather.config import LOG_FILE, PORT, WeatherSettings, get_settings
from city_weather.logging_config import read_log_tail
from city_weather.weather.errors import InvalidInput
from city_weather.weather.models import CurrentWeather, ForecastDay, ResolvedResult
from city_weather.weather.service import WeatherResolver

logger = logging.getLogger(__name__)

router = APIRouter(tags=["weather"])

NO_LOGS_MESSAGE = "No logs available yet"


async def get_weather_resolver(
    settings: WeatherSettings = Depends(get_settings)
) -> AsyncGenerator[WeatherResolver, None]:
    """Dependency yielding a per-request resolver that is closed afterwards."""
    async with WeatherResolver(settings) as resolver:
        yield resolver


@router.get("/current", response_model=ResolvedResult[CurrentWeather])
async def get_current_weather(
    city: str = Query("", description="City name, e.g. 'Tokyo' or 'in Tokyo'"),
    resolver: WeatherResolver = Depends(get_weather_resolver)
) -> ResolvedResult[CurrentWeather]:
    """Get current weather for a city.

    Args:
        city: City name, optionally prefixed with "in", "at", "near" or "in the"

    Returns:
        Current weather tagged with its source

    Raises:
        HTTPException: If the city name is empty
    """
    try:
        result = await resolver.resolve_current(city)
    except InvalidInput as e:
        logger.warning(f"Rejected current weather request: {e}")
        raise HTTPException(status_code=400, detail=str(e))

    logger.info(f"Served current weather for '{city}' from {result.source.value}")
    return result


@router.get("/forecast", response_model=ResolvedResult[List[ForecastDay]])
async def get_forecast(
    city: str = Query("", description="City name, e.g. 'Tokyo' or 'in Tokyo'"),
    resolver: WeatherResolver = Depends(get_weather_resolver)
) -> ResolvedResult[List[ForecastDay]]:
    """Get the daily forecast for a city.

    Raises:
        HTTPException: If the city name is empty
    """
    try:
        result = await resolver.resolve_forecast(city)
    except InvalidInput as e:
        logger.warning(f"Rejected forecast request: {e}")
        raise HTTPException(status_code=400, detail=str(e))

    logger.info(f"Served {len(result.data)}-day forecast for '{city}' from {result.source.value}")
    return result


@router.get("/health")
async def health_check() -> dict:
    """Health check endpoint."""
    return {"status": "ok", "service": "weather-service", "port": PORT}


@router.get("/logs", response_class=PlainTextResponse)
async def get_logs(
    max_lines: int = Query(100, ge=1, le=5000, description="Number of trailing log lines")
) -> str:
    """Return the tail of the service log file."""
    logs = read_log_tail(LOG_FILE, max_lines)
    return logs or NO_LOGS_MESSAGE


@router.get("/info")
async def get_service_info(settings: WeatherSettings = Depends(get_settings)) -> dict:
    """Get service information.

    Returns:
        Service description, configured upstreams and retry policy
    """
    return {
        "service": "City Weather Service",
        "version": "0.1.0",
        "upstreams": {
            "geocoding": settings.geo_api_base,
            "weather": settings.weather_api_base
        },
        "retry": {
            "attempts": settings.retry_attempts,
            "base_delay_ms": settings.retry_base_delay_ms,
            "timeout_seconds": settings.timeout_seconds
        },
        "endpoints": {
            "current": "/current?city=<cityname>",
            "forecast": "/forecast?city=<cityname>",
            "logs": "/logs"
        },
        "data_source": "Open-Meteo, with mock fallback"
    }
