"""Configuration settings for the city weather service."""

import os
from functools import lru_cache
from typing import Final

from dotenv import load_dotenv
from pydantic import BaseModel, ConfigDict, Field

load_dotenv()

# Upstream API configuration (Open-Meteo)
GEO_API_BASE: str = os.getenv("GEO_API_BASE", "https://geocoding-api.open-meteo.com/v1")
WEATHER_API_BASE: str = os.getenv("WEATHER_API_BASE", "https://api.open-meteo.com/v1")
USER_AGENT: Final[str] = "CityWeatherService/0.1 (user@example.com)"

# Keep upstream timeouts short so a dead provider falls back to mock data quickly
API_TIMEOUT_SECONDS: float = float(os.getenv("API_TIMEOUT_MS", "1500")) / 1000
WEATHER_GEOCODE_ALT: bool = os.getenv("WEATHER_GEOCODE_ALT", "0").lower() in ("1", "true")
FORECAST_DAYS: int = int(os.getenv("FORECAST_DAYS", "5"))

# Retry configuration
RETRY_ATTEMPTS: int = int(os.getenv("RETRY_ATTEMPTS", "3"))
RETRY_BASE_DELAY_MS: int = int(os.getenv("RETRY_BASE_DELAY_MS", "200"))

# Server configuration
HOST: str = os.getenv("HOST", "0.0.0.0")
PORT: int = int(os.getenv("PORT", "3001"))
DEBUG: bool = os.getenv("DEBUG", "false").lower() == "true"

# Logging configuration
LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO").upper()
LOG_FILE: str = os.getenv("LOG_FILE", os.path.join("logs", "weather-service.log"))

# Default city for the interactive client
DEFAULT_CITY: Final[str] = "Chennai"


class WeatherSettings(BaseModel):
    """Settings handed to the resolution pipeline at construction time."""
    model_config = ConfigDict(frozen=True, validate_default=True)

    geo_api_base: str = Field(GEO_API_BASE, description="Geocoding API base URL")
    weather_api_base: str = Field(WEATHER_API_BASE, description="Forecast API base URL")
    user_agent: str = Field(USER_AGENT, description="User-Agent header for upstream requests")
    timeout_seconds: float = Field(API_TIMEOUT_SECONDS, gt=0, description="Per-call upstream timeout")
    alt_geocode: bool = Field(WEATHER_GEOCODE_ALT, description="Try broader geocoding lookups on a miss")
    forecast_days: int = Field(FORECAST_DAYS, ge=1, le=16, description="Days requested from the forecast API")
    retry_attempts: int = Field(RETRY_ATTEMPTS, ge=1, description="Total attempts per upstream fetch")
    retry_base_delay_ms: int = Field(RETRY_BASE_DELAY_MS, ge=0, description="Linear backoff step in milliseconds")


@lru_cache(maxsize=1)
def get_settings() -> WeatherSettings:
    """Build the settings object once from the environment-derived constants."""
    return WeatherSettings()
