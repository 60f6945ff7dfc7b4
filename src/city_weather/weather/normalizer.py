"""Normalization of Open-Meteo payloads into service models."""

import logging
import math
from datetime import datetime
from typing import Any, Dict, List, Optional, Sequence

from city_weather.weather.models import CurrentWeather, ForecastDay

logger = logging.getLogger(__name__)


def _first_present(record: Dict[str, Any], *keys: str) -> Any:
    """Return the value of the first key that is present and not None."""
    for key in keys:
        value = record.get(key)
        if value is not None:
            return value
    return None


def _as_float(value: Any) -> Optional[float]:
    """Coerce to float, mapping missing, non-numeric and NaN values to None."""
    if value is None or isinstance(value, bool):
        return None
    try:
        number = float(value)
    except (TypeError, ValueError):
        return None
    if math.isnan(number) or math.isinf(number):
        return None
    return number


def _as_int(value: Any) -> Optional[int]:
    number = _as_float(value)
    return int(number) if number is not None else None


def _as_datetime(value: Any) -> Optional[datetime]:
    if isinstance(value, datetime):
        return value
    if not isinstance(value, str):
        return None
    try:
        return datetime.fromisoformat(value.replace("Z", "+00:00"))
    except ValueError:
        logger.warning(f"Ignoring unparseable observation time: {value!r}")
        return None


def normalize_current(payload: Dict[str, Any], city: Optional[str] = None) -> CurrentWeather:
    """Convert a current-weather payload into CurrentWeather.

    The payload is either the full forecast response with a nested
    "current_weather" object or the record itself.

    Args:
        payload: Raw JSON payload
        city: City name to attach; falls back to the payload's own "city"

    Returns:
        CurrentWeather with missing numeric fields set to None
    """
    if not isinstance(payload, dict):
        raise ValueError(f"Unexpected current weather payload: {type(payload).__name__}")
    record = payload.get("current_weather") or payload
    if not isinstance(record, dict):
        raise ValueError(f"Unexpected current weather record: {type(record).__name__}")

    return CurrentWeather(
        city=city or payload.get("city") or record.get("city") or "Unknown",
        temperature_c=_as_float(_first_present(record, "temperature", "temp")),
        wind_speed_kmh=_as_float(_first_present(record, "windspeed", "windSpeed")),
        wind_direction_deg=_as_float(_first_present(record, "winddirection", "windDirection")),
        condition_code=_as_int(_first_present(record, "weathercode", "weather_code")),
        observed_at=_as_datetime(_first_present(record, "time"))
    )


def normalize_forecast(payload: Dict[str, Any]) -> List[ForecastDay]:
    """Zip Open-Meteo's column-oriented daily arrays into ForecastDay rows.

    Output length is the length of the shortest of the four arrays, so a
    partial upstream response yields fewer days instead of an index error.

    Args:
        payload: Raw JSON payload, with or without the "daily" wrapper

    Returns:
        Forecast days in upstream order
    """
    if not isinstance(payload, dict):
        raise ValueError(f"Unexpected forecast payload: {type(payload).__name__}")
    daily = payload.get("daily") or payload
    if not isinstance(daily, dict):
        raise ValueError(f"Unexpected daily forecast record: {type(daily).__name__}")

    columns: List[Sequence[Any]] = [
        daily.get("time") or [],
        daily.get("temperature_2m_max") or [],
        daily.get("temperature_2m_min") or [],
        daily.get("weathercode") or daily.get("weather_code") or [],
    ]

    lengths = [len(column) for column in columns]
    if len(set(lengths)) > 1:
        logger.warning(f"Daily forecast arrays have unequal lengths {lengths}, truncating to {min(lengths)}")

    return [
        ForecastDay(
            date=day,
            max_temp_c=_as_float(max_temp),
            min_temp_c=_as_float(min_temp),
            condition_code=_as_int(code)
        )
        for day, max_temp, min_temp, code in zip(*columns)
    ]
