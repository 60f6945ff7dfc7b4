"""Plain-text rendering of resolved weather for the tool-call transport."""

from typing import Any, List

from city_weather.weather.codes import NOT_AVAILABLE, condition_label
from city_weather.weather.models import CurrentWeather, ForecastDay, ResolvedResult, Source


def _value(value: Any, unit: str = "") -> str:
    if value is None:
        return NOT_AVAILABLE
    return f"{value}{unit}"


def _footer(result: ResolvedResult) -> List[str]:
    if result.source is Source.MOCK:
        return [f"Note: {result.note or 'mock data, not real'}"]
    return []


def format_current(result: ResolvedResult[CurrentWeather]) -> str:
    """Render current weather as a multi-line summary."""
    weather = result.data
    observed_at = weather.observed_at.isoformat() if weather.observed_at else None

    lines = [
        f"Current weather for {weather.city} (source: {result.source.value})",
        f"  Temperature: {_value(weather.temperature_c, '°C')}",
        f"  Wind speed: {_value(weather.wind_speed_kmh, ' km/h')}",
        f"  Wind direction: {_value(weather.wind_direction_deg, '°')}",
        f"  Conditions: {condition_label(weather.condition_code)}",
        f"  Observed at: {_value(observed_at)}",
    ]
    lines.extend(_footer(result))
    return "\n".join(lines)


def format_forecast(result: ResolvedResult[List[ForecastDay]], city: str) -> str:
    """Render a forecast as a multi-line summary, one line per day."""
    days = result.data

    lines = [f"{len(days)}-day forecast for {city} (source: {result.source.value})"]
    if not days:
        lines.append("  No forecast data available")
    for day in days:
        lines.append(
            f"  {day.date.isoformat()}: "
            f"{_value(day.min_temp_c, '°C')} - {_value(day.max_temp_c, '°C')}, "
            f"{condition_label(day.condition_code)}"
        )
    lines.extend(_footer(result))
    return "\n".join(lines)
