"""Synthetic weather data used when real data is unavailable."""

import random
from datetime import date, datetime, timedelta, timezone
from typing import List, Optional

from city_weather.weather.models import CurrentWeather, ForecastDay

# Clear sky, partly cloudy, slight rain, overcast, mainly clear
MOCK_CONDITION_CODES = (0, 2, 61, 3, 1)
MOCK_FORECAST_DAYS = 5


class MockDataProvider:
    """Generates plausible current and forecast records for any city."""

    def __init__(self, rng: Optional[random.Random] = None):
        """Initialize the provider.

        Args:
            rng: Random generator (pass a seeded one for reproducible output)
        """
        self.rng = rng or random.Random()

    def mock_current(self, city: str) -> CurrentWeather:
        """Synthesize current weather for a city."""
        return CurrentWeather(
            city=city,
            temperature_c=round(self.rng.uniform(15, 35), 1),
            wind_speed_kmh=round(self.rng.uniform(5, 25), 1),
            wind_direction_deg=float(self.rng.randrange(0, 360)),
            condition_code=self.rng.choice(MOCK_CONDITION_CODES),
            observed_at=datetime.now(timezone.utc).replace(microsecond=0)
        )

    def mock_forecast(self, city: str, start: Optional[date] = None) -> List[ForecastDay]:
        """Synthesize a forecast of consecutive days starting today.

        Args:
            city: City name (forecast values do not depend on it)
            start: First forecast day, defaults to today

        Returns:
            Five forecast days with min_temp_c <= max_temp_c
        """
        first_day = start or date.today()
        forecast = []
        for offset in range(MOCK_FORECAST_DAYS):
            min_temp = round(self.rng.uniform(10, 20), 1)
            max_temp = round(min_temp + self.rng.uniform(3, 12), 1)
            forecast.append(ForecastDay(
                date=first_day + timedelta(days=offset),
                min_temp_c=min_temp,
                max_temp_c=max_temp,
                condition_code=MOCK_CONDITION_CODES[offset % len(MOCK_CONDITION_CODES)]
            ))
        return forecast
