"""Data models for the city weather service."""

import datetime
from enum import Enum
from typing import Generic, List, Optional, TypeVar

from pydantic import BaseModel, ConfigDict, Field, model_validator

T = TypeVar("T")


class Coordinates(BaseModel):
    """Geocoded location."""
    model_config = ConfigDict(frozen=True)

    latitude: float = Field(..., ge=-90, le=90, description="Latitude in decimal degrees")
    longitude: float = Field(..., ge=-180, le=180, description="Longitude in decimal degrees")


class CurrentWeather(BaseModel):
    """Current weather for a city."""
    city: str = Field(..., description="City name")
    temperature_c: Optional[float] = Field(None, description="Temperature in Celsius")
    wind_speed_kmh: Optional[float] = Field(None, description="Wind speed in km/h")
    wind_direction_deg: Optional[float] = Field(None, description="Wind direction in degrees")
    condition_code: Optional[int] = Field(None, description="WMO weather code")
    observed_at: Optional[datetime.datetime] = Field(None, description="Observation time")


class ForecastDay(BaseModel):
    """Single day of a multi-day forecast."""
    date: datetime.date = Field(..., description="Calendar date")
    min_temp_c: Optional[float] = Field(None, description="Minimum temperature in Celsius")
    max_temp_c: Optional[float] = Field(None, description="Maximum temperature in Celsius")
    condition_code: Optional[int] = Field(None, description="WMO weather code")


class Source(str, Enum):
    """Provenance of resolved weather data."""
    UPSTREAM = "upstream"
    MOCK = "mock"


class ResolvedResult(BaseModel, Generic[T]):
    """Weather data tagged with its provenance."""
    source: Source = Field(..., description="Where the data came from")
    note: Optional[str] = Field(None, description="Why mock data was returned")
    data: T = Field(..., description="Resolved weather data")

    @model_validator(mode="after")
    def check_note_matches_source(self):
        if self.source is Source.MOCK and not self.note:
            raise ValueError("mock results must carry a note")
        if self.source is Source.UPSTREAM and self.note is not None:
            raise ValueError("upstream results must not carry a note")
        return self


class GeocodingResult(BaseModel):
    """Single candidate from the geocoding API."""
    latitude: float
    longitude: float
    name: Optional[str] = None
    country: Optional[str] = None


class GeocodingResponse(BaseModel):
    """Raw response from the Open-Meteo geocoding API."""
    results: Optional[List[GeocodingResult]] = Field(None, description="Candidate matches")
