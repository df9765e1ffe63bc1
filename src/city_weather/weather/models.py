"""Typed models for normalized weather snapshots."""

from __future__ import annotations

import datetime
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, model_validator

MAX_FORECAST_DAYS = 3

SnapshotSource = Literal["provider", "mock"]


class _FrozenModel(BaseModel):
    model_config = ConfigDict(frozen=True)


class WeatherCondition(_FrozenModel):
    """Categorical condition with a protocol-relative icon URL."""

    text: str
    icon_url: str
    code: int


class Location(_FrozenModel):
    """Identity of the queried place; `name` is the display de-duplication key."""

    name: str
    region: str
    country: str
    latitude: float
    longitude: float
    local_time_iso: str


class CurrentConditions(_FrozenModel):
    """Single point-in-time reading."""

    temp_c: float
    temp_f: float
    condition: WeatherCondition
    humidity_pct: float
    wind_kph: float
    wind_mph: float
    wind_direction: str = ""
    pressure_mb: float = 0.0
    feels_like_c: float
    feels_like_f: float
    uv_index: float = 0.0
    visibility_km: float = 0.0


class HourForecast(_FrozenModel):
    """Hourly breakdown entry. No current provider populates these."""

    time: str
    temp_c: float
    temp_f: float
    condition: WeatherCondition
    humidity_pct: float
    wind_kph: float
    wind_mph: float


class ForecastDay(_FrozenModel):
    """Aggregates over every sample that shares one calendar date."""

    date: datetime.date
    max_temp_c: float
    max_temp_f: float
    min_temp_c: float
    min_temp_f: float
    avg_temp_c: float
    avg_temp_f: float
    max_wind_kph: float
    max_wind_mph: float
    avg_humidity_pct: float
    total_precip_mm: float = 0.0
    total_precip_in: float = 0.0
    condition: WeatherCondition
    hours: tuple[HourForecast, ...] = ()


class WeatherSnapshot(_FrozenModel):
    """One fully-populated weather result for one location."""

    source: SnapshotSource
    location: Location
    current: CurrentConditions
    forecast_days: tuple[ForecastDay, ...] = Field(min_length=1, max_length=MAX_FORECAST_DAYS)

    @model_validator(mode="after")
    def validate_day_order(self) -> WeatherSnapshot:
        """Forecast dates must be unique and strictly increasing."""
        dates = [day.date for day in self.forecast_days]
        for previous, current in zip(dates, dates[1:]):
            if current <= previous:
                raise ValueError(
                    f"forecast_days dates must be strictly increasing; got {previous} then {current}."
                )
        return self
