"""Randomized fallback snapshots with a fixed shape.

Values are drawn from plausible ranges so the presentation layer never sees
NaN or out-of-range numbers; they make no claim about real weather.

Documented ranges (Celsius is canonical, Fahrenheit is always derived):

- current temperature 10-40 C, feels-like within 3 C of it
- humidity 40-80 %
- wind 5-25 km/h, pressure 1000-1050 mb, UV index 1-10, visibility 5-15 km
- daily minimum 5-20 C, maximum 3-15 C above the minimum
- daily wind maximum 10-35 km/h, precipitation 0-10 mm
"""

from __future__ import annotations

import asyncio
import random
from collections.abc import Awaitable, Callable
from datetime import UTC, date, datetime, timedelta

from .models import (
    MAX_FORECAST_DAYS,
    CurrentConditions,
    ForecastDay,
    Location,
    WeatherCondition,
    WeatherSnapshot,
)
from .units import celsius_to_fahrenheit, kph_to_mph, mm_to_inches

DEFAULT_DELAY_SECONDS = 1.0

_ICON_TEMPLATE = "//cdn.weatherapi.com/weather/64x64/day/{icon}.png"
MOCK_CONDITIONS = (
    ("Sunny", 113, 1000),
    ("Partly cloudy", 116, 1003),
    ("Cloudy", 119, 1006),
    ("Light rain", 296, 1063),
)
_WIND_DIRECTIONS = ("N", "NE", "E", "SE", "S", "SW", "W", "NW")


def _utc_now() -> datetime:
    return datetime.now(UTC)


class MockWeatherGenerator:
    """Produces a complete snapshot for any query without I/O.

    `rng`, `sleep`, and `now` are injectable so tests can pin values and
    skip the artificial latency.
    """

    def __init__(
        self,
        rng: random.Random | None = None,
        delay_seconds: float = DEFAULT_DELAY_SECONDS,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
        now: Callable[[], datetime] = _utc_now,
    ) -> None:
        self._rng = rng or random.Random()
        self._delay_seconds = delay_seconds
        self._sleep = sleep
        self._now = now

    async def generate(self, query: str) -> WeatherSnapshot:
        """Return a fallback snapshot named after `query` verbatim."""
        if self._delay_seconds > 0:
            await self._sleep(self._delay_seconds)
        return self.build(query)

    def build(self, query: str) -> WeatherSnapshot:
        """Synchronous core of `generate`, without the simulated latency."""
        now = self._now()
        today = now.date()
        return WeatherSnapshot(
            source="mock",
            location=Location(
                name=query,
                region="Demo Region",
                country="Demo Country",
                latitude=40.7128,
                longitude=-74.0060,
                local_time_iso=now.isoformat(),
            ),
            current=self._current(),
            forecast_days=tuple(
                self._day(today + timedelta(days=offset)) for offset in range(MAX_FORECAST_DAYS)
            ),
        )

    def _condition(self) -> WeatherCondition:
        text, icon, code = self._rng.choice(MOCK_CONDITIONS)
        return WeatherCondition(text=text, icon_url=_ICON_TEMPLATE.format(icon=icon), code=code)

    def _current(self) -> CurrentConditions:
        rng = self._rng
        temp_c = float(rng.randint(10, 40))
        feels_like_c = temp_c + rng.uniform(-3.0, 3.0)
        wind_kph = float(rng.randint(5, 25))
        return CurrentConditions(
            temp_c=temp_c,
            temp_f=celsius_to_fahrenheit(temp_c),
            condition=self._condition(),
            humidity_pct=float(rng.randint(40, 80)),
            wind_kph=wind_kph,
            wind_mph=kph_to_mph(wind_kph),
            wind_direction=rng.choice(_WIND_DIRECTIONS),
            pressure_mb=float(rng.randint(1000, 1050)),
            feels_like_c=feels_like_c,
            feels_like_f=celsius_to_fahrenheit(feels_like_c),
            uv_index=float(rng.randint(1, 10)),
            visibility_km=float(rng.randint(5, 15)),
        )

    def _day(self, day: date) -> ForecastDay:
        rng = self._rng
        min_c = float(rng.randint(5, 20))
        max_c = min_c + rng.randint(3, 15)
        avg_c = (min_c + max_c) / 2
        wind_kph = float(rng.randint(10, 35))
        precip_mm = float(rng.randint(0, 10))
        return ForecastDay(
            date=day,
            max_temp_c=max_c,
            max_temp_f=celsius_to_fahrenheit(max_c),
            min_temp_c=min_c,
            min_temp_f=celsius_to_fahrenheit(min_c),
            avg_temp_c=avg_c,
            avg_temp_f=celsius_to_fahrenheit(avg_c),
            max_wind_kph=wind_kph,
            max_wind_mph=kph_to_mph(wind_kph),
            avg_humidity_pct=float(rng.randint(40, 80)),
            total_precip_mm=precip_mm,
            total_precip_in=mm_to_inches(precip_mm),
            condition=self._condition(),
        )
