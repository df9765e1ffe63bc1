"""Weather provider integration, normalization, and fallback."""

from .base import WeatherProvider
from .mock import MockWeatherGenerator
from .models import (
    CurrentConditions,
    ForecastDay,
    Location,
    WeatherCondition,
    WeatherSnapshot,
)
from .normalizer import normalize
from .openweather import OpenWeatherClient
from .service import WeatherResult, WeatherService

__all__ = [
    "CurrentConditions",
    "ForecastDay",
    "Location",
    "MockWeatherGenerator",
    "OpenWeatherClient",
    "WeatherCondition",
    "WeatherProvider",
    "WeatherResult",
    "WeatherService",
    "WeatherSnapshot",
    "normalize",
]
