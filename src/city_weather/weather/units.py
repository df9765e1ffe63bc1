"""Exact unit conversions used by the normalizer and the mock generator."""

from __future__ import annotations

KELVIN_OFFSET = 273.15
MPS_TO_KPH = 3.6
MPS_TO_MPH = 2.23694
MM_PER_INCH = 25.4
KM_TO_MILES = 0.621371

_COMPASS_POINTS = (
    "N", "NNE", "NE", "ENE", "E", "ESE", "SE", "SSE",
    "S", "SSW", "SW", "WSW", "W", "WNW", "NW", "NNW",
)


def kelvin_to_celsius(kelvin: float) -> float:
    return kelvin - KELVIN_OFFSET


def celsius_to_fahrenheit(celsius: float) -> float:
    return celsius * 9 / 5 + 32


def kelvin_to_fahrenheit(kelvin: float) -> float:
    # Both fields of a temperature pair derive from the Celsius value.
    return celsius_to_fahrenheit(kelvin_to_celsius(kelvin))


def mps_to_kph(speed: float) -> float:
    return speed * MPS_TO_KPH


def mps_to_mph(speed: float) -> float:
    return speed * MPS_TO_MPH


def kph_to_mph(speed: float) -> float:
    return mps_to_mph(speed / MPS_TO_KPH)


def mm_to_inches(millimeters: float) -> float:
    return millimeters / MM_PER_INCH


def meters_to_km(meters: float) -> float:
    return meters / 1000


def km_to_miles(kilometers: float) -> float:
    return kilometers * KM_TO_MILES


def degrees_to_compass(degrees: float) -> str:
    """Map a meteorological bearing (0 = from north) to a 16-point compass name."""
    index = int((degrees % 360) / 22.5 + 0.5) % len(_COMPASS_POINTS)
    return _COMPASS_POINTS[index]
