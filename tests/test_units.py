"""Unit conversion helpers."""

from __future__ import annotations

import pytest

from city_weather.weather.units import (
    celsius_to_fahrenheit,
    degrees_to_compass,
    kelvin_to_celsius,
    kelvin_to_fahrenheit,
    kph_to_mph,
    mm_to_inches,
    mps_to_kph,
    mps_to_mph,
)


def test_kelvin_conversions() -> None:
    assert kelvin_to_celsius(273.15) == 0
    assert kelvin_to_fahrenheit(273.15) == 32
    assert kelvin_to_fahrenheit(373.15) == pytest.approx(212.0)
    assert celsius_to_fahrenheit(-40) == -40


def test_wind_and_precip_conversions() -> None:
    assert mps_to_kph(10) == pytest.approx(36.0)
    assert mps_to_mph(10) == pytest.approx(22.3694)
    assert kph_to_mph(36.0) == pytest.approx(22.3694)
    assert mm_to_inches(25.4) == pytest.approx(1.0)


@pytest.mark.parametrize(
    ("degrees", "expected"),
    [(0, "N"), (11.24, "N"), (11.25, "NNE"), (90, "E"), (225, "SW"), (348.75, "N"), (720, "N")],
)
def test_degrees_to_compass(degrees: float, expected: str) -> None:
    assert degrees_to_compass(degrees) == expected
