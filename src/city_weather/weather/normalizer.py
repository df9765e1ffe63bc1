"""Normalization of OpenWeatherMap 5-day/3-hour forecast payloads.

`normalize` is a pure function: it reads the raw payload, never mutates it,
and either returns a fully populated `WeatherSnapshot` or raises
`NormalizationError`. Partial snapshots are never produced.

Samples are grouped by the date portion of `dt_txt` exactly as the provider
reports it; no timezone conversion is applied on top of that.
"""

from __future__ import annotations

import math
from collections.abc import Mapping
from dataclasses import dataclass
from datetime import UTC, date, datetime
from statistics import fmean
from typing import Any

from pydantic import ValidationError

from ..exceptions import NormalizationError
from .models import (
    MAX_FORECAST_DAYS,
    CurrentConditions,
    ForecastDay,
    Location,
    WeatherCondition,
    WeatherSnapshot,
)
from .units import (
    degrees_to_compass,
    kelvin_to_celsius,
    kelvin_to_fahrenheit,
    meters_to_km,
    mm_to_inches,
    mps_to_kph,
    mps_to_mph,
)

ICON_URL_TEMPLATE = "//openweathermap.org/img/wn/{icon}@2x.png"


@dataclass(frozen=True, slots=True)
class _Sample:
    timestamp: datetime
    day: date
    temp_k: float
    temp_min_k: float | None
    temp_max_k: float | None
    feels_like_k: float | None
    humidity_pct: float | None
    pressure_mb: float | None
    wind_mps: float | None
    wind_deg: float | None
    visibility_m: float | None
    precip_mm: float | None
    condition: WeatherCondition


def icon_url(icon: str) -> str:
    """Template a provider icon identifier into the protocol-relative CDN path."""
    return ICON_URL_TEMPLATE.format(icon=icon)


def normalize(raw: Mapping[str, Any]) -> WeatherSnapshot:
    """Convert a raw forecast payload into the internal snapshot model."""
    if not isinstance(raw, Mapping):
        raise NormalizationError(
            f"Forecast payload must be an object, got {type(raw).__name__}.",
            field="payload",
        )

    city = _require_mapping(raw.get("city"), "city")
    raw_samples = raw.get("list")
    if not isinstance(raw_samples, list) or not raw_samples:
        raise NormalizationError(
            "Forecast payload missing non-empty 'list' of samples.", field="list"
        )

    samples = [_parse_sample(item, f"list[{index}]") for index, item in enumerate(raw_samples)]
    # min() keeps the first of equal timestamps, so ties resolve in arrival order.
    current_sample = min(samples, key=lambda sample: sample.timestamp)

    try:
        return WeatherSnapshot(
            source="provider",
            location=_normalize_location(city, current_sample),
            current=_normalize_current(current_sample),
            forecast_days=tuple(_aggregate_days(samples)),
        )
    except ValidationError as exc:
        raise NormalizationError(
            f"Normalized snapshot failed validation: {exc}", field="snapshot"
        ) from exc


def group_by_day(samples: list[_Sample]) -> dict[date, list[_Sample]]:
    """Bucket samples by calendar date, ascending, preserving arrival order within a day."""
    buckets: dict[date, list[_Sample]] = {}
    for sample in samples:
        buckets.setdefault(sample.day, []).append(sample)
    return {day: buckets[day] for day in sorted(buckets)}


def _aggregate_days(samples: list[_Sample]) -> list[ForecastDay]:
    buckets = group_by_day(samples)
    return [
        _aggregate_day(day, bucket)
        for day, bucket in list(buckets.items())[:MAX_FORECAST_DAYS]
    ]


def _aggregate_day(day: date, bucket: list[_Sample]) -> ForecastDay:
    temps = [sample.temp_k for sample in bucket]
    max_temps = [
        sample.temp_max_k if sample.temp_max_k is not None else sample.temp_k
        for sample in bucket
    ]
    min_temps = [
        sample.temp_min_k if sample.temp_min_k is not None else sample.temp_k
        for sample in bucket
    ]
    winds = [sample.wind_mps for sample in bucket if sample.wind_mps is not None]
    humidities = [sample.humidity_pct for sample in bucket if sample.humidity_pct is not None]
    precip = [sample.precip_mm for sample in bucket if sample.precip_mm is not None]

    max_temp = max(max_temps)
    min_temp = min(min_temps)
    avg_temp = fmean(temps)
    max_wind = max(winds, default=0.0)
    total_precip_mm = sum(precip, 0.0)

    return ForecastDay(
        date=day,
        max_temp_c=kelvin_to_celsius(max_temp),
        max_temp_f=kelvin_to_fahrenheit(max_temp),
        min_temp_c=kelvin_to_celsius(min_temp),
        min_temp_f=kelvin_to_fahrenheit(min_temp),
        avg_temp_c=kelvin_to_celsius(avg_temp),
        avg_temp_f=kelvin_to_fahrenheit(avg_temp),
        max_wind_kph=mps_to_kph(max_wind),
        max_wind_mph=mps_to_mph(max_wind),
        avg_humidity_pct=fmean(humidities) if humidities else 0.0,
        total_precip_mm=total_precip_mm,
        total_precip_in=mm_to_inches(total_precip_mm),
        # Conditions are categorical; the middle sample stands in for mid-day.
        condition=bucket[len(bucket) // 2].condition,
    )


def _normalize_location(city: Mapping[str, Any], current: _Sample) -> Location:
    name = _as_str(city.get("name"))
    if name is None:
        raise NormalizationError("Forecast payload missing 'city.name'.", field="city.name")
    coord = _require_mapping(city.get("coord"), "city.coord")
    latitude = _require_float(coord.get("lat"), "city.coord.lat")
    longitude = _require_float(coord.get("lon"), "city.coord.lon")
    country = _as_str(city.get("country")) or ""

    return Location(
        name=name,
        region=country,
        country=country,
        latitude=latitude,
        longitude=longitude,
        local_time_iso=current.timestamp.isoformat(),
    )


def _normalize_current(sample: _Sample) -> CurrentConditions:
    feels_like = sample.feels_like_k if sample.feels_like_k is not None else sample.temp_k
    wind = sample.wind_mps if sample.wind_mps is not None else 0.0
    return CurrentConditions(
        temp_c=kelvin_to_celsius(sample.temp_k),
        temp_f=kelvin_to_fahrenheit(sample.temp_k),
        condition=sample.condition,
        humidity_pct=sample.humidity_pct if sample.humidity_pct is not None else 0.0,
        wind_kph=mps_to_kph(wind),
        wind_mph=mps_to_mph(wind),
        wind_direction=degrees_to_compass(sample.wind_deg) if sample.wind_deg is not None else "",
        pressure_mb=sample.pressure_mb if sample.pressure_mb is not None else 0.0,
        feels_like_c=kelvin_to_celsius(feels_like),
        feels_like_f=kelvin_to_fahrenheit(feels_like),
        uv_index=0.0,
        visibility_km=meters_to_km(sample.visibility_m) if sample.visibility_m is not None else 0.0,
    )


def _parse_sample(item: Any, path: str) -> _Sample:
    entry = _require_mapping(item, path)
    timestamp, day = _parse_timestamp(entry, path)
    main = _require_mapping(entry.get("main"), f"{path}.main")
    wind = entry.get("wind") if isinstance(entry.get("wind"), Mapping) else {}

    return _Sample(
        timestamp=timestamp,
        day=day,
        temp_k=_require_float(main.get("temp"), f"{path}.main.temp"),
        temp_min_k=_as_float(main.get("temp_min")),
        temp_max_k=_as_float(main.get("temp_max")),
        feels_like_k=_as_float(main.get("feels_like")),
        humidity_pct=_as_float(main.get("humidity")),
        pressure_mb=_as_float(main.get("pressure")),
        wind_mps=_as_float(wind.get("speed")),
        wind_deg=_as_float(wind.get("deg")),
        visibility_m=_as_float(entry.get("visibility")),
        precip_mm=_precip_volume(entry),
        condition=_parse_condition(entry.get("weather"), f"{path}.weather"),
    )


def _parse_timestamp(entry: Mapping[str, Any], path: str) -> tuple[datetime, date]:
    epoch = _as_float(entry.get("dt"))
    dt_txt = _as_str(entry.get("dt_txt"))
    if epoch is None and dt_txt is None:
        raise NormalizationError(f"Sample {path} has neither 'dt' nor 'dt_txt'.", field=f"{path}.dt")

    try:
        if epoch is not None:
            timestamp = datetime.fromtimestamp(epoch, UTC)
        else:
            timestamp = datetime.fromisoformat(dt_txt).replace(tzinfo=UTC)
        # dt_txt carries the provider's own calendar date; prefer it for grouping.
        day = date.fromisoformat(dt_txt.split(" ")[0]) if dt_txt else timestamp.date()
    except (ValueError, OverflowError, OSError) as exc:
        raise NormalizationError(
            f"Sample {path} has an unparseable timestamp.", field=f"{path}.dt_txt"
        ) from exc
    return timestamp, day


def _parse_condition(value: Any, path: str) -> WeatherCondition:
    if not isinstance(value, list) or not value:
        raise NormalizationError(f"Sample missing '{path}' condition list.", field=path)
    block = _require_mapping(value[0], f"{path}[0]")
    text = _as_str(block.get("description")) or _as_str(block.get("main"))
    if text is None:
        raise NormalizationError(
            f"Sample condition missing '{path}[0].description'.", field=f"{path}[0].description"
        )
    code = block.get("id")
    if not isinstance(code, int) or isinstance(code, bool):
        raise NormalizationError(
            f"Sample condition missing '{path}[0].id'.", field=f"{path}[0].id"
        )
    icon = _as_str(block.get("icon"))
    return WeatherCondition(text=text, icon_url=icon_url(icon) if icon else "", code=code)


def _precip_volume(entry: Mapping[str, Any]) -> float | None:
    volumes = []
    for key in ("rain", "snow"):
        block = entry.get(key)
        if isinstance(block, Mapping):
            volume = _as_float(block.get("3h"))
            if volume is not None:
                volumes.append(volume)
    return sum(volumes) if volumes else None


def _require_mapping(value: Any, field: str) -> Mapping[str, Any]:
    if not isinstance(value, Mapping):
        raise NormalizationError(f"Forecast payload missing '{field}' object.", field=field)
    return value


def _require_float(value: Any, field: str) -> float:
    parsed = _as_float(value)
    if parsed is None:
        raise NormalizationError(
            f"Forecast payload missing finite numeric '{field}'.", field=field
        )
    return parsed


def _as_str(value: Any) -> str | None:
    if isinstance(value, str) and value.strip():
        return value.strip()
    return None


def _as_float(value: Any) -> float | None:
    if isinstance(value, bool):
        return None
    # NaN and Infinity parse from provider JSON but are treated as absent.
    if isinstance(value, (int, float)) and math.isfinite(value):
        return float(value)
    return None
