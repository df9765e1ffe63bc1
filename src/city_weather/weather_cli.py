"""Terminal presenter: search cities and render weather cards with rich."""

from __future__ import annotations

import argparse
import asyncio
import logging
import sys
from collections.abc import Iterable, Sequence
from typing import Literal

from rich.console import Console, Group
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from .config import Settings, load_settings
from .exceptions import ConfigError, InvalidQueryError, WeatherUnavailableError
from .log_setup import setup_logger
from .weather.models import ForecastDay, WeatherSnapshot
from .weather.service import WeatherService, clean_query
from .weather.units import km_to_miles

TemperatureUnit = Literal["C", "F"]


def parse_args(argv: Sequence[str] | None = None) -> argparse.Namespace:
    """Parse weather CLI arguments."""
    parser = argparse.ArgumentParser(
        description="Show current weather and a 3-day forecast for one or more cities."
    )
    parser.add_argument("cities", nargs="+", help="City names to search, e.g. London 'New York'.")
    parser.add_argument(
        "--unit",
        choices=["C", "F"],
        default=None,
        help="Temperature unit (defaults to WEATHER_DEFAULT_UNIT).",
    )
    parser.add_argument(
        "--offline",
        action="store_true",
        help="Skip the live provider and show generated demo data.",
    )
    return parser.parse_args(argv)


def dedupe_by_name(snapshots: Iterable[WeatherSnapshot]) -> list[WeatherSnapshot]:
    """Keep one card per location name; the first result wins."""
    seen: set[str] = set()
    unique: list[WeatherSnapshot] = []
    for snapshot in snapshots:
        if snapshot.location.name in seen:
            continue
        seen.add(snapshot.location.name)
        unique.append(snapshot)
    return unique


def condition_style(text: str) -> str:
    lowered = text.lower()
    if "rain" in lowered or "drizzle" in lowered:
        return "bold blue"
    if "cloud" in lowered:
        return "bold grey70"
    return "bold yellow"


def _format_day(day: ForecastDay) -> str:
    return f"{day.date:%a, %b} {day.date.day}"


def build_current_panel(snapshot: WeatherSnapshot, unit: TemperatureUnit) -> Panel:
    current = snapshot.current
    temp = current.temp_c if unit == "C" else current.temp_f
    feels_like = current.feels_like_c if unit == "C" else current.feels_like_f
    if unit == "C":
        wind = f"{round(current.wind_kph)} km/h"
        visibility = f"{current.visibility_km:g} km"
    else:
        wind = f"{round(current.wind_mph)} mph"
        visibility = f"{round(km_to_miles(current.visibility_km))} mi"
    if current.wind_direction:
        wind = f"{wind} {current.wind_direction}"

    headline = Text()
    headline.append(f"{round(temp)}°{unit}", style="bold white")
    headline.append("  ")
    headline.append(current.condition.text, style=condition_style(current.condition.text))

    details = Table.grid(padding=(0, 1))
    details.add_column(style="bold")
    details.add_column()
    details.add_row("Feels like", f"{round(feels_like)}°{unit}")
    details.add_row("Humidity", f"{round(current.humidity_pct)}%")
    details.add_row("Wind", wind)
    details.add_row("Visibility", visibility)
    details.add_row("UV Index", f"{current.uv_index:g}")

    subtitle = "demo data" if snapshot.source == "mock" else snapshot.location.local_time_iso
    return Panel(
        Group(headline, details),
        title=f"{snapshot.location.name}, {snapshot.location.country}",
        subtitle=subtitle,
        border_style="yellow" if snapshot.source == "mock" else "cyan",
    )


def build_forecast_table(days: Sequence[ForecastDay], unit: TemperatureUnit) -> Table:
    table = Table(title="Forecast")
    table.add_column("Day")
    table.add_column("High", justify="right")
    table.add_column("Low", justify="right")
    table.add_column("Wind", justify="right")
    table.add_column("Humidity", justify="right")
    table.add_column("Precip", justify="right")
    table.add_column("Condition", overflow="fold")

    for day in days:
        if unit == "C":
            high, low = day.max_temp_c, day.min_temp_c
            wind = f"{round(day.max_wind_kph)} km/h"
            precip = f"{day.total_precip_mm:.1f} mm"
        else:
            high, low = day.max_temp_f, day.min_temp_f
            wind = f"{round(day.max_wind_mph)} mph"
            precip = f"{day.total_precip_in:.2f} in"
        table.add_row(
            _format_day(day),
            f"{round(high)}°",
            f"{round(low)}°",
            wind,
            f"{round(day.avg_humidity_pct)}%",
            precip,
            Text(day.condition.text, style=condition_style(day.condition.text)),
        )
    return table


def render_snapshot(console: Console, snapshot: WeatherSnapshot, unit: TemperatureUnit) -> None:
    console.print(build_current_panel(snapshot, unit))
    console.print(build_forecast_table(snapshot.forecast_days, unit))


async def _search_all(
    service: WeatherService, queries: Sequence[str], logger: logging.Logger
) -> list[WeatherSnapshot]:
    results = await asyncio.gather(
        *(service.get_weather(query) for query in queries),
        return_exceptions=True,
    )
    snapshots: list[WeatherSnapshot] = []
    for query, result in zip(queries, results):
        if isinstance(result, WeatherUnavailableError):
            logger.error("Weather unavailable for %r: %s", query, result)
            continue
        if isinstance(result, BaseException):
            raise result
        snapshots.append(result)
    return snapshots


async def run(
    settings: Settings,
    queries: Sequence[str],
    unit: TemperatureUnit,
    console: Console,
    logger: logging.Logger,
) -> int:
    """Search every query concurrently and render one card per distinct city."""
    async with WeatherService(settings=settings, logger=logger) as service:
        snapshots = await _search_all(service, queries, logger)

    if not snapshots:
        console.print("[red]Unable to fetch weather data. Please try again.[/red]")
        return 4
    for snapshot in dedupe_by_name(snapshots):
        render_snapshot(console, snapshot, unit)
    return 0


def main(argv: Sequence[str] | None = None) -> int:
    """Run the weather search presenter."""
    args = parse_args(argv)
    console = Console()

    try:
        settings = load_settings()
    except ConfigError as exc:
        setup_logger().error("Configuration failure: %s", exc)
        return 2

    logger = setup_logger(level=settings.log_level)
    if args.offline:
        settings = settings.model_copy(update={"weather_offline": True})
    logger.debug("Loaded configuration", extra={"context": settings.safe_summary()})

    try:
        queries = [clean_query(city) for city in args.cities]
    except InvalidQueryError as exc:
        logger.error("Invalid search input: %s", exc)
        return 3

    unit: TemperatureUnit = args.unit or settings.weather_default_unit
    return asyncio.run(run(settings, queries, unit, console, logger))


if __name__ == "__main__":
    sys.exit(main())
