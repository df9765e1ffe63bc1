"""Search orchestration: live provider first, mock generator as fallback."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable, Mapping
from typing import Any

from pydantic import BaseModel, ConfigDict

from ..config import Settings
from ..exceptions import (
    InvalidQueryError,
    ProviderError,
    SearchSupersededError,
    WeatherProviderError,
    WeatherUnavailableError,
)
from .base import WeatherProvider
from .mock import MockWeatherGenerator
from .models import WeatherSnapshot
from .normalizer import normalize
from .openweather import OpenWeatherClient

USER_FACING_ERROR = "Unable to fetch weather data. Please try again."


class WeatherResult(BaseModel):
    """Outcome of one search: a snapshot, or the single fatal error message."""

    model_config = ConfigDict(frozen=True)

    snapshot: WeatherSnapshot | None = None
    provider_error: str | None = None
    error: str | None = None

    @property
    def ok(self) -> bool:
        return self.snapshot is not None


def clean_query(query: str) -> str:
    """Trim a location query, rejecting empty input before any I/O."""
    cleaned = query.strip() if isinstance(query, str) else ""
    if not cleaned:
        raise InvalidQueryError("Search query must not be empty.")
    return cleaned


class WeatherService:
    """Entry point the presentation layer uses to obtain weather snapshots.

    Each search is independent: the service holds no per-search state beyond
    the handle of the most recent `search` task, which exists only so a newer
    search can cancel it.
    """

    def __init__(
        self,
        settings: Settings,
        logger: logging.Logger,
        provider: WeatherProvider | None = None,
        generator: MockWeatherGenerator | None = None,
        normalizer: Callable[[Mapping[str, Any]], WeatherSnapshot] = normalize,
    ) -> None:
        self.settings = settings
        self.logger = logger
        if provider is None and settings.provider_enabled:
            provider = OpenWeatherClient(settings=settings, logger=logger)
        self._provider = provider
        self._generator = generator or MockWeatherGenerator(
            delay_seconds=settings.mock_delay_seconds
        )
        self._normalize = normalizer
        self._inflight: asyncio.Task[WeatherSnapshot] | None = None

    async def __aenter__(self) -> WeatherService:
        return self

    async def __aexit__(self, exc_type: Any, exc: Any, exc_tb: Any) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        if self._inflight is not None and not self._inflight.done():
            self._inflight.cancel()
        if self._provider is not None:
            await self._provider.aclose()

    async def get_weather(self, query: str) -> WeatherSnapshot:
        """Return a snapshot for `query`, falling back to mock data on provider failure.

        Raises `WeatherUnavailableError` only when the fallback also fails.
        """
        result = await self.fetch_weather(query)
        if result.snapshot is None:
            raise WeatherUnavailableError(result.error or USER_FACING_ERROR)
        return result.snapshot

    async def fetch_weather(self, query: str) -> WeatherResult:
        """Two-stage lookup returning an explicit result instead of raising."""
        query = clean_query(query)
        snapshot, provider_error = await self._from_provider(query)
        if snapshot is not None:
            return WeatherResult(snapshot=snapshot)
        return await self._from_fallback(query, provider_error)

    async def search(self, query: str) -> WeatherSnapshot:
        """Run `get_weather`, cancelling any earlier search still in flight.

        The caller of a superseded search receives `SearchSupersededError`.
        """
        previous = self._inflight
        if previous is not None and not previous.done():
            previous.cancel()

        task = asyncio.create_task(self.get_weather(query))
        self._inflight = task
        try:
            return await task
        except asyncio.CancelledError:
            current = asyncio.current_task()
            if task.cancelled() and (current is None or not current.cancelling()):
                raise SearchSupersededError(f"Search for {query!r} was superseded.") from None
            raise
        finally:
            if self._inflight is task:
                self._inflight = None

    async def _from_provider(self, query: str) -> tuple[WeatherSnapshot | None, str | None]:
        if self._provider is None:
            self.logger.info(
                "Live provider disabled; using mock weather",
                extra={"context": {"query": query, "offline": self.settings.weather_offline}},
            )
            return None, "provider disabled"

        try:
            raw = await self._provider.fetch(query)
            return self._normalize(raw), None
        except WeatherProviderError as exc:
            kind = (
                exc.kind
                if isinstance(exc, ProviderError)
                else f"normalization:{getattr(exc, 'kind', 'unknown')}"
            )
            self.logger.warning(
                "Falling back to mock weather (%s): %s",
                kind,
                exc,
                extra={"context": {"query": query, "kind": kind}},
            )
            return None, f"{kind}: {exc}"
        except Exception as exc:
            self.logger.exception(
                "Unexpected provider failure; falling back to mock weather",
                extra={"context": {"query": query, "type": type(exc).__name__}},
            )
            return None, f"unexpected: {type(exc).__name__}"

    async def _from_fallback(self, query: str, provider_error: str | None) -> WeatherResult:
        try:
            snapshot = await self._generator.generate(query)
        except Exception:
            self.logger.exception(
                "Mock weather fallback failed",
                extra={"context": {"query": query, "provider_error": provider_error}},
            )
            return WeatherResult(provider_error=provider_error, error=USER_FACING_ERROR)
        return WeatherResult(snapshot=snapshot, provider_error=provider_error)
