"""OpenWeatherMap (api.openweathermap.org) forecast client."""

from __future__ import annotations

import asyncio
import logging
from typing import Any

import httpx

from ..config import Settings
from ..exceptions import ProviderError
from ..redaction import sanitize_text
from .base import WeatherProvider


class OpenWeatherClient(WeatherProvider):
    """Fetches raw 5-day/3-hour forecast payloads for a location query.

    Exactly one attempt is made per call; retry policy belongs to the caller.
    httpx applies its timeout to each connect/read/write step, so the whole
    request, body included, is also bounded by `weather_timeout_seconds`.
    """

    provider_name = "openweathermap"

    def __init__(
        self,
        settings: Settings,
        logger: logging.Logger,
        http_client: httpx.AsyncClient | None = None,
    ) -> None:
        self.settings = settings
        self.logger = logger
        self._owns_client = http_client is None
        self._client = http_client or httpx.AsyncClient(
            base_url=str(settings.openweather_base_url).rstrip("/") + "/",
            timeout=settings.weather_timeout_seconds,
            headers={
                "Accept": "application/json",
                "User-Agent": "city-weather/0.1",
            },
        )

    async def __aenter__(self) -> OpenWeatherClient:
        return self

    async def __aexit__(self, exc_type: Any, exc: Any, exc_tb: Any) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.aclose()

    async def fetch(self, query: str) -> dict[str, Any]:
        """Fetch the raw forecast payload for `query`."""
        params = {"q": query, "appid": self.settings.openweather_api_key or ""}
        try:
            async with asyncio.timeout(self.settings.weather_timeout_seconds):
                response = await self._client.get("forecast", params=params)
            response.raise_for_status()
        except httpx.HTTPStatusError as exc:
            status = exc.response.status_code
            kind = "not_found" if status == 404 else "network"
            raise ProviderError(
                f"OpenWeatherMap forecast failed with status {status}: "
                f"{sanitize_text(exc.response.text[:300])}",
                kind=kind,
                status_code=status,
            ) from exc
        except (httpx.TimeoutException, TimeoutError) as exc:
            raise ProviderError(
                f"OpenWeatherMap forecast timed out after "
                f"{self.settings.weather_timeout_seconds:g}s.",
                kind="timeout",
            ) from exc
        except httpx.HTTPError as exc:
            raise ProviderError(
                f"OpenWeatherMap forecast request failed: {sanitize_text(str(exc))}",
                kind="network",
            ) from exc

        try:
            payload = response.json()
        except ValueError as exc:
            raise ProviderError(
                "OpenWeatherMap forecast returned non-JSON response.",
                kind="malformed",
                status_code=response.status_code,
            ) from exc

        if not isinstance(payload, dict):
            raise ProviderError(
                f"OpenWeatherMap forecast returned unexpected payload type "
                f"{type(payload).__name__}.",
                kind="malformed",
                status_code=response.status_code,
            )
        # The provider also reports lookup failures in-band as a string "cod".
        if str(payload.get("cod", "200")) == "404":
            raise ProviderError(
                f"OpenWeatherMap could not resolve location: {payload.get('message', query)}",
                kind="not_found",
                status_code=404,
            )
        if not isinstance(payload.get("list"), list) or not isinstance(payload.get("city"), dict):
            raise ProviderError(
                "OpenWeatherMap forecast payload missing 'list' or 'city'.",
                kind="malformed",
                status_code=response.status_code,
            )

        self.logger.debug(
            "OpenWeatherMap forecast fetched",
            extra={"context": {"query": query, "samples": len(payload["list"])}},
        )
        return payload
