"""Provider-agnostic weather interface."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any


class WeatherProvider(ABC):
    """Base contract for providers that return one raw forecast payload per query."""

    provider_name: str

    @abstractmethod
    async def fetch(self, query: str) -> dict[str, Any]:
        """Issue exactly one request for `query` and return the raw payload.

        Raises `ProviderError` on transport, status, or shape failures.
        """

    @abstractmethod
    async def aclose(self) -> None:
        """Release provider resources."""
