"""Application exception classes."""

from __future__ import annotations

from typing import Literal

ProviderErrorKind = Literal["network", "timeout", "not_found", "malformed"]
NormalizationErrorKind = Literal["missing_field"]


class ConfigError(Exception):
    """Raised when configuration is invalid or incomplete."""


class InvalidQueryError(ValueError):
    """Raised when a location search query is empty after trimming."""


class WeatherProviderError(Exception):
    """Raised when weather provider requests or normalization fail.

    Everything in this family is recoverable: the service answers it with the
    mock fallback instead of surfacing it to the caller.
    """


class ProviderError(WeatherProviderError):
    """Raised for provider request failures with kind/status metadata."""

    def __init__(
        self,
        message: str,
        *,
        kind: ProviderErrorKind,
        status_code: int | None = None,
    ) -> None:
        super().__init__(message)
        self.kind = kind
        self.status_code = status_code


class NormalizationError(WeatherProviderError):
    """Raised when a raw provider payload lacks a required field."""

    def __init__(
        self,
        message: str,
        *,
        field: str,
        kind: NormalizationErrorKind = "missing_field",
    ) -> None:
        super().__init__(message)
        self.kind = kind
        self.field = field


class WeatherUnavailableError(Exception):
    """Raised when neither the provider nor the fallback produced a snapshot."""


class SearchSupersededError(Exception):
    """Raised to the caller of a search that a newer search cancelled."""
