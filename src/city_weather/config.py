"""Typed settings loader for the city weather service."""

from __future__ import annotations

from typing import Any, Literal

from pydantic import AnyUrl, Field, ValidationError, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from .exceptions import ConfigError


class Settings(BaseSettings):
    """Application settings loaded from environment variables and `.env`."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    openweather_api_key: str | None = Field(
        default=None, alias="OPENWEATHER_API_KEY", repr=False
    )
    openweather_base_url: AnyUrl = Field(
        default="https://api.openweathermap.org/data/2.5",
        validate_default=True,
        alias="OPENWEATHER_BASE_URL",
    )
    weather_timeout_seconds: float = Field(default=10.0, alias="WEATHER_TIMEOUT_SECONDS")
    weather_offline: bool = Field(default=False, alias="WEATHER_OFFLINE")
    mock_delay_seconds: float = Field(default=1.0, alias="MOCK_DELAY_SECONDS")
    weather_default_unit: Literal["C", "F"] = Field(default="C", alias="WEATHER_DEFAULT_UNIT")
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = Field(
        default="INFO", alias="LOG_LEVEL"
    )

    @field_validator("openweather_api_key", mode="before")
    @classmethod
    def empty_string_to_none(cls, value: Any) -> Any:
        """Treat empty env-string values as an unset credential."""
        if isinstance(value, str) and value.strip() == "":
            return None
        return value

    @field_validator("weather_default_unit", "log_level", mode="before")
    @classmethod
    def normalize_case(cls, value: Any) -> Any:
        if isinstance(value, str):
            return value.strip().upper()
        return value

    @model_validator(mode="after")
    def validate_ranges(self) -> Settings:
        """Validate numeric bounds that pydantic types cannot express."""
        if self.weather_timeout_seconds <= 0:
            raise ValueError("WEATHER_TIMEOUT_SECONDS must be > 0.")
        if self.mock_delay_seconds < 0:
            raise ValueError("MOCK_DELAY_SECONDS must be >= 0.")
        return self

    @property
    def provider_enabled(self) -> bool:
        """Whether live provider calls should be attempted at all."""
        return not self.weather_offline and self.openweather_api_key is not None

    def safe_summary(self) -> dict[str, Any]:
        """Return config summary safe for logging (no credentials)."""
        return {
            "base_url": str(self.openweather_base_url),
            "credential_configured": self.openweather_api_key is not None,
            "timeout_seconds": self.weather_timeout_seconds,
            "offline": self.weather_offline,
            "provider_enabled": self.provider_enabled,
            "mock_delay_seconds": self.mock_delay_seconds,
            "default_unit": self.weather_default_unit,
            "log_level": self.log_level,
        }


def load_settings() -> Settings:
    """Load and validate settings, raising ConfigError on failure."""
    try:
        return Settings()
    except ValidationError as exc:
        raise ConfigError(f"Invalid configuration: {exc}") from exc
    except OSError as exc:
        raise ConfigError(f"Failed reading environment/.env: {exc}") from exc
