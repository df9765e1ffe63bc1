"""Settings loading and validation."""

from __future__ import annotations

import pytest

from city_weather.config import Settings, load_settings
from city_weather.exceptions import ConfigError

_ENV_VARS = (
    "OPENWEATHER_API_KEY",
    "OPENWEATHER_BASE_URL",
    "WEATHER_TIMEOUT_SECONDS",
    "WEATHER_OFFLINE",
    "MOCK_DELAY_SECONDS",
    "WEATHER_DEFAULT_UNIT",
    "LOG_LEVEL",
)


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    for name in _ENV_VARS:
        monkeypatch.delenv(name, raising=False)


def test_defaults_without_credential_disable_provider() -> None:
    settings = Settings(_env_file=None)

    assert settings.openweather_api_key is None
    assert settings.weather_timeout_seconds == 10.0
    assert settings.mock_delay_seconds == 1.0
    assert settings.weather_default_unit == "C"
    assert str(settings.openweather_base_url).startswith("https://api.openweathermap.org/data/2.5")
    assert settings.provider_enabled is False


def test_credential_enables_provider_unless_offline(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("OPENWEATHER_API_KEY", "abc123")
    assert Settings(_env_file=None).provider_enabled is True

    monkeypatch.setenv("WEATHER_OFFLINE", "true")
    assert Settings(_env_file=None).provider_enabled is False


def test_empty_credential_is_treated_as_unset(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("OPENWEATHER_API_KEY", "  ")
    assert Settings(_env_file=None).openweather_api_key is None


def test_unit_and_log_level_are_case_insensitive(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("WEATHER_DEFAULT_UNIT", "f")
    monkeypatch.setenv("LOG_LEVEL", "debug")
    settings = Settings(_env_file=None)
    assert settings.weather_default_unit == "F"
    assert settings.log_level == "DEBUG"


def test_credential_is_hidden_from_repr_and_summary(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("OPENWEATHER_API_KEY", "super-secret-key")
    settings = Settings(_env_file=None)

    assert "super-secret-key" not in repr(settings)
    summary = settings.safe_summary()
    assert "super-secret-key" not in str(summary)
    assert summary["credential_configured"] is True


@pytest.mark.parametrize(
    ("name", "value"),
    [
        ("WEATHER_TIMEOUT_SECONDS", "0"),
        ("MOCK_DELAY_SECONDS", "-1"),
        ("WEATHER_DEFAULT_UNIT", "K"),
        ("OPENWEATHER_BASE_URL", "not a url"),
    ],
)
def test_invalid_values_raise_config_error(
    monkeypatch: pytest.MonkeyPatch, name: str, value: str
) -> None:
    monkeypatch.chdir("/")
    monkeypatch.setenv(name, value)
    with pytest.raises(ConfigError, match="Invalid configuration"):
        load_settings()
