"""Credential redaction and structured log output."""

from __future__ import annotations

import json
import logging

from city_weather.log_setup import JsonConsoleFormatter, setup_logger
from city_weather.redaction import REDACTED, sanitize_for_logging, sanitize_text


def test_sanitize_text_masks_appid_query_parameter() -> None:
    text = "GET https://api.openweathermap.org/data/2.5/forecast?q=Paris&appid=abc123 failed"
    sanitized = sanitize_text(text)

    assert "abc123" not in sanitized
    assert f"&appid={REDACTED}" in sanitized
    assert "q=Paris" in sanitized


def test_sanitize_text_masks_key_value_pairs() -> None:
    assert sanitize_text("api_key: abc123") == f"api_key={REDACTED}"
    assert sanitize_text("nothing to hide") == "nothing to hide"


def test_sanitize_for_logging_masks_sensitive_keys_recursively() -> None:
    payload = {
        "query": "Paris",
        "params": {"appid": "abc123", "q": "Paris"},
        "urls": ["https://x.test/forecast?appid=abc123"],
    }
    sanitized = sanitize_for_logging(payload)

    assert sanitized["query"] == "Paris"
    assert sanitized["params"] == {"appid": REDACTED, "q": "Paris"}
    assert "abc123" not in sanitized["urls"][0]


def test_json_formatter_includes_sanitized_context() -> None:
    record = logging.LogRecord(
        name="city_weather",
        level=logging.WARNING,
        pathname=__file__,
        lineno=1,
        msg="Falling back (%s): %s",
        args=("network", "https://x.test/forecast?appid=abc123"),
        exc_info=None,
    )
    record.context = {"query": "Paris", "appid": "abc123"}

    event = json.loads(JsonConsoleFormatter().format(record))

    assert event["level"] == "WARNING"
    assert event["logger"] == "city_weather"
    assert "abc123" not in event["message"]
    assert event["context"] == {"query": "Paris", "appid": REDACTED}


def test_setup_logger_is_idempotent() -> None:
    first = setup_logger("city_weather_test_logger", level="DEBUG")
    second = setup_logger("city_weather_test_logger")

    assert first is second
    assert len(second.handlers) == 1
    assert isinstance(second.handlers[0].formatter, JsonConsoleFormatter)
