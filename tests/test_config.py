import json
import logging

import pytest

from fxref.core.config import BUNDLED_BACKUP, Settings
from fxref.core.logging import JsonFormatter, RequestIdFilter, request_id_ctx
from fxref.models.constants import Currency


def test_defaults():
    s = Settings()
    s.init_post_load()
    assert s.source_url.endswith("eurofxref-daily.xml")
    assert s.backup_source_path == str(BUNDLED_BACKUP)
    assert s.anchor_currency is Currency.EUR
    assert s.base_currency is Currency.EUR
    assert s.fallback_on_format_error is False


def test_environment_overrides(monkeypatch):
    monkeypatch.setenv("BASE_CURRENCY", "USD")
    monkeypatch.setenv("HTTP_RETRIES", "0")
    s = Settings()
    assert s.base_currency is Currency.USD
    assert s.http_retries == 0


@pytest.mark.parametrize(
    "kwargs",
    [
        {"http_timeout_seconds": 0},
        {"http_retries": -1},
        {"rate_display_places": 20},
    ],
)
def test_init_post_load_rejects_bad_ranges(kwargs):
    with pytest.raises(ValueError):
        Settings(**kwargs).init_post_load()


def test_json_formatter_includes_request_id_and_extras():
    record = logging.LogRecord("fxref.rates", logging.INFO, __file__, 1, "rate table ready", None, None)
    record.location = "backup.xml"
    token = request_id_ctx.set("rid-1")
    try:
        RequestIdFilter().filter(record)
    finally:
        request_id_ctx.reset(token)
    payload = json.loads(JsonFormatter().format(record))
    assert payload["message"] == "rate table ready"
    assert payload["request_id"] == "rid-1"
    assert payload["location"] == "backup.xml"
    assert payload["level"] == "INFO"


def test_currency_settings_are_case_insensitive(monkeypatch):
    monkeypatch.setenv("BASE_CURRENCY", "usd")
    monkeypatch.setenv("ANCHOR_CURRENCY", " eur ")
    s = Settings()
    assert s.base_currency is Currency.USD
    assert s.anchor_currency is Currency.EUR
    assert Settings(base_currency="gbp").base_currency is Currency.GBP


def test_unknown_currency_setting_is_a_validation_error():
    with pytest.raises(ValueError):
        Settings(base_currency="XYZ")
