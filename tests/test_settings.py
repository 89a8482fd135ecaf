"""Tests for settings loading and timestamp helpers."""

from __future__ import annotations

from datetime import datetime, timezone

import pytest

from app import config
from app.utils import datetime as datetime_utils
from app.utils import format_korean_datetime, to_storage_datetime


@pytest.fixture()
def fresh_settings():
    config.reset_settings_cache()
    datetime_utils.get_app_timezone.cache_clear()
    yield
    config.reset_settings_cache()
    datetime_utils.get_app_timezone.cache_clear()


def test_settings_follow_environment_after_cache_reset(monkeypatch, fresh_settings) -> None:
    monkeypatch.setenv("APP_BASE_URL", "https://connectone.example")
    monkeypatch.setenv("EMAIL_SERVER_CONTEXT", "false")

    settings = config.get_settings()

    assert settings.app_base_url == "https://connectone.example"
    assert settings.email_server_context is False
    assert settings.smtp_port == 587


def test_unknown_timezone_name_falls_back_to_seoul(monkeypatch, fresh_settings) -> None:
    monkeypatch.setenv("APP_TIMEZONE", "Mars/Olympus")

    assert str(datetime_utils.get_app_timezone()) == "Asia/Seoul"


def test_offset_timezone_is_accepted(monkeypatch, fresh_settings) -> None:
    monkeypatch.setenv("APP_TIMEZONE", "UTC+09:00")

    value = datetime(2026, 10, 19, 6, 5, tzinfo=timezone.utc)

    assert datetime_utils.ensure_app_timezone(value).hour == 15


def test_format_korean_datetime(fresh_settings) -> None:
    value = datetime(2026, 10, 19, 6, 5, 0, tzinfo=timezone.utc)

    assert format_korean_datetime(value) == "2026. 10. 19. 오후 3:05:00"
    assert format_korean_datetime(None) == ""


def test_storage_datetime_is_local_wall_clock(fresh_settings) -> None:
    aware = datetime(2026, 10, 19, 6, 5, tzinfo=timezone.utc)
    naive = datetime(2026, 10, 19, 15, 5)

    assert to_storage_datetime(aware) == naive
    assert to_storage_datetime(naive) == naive
    assert datetime_utils.ensure_app_timezone(naive).utcoffset().total_seconds() == 9 * 3600
