"""Timezone handling for stored timestamps and email dates.

Records keep aware datetimes in the domain layer. ``DATETIME`` columns drop the
offset, so rows hold the wall-clock time of the marketplace timezone and are
re-localized when read back.
"""

from __future__ import annotations

import re
from datetime import datetime, timedelta, timezone, tzinfo
from functools import lru_cache
from typing import Final

from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from app.config import get_settings

MARKETPLACE_TIMEZONE: Final[str] = "Asia/Seoul"
_UTC_OFFSET: Final[re.Pattern[str]] = re.compile(
    r"^(?:UTC|GMT)([+-])(\d{1,2})(?::?(\d{2}))?$", re.IGNORECASE
)


@lru_cache(maxsize=1)
def get_app_timezone() -> tzinfo:
    """Zone named by ``APP_TIMEZONE``, an offset like ``UTC+09:00``, or Seoul."""

    name = (get_settings().app_timezone or "").strip() or MARKETPLACE_TIMEZONE
    try:
        return ZoneInfo(name)
    except (ZoneInfoNotFoundError, ValueError):
        pass

    match = _UTC_OFFSET.match(name)
    if match is None:
        return ZoneInfo(MARKETPLACE_TIMEZONE)
    sign, hours, minutes = match.groups()
    offset = timedelta(hours=int(hours), minutes=int(minutes or 0))
    return timezone(-offset if sign == "-" else offset)


def now_in_app_timezone() -> datetime:
    return datetime.now(tz=get_app_timezone())


def ensure_app_timezone(value: datetime | None) -> datetime | None:
    """Express ``value`` in the app timezone; naive values are taken as local."""

    if value is None:
        return None
    tz = get_app_timezone()
    if value.tzinfo is None:
        return value.replace(tzinfo=tz)
    return value.astimezone(tz)


def to_storage_datetime(value: datetime) -> datetime:
    """Local wall-clock time of ``value`` without ``tzinfo``, as columns hold it."""

    return ensure_app_timezone(value).replace(tzinfo=None)


def storage_now() -> datetime:
    """Column default for creation and update timestamps."""

    return to_storage_datetime(now_in_app_timezone())


def format_korean_datetime(value: datetime | None) -> str:
    """Render ``value`` the way the marketplace shows timestamps in emails."""

    localized = ensure_app_timezone(value)
    if localized is None:
        return ""
    meridiem = "오전" if localized.hour < 12 else "오후"
    hour = localized.hour % 12 or 12
    return (
        f"{localized.year}. {localized.month}. {localized.day}. "
        f"{meridiem} {hour}:{localized.minute:02d}:{localized.second:02d}"
    )
