"""Utility helpers for reusable functionality."""

from .datetime import (
    ensure_app_timezone,
    format_korean_datetime,
    get_app_timezone,
    now_in_app_timezone,
    storage_now,
    to_storage_datetime,
)

__all__ = [
    "ensure_app_timezone",
    "format_korean_datetime",
    "get_app_timezone",
    "now_in_app_timezone",
    "storage_now",
    "to_storage_datetime",
]
