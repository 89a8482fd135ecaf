"""Pydantic schemas exposed by the API layer."""

from .notification import (
    BulkUpdateRead,
    NotificationPageRead,
    NotificationPreferencesRead,
    NotificationPreferencesUpdate,
    NotificationRead,
    UnreadCountRead,
)

__all__ = [
    "BulkUpdateRead",
    "NotificationPageRead",
    "NotificationPreferencesRead",
    "NotificationPreferencesUpdate",
    "NotificationRead",
    "UnreadCountRead",
]
