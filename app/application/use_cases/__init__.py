"""Aggregate application use cases."""

from .notifications import (
    NotificationPreferenceGate,
    NotificationRecordStore,
    NotificationTriggerService,
)

__all__ = [
    "NotificationPreferenceGate",
    "NotificationRecordStore",
    "NotificationTriggerService",
]
