"""Notification use cases: records, email preferences and event triggers."""

from .preferences import NotificationPreferenceGate
from .records import NotificationPage, NotificationRecordStore
from .trigger import ItemStatusReader, NotificationTriggerService, TriggerOutcome

__all__ = [
    "ItemStatusReader",
    "NotificationPage",
    "NotificationPreferenceGate",
    "NotificationRecordStore",
    "NotificationTriggerService",
    "TriggerOutcome",
]
