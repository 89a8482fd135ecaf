"""Repository implementations for infrastructure layer."""

from .item_repository import ItemRepository
from .notification_repository import NotificationRepository
from .notification_settings_repository import NotificationSettingsRepository

__all__ = [
    "ItemRepository",
    "NotificationRepository",
    "NotificationSettingsRepository",
]
