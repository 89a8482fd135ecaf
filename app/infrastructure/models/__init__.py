"""ORM models used by the application infrastructure."""

from .item import ItemModel
from .notification import NotificationModel
from .notification_settings import NotificationSettingsModel

__all__ = [
    "ItemModel",
    "NotificationModel",
    "NotificationSettingsModel",
]
