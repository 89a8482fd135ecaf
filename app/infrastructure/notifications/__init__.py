"""Realtime notification helpers for the infrastructure layer."""

from .realtime import (
    NotificationConnectionManager,
    NotificationPublisher,
    serialize_notification,
)
from .subscriptions import NotificationSubscriptionHub

__all__ = [
    "NotificationConnectionManager",
    "NotificationPublisher",
    "NotificationSubscriptionHub",
    "serialize_notification",
]
