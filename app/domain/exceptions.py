"""Exceptions raised inside the notification layers.

Each layer raises these internally and converts them into result values at
its boundary, so callers only ever see ``OperationResult`` or booleans.
"""

from __future__ import annotations


class NotificationServiceError(Exception):
    """Base class for notification service errors."""


class StoreError(NotificationServiceError):
    """A database read or write failed."""


class NotificationNotFoundError(NotificationServiceError):
    """The targeted notification does not exist."""


class NotificationPermissionError(NotificationServiceError):
    """The targeted notification belongs to another user."""


class TransportError(NotificationServiceError):
    """An email transport refused or failed to accept a message."""

    def __init__(self, provider: str, message: str) -> None:
        super().__init__(f"{provider}: {message}")
        self.provider = provider


__all__ = [
    "NotificationNotFoundError",
    "NotificationPermissionError",
    "NotificationServiceError",
    "StoreError",
    "TransportError",
]
