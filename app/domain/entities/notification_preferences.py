"""Domain entity describing which notification emails a user wants."""

from __future__ import annotations

from dataclasses import dataclass, fields
from datetime import datetime

from .notification import NotificationType


@dataclass
class NotificationPreferences:
    """Per-user email switches, one per :class:`NotificationType`."""

    user_id: str
    new_message: bool = True
    transaction_update: bool = True
    logistics_quote: bool = True
    question_answer: bool = True
    payment_status: bool = True
    product_interest: bool = True
    system_announcement: bool = True
    updated_at: datetime | None = None

    @classmethod
    def defaults_for(cls, user_id: str) -> "NotificationPreferences":
        """Return the settings assumed for users that never saved any."""

        return cls(user_id=user_id)

    def allows(self, notification_type: NotificationType | str) -> bool:
        """Return whether email is enabled for ``notification_type``."""

        flag = preference_flag_for(notification_type)
        return bool(getattr(self, flag))


PREFERENCE_FLAGS: tuple[str, ...] = tuple(
    item.name
    for item in fields(NotificationPreferences)
    if item.name not in {"user_id", "updated_at"}
)


def preference_flag_for(notification_type: NotificationType | str) -> str:
    """Map a notification type onto the preference flag that controls it.

    Unknown types are governed by the ``new_message`` switch.
    """

    value = getattr(notification_type, "value", notification_type)
    if value in PREFERENCE_FLAGS:
        return str(value)
    return NotificationType.NEW_MESSAGE.value


__all__ = ["NotificationPreferences", "PREFERENCE_FLAGS", "preference_flag_for"]
