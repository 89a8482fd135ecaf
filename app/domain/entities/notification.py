"""Domain entities representing user notifications and notification emails."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any


class NotificationType(str, Enum):
    """Closed set of events a user can be notified about."""

    NEW_MESSAGE = "new_message"
    TRANSACTION_UPDATE = "transaction_update"
    LOGISTICS_QUOTE = "logistics_quote"
    QUESTION_ANSWER = "question_answer"
    PAYMENT_STATUS = "payment_status"
    PRODUCT_INTEREST = "product_interest"
    SYSTEM_ANNOUNCEMENT = "system_announcement"


class NotificationPriority(str, Enum):
    """Informational priority shown to the user; it does not affect delivery."""

    LOW = "low"
    NORMAL = "normal"
    HIGH = "high"
    URGENT = "urgent"


class EmailStatus(str, Enum):
    PENDING = "pending"
    COMPLETED = "completed"
    FAILED = "failed"


@dataclass
class Notification:
    """User-visible notification persisted in the ``notifications`` table.

    ``title``, ``message`` and ``data`` are fixed when the record is created;
    only the read state changes afterwards.
    """

    id: str | None
    user_id: str
    type: NotificationType
    title: str
    message: str
    data: dict[str, Any] = field(default_factory=dict)
    is_read: bool = False
    priority: NotificationPriority = NotificationPriority.NORMAL
    link: str | None = None
    created_at: datetime | None = None
    read_at: datetime | None = None


@dataclass
class EmailNotification:
    """Rendered email waiting to be handed to a delivery provider."""

    id: str
    user_id: str
    type: str
    template_id: str
    title: str
    data: dict[str, Any] = field(default_factory=dict)
    status: EmailStatus = EmailStatus.PENDING
    created_at: datetime | None = None


__all__ = [
    "EmailNotification",
    "EmailStatus",
    "Notification",
    "NotificationPriority",
    "NotificationType",
]
