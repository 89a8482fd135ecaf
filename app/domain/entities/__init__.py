"""Domain entities exposed by the application."""

from .item import Item
from .notification import (
    EmailNotification,
    EmailStatus,
    Notification,
    NotificationPriority,
    NotificationType,
)
from .notification_event import (
    LogisticsQuoteEvent,
    NewMessageEvent,
    NotificationEvent,
    PaymentStatusEvent,
    ProductInterestEvent,
    PurchaseConfirmationEvent,
    QuestionAnswerEvent,
    SystemAnnouncementEvent,
    TransactionUpdateEvent,
)
from .notification_preferences import (
    PREFERENCE_FLAGS,
    NotificationPreferences,
    preference_flag_for,
)
from .operation_result import (
    ERROR_NOT_FOUND,
    ERROR_PERMISSION,
    ERROR_STORE,
    BatchResult,
    OperationResult,
)

__all__ = [
    "BatchResult",
    "EmailNotification",
    "EmailStatus",
    "ERROR_NOT_FOUND",
    "ERROR_PERMISSION",
    "ERROR_STORE",
    "Item",
    "LogisticsQuoteEvent",
    "NewMessageEvent",
    "Notification",
    "NotificationEvent",
    "NotificationPreferences",
    "NotificationPriority",
    "NotificationType",
    "OperationResult",
    "PaymentStatusEvent",
    "PREFERENCE_FLAGS",
    "ProductInterestEvent",
    "PurchaseConfirmationEvent",
    "QuestionAnswerEvent",
    "SystemAnnouncementEvent",
    "TransactionUpdateEvent",
    "preference_flag_for",
]
