"""Pydantic models describing notification payloads."""

from __future__ import annotations

from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from app.domain.entities import NotificationPriority, NotificationType


class NotificationRead(BaseModel):
    """Representation of a notification delivered to the client."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    user_id: str
    type: NotificationType
    title: str
    message: str
    data: dict[str, Any] = Field(default_factory=dict)
    is_read: bool
    priority: NotificationPriority
    link: str | None = None
    created_at: datetime | None = None
    read_at: datetime | None = None


class NotificationPageRead(BaseModel):
    notifications: list[NotificationRead]
    next_cursor: str | None = None


class UnreadCountRead(BaseModel):
    count: int


class BulkUpdateRead(BaseModel):
    """Number of notifications changed by a bulk operation."""

    affected: int


class NotificationPreferencesRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    user_id: str
    new_message: bool
    transaction_update: bool
    logistics_quote: bool
    question_answer: bool
    payment_status: bool
    product_interest: bool
    system_announcement: bool
    updated_at: datetime | None = None


class NotificationPreferencesUpdate(BaseModel):
    """Partial update; omitted flags keep their stored value."""

    new_message: bool | None = None
    transaction_update: bool | None = None
    logistics_quote: bool | None = None
    question_answer: bool | None = None
    payment_status: bool | None = None
    product_interest: bool | None = None
    system_announcement: bool | None = None

    def flags(self) -> dict[str, bool]:
        return self.model_dump(exclude_none=True)


__all__ = [
    "BulkUpdateRead",
    "NotificationPageRead",
    "NotificationPreferencesRead",
    "NotificationPreferencesUpdate",
    "NotificationRead",
    "UnreadCountRead",
]
