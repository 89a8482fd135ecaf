"""Typed payloads accepted by the notification trigger service."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Literal, Union


@dataclass
class NewMessageEvent:
    """A chat message arrived; an empty ``sender_name`` marks a system message."""

    user_id: str
    sender_name: str
    product_title: str
    message_preview: str
    chat_id: str


@dataclass
class TransactionUpdateEvent:
    """A transaction moved to ``status``; ``item_id`` points at the listing."""

    user_id: str
    transaction_id: str
    status: str
    product_title: str
    product_brand: str = ""
    product_model: str = ""
    amount: int = 0
    counterpart_name: str = ""
    item_id: str | None = None


@dataclass
class LogisticsQuoteEvent:
    """A carrier returned a shipping quote for a listing."""

    user_id: str
    product_id: str
    product_title: str
    estimated_price: int
    from_address: str
    to_address: str
    estimated_days: int
    insurance: bool
    carrier_name: str
    service_type: str


@dataclass
class QuestionAnswerEvent:
    user_id: str
    product_id: str
    product_title: str
    question_id: str
    answer: str
    seller_name: str


@dataclass
class PaymentStatusEvent:
    user_id: str
    transaction_id: str
    status: str
    amount: int
    product_title: str


@dataclass
class ProductInterestEvent:
    """Someone viewed, favourited or repriced a listing the user follows."""

    user_id: str
    product_id: str
    product_title: str
    interest_type: Literal["view", "favorite", "price_drop"]
    price: int | None = None
    previous_price: int | None = None


@dataclass
class SystemAnnouncementEvent:
    user_id: str
    title: str
    content: str
    announcement_type: Literal["maintenance", "feature", "security", "general"] = "general"


@dataclass
class PurchaseConfirmationEvent:
    """The buyer confirmed receipt; sent to the seller."""

    user_id: str
    buyer_nickname: str
    product_title: str
    transaction_id: str | None = None
    amount: int = 0


NotificationEvent = Union[
    NewMessageEvent,
    TransactionUpdateEvent,
    LogisticsQuoteEvent,
    QuestionAnswerEvent,
    PaymentStatusEvent,
    ProductInterestEvent,
    SystemAnnouncementEvent,
    PurchaseConfirmationEvent,
]


__all__ = [
    "LogisticsQuoteEvent",
    "NewMessageEvent",
    "NotificationEvent",
    "PaymentStatusEvent",
    "ProductInterestEvent",
    "PurchaseConfirmationEvent",
    "QuestionAnswerEvent",
    "SystemAnnouncementEvent",
    "TransactionUpdateEvent",
]
