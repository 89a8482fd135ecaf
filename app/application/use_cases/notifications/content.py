"""Turn marketplace events into notification text, links and email data."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Final

from app.domain.entities import (
    LogisticsQuoteEvent,
    NewMessageEvent,
    NotificationPriority,
    NotificationType,
    PaymentStatusEvent,
    ProductInterestEvent,
    PurchaseConfirmationEvent,
    QuestionAnswerEvent,
    SystemAnnouncementEvent,
    TransactionUpdateEvent,
)
from app.infrastructure.email.templates import STATUS_LABELS
from app.utils import format_korean_datetime, now_in_app_timezone

TRANSACTION_LINK: Final[str] = "/profile/transactions"
DEFAULT_STATUS_MESSAGE: Final[str] = "상태가 변경되었습니다"

TRANSACTION_STATUS_MESSAGES: Final[dict[str, str]] = {
    "paid_hold": "결제가 완료되었습니다",
    "shipped": "상품이 배송되었습니다",
    "delivered": "상품이 배송 완료되었습니다",
    "released": "거래가 완료되었습니다",
    "refunded": "환불이 처리되었습니다",
    "cancelled": "거래가 취소되었습니다",
    "active": "다시 판매중으로 변경되었습니다",
    "reserved": "거래가 시작되었습니다",
    "escrow_completed": "안전결제가 완료되었습니다",
    "shipping": "상품이 발송되었습니다",
    "sold": "거래가 완료되었습니다",
}

PAYMENT_STATUS_LABELS: Final[dict[str, str]] = {
    "pending": "결제 대기",
    "completed": "결제 완료",
    "failed": "결제 실패",
    "cancelled": "결제 취소",
    "refunded": "환불 완료",
}

ANNOUNCEMENT_TITLES: Final[dict[str, str]] = {
    "maintenance": "[점검 안내]",
    "feature": "[새 기능]",
    "security": "[보안 안내]",
}


@dataclass
class NotificationContent:
    """Everything needed to write one record and compose its email.

    ``data`` is stored on the record; ``email_data`` adds display-only values
    for the template. ``title`` overrides the rendered email subject as the
    record title.
    """

    type: NotificationType
    message: str
    data: dict[str, Any] = field(default_factory=dict)
    email_data: dict[str, Any] = field(default_factory=dict)
    link: str | None = None
    priority: NotificationPriority = NotificationPriority.NORMAL
    title: str | None = None

    def template_data(self) -> dict[str, Any]:
        return {**self.data, **self.email_data}


def _won(amount: int | None) -> str:
    return f"{amount or 0:,}"


def new_message_content(event: NewMessageEvent) -> NotificationContent:
    if event.sender_name:
        message = (
            f'{event.sender_name}님이 "{event.product_title}" 상품에 대해 '
            f"메시지를 보냈습니다: {event.message_preview}"
        )
    else:
        message = event.message_preview

    return NotificationContent(
        type=NotificationType.NEW_MESSAGE,
        message=message,
        data={
            "senderName": event.sender_name,
            "productTitle": event.product_title,
            "messagePreview": event.message_preview,
            "chatId": event.chat_id,
            "isSystemMessage": not event.sender_name,
        },
        link=f"/chat/{event.chat_id}",
        priority=NotificationPriority.NORMAL,
    )


def transaction_update_content(
    event: TransactionUpdateEvent, status: str
) -> NotificationContent:
    """Describe ``event`` using ``status``, which may differ from ``event.status``."""

    status_label = STATUS_LABELS.get(status, status)
    status_message = TRANSACTION_STATUS_MESSAGES.get(status, DEFAULT_STATUS_MESSAGE)
    return NotificationContent(
        type=NotificationType.TRANSACTION_UPDATE,
        message=f'"{event.product_title}" 거래가 {status_message} (현재 상태: {status_label})',
        data={
            "transactionId": event.transaction_id,
            "status": status,
            "statusLabel": status_label,
            "productTitle": event.product_title,
            "productBrand": event.product_brand,
            "productModel": event.product_model,
            "amount": event.amount,
            "counterpartName": event.counterpart_name,
            "itemId": event.item_id,
        },
        email_data={
            "amount": _won(event.amount),
            "updatedAt": format_korean_datetime(now_in_app_timezone()),
        },
        link=TRANSACTION_LINK,
        priority=NotificationPriority.HIGH,
    )


def logistics_quote_content(event: LogisticsQuoteEvent) -> NotificationContent:
    return NotificationContent(
        type=NotificationType.LOGISTICS_QUOTE,
        message=(
            f'"{event.product_title}" 운송 견적: {_won(event.estimated_price)}원 '
            f"({event.carrier_name}, 약 {event.estimated_days}일 소요)"
        ),
        data={
            "productId": event.product_id,
            "productTitle": event.product_title,
            "estimatedPrice": event.estimated_price,
            "fromAddress": event.from_address,
            "toAddress": event.to_address,
            "estimatedDays": event.estimated_days,
            "insurance": event.insurance,
            "carrierName": event.carrier_name,
            "serviceType": event.service_type,
        },
        email_data={"estimatedPrice": _won(event.estimated_price)},
        link=f"/item/{event.product_id}",
        priority=NotificationPriority.NORMAL,
    )


def question_answer_content(event: QuestionAnswerEvent) -> NotificationContent:
    message = (
        f'{event.seller_name}님이 "{event.product_title}" 상품 문의에 답변했습니다: '
        f"{event.answer}"
    )
    return NotificationContent(
        type=NotificationType.QUESTION_ANSWER,
        message=message,
        data={
            "productId": event.product_id,
            "productTitle": event.product_title,
            "questionId": event.question_id,
            "answer": event.answer,
            "sellerName": event.seller_name,
        },
        email_data={"title": "상품 문의에 답변이 등록되었습니다", "content": message},
        link=f"/item/{event.product_id}",
        priority=NotificationPriority.NORMAL,
    )


def payment_status_content(event: PaymentStatusEvent) -> NotificationContent:
    status_label = PAYMENT_STATUS_LABELS.get(event.status, event.status)
    message = f'"{event.product_title}" {_won(event.amount)}원 결제 상태: {status_label}'
    return NotificationContent(
        type=NotificationType.PAYMENT_STATUS,
        message=message,
        data={
            "transactionId": event.transaction_id,
            "status": event.status,
            "statusLabel": status_label,
            "amount": event.amount,
            "productTitle": event.product_title,
        },
        email_data={"title": f"결제 상태 알림: {status_label}", "content": message},
        link=TRANSACTION_LINK,
        priority=NotificationPriority.HIGH,
    )


def product_interest_content(event: ProductInterestEvent) -> NotificationContent:
    if event.interest_type == "price_drop":
        title = "관심 상품 가격 인하"
        message = (
            f'"{event.product_title}" 상품 가격이 {_won(event.previous_price)}원에서 '
            f"{_won(event.price)}원으로 인하되었습니다"
        )
    elif event.interest_type == "favorite":
        title = "상품 찜 알림"
        message = f'누군가 "{event.product_title}" 상품을 찜했습니다'
    else:
        title = "상품 조회 알림"
        message = f'누군가 "{event.product_title}" 상품을 조회했습니다'

    return NotificationContent(
        type=NotificationType.PRODUCT_INTEREST,
        message=message,
        data={
            "productId": event.product_id,
            "productTitle": event.product_title,
            "interestType": event.interest_type,
            "price": event.price,
            "previousPrice": event.previous_price,
        },
        email_data={"title": title, "content": message},
        link=f"/item/{event.product_id}",
        priority=NotificationPriority.LOW,
    )


def system_announcement_content(event: SystemAnnouncementEvent) -> NotificationContent:
    prefix = ANNOUNCEMENT_TITLES.get(event.announcement_type)
    title = f"{prefix} {event.title}" if prefix else event.title
    return NotificationContent(
        type=NotificationType.SYSTEM_ANNOUNCEMENT,
        message=event.content,
        data={
            "title": event.title,
            "content": event.content,
            "announcementType": event.announcement_type,
        },
        email_data={"title": title},
        link=None,
        priority=NotificationPriority.URGENT,
    )


def purchase_confirmation_content(
    event: PurchaseConfirmationEvent,
) -> NotificationContent:
    return NotificationContent(
        type=NotificationType.TRANSACTION_UPDATE,
        title="구매확인 완료",
        message=(
            f'{event.buyer_nickname}님이 "{event.product_title}" 상품의 구매를 '
            "확인했습니다. 거래가 완료되었습니다! 🎉"
        ),
        data={
            "transactionId": event.transaction_id,
            "status": "released",
            "productTitle": event.product_title,
            "buyerNickname": event.buyer_nickname,
            "counterpartName": event.buyer_nickname,
            "amount": event.amount,
        },
        email_data={
            "amount": _won(event.amount),
            "updatedAt": format_korean_datetime(now_in_app_timezone()),
        },
        link=TRANSACTION_LINK,
        priority=NotificationPriority.HIGH,
    )


__all__ = [
    "DEFAULT_STATUS_MESSAGE",
    "NotificationContent",
    "PAYMENT_STATUS_LABELS",
    "TRANSACTION_STATUS_MESSAGES",
    "logistics_quote_content",
    "new_message_content",
    "payment_status_content",
    "product_interest_content",
    "purchase_confirmation_content",
    "question_answer_content",
    "system_announcement_content",
    "transaction_update_content",
]
