"""Entry points that turn marketplace events into records and emails."""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable
from dataclasses import dataclass

from sqlalchemy.orm import Session

from app.domain.entities import (
    BatchResult,
    EmailNotification,
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
from app.infrastructure.email import DeliveryProviderChain, TemplateRenderer
from app.infrastructure.email.renderer import DEFAULT_TITLE
from app.infrastructure.repositories import ItemRepository

from .content import (
    NotificationContent,
    logistics_quote_content,
    new_message_content,
    payment_status_content,
    product_interest_content,
    purchase_confirmation_content,
    question_answer_content,
    system_announcement_content,
    transaction_update_content,
)
from .preferences import NotificationPreferenceGate
from .records import NotificationRecordStore

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TriggerOutcome:
    """What happened to one event.

    ``record_id`` is ``None`` when the record could not be written.
    ``email_skipped`` is true when the user's settings suppressed the email.
    """

    record_id: str | None
    email_sent: bool
    email_skipped: bool = False

    @property
    def delivered(self) -> bool:
        return self.record_id is not None or self.email_sent


class ItemStatusReader:
    """Look up the current listing status stored on ``items``."""

    def __init__(self, session_factory: Callable[[], Session]) -> None:
        self._session_factory = session_factory

    def current_status(self, item_id: str) -> str | None:
        session = self._session_factory()
        try:
            item = ItemRepository(session).get(item_id)
        finally:
            session.close()
        return item.status if item is not None else None


class NotificationTriggerService:
    """Write the in-app record, then email the user when their settings allow it.

    The record and the email are independent: a failed record write still
    sends the email, and a failed email keeps the record.
    """

    def __init__(
        self,
        *,
        record_store: NotificationRecordStore,
        preference_gate: NotificationPreferenceGate,
        renderer: TemplateRenderer,
        provider_chain: DeliveryProviderChain,
        item_status_reader: ItemStatusReader | None = None,
    ) -> None:
        self._records = record_store
        self._gate = preference_gate
        self._renderer = renderer
        self._provider_chain = provider_chain
        self._item_status_reader = item_status_reader

    def trigger_new_message(self, event: NewMessageEvent) -> TriggerOutcome:
        return self._dispatch(event.user_id, new_message_content(event))

    def trigger_transaction_update(self, event: TransactionUpdateEvent) -> TriggerOutcome:
        status = self._current_item_status(event)
        return self._dispatch(event.user_id, transaction_update_content(event, status))

    def trigger_logistics_quote(self, event: LogisticsQuoteEvent) -> TriggerOutcome:
        return self._dispatch(event.user_id, logistics_quote_content(event))

    def trigger_question_answer(self, event: QuestionAnswerEvent) -> TriggerOutcome:
        return self._dispatch(event.user_id, question_answer_content(event))

    def trigger_payment_status(self, event: PaymentStatusEvent) -> TriggerOutcome:
        return self._dispatch(event.user_id, payment_status_content(event))

    def trigger_product_interest(self, event: ProductInterestEvent) -> TriggerOutcome:
        return self._dispatch(event.user_id, product_interest_content(event))

    def trigger_system_announcement(
        self, event: SystemAnnouncementEvent
    ) -> TriggerOutcome:
        return self._dispatch(event.user_id, system_announcement_content(event))

    def trigger_purchase_confirmation(
        self, event: PurchaseConfirmationEvent
    ) -> TriggerOutcome:
        return self._dispatch(event.user_id, purchase_confirmation_content(event))

    def process_batch(self, events: Iterable[NotificationEvent]) -> BatchResult:
        """Trigger every event in order; one failure does not stop the rest."""

        handlers: dict[type, Callable[[object], TriggerOutcome]] = {
            NewMessageEvent: self.trigger_new_message,
            TransactionUpdateEvent: self.trigger_transaction_update,
            LogisticsQuoteEvent: self.trigger_logistics_quote,
            QuestionAnswerEvent: self.trigger_question_answer,
            PaymentStatusEvent: self.trigger_payment_status,
            ProductInterestEvent: self.trigger_product_interest,
            SystemAnnouncementEvent: self.trigger_system_announcement,
            PurchaseConfirmationEvent: self.trigger_purchase_confirmation,
        }

        results = []
        for event in events:
            handler = handlers.get(type(event))
            if handler is None:
                logger.warning("No trigger for event %s", type(event).__name__)
                results.append({"event": type(event).__name__, "success": False})
                continue
            outcome = handler(event)
            results.append(
                {
                    "event": type(event).__name__,
                    "success": outcome.delivered,
                    "record_id": outcome.record_id,
                    "email_sent": outcome.email_sent,
                }
            )

        succeeded = sum(1 for result in results if result["success"])
        logger.info("Processed %d notification events, %d failed", len(results), len(results) - succeeded)
        return BatchResult(success=succeeded, failed=len(results) - succeeded, results=results)

    def _current_item_status(self, event: TransactionUpdateEvent) -> str:
        if not event.item_id or self._item_status_reader is None:
            return event.status
        try:
            status = self._item_status_reader.current_status(event.item_id)
        except Exception as exc:
            logger.warning(
                "Could not read status of item %s; using %s: %s",
                event.item_id,
                event.status,
                exc,
            )
            return event.status
        if not status:
            logger.debug("Item %s not found; using %s", event.item_id, event.status)
            return event.status
        if status != event.status:
            logger.info(
                "Item %s is %s; overriding reported status %s",
                event.item_id,
                status,
                event.status,
            )
        return status

    def _compose(self, user_id: str, content: NotificationContent) -> EmailNotification | None:
        try:
            return self._renderer.compose(user_id, content.type, content.template_data())
        except Exception:
            logger.exception("Composing %s email for %s failed", content.type.value, user_id)
            return None

    def _dispatch(self, user_id: str, content: NotificationContent) -> TriggerOutcome:
        email = self._compose(user_id, content)
        title = content.title or (email.title if email is not None else DEFAULT_TITLE)

        created = self._records.create(
            user_id,
            content.type,
            title,
            content.message,
            data=content.data,
            link=content.link,
            priority=content.priority,
        )
        if not created.success:
            logger.error(
                "Could not record %s notification for %s: %s",
                content.type.value,
                user_id,
                created.error,
            )
        record_id = created.value if created.success else None

        if email is None:
            return TriggerOutcome(record_id=record_id, email_sent=False)

        if not self._gate.should_send(user_id, content.type):
            return TriggerOutcome(record_id=record_id, email_sent=False, email_skipped=True)

        sent = self._provider_chain.send(email)
        if sent:
            logger.info("%s notification delivered to %s", content.type.value, user_id)
        else:
            logger.warning("%s email to %s was not delivered", content.type.value, user_id)
        return TriggerOutcome(record_id=record_id, email_sent=sent)


__all__ = ["ItemStatusReader", "NotificationTriggerService", "TriggerOutcome"]
