"""Tests for the notification trigger service."""

from __future__ import annotations

import pytest

from app.application.use_cases.notifications import (
    ItemStatusReader,
    NotificationPreferenceGate,
    NotificationRecordStore,
    NotificationTriggerService,
)
from app.domain.entities import (
    ERROR_STORE,
    LogisticsQuoteEvent,
    NewMessageEvent,
    NotificationPreferences,
    NotificationPriority,
    NotificationType,
    OperationResult,
    PaymentStatusEvent,
    ProductInterestEvent,
    PurchaseConfirmationEvent,
    QuestionAnswerEvent,
    SystemAnnouncementEvent,
    TransactionUpdateEvent,
)
from app.infrastructure.email import (
    DeliveryProviderChain,
    EmailProviderConfig,
    TemplateRenderer,
)
from app.infrastructure.models import ItemModel
from app.infrastructure.repositories import NotificationSettingsRepository


@pytest.fixture()
def transports(recording_factory):
    return recording_factory()


@pytest.fixture()
def build_service(session_factory, transports):
    def _build(
        *,
        record_store: NotificationRecordStore | None = None,
        item_status_reader: ItemStatusReader | None = None,
        factory=None,
    ) -> NotificationTriggerService:
        renderer = TemplateRenderer("https://connectone.test")
        chain = DeliveryProviderChain(
            EmailProviderConfig(sendgrid_api_key="SG.fake"),
            renderer,
            factory or transports,
        )
        return NotificationTriggerService(
            record_store=record_store or NotificationRecordStore(session_factory),
            preference_gate=NotificationPreferenceGate(session_factory),
            renderer=renderer,
            provider_chain=chain,
            item_status_reader=item_status_reader or ItemStatusReader(session_factory),
        )

    return _build


@pytest.fixture()
def add_item(session_factory):
    def _add(item_id: str, status: str, title: str = "Guitar") -> None:
        session = session_factory()
        try:
            session.add(ItemModel(id=item_id, title=title, status=status))
            session.commit()
        finally:
            session.close()

    return _add


def _records(session_factory, user_id: str):
    store = NotificationRecordStore(session_factory)
    return store.list_for_user(user_id, limit=50).value.notifications


def test_transaction_update_end_to_end(build_service, add_item, session_factory, transports) -> None:
    add_item("i1", "shipped")
    service = build_service()

    outcome = service.trigger_transaction_update(
        TransactionUpdateEvent(
            user_id="u1",
            transaction_id="t1",
            status="shipped",
            item_id="i1",
            product_title="Guitar",
        )
    )

    records = _records(session_factory, "u1")
    assert len(records) == 1
    record = records[0]
    assert outcome.record_id == record.id
    assert outcome.email_sent is True
    assert record.type is NotificationType.TRANSACTION_UPDATE
    assert "Guitar" in record.message
    assert "배송 중" in record.message
    assert record.priority is NotificationPriority.HIGH
    assert record.link == "/profile/transactions"

    sent = transports.transports["sendgrid"].sent
    assert len(sent) == 1
    assert sent[0].subject == record.title
    assert sent[0].to == "u1"


def test_transaction_update_prefers_stored_item_status(
    build_service, add_item, session_factory
) -> None:
    add_item("i1", "sold")

    build_service().trigger_transaction_update(
        TransactionUpdateEvent(
            user_id="u1",
            transaction_id="t1",
            status="reserved",
            item_id="i1",
            product_title="Guitar",
        )
    )

    record = _records(session_factory, "u1")[0]
    assert "거래완료" in record.message
    assert "거래중" not in record.message
    assert record.data["status"] == "sold"


def test_transaction_update_keeps_caller_status_for_unknown_item(
    build_service, session_factory
) -> None:
    build_service().trigger_transaction_update(
        TransactionUpdateEvent(
            user_id="u1",
            transaction_id="t1",
            status="reserved",
            item_id="missing",
            product_title="Guitar",
        )
    )

    record = _records(session_factory, "u1")[0]
    assert "거래중" in record.message


def test_transaction_update_survives_item_lookup_failure(
    build_service, session_factory, caplog
) -> None:
    def _broken_session():
        raise RuntimeError("items unavailable")

    service = build_service(item_status_reader=ItemStatusReader(_broken_session))

    with caplog.at_level("WARNING"):
        outcome = service.trigger_transaction_update(
            TransactionUpdateEvent(
                user_id="u1",
                transaction_id="t1",
                status="delivered",
                item_id="i1",
                product_title="Guitar",
            )
        )

    assert outcome.record_id is not None
    assert "배송 완료" in _records(session_factory, "u1")[0].message
    assert "items unavailable" in caplog.text


def test_system_message_uses_preview_only(build_service, session_factory) -> None:
    build_service().trigger_new_message(
        NewMessageEvent(
            user_id="u1",
            sender_name="",
            product_title="Guitar",
            message_preview="판매자가 배송을 시작했습니다.",
            chat_id="c1",
        )
    )

    record = _records(session_factory, "u1")[0]
    assert record.message == "판매자가 배송을 시작했습니다."
    assert record.link == "/chat/c1"


def test_user_message_names_the_sender(build_service, session_factory) -> None:
    build_service().trigger_new_message(
        NewMessageEvent(
            user_id="u1",
            sender_name="민수",
            product_title="Guitar",
            message_preview="네고 가능할까요?",
            chat_id="c1",
        )
    )

    record = _records(session_factory, "u1")[0]
    assert record.message == '민수님이 "Guitar" 상품에 대해 메시지를 보냈습니다: 네고 가능할까요?'
    assert record.title == "새로운 메시지가 도착했습니다"


def test_disabled_preference_skips_email_but_keeps_record(
    build_service, session_factory, transports
) -> None:
    preferences = NotificationPreferences.defaults_for("u1")
    preferences.new_message = False
    session = session_factory()
    try:
        NotificationSettingsRepository(session).save(preferences)
    finally:
        session.close()

    outcome = build_service().trigger_new_message(
        NewMessageEvent("u1", "민수", "Guitar", "안녕하세요", "c1")
    )

    assert outcome.email_skipped is True
    assert outcome.email_sent is False
    assert len(_records(session_factory, "u1")) == 1
    assert transports.all_sent() == []


def test_email_failure_keeps_the_record(build_service, session_factory, recording_factory) -> None:
    service = build_service(factory=recording_factory(fail=True))

    outcome = service.trigger_new_message(
        NewMessageEvent("u1", "민수", "Guitar", "안녕하세요", "c1")
    )

    assert outcome.email_sent is False
    assert outcome.record_id is not None
    assert len(_records(session_factory, "u1")) == 1


def test_record_failure_still_sends_email(build_service, transports, caplog) -> None:
    def _broken_session():
        raise RuntimeError("unreachable")

    class BrokenRecordStore(NotificationRecordStore):
        def create(self, *args, **kwargs):
            return OperationResult.failure(ERROR_STORE, "알림 생성에 실패했습니다.")

    service = build_service(record_store=BrokenRecordStore(_broken_session))

    with caplog.at_level("ERROR"):
        outcome = service.trigger_new_message(
            NewMessageEvent("u1", "민수", "Guitar", "안녕하세요", "c1")
        )

    assert outcome.record_id is None
    assert outcome.email_sent is True
    assert len(transports.all_sent()) == 1
    assert "Could not record" in caplog.text


def test_purchase_confirmation_record(build_service, session_factory, transports) -> None:
    build_service().trigger_purchase_confirmation(
        PurchaseConfirmationEvent(
            user_id="seller-1",
            buyer_nickname="기타맨",
            product_title="Guitar",
            transaction_id="t1",
            amount=1200000,
        )
    )

    record = _records(session_factory, "seller-1")[0]
    assert record.type is NotificationType.TRANSACTION_UPDATE
    assert record.title == "구매확인 완료"
    assert record.message.startswith('기타맨님이 "Guitar" 상품의 구매를 확인했습니다.')
    assert record.link == "/profile/transactions"
    assert transports.all_sent()[0].subject == "거래 상태가 업데이트되었습니다"
    assert "1,200,000" in transports.all_sent()[0].html


def test_announcement_title_drives_email_subject(build_service, session_factory, transports) -> None:
    build_service().trigger_system_announcement(
        SystemAnnouncementEvent(
            user_id="u1",
            title="서버 점검",
            content="오전 2시부터 점검합니다.",
            announcement_type="maintenance",
        )
    )

    record = _records(session_factory, "u1")[0]
    assert record.title == "[점검 안내] 서버 점검"
    assert record.priority is NotificationPriority.URGENT
    assert record.link is None
    assert transports.all_sent()[0].subject == record.title


def test_price_drop_message(build_service, session_factory) -> None:
    build_service().trigger_product_interest(
        ProductInterestEvent(
            user_id="u1",
            product_id="p1",
            product_title="Guitar",
            interest_type="price_drop",
            price=1000000,
            previous_price=1200000,
        )
    )

    record = _records(session_factory, "u1")[0]
    assert record.message == '"Guitar" 상품 가격이 1,200,000원에서 1,000,000원으로 인하되었습니다'
    assert record.link == "/item/p1"
    assert record.priority is NotificationPriority.LOW


def test_process_batch_counts_each_event(build_service) -> None:
    result = build_service().process_batch(
        [
            NewMessageEvent("u1", "민수", "Guitar", "안녕하세요", "c1"),
            SystemAnnouncementEvent("u1", "공지", "내용"),
            object(),
        ]
    )

    assert result.success == 2
    assert result.failed == 1
    assert [item["success"] for item in result.results] == [True, True, False]


def test_logistics_quote_uses_quote_template(build_service, session_factory, transports) -> None:
    build_service().trigger_logistics_quote(
        LogisticsQuoteEvent(
            user_id="u1",
            product_id="p1",
            product_title="Guitar",
            estimated_price=35000,
            from_address="서울시 마포구",
            to_address="부산시 해운대구",
            estimated_days=2,
            insurance=True,
            carrier_name="악기특송",
            service_type="프리미엄",
        )
    )

    record = _records(session_factory, "u1")[0]
    assert record.type is NotificationType.LOGISTICS_QUOTE
    assert record.title == "운송 견적이 준비되었습니다"
    assert record.data["estimatedPrice"] == 35000
    assert record.link == "/item/p1"
    html = transports.all_sent()[0].html
    assert "35,000" in html
    assert "포함" in html


def test_question_answer_and_payment_status_use_default_template(
    build_service, session_factory, transports
) -> None:
    service = build_service()

    service.trigger_question_answer(
        QuestionAnswerEvent(
            user_id="u1",
            product_id="p1",
            product_title="Guitar",
            question_id="q1",
            answer="네, 가능합니다.",
            seller_name="판매자",
        )
    )
    service.trigger_payment_status(
        PaymentStatusEvent(
            user_id="u1",
            transaction_id="t1",
            status="completed",
            amount=1200000,
            product_title="Guitar",
        )
    )

    titles = {record.type: record.title for record in _records(session_factory, "u1")}
    assert titles[NotificationType.QUESTION_ANSWER] == "상품 문의에 답변이 등록되었습니다"
    assert titles[NotificationType.PAYMENT_STATUS] == "결제 상태 알림: 결제 완료"
    subjects = [message.subject for message in transports.all_sent()]
    assert subjects == [
        "상품 문의에 답변이 등록되었습니다",
        "결제 상태 알림: 결제 완료",
    ]
    assert "네, 가능합니다." in transports.all_sent()[0].text
