"""Shared fixtures for the notification service tests."""

from __future__ import annotations

import os
from datetime import datetime, timedelta

import pytest

os.environ.setdefault("DATABASE_URL", "sqlite://")

from app.application.use_cases.notifications import (  # noqa: E402
    NotificationPreferenceGate,
    NotificationRecordStore,
)
from app.domain.entities import (  # noqa: E402
    EmailNotification,
    Notification,
    NotificationPriority,
    NotificationType,
)
from app.infrastructure.database import (  # noqa: E402
    build_engine,
    build_session_factory,
    initialize_database,
)
from app.infrastructure.email import (  # noqa: E402
    MailTransport,
    OutgoingEmail,
    TransportFactory,
)
from app.infrastructure.notifications import NotificationSubscriptionHub  # noqa: E402
from app.infrastructure.repositories import NotificationRepository  # noqa: E402
from app.domain.exceptions import TransportError  # noqa: E402
from app.utils import now_in_app_timezone  # noqa: E402


class RecordingTransport(MailTransport):
    """Transport double that remembers every message it was given."""

    def __init__(self, name: str, *, fail: bool = False) -> None:
        self.name = name
        self.fail = fail
        self.sent: list[OutgoingEmail] = []

    def deliver(self, message: OutgoingEmail) -> None:
        if self.fail:
            raise TransportError(self.name, "rejected")
        self.sent.append(message)


class RecordingTransportFactory(TransportFactory):
    """Hand out one :class:`RecordingTransport` per provider."""

    def __init__(self, *, fail: bool = False) -> None:
        self.transports: dict[str, RecordingTransport] = {}
        self._fail = fail

    def _build(self, name: str) -> RecordingTransport:
        transport = RecordingTransport(name, fail=self._fail)
        self.transports[name] = transport
        return transport

    def sendgrid(self, api_key):
        return self._build("sendgrid")

    def ses(self, credentials):
        return self._build("ses")

    def smtp(self, credentials):
        return self._build("smtp")

    def fallback(self):
        return self._build("fallback")

    def all_sent(self) -> list[OutgoingEmail]:
        return [message for transport in self.transports.values() for message in transport.sent]


@pytest.fixture()
def engine(tmp_path):
    engine = build_engine(f"sqlite:///{tmp_path / 'notifications.db'}")
    initialize_database(engine)
    yield engine
    engine.dispose()


@pytest.fixture()
def session_factory(engine):
    return build_session_factory(engine)


@pytest.fixture()
def hub() -> NotificationSubscriptionHub:
    return NotificationSubscriptionHub()


@pytest.fixture()
def record_store(session_factory, hub) -> NotificationRecordStore:
    return NotificationRecordStore(session_factory, hub)


@pytest.fixture()
def preference_gate(session_factory) -> NotificationPreferenceGate:
    return NotificationPreferenceGate(session_factory)


@pytest.fixture()
def seed_notification(session_factory):
    """Insert a notification with an explicit age and return it."""

    def _seed(
        user_id: str = "user-1",
        *,
        minutes_ago: int = 0,
        is_read: bool = False,
        title: str = "알림",
    ) -> Notification:
        session = session_factory()
        try:
            return NotificationRepository(session).create(
                Notification(
                    id=None,
                    user_id=user_id,
                    type=NotificationType.NEW_MESSAGE,
                    title=title,
                    message="메시지",
                    is_read=is_read,
                    priority=NotificationPriority.NORMAL,
                    created_at=now_in_app_timezone() - timedelta(minutes=minutes_ago),
                    read_at=now_in_app_timezone() if is_read else None,
                )
            )
        finally:
            session.close()

    return _seed


def make_email(**overrides) -> EmailNotification:
    values = {
        "id": "email_test",
        "user_id": "buyer@example.com",
        "type": "new_message",
        "template_id": "new_message",
        "title": "새로운 메시지가 도착했습니다",
        "data": {"senderName": "판매자", "productTitle": "Fender Stratocaster"},
        "created_at": datetime(2026, 10, 19, 15, 5),
    }
    values.update(overrides)
    return EmailNotification(**values)


@pytest.fixture()
def email_factory():
    return make_email


@pytest.fixture()
def recording_factory():
    """Return a builder for :class:`RecordingTransportFactory` instances."""

    def _build(*, fail: bool = False) -> RecordingTransportFactory:
        return RecordingTransportFactory(fail=fail)

    return _build
