"""Tests for the in-process change feed and websocket payloads."""

from __future__ import annotations

from datetime import datetime, timezone

from app.domain.entities import Notification, NotificationPriority, NotificationType
from app.infrastructure.notifications import (
    NotificationConnectionManager,
    NotificationPublisher,
    NotificationSubscriptionHub,
    serialize_notification,
)


def test_failing_listener_does_not_block_the_others(caplog) -> None:
    hub = NotificationSubscriptionHub()
    calls = []

    def broken() -> None:
        raise RuntimeError("listener exploded")

    hub.add_listener("u1", broken)
    hub.add_listener("u1", lambda: calls.append("u1"))
    hub.add_listener("u2", lambda: calls.append("u2"))

    with caplog.at_level("ERROR"):
        hub.notify("u1")

    assert calls == ["u1"]
    assert "listener exploded" in caplog.text


def test_remove_listener_is_idempotent() -> None:
    hub = NotificationSubscriptionHub()
    remove = hub.add_listener("u1", lambda: None)

    remove()
    remove()

    assert hub.listener_count("u1") == 0


def test_serialize_notification() -> None:
    created = datetime(2026, 10, 19, 15, 5, tzinfo=timezone.utc)
    notification = Notification(
        id="n1",
        user_id="u1",
        type=NotificationType.LOGISTICS_QUOTE,
        title="운송 견적이 준비되었습니다",
        message="견적 도착",
        data={"productId": "p1"},
        priority=NotificationPriority.NORMAL,
        link="/item/p1",
        created_at=created,
    )

    payload = serialize_notification(notification)

    assert payload["type"] == "logistics_quote"
    assert payload["priority"] == "normal"
    assert payload["created_at"] == created.isoformat()
    assert payload["read_at"] is None
    assert payload["is_read"] is False


def test_publisher_outside_event_loop_skips_push() -> None:
    manager = NotificationConnectionManager()
    publisher = NotificationPublisher(manager)

    publisher.publish_unread_count("u1", 3)

    assert manager.is_connected("u1") is False
