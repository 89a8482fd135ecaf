"""Tests for the per-user email preference gate."""

from __future__ import annotations

import pytest

from app.application.use_cases.notifications import NotificationPreferenceGate
from app.domain.entities import NotificationPreferences, NotificationType
from app.infrastructure.repositories import NotificationSettingsRepository


def _store(session_factory, preferences: NotificationPreferences) -> None:
    session = session_factory()
    try:
        NotificationSettingsRepository(session).save(preferences)
    finally:
        session.close()


def test_missing_settings_allow_every_type(preference_gate) -> None:
    for notification_type in NotificationType:
        assert preference_gate.should_send("new-user", notification_type) is True


def test_disabled_flag_blocks_only_that_type(session_factory, preference_gate) -> None:
    preferences = NotificationPreferences.defaults_for("user-1")
    preferences.transaction_update = False
    _store(session_factory, preferences)

    assert preference_gate.should_send("user-1", NotificationType.TRANSACTION_UPDATE) is False
    assert preference_gate.should_send("user-1", "transaction_update") is False
    assert preference_gate.should_send("user-1", NotificationType.NEW_MESSAGE) is True


def test_unknown_type_follows_new_message_flag(session_factory, preference_gate) -> None:
    preferences = NotificationPreferences.defaults_for("user-1")
    preferences.new_message = False
    _store(session_factory, preferences)

    assert preference_gate.should_send("user-1", "flash_sale") is False


@pytest.mark.parametrize("notification_type", list(NotificationType))
def test_lookup_failure_sends_anyway(notification_type, caplog) -> None:
    def _broken_session():
        raise RuntimeError("database unavailable")

    gate = NotificationPreferenceGate(_broken_session)

    with caplog.at_level("WARNING"):
        assert gate.should_send("user-1", notification_type) is True

    assert "database unavailable" in caplog.text


def test_update_preferences_merges_partial_flags(preference_gate) -> None:
    first = preference_gate.update_preferences("user-1", {"product_interest": False})
    second = preference_gate.update_preferences(
        "user-1", {"payment_status": False, "unknown_flag": False}
    )

    assert first.success and second.success
    stored = preference_gate.get_preferences("user-1")
    assert stored.product_interest is False
    assert stored.payment_status is False
    assert stored.new_message is True
    assert stored.updated_at is not None
