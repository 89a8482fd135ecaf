"""Decide whether a user wants email for a notification type."""

from __future__ import annotations

import logging
from collections.abc import Callable, Mapping

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.domain.entities import (
    ERROR_STORE,
    PREFERENCE_FLAGS,
    NotificationPreferences,
    NotificationType,
    OperationResult,
)
from app.infrastructure.repositories import NotificationSettingsRepository

logger = logging.getLogger(__name__)


class NotificationPreferenceGate:
    """Read per-user email settings; an unreadable setting means "send"."""

    def __init__(self, session_factory: Callable[[], Session]) -> None:
        self._session_factory = session_factory

    def get_preferences(self, user_id: str) -> NotificationPreferences:
        """Return stored preferences, or the all-enabled defaults when none exist."""

        session = self._session_factory()
        try:
            stored = NotificationSettingsRepository(session).get(user_id)
        finally:
            session.close()
        return stored or NotificationPreferences.defaults_for(user_id)

    def should_send(self, user_id: str, notification_type: NotificationType | str) -> bool:
        try:
            preferences = self.get_preferences(user_id)
            allowed = preferences.allows(notification_type)
        except Exception as exc:
            logger.warning(
                "Could not read notification settings for %s; sending anyway: %s",
                user_id,
                exc,
            )
            return True

        if not allowed:
            logger.info(
                "Email for %s disabled by %s's settings",
                getattr(notification_type, "value", notification_type),
                user_id,
            )
        return allowed

    def update_preferences(
        self, user_id: str, flags: Mapping[str, bool]
    ) -> OperationResult[NotificationPreferences]:
        """Apply the known flags in ``flags`` and persist the result."""

        unknown = sorted(set(flags) - set(PREFERENCE_FLAGS))
        if unknown:
            logger.debug("Ignoring unknown notification settings: %s", ", ".join(unknown))

        session = self._session_factory()
        try:
            repository = NotificationSettingsRepository(session)
            preferences = repository.get(user_id) or NotificationPreferences.defaults_for(
                user_id
            )
            for flag in PREFERENCE_FLAGS:
                if flag in flags:
                    setattr(preferences, flag, bool(flags[flag]))
            saved = repository.save(preferences)
        except SQLAlchemyError as exc:
            session.rollback()
            logger.error("Saving notification settings for %s failed: %s", user_id, exc)
            return OperationResult.failure(ERROR_STORE, "알림 설정 저장에 실패했습니다.")
        finally:
            session.close()
        return OperationResult.ok(saved)


__all__ = ["NotificationPreferenceGate"]
