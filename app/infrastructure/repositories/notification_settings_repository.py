"""Persistence helpers for notification preferences."""

from __future__ import annotations

from sqlalchemy.orm import Session

from app.domain.entities import PREFERENCE_FLAGS, NotificationPreferences
from app.infrastructure.models import NotificationSettingsModel
from app.utils import ensure_app_timezone


class NotificationSettingsRepository:
    """Read and upsert :class:`NotificationPreferences` rows."""

    def __init__(self, session: Session) -> None:
        self.session = session

    def get(self, user_id: str) -> NotificationPreferences | None:
        model = self.session.get(NotificationSettingsModel, user_id)
        if model is None:
            return None
        return self._to_entity(model)

    def save(self, preferences: NotificationPreferences) -> NotificationPreferences:
        model = self.session.get(NotificationSettingsModel, preferences.user_id)
        if model is None:
            model = NotificationSettingsModel(user_id=preferences.user_id)
        for flag in PREFERENCE_FLAGS:
            setattr(model, flag, bool(getattr(preferences, flag)))
        self.session.add(model)
        self.session.commit()
        self.session.refresh(model)
        return self._to_entity(model)

    @staticmethod
    def _to_entity(model: NotificationSettingsModel) -> NotificationPreferences:
        flags = {flag: bool(getattr(model, flag)) for flag in PREFERENCE_FLAGS}
        return NotificationPreferences(
            user_id=model.user_id,
            updated_at=ensure_app_timezone(model.updated_at),
            **flags,
        )


__all__ = ["NotificationSettingsRepository"]
