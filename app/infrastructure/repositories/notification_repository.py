"""Persistence helpers for notification entities."""

from __future__ import annotations

from collections.abc import Sequence
from uuid import uuid4

from sqlalchemy import func
from sqlalchemy.orm import Session

from app.domain.entities import Notification, NotificationPriority, NotificationType
from app.infrastructure.models import NotificationModel
from app.utils import ensure_app_timezone, storage_now, to_storage_datetime


class NotificationRepository:
    """Provide CRUD operations for :class:`Notification` objects.

    Listing queries return rows in primary-key order only. Notification ids are
    random, so callers that need newest-first ordering sort the window they
    fetched themselves.
    """

    def __init__(self, session: Session) -> None:
        self.session = session

    def get(self, notification_id: str) -> Notification | None:
        model = self.session.get(NotificationModel, notification_id)
        if model is None:
            return None
        return self._to_entity(model)

    def list_window(
        self,
        user_id: str,
        *,
        fetch_size: int,
        after_id: str | None = None,
    ) -> Sequence[Notification]:
        """Return up to ``fetch_size`` rows for ``user_id`` in key order."""

        query = self.session.query(NotificationModel).filter(
            NotificationModel.user_id == user_id
        )
        if after_id is not None:
            query = query.filter(NotificationModel.id > after_id)
        query = query.order_by(NotificationModel.id).limit(fetch_size)
        return [self._to_entity(model) for model in query.all()]

    def list_unread_for_user(self, user_id: str) -> Sequence[Notification]:
        query = (
            self.session.query(NotificationModel)
            .filter(NotificationModel.user_id == user_id)
            .filter(NotificationModel.is_read.is_(False))
        )
        return [self._to_entity(model) for model in query.all()]

    def list_ids_for_user(self, user_id: str) -> list[str]:
        rows = (
            self.session.query(NotificationModel.id)
            .filter(NotificationModel.user_id == user_id)
            .all()
        )
        return [row[0] for row in rows]

    def count_unread(self, user_id: str) -> int:
        count = (
            self.session.query(func.count(NotificationModel.id))
            .filter(NotificationModel.user_id == user_id)
            .filter(NotificationModel.is_read.is_(False))
            .scalar()
        )
        return int(count or 0)

    def create(self, notification: Notification) -> Notification:
        model = NotificationModel(id=notification.id or uuid4().hex)
        self._apply_entity_to_model(model, notification)
        self.session.add(model)
        self.session.commit()
        self.session.refresh(model)
        return self._to_entity(model)

    def mark_as_read(self, notification_id: str) -> Notification:
        model = self.session.get(NotificationModel, notification_id)
        if model is None:
            msg = f"Notification with id {notification_id} not found"
            raise ValueError(msg)
        model.is_read = True
        model.read_at = storage_now()
        self.session.add(model)
        self.session.commit()
        self.session.refresh(model)
        return self._to_entity(model)

    def delete(self, notification_id: str) -> None:
        model = self.session.get(NotificationModel, notification_id)
        if model is None:
            return
        self.session.delete(model)
        self.session.commit()

    @staticmethod
    def _apply_entity_to_model(
        model: NotificationModel, notification: Notification
    ) -> None:
        model.created_at = (
            to_storage_datetime(notification.created_at)
            if notification.created_at is not None
            else storage_now()
        )
        model.user_id = notification.user_id
        model.type = NotificationType(notification.type).value
        model.title = notification.title
        model.message = notification.message
        model.data = notification.data or {}
        model.is_read = bool(notification.is_read)
        model.priority = NotificationPriority(notification.priority).value
        model.link = notification.link
        model.read_at = (
            to_storage_datetime(notification.read_at)
            if notification.read_at is not None
            else None
        )

    @staticmethod
    def _to_entity(model: NotificationModel) -> Notification:
        return Notification(
            id=model.id,
            user_id=model.user_id,
            type=NotificationType(model.type),
            title=model.title,
            message=model.message,
            data=model.data or {},
            is_read=bool(model.is_read),
            priority=NotificationPriority(model.priority),
            link=model.link,
            created_at=ensure_app_timezone(model.created_at),
            read_at=ensure_app_timezone(model.read_at),
        )


__all__ = ["NotificationRepository"]
