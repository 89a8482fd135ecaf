"""User-visible notification records: creation, listing, read state and live feeds."""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable, Iterator, Mapping
from contextlib import contextmanager
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.domain.entities import (
    ERROR_NOT_FOUND,
    ERROR_PERMISSION,
    ERROR_STORE,
    Notification,
    NotificationPriority,
    NotificationType,
    OperationResult,
)
from app.domain.exceptions import (
    NotificationNotFoundError,
    NotificationPermissionError,
    StoreError,
)
from app.infrastructure.notifications import NotificationSubscriptionHub
from app.infrastructure.repositories import NotificationRepository

logger = logging.getLogger(__name__)

_OLDEST = datetime.min.replace(tzinfo=timezone.utc)


@dataclass
class NotificationPage:
    notifications: list[Notification] = field(default_factory=list)
    next_cursor: str | None = None


def newest_first(notifications: Iterable[Notification]) -> list[Notification]:
    return sorted(
        notifications,
        key=lambda item: item.created_at or _OLDEST,
        reverse=True,
    )


class NotificationRecordStore:
    """Own the ``notifications`` table on behalf of the users it belongs to.

    Every method returns an :class:`OperationResult`; nothing raises. Bulk
    operations commit each record on its own, so a failure part-way leaves
    the earlier records updated.
    """

    overfetch_factor = 2
    subscription_window = 100

    def __init__(
        self,
        session_factory: Callable[[], Session],
        hub: NotificationSubscriptionHub | None = None,
    ) -> None:
        self._session_factory = session_factory
        self._hub = hub or NotificationSubscriptionHub()

    @property
    def hub(self) -> NotificationSubscriptionHub:
        return self._hub

    @contextmanager
    def _repository(self) -> Iterator[NotificationRepository]:
        session = self._session_factory()
        try:
            yield NotificationRepository(session)
        except SQLAlchemyError as exc:
            session.rollback()
            raise StoreError(str(exc)) from exc
        finally:
            session.close()

    @staticmethod
    def _store_failure(action: str, message: str, exc: Exception) -> OperationResult[Any]:
        logger.error("Notification store %s failed: %s", action, exc)
        return OperationResult.failure(ERROR_STORE, message)

    def create(
        self,
        user_id: str,
        notification_type: NotificationType | str,
        title: str,
        message: str,
        data: Mapping[str, Any] | None = None,
        link: str | None = None,
        priority: NotificationPriority | str = NotificationPriority.NORMAL,
    ) -> OperationResult[str]:
        """Insert an unread record and return its id."""

        try:
            notification = Notification(
                id=None,
                user_id=user_id,
                type=NotificationType(notification_type),
                title=title,
                message=message,
                data=dict(data or {}),
                is_read=False,
                priority=NotificationPriority(priority),
                link=link,
            )
            with self._repository() as repository:
                saved = repository.create(notification)
        except (StoreError, ValueError) as exc:
            return self._store_failure("create", "알림 생성에 실패했습니다.", exc)

        logger.info("Notification %s (%s) created for %s", saved.id, saved.type.value, user_id)
        self._hub.notify(user_id)
        return OperationResult.ok(saved.id)

    def get(self, notification_id: str, user_id: str) -> OperationResult[Notification]:
        try:
            with self._repository() as repository:
                notification = self._owned(repository, notification_id, user_id)
        except NotificationNotFoundError:
            return OperationResult.failure(ERROR_NOT_FOUND, "알림을 찾을 수 없습니다.")
        except NotificationPermissionError:
            return OperationResult.failure(ERROR_PERMISSION, "권한이 없습니다.")
        except StoreError as exc:
            return self._store_failure("get", "알림을 조회하는데 실패했습니다.", exc)
        return OperationResult.ok(notification)

    def list_for_user(
        self, user_id: str, limit: int = 20, cursor: str | None = None
    ) -> OperationResult[NotificationPage]:
        """Return up to ``limit`` records, newest first.

        The query reads ``2 * limit`` rows in key order and sorts them by
        creation time here, so users with more rows than that window may not
        see every older record on a page.
        """

        limit = max(int(limit), 1)
        fetch_size = limit * self.overfetch_factor
        try:
            with self._repository() as repository:
                window = list(
                    repository.list_window(user_id, fetch_size=fetch_size, after_id=cursor)
                )
        except StoreError as exc:
            return self._store_failure("list", "알림 목록을 조회하는데 실패했습니다.", exc)

        next_cursor = window[-1].id if len(window) == fetch_size else None
        page = NotificationPage(
            notifications=newest_first(window)[:limit], next_cursor=next_cursor
        )
        return OperationResult.ok(page)

    def count_unread(self, user_id: str) -> OperationResult[int]:
        try:
            with self._repository() as repository:
                count = repository.count_unread(user_id)
        except StoreError as exc:
            return self._store_failure(
                "count", "읽지 않은 알림 개수를 조회하는데 실패했습니다.", exc
            )
        return OperationResult.ok(count)

    def mark_read(self, notification_id: str, user_id: str) -> OperationResult[None]:
        """Mark one record read; reading an already read record is a no-op."""

        try:
            with self._repository() as repository:
                notification = self._owned(repository, notification_id, user_id)
                if notification.is_read:
                    return OperationResult.ok()
                try:
                    repository.mark_as_read(notification_id)
                except ValueError as exc:
                    # deleted after the ownership check
                    raise NotificationNotFoundError(notification_id) from exc
        except NotificationNotFoundError:
            return OperationResult.failure(ERROR_NOT_FOUND, "알림을 찾을 수 없습니다.")
        except NotificationPermissionError:
            logger.warning(
                "User %s tried to mark notification %s owned by another user",
                user_id,
                notification_id,
            )
            return OperationResult.failure(ERROR_PERMISSION, "권한이 없습니다.")
        except StoreError as exc:
            return self._store_failure("mark_read", "알림 읽음 처리에 실패했습니다.", exc)

        self._hub.notify(user_id)
        return OperationResult.ok()

    def mark_all_read(self, user_id: str) -> OperationResult[int]:
        """Mark every unread record of ``user_id`` read and return how many changed."""

        updated = 0
        try:
            with self._repository() as repository:
                for notification in repository.list_unread_for_user(user_id):
                    try:
                        repository.mark_as_read(notification.id)
                    except ValueError:
                        # deleted since the listing
                        continue
                    updated += 1
        except StoreError as exc:
            logger.warning(
                "mark_all_read for %s stopped after %d records", user_id, updated
            )
            return self._store_failure(
                "mark_all_read", "모든 알림 읽음 처리에 실패했습니다.", exc
            )
        finally:
            if updated:
                self._hub.notify(user_id)

        logger.info("Marked %d notifications read for %s", updated, user_id)
        return OperationResult.ok(updated)

    def delete(self, notification_id: str, user_id: str) -> OperationResult[None]:
        try:
            with self._repository() as repository:
                self._owned(repository, notification_id, user_id)
                repository.delete(notification_id)
        except NotificationNotFoundError:
            return OperationResult.failure(ERROR_NOT_FOUND, "알림을 찾을 수 없습니다.")
        except NotificationPermissionError:
            return OperationResult.failure(ERROR_PERMISSION, "권한이 없습니다.")
        except StoreError as exc:
            return self._store_failure("delete", "알림 삭제에 실패했습니다.", exc)

        self._hub.notify(user_id)
        return OperationResult.ok()

    def delete_all(self, user_id: str) -> OperationResult[int]:
        deleted = 0
        try:
            with self._repository() as repository:
                for notification_id in repository.list_ids_for_user(user_id):
                    repository.delete(notification_id)
                    deleted += 1
        except StoreError as exc:
            logger.warning("delete_all for %s stopped after %d records", user_id, deleted)
            return self._store_failure("delete_all", "모든 알림 삭제에 실패했습니다.", exc)
        finally:
            if deleted:
                self._hub.notify(user_id)

        logger.info("Deleted %d notifications for %s", deleted, user_id)
        return OperationResult.ok(deleted)

    def subscribe(
        self,
        user_id: str,
        on_change: Callable[[list[Notification]], None],
        on_error: Callable[[Exception], None] | None = None,
    ) -> Callable[[], None]:
        """Push the latest records of ``user_id`` now and after every change.

        Returns a function that stops the feed; calling it twice is harmless.
        """

        def _load() -> list[Notification]:
            with self._repository() as repository:
                window = repository.list_window(
                    user_id, fetch_size=self.subscription_window
                )
            return newest_first(window)[: self.subscription_window]

        return self._watch(user_id, _load, on_change, on_error)

    def subscribe_unread_count(
        self,
        user_id: str,
        on_count: Callable[[int], None],
        on_error: Callable[[Exception], None] | None = None,
    ) -> Callable[[], None]:
        def _load() -> int:
            with self._repository() as repository:
                return repository.count_unread(user_id)

        return self._watch(user_id, _load, on_count, on_error)

    def _watch(
        self,
        user_id: str,
        load: Callable[[], Any],
        on_value: Callable[[Any], None],
        on_error: Callable[[Exception], None] | None,
    ) -> Callable[[], None]:
        active = True

        def _push() -> None:
            if not active:
                return
            try:
                value = load()
            except Exception as exc:
                logger.error("Notification feed for %s failed: %s", user_id, exc)
                if on_error is not None:
                    on_error(exc)
                return
            if active:
                on_value(value)

        remove = self._hub.add_listener(user_id, _push)
        _push()

        def _unsubscribe() -> None:
            nonlocal active
            active = False
            remove()

        return _unsubscribe

    @staticmethod
    def _owned(
        repository: NotificationRepository, notification_id: str, user_id: str
    ) -> Notification:
        notification = repository.get(notification_id)
        if notification is None:
            raise NotificationNotFoundError(notification_id)
        if notification.user_id != user_id:
            raise NotificationPermissionError(notification_id)
        return notification


__all__ = ["NotificationPage", "NotificationRecordStore", "newest_first"]
