"""Websocket delivery of notification snapshots."""

from __future__ import annotations

import asyncio
import logging
from collections import defaultdict
from typing import Any, DefaultDict, Iterable, Set

from anyio import from_thread
from fastapi import WebSocket

from app.domain.entities import Notification

logger = logging.getLogger(__name__)


class NotificationConnectionManager:
    """Track open websockets grouped by user id."""

    def __init__(self) -> None:
        self._connections: DefaultDict[str, Set[WebSocket]] = defaultdict(set)

    async def connect(self, user_id: str, websocket: WebSocket) -> None:
        await websocket.accept()
        self._connections[user_id].add(websocket)

    def disconnect(self, user_id: str, websocket: WebSocket) -> None:
        connections = self._connections.get(user_id)
        if connections is None:
            return
        connections.discard(websocket)
        if not connections:
            self._connections.pop(user_id, None)

    def is_connected(self, user_id: str) -> bool:
        return bool(self._connections.get(user_id))

    async def send_to_user(self, user_id: str, message: dict[str, Any]) -> None:
        """Send ``message`` to every open socket of ``user_id``; drop broken ones."""

        for connection in list(self._connections.get(user_id, set())):
            try:
                await connection.send_json(message)
            except Exception:
                logger.debug("Dropping websocket for %s after a failed send", user_id)
                self.disconnect(user_id, connection)


def serialize_notification(notification: Notification) -> dict[str, Any]:
    """Return the JSON representation pushed to websocket clients."""

    return {
        "id": notification.id,
        "user_id": notification.user_id,
        "type": notification.type.value,
        "title": notification.title,
        "message": notification.message,
        "data": notification.data or {},
        "is_read": notification.is_read,
        "priority": notification.priority.value,
        "link": notification.link,
        "created_at": notification.created_at.isoformat()
        if notification.created_at
        else None,
        "read_at": notification.read_at.isoformat() if notification.read_at else None,
    }


class NotificationPublisher:
    """Schedule snapshot messages on the websocket connections of a user."""

    def __init__(self, manager: NotificationConnectionManager) -> None:
        self._manager = manager
        self._pending: set[asyncio.Task[None]] = set()

    def publish_notifications(
        self, user_id: str, notifications: Iterable[Notification]
    ) -> None:
        payload = [serialize_notification(item) for item in notifications]
        self._schedule(user_id, {"type": "notifications", "data": payload})

    def publish_unread_count(self, user_id: str, count: int) -> None:
        self._schedule(user_id, {"type": "unread-count", "data": {"count": count}})

    def publish_error(self, user_id: str, error: Exception) -> None:
        self._schedule(user_id, {"type": "error", "data": {"message": str(error)}})

    def _schedule(self, user_id: str, message: dict[str, Any]) -> None:
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            try:
                from_thread.run(self._manager.send_to_user, user_id, message)
            except RuntimeError:
                logger.debug(
                    "No event loop reachable; skipping realtime push to %s", user_id
                )
        else:
            task = loop.create_task(self._manager.send_to_user(user_id, message))
            self._pending.add(task)
            task.add_done_callback(self._pending.discard)


__all__ = [
    "NotificationConnectionManager",
    "NotificationPublisher",
    "serialize_notification",
]
