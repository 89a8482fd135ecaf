"""In-process change feed for per-user notification listeners."""

from __future__ import annotations

import itertools
import logging
import threading
from collections import defaultdict
from typing import Callable, DefaultDict

logger = logging.getLogger(__name__)

Listener = Callable[[], None]


class NotificationSubscriptionHub:
    """Call every listener registered for a user whenever that user's records change.

    Listeners receive no arguments; they re-query whatever view they maintain.
    """

    def __init__(self) -> None:
        self._listeners: DefaultDict[str, dict[int, Listener]] = defaultdict(dict)
        self._ids = itertools.count(1)
        self._lock = threading.Lock()

    def add_listener(self, user_id: str, listener: Listener) -> Callable[[], None]:
        """Register ``listener`` and return a function that removes it."""

        with self._lock:
            listener_id = next(self._ids)
            self._listeners[user_id][listener_id] = listener

        def _remove() -> None:
            with self._lock:
                listeners = self._listeners.get(user_id)
                if listeners is None:
                    return
                listeners.pop(listener_id, None)
                if not listeners:
                    self._listeners.pop(user_id, None)

        return _remove

    def listener_count(self, user_id: str) -> int:
        with self._lock:
            return len(self._listeners.get(user_id, {}))

    def notify(self, user_id: str) -> None:
        """Run the listeners of ``user_id``; a failing listener does not stop the rest."""

        with self._lock:
            listeners = list(self._listeners.get(user_id, {}).values())
        for listener in listeners:
            try:
                listener()
            except Exception:
                logger.exception("Notification listener for %s failed", user_id)


__all__ = ["Listener", "NotificationSubscriptionHub"]
