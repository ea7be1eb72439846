"""Toast notification center."""

from __future__ import annotations

import itertools
import threading
from collections import OrderedDict
from typing import Optional

from clock import SystemClock, now_ms
from dispatcher import EventDispatcher
from interfaces import Clock
from models import Notification

NOTIFICATION_ADDED = "notification-added"
NOTIFICATION_REMOVED = "notification-removed"

LEVELS = ("info", "success", "warning", "error")


class NotificationCenter:
    def __init__(
        self,
        clock: Optional[Clock] = None,
        dispatcher: Optional[EventDispatcher] = None,
        max_notifications: int = 5,
    ) -> None:
        self._clock = clock or SystemClock()
        self.events = dispatcher or EventDispatcher()
        self._max = max_notifications
        self._lock = threading.Lock()
        self._items: OrderedDict[str, Notification] = OrderedDict()
        self._ids = itertools.count(1)

    def add(self, level: str, title: str, message: str, duration_ms: int = 3000) -> str:
        if level not in LEVELS:
            raise ValueError(f"unknown notification level: {level}")
        notification = Notification(
            id=f"notification-{next(self._ids)}",
            level=level,
            title=title,
            message=message,
            duration_ms=duration_ms,
            timestamp_ms=now_ms(),
        )
        evicted: list[Notification] = []
        with self._lock:
            self._items[notification.id] = notification
            while len(self._items) > self._max:
                _, oldest = self._items.popitem(last=False)
                evicted.append(oldest)

        for old in evicted:
            self.events.emit(NOTIFICATION_REMOVED, old)
        self.events.emit(NOTIFICATION_ADDED, notification)

        if duration_ms > 0:
            self._clock.call_later(duration_ms, lambda: self.remove(notification.id))
        return notification.id

    def success(self, title: str, message: str, duration_ms: int = 3000) -> str:
        return self.add("success", title, message, duration_ms)

    def info(self, title: str, message: str, duration_ms: int = 3000) -> str:
        return self.add("info", title, message, duration_ms)

    def warning(self, title: str, message: str, duration_ms: int = 4000) -> str:
        return self.add("warning", title, message, duration_ms)

    def error(self, title: str, message: str, duration_ms: int = 5000) -> str:
        return self.add("error", title, message, duration_ms)

    def remove(self, notification_id: str) -> None:
        with self._lock:
            notification = self._items.pop(notification_id, None)
        if notification is not None:
            self.events.emit(NOTIFICATION_REMOVED, notification)

    def clear(self) -> None:
        with self._lock:
            removed = list(self._items.values())
            self._items.clear()
        for notification in removed:
            self.events.emit(NOTIFICATION_REMOVED, notification)

    def notifications(self) -> list[Notification]:
        with self._lock:
            return list(self._items.values())
