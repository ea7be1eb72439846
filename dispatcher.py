"""In-process publish/subscribe for gesture and notification events."""

from __future__ import annotations

import logging
import threading
from collections import defaultdict
from typing import Any, Callable

logger = logging.getLogger(__name__)

Listener = Callable[[Any], None]


class EventDispatcher:
    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._listeners: dict[str, list[Listener]] = defaultdict(list)

    def on(self, kind: str, listener: Listener) -> None:
        with self._lock:
            self._listeners[_key(kind)].append(listener)

    def off(self, kind: str, listener: Listener) -> None:
        with self._lock:
            listeners = self._listeners.get(_key(kind), [])
            if listener in listeners:
                listeners.remove(listener)

    def listener_count(self, kind: str) -> int:
        with self._lock:
            return len(self._listeners.get(_key(kind), []))

    def emit(self, kind: str, payload: Any = None) -> int:
        """Deliver ``payload`` to every listener of ``kind`` in subscription order.

        A listener that raises is logged and skipped. Returns the number of
        listeners that completed normally.
        """
        with self._lock:
            listeners = list(self._listeners.get(_key(kind), []))
        delivered = 0
        for listener in listeners:
            try:
                listener(payload)
            except Exception:
                logger.exception("Listener %r for %s failed", listener, _key(kind))
                continue
            delivered += 1
        return delivered


def _key(kind: Any) -> str:
    return str(getattr(kind, "value", kind))
