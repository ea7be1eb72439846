from __future__ import annotations

import logging

from dispatcher import EventDispatcher
from models import GestureEvent, GestureKind


def test_listeners_called_in_subscription_order() -> None:
    dispatcher = EventDispatcher()
    calls: list[str] = []
    dispatcher.on("double-copy", lambda p: calls.append(f"first:{p}"))
    dispatcher.on("double-copy", lambda p: calls.append(f"second:{p}"))

    delivered = dispatcher.emit("double-copy", "x")

    assert calls == ["first:x", "second:x"]
    assert delivered == 2


def test_failing_listener_does_not_block_later_ones(caplog) -> None:  # noqa: ANN001
    dispatcher = EventDispatcher()
    calls: list[str] = []

    def broken(payload: object) -> None:
        raise RuntimeError("boom")

    dispatcher.on("k", broken)
    dispatcher.on("k", lambda p: calls.append("after"))

    with caplog.at_level(logging.ERROR, logger="dispatcher"):
        delivered = dispatcher.emit("k", None)

    assert calls == ["after"]
    assert delivered == 1
    assert "boom" in caplog.text


def test_events_without_listeners_are_dropped() -> None:
    dispatcher = EventDispatcher()
    assert dispatcher.emit("nobody", 1) == 0

    calls: list[int] = []
    dispatcher.on("nobody", calls.append)
    assert calls == []  # no replay of earlier emits


def test_off_removes_listener() -> None:
    dispatcher = EventDispatcher()
    calls: list[int] = []
    dispatcher.on("k", calls.append)
    dispatcher.off("k", calls.append)
    dispatcher.off("k", calls.append)  # unknown listener is fine

    dispatcher.emit("k", 1)
    assert calls == []
    assert dispatcher.listener_count("k") == 0


def test_enum_and_string_kinds_are_equivalent() -> None:
    dispatcher = EventDispatcher()
    received: list[GestureEvent] = []
    dispatcher.on(GestureKind.TRIPLE_COPY, received.append)

    event = GestureEvent(text="t", timestamp_ms=1.0, count=3)
    dispatcher.emit("triple-copy", event)

    assert received == [event]


def test_kinds_are_independent() -> None:
    dispatcher = EventDispatcher()
    doubles: list[GestureEvent] = []
    triples: list[GestureEvent] = []
    dispatcher.on(GestureKind.DOUBLE_COPY, doubles.append)
    dispatcher.on(GestureKind.TRIPLE_COPY, triples.append)

    triple = GestureEvent(text="t", timestamp_ms=1.0, count=3)
    dispatcher.emit(triple.kind, triple)

    assert doubles == []
    assert triples == [triple]
