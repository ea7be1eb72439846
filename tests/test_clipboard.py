from __future__ import annotations

import threading
import time
from unittest.mock import MagicMock

import pytest

import clipboard
from clipboard import GuardedClipboard, PyperclipAccessor
from errors import PlatformError
from fakes import FakeClipboard, FakeClock
from gesture_detector import GestureDetector


def test_read_and_write_through_pyperclip(monkeypatch) -> None:  # noqa: ANN001
    fake = MagicMock()
    fake.paste.return_value = "copied"
    monkeypatch.setattr(clipboard, "pyperclip", fake)

    accessor = PyperclipAccessor()
    try:
        assert accessor.read_text() == "copied"
        accessor.write_text("out")
    finally:
        accessor.close()

    fake.copy.assert_called_once_with("out")


def test_hanging_read_times_out(monkeypatch) -> None:  # noqa: ANN001
    fake = MagicMock()
    fake.paste.side_effect = lambda: time.sleep(0.5) or "late"
    monkeypatch.setattr(clipboard, "pyperclip", fake)

    accessor = PyperclipAccessor(read_timeout_s=0.05)
    try:
        with pytest.raises(PlatformError):
            accessor.read_text()
    finally:
        accessor.close()


def test_backend_failure_is_platform_error(monkeypatch) -> None:  # noqa: ANN001
    fake = MagicMock()
    fake.paste.side_effect = RuntimeError("no clipboard mechanism")
    fake.copy.side_effect = RuntimeError("no clipboard mechanism")
    monkeypatch.setattr(clipboard, "pyperclip", fake)

    accessor = PyperclipAccessor()
    try:
        with pytest.raises(PlatformError):
            accessor.read_text()
        with pytest.raises(PlatformError):
            accessor.write_text("x")
    finally:
        accessor.close()


def test_missing_pyperclip_is_platform_error(monkeypatch) -> None:  # noqa: ANN001
    monkeypatch.setattr(clipboard, "pyperclip", None)
    with pytest.raises(PlatformError):
        PyperclipAccessor().read_text()


def test_hung_read_is_not_resubmitted(monkeypatch) -> None:  # noqa: ANN001
    release = threading.Event()
    calls: list[int] = []

    def paste() -> str:
        calls.append(1)
        release.wait(2.0)
        return "recovered"

    fake = MagicMock()
    fake.paste.side_effect = paste
    monkeypatch.setattr(clipboard, "pyperclip", fake)

    accessor = PyperclipAccessor(read_timeout_s=0.01)
    try:
        for _ in range(20):
            with pytest.raises(PlatformError):
                accessor.read_text()
        assert len(calls) == 1

        release.set()
        value = None
        deadline = time.time() + 2.0
        while value is None and time.time() < deadline:
            try:
                value = accessor.read_text()
            except PlatformError:
                time.sleep(0.01)
        assert value == "recovered"
    finally:
        accessor.close()


def test_guarded_clipboard_write_is_not_a_copy() -> None:
    inner = FakeClipboard("start")
    clock = FakeClock()
    events: list = []
    detector = GestureDetector(clipboard=inner, clock=clock, on_gesture=events.append)
    guarded = GuardedClipboard(inner, detector)

    detector.poll_once()
    guarded.write_text("result")
    clock.advance(100)
    detector.poll_once()

    assert inner.writes == ["result"]
    assert guarded.read_text() == "result"
    assert detector.state.copy_count == 1
    assert events == []
