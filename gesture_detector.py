"""Clipboard polling state machine that detects double/triple-copy gestures.

A gesture is a run of *distinct* clipboard texts observed in quick
succession. Each poll tick compares the clipboard with the last text seen;
only a change counts as a copy. Copies closer together than the copy window
extend the run, anything slower restarts it at 1. A run that reaches 2 (or
3) emits one ``GestureEvent`` and starts over from 0.

A separate reset timer at twice the window clears a lingering count when no
further copies arrive, so an isolated copy long after a gesture never
resumes an old run.

All transitions (poll tick, reset timer, window changes, own-write
announcements, stop) run under one lock. Events are delivered to the sink
after the lock is released.
"""

from __future__ import annotations

import dataclasses
import logging
import math
import threading
from typing import Callable, Optional

from clock import SystemClock
from errors import PlatformError
from interfaces import ClipboardAccessor, Clock
from models import ClipboardSample, DetectorState, GestureEvent

logger = logging.getLogger(__name__)

GestureCallback = Callable[[GestureEvent], None]

DEFAULT_POLL_INTERVAL_MS = 100
DEFAULT_COPY_WINDOW_MS = 500
TRIGGER_COUNTS = (2, 3)


class GestureDetector:
    def __init__(
        self,
        clipboard: ClipboardAccessor,
        clock: Optional[Clock] = None,
        on_gesture: Optional[GestureCallback] = None,
        copy_window_ms: float = DEFAULT_COPY_WINDOW_MS,
        poll_interval_ms: float = DEFAULT_POLL_INTERVAL_MS,
        min_trigger_count: int = 2,
        join_timeout_s: float = 2.0,
    ) -> None:
        if min_trigger_count not in TRIGGER_COUNTS:
            raise ValueError(f"min_trigger_count must be one of {TRIGGER_COUNTS}")
        self._clipboard = clipboard
        self._clock = clock or SystemClock()
        self._on_gesture = on_gesture
        self._copy_window_ms = _positive(copy_window_ms, "copy_window_ms")
        self._poll_interval_ms = _positive(poll_interval_ms, "poll_interval_ms")
        self._min_trigger_count = min_trigger_count
        self._join_timeout_s = join_timeout_s

        self._lock = threading.RLock()
        self._state = DetectorState()
        self._reset_seq = 0
        self._paused = False
        # (clipboard text before, text written) for an own write not yet observed.
        self._pending_write: Optional[tuple[str, str]] = None
        self._thread: Optional[threading.Thread] = None
        self._stop_event: Optional[threading.Event] = None

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    @property
    def is_running(self) -> bool:
        with self._lock:
            return self._thread is not None

    @property
    def copy_window_ms(self) -> float:
        return self._copy_window_ms

    @property
    def state(self) -> DetectorState:
        """Snapshot of the current state; mutating it has no effect."""
        with self._lock:
            return dataclasses.replace(self._state)

    def set_callback(self, on_gesture: Optional[GestureCallback]) -> None:
        with self._lock:
            self._on_gesture = on_gesture

    def start(
        self,
        poll_interval_ms: Optional[float] = None,
        copy_window_ms: Optional[float] = None,
    ) -> None:
        with self._lock:
            if self._thread is not None:
                return
            if poll_interval_ms is not None:
                self._poll_interval_ms = _positive(poll_interval_ms, "poll_interval_ms")
            if copy_window_ms is not None:
                self._copy_window_ms = _positive(copy_window_ms, "copy_window_ms")
            stop_event = threading.Event()
            self._stop_event = stop_event
            self._thread = threading.Thread(
                target=self._worker,
                args=(stop_event,),
                name="gesture_detector",
                daemon=True,
            )
            self._thread.start()
            logger.info(
                "Gesture detector started (poll=%sms, window=%sms)",
                self._poll_interval_ms,
                self._copy_window_ms,
            )

    def stop(self) -> None:
        with self._lock:
            self._cancel_reset()
            thread = self._thread
            stop_event = self._stop_event
            self._thread = None
            self._stop_event = None
            if stop_event is not None:
                stop_event.set()
        if thread is None:
            return
        if thread is not threading.current_thread():
            thread.join(timeout=self._join_timeout_s)
            if thread.is_alive():
                logger.warning("Gesture detector worker did not exit within %.1fs", self._join_timeout_s)
        logger.info("Gesture detector stopped")

    def set_window(self, copy_window_ms: float) -> None:
        """Change the copy window for later samples; the current count is kept."""
        with self._lock:
            self._copy_window_ms = _positive(copy_window_ms, "copy_window_ms")

    def set_min_trigger_count(self, count: int) -> None:
        """Emit only at counts >= ``count``; 3 makes the run skip its double-copy event."""
        if count not in TRIGGER_COUNTS:
            raise ValueError(f"min_trigger_count must be one of {TRIGGER_COUNTS}")
        with self._lock:
            self._min_trigger_count = count

    # ------------------------------------------------------------------
    # Own-write suppression
    # ------------------------------------------------------------------

    def own_write(self, text: str, writer: Callable[[str], None]) -> None:
        """Write ``text`` to the clipboard on behalf of the app.

        The write runs inside the critical section and ``text`` is marked as
        seen before it lands. Until a tick observes ``text``, samples that
        still show the pre-write content are not counted either. A failed
        write restores the previous state and re-raises.
        """
        with self._lock:
            previous = self._state.last_text
            self._pending_write = (previous, text)
            self._state.last_text = text
            try:
                writer(text)
            except Exception:
                self._pending_write = None
                self._state.last_text = previous
                raise

    def pause(self) -> None:
        with self._lock:
            self._paused = True

    def resume(self) -> None:
        with self._lock:
            self._paused = False

    @property
    def is_paused(self) -> bool:
        return self._paused

    # ------------------------------------------------------------------
    # Tick
    # ------------------------------------------------------------------

    def poll_once(self) -> Optional[GestureEvent]:
        """Run a single poll tick and return the event it emitted, if any."""
        return self._tick(None)

    def _worker(self, stop_event: threading.Event) -> None:
        while not stop_event.wait(self._poll_interval_ms / 1000.0):
            try:
                self._tick(stop_event)
            except Exception:  # pragma: no cover - the loop must outlive any tick
                logger.exception("Unexpected error in gesture detector tick")

    def _tick(self, stop_event: Optional[threading.Event]) -> Optional[GestureEvent]:
        with self._lock:
            if stop_event is not None and stop_event.is_set():
                return None
            try:
                text = self._clipboard.read_text()
            except PlatformError as exc:
                logger.warning("Clipboard read failed: %s", exc)
                return None
            except Exception as exc:
                logger.warning("Clipboard read failed: %s", exc, exc_info=True)
                return None
            sample = ClipboardSample(text=text or "", observed_at_ms=self._clock.monotonic_ms())
            event = self._observe(sample)
            on_gesture = self._on_gesture

        if event is None:
            return None
        if stop_event is not None and stop_event.is_set():
            return None
        logger.info("Detected %s (%d chars)", event.kind.value, len(event.text))
        if on_gesture is not None:
            try:
                on_gesture(event)
            except Exception:
                logger.exception("Gesture callback failed")
        return event

    def _observe(self, sample: ClipboardSample) -> Optional[GestureEvent]:
        state = self._state
        text = sample.text
        if self._pending_write is not None:
            before, written = self._pending_write
            if text == written:
                self._pending_write = None
                return None
            if text == before:
                # The own write has not landed yet.
                return None
            self._pending_write = None
        if not text.strip() or text == state.last_text:
            return None

        state.last_text = text
        if self._paused:
            return None

        now = sample.observed_at_ms
        if state.last_copy_at_ms is None:
            gap = math.inf
        else:
            gap = now - state.last_copy_at_ms

        if gap <= self._copy_window_ms:
            state.copy_count += 1
        else:
            state.copy_count = 1
        state.last_copy_at_ms = now

        self._schedule_reset(2 * self._copy_window_ms)

        count = state.copy_count
        if count in TRIGGER_COUNTS and count >= self._min_trigger_count:
            state.copy_count = 0
            return GestureEvent(text=text, timestamp_ms=now, count=count)
        return None

    # ------------------------------------------------------------------
    # Reset timer
    # ------------------------------------------------------------------

    def _schedule_reset(self, delay_ms: float) -> None:
        self._cancel_reset()
        seq = self._reset_seq
        self._state.reset_handle = self._clock.call_later(delay_ms, lambda: self._on_reset_due(seq))

    def _cancel_reset(self) -> None:
        # Bumping the sequence also disarms a callback that is already running.
        self._reset_seq += 1
        handle = self._state.reset_handle
        self._state.reset_handle = None
        if handle is not None:
            handle.cancel()

    def _on_reset_due(self, seq: int) -> None:
        with self._lock:
            if seq != self._reset_seq:
                return
            self._state.copy_count = 0
            self._state.reset_handle = None


def _positive(value: float, name: str) -> float:
    if value <= 0:
        raise ValueError(f"{name} must be positive, got {value}")
    return value
