"""State-machine based handling of a triggered transform.

A trigger (gesture or hotkey) hands over the copied text. The controller
runs the orchestrator on a worker thread, then delivers the result to the
clipboard and, when enabled, pastes it. One transform runs at a time;
triggers that arrive while busy are dropped.
"""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass, replace
from typing import Callable, Optional

from errors import NO_ACTIVE_TARGET, UNKNOWN_ERROR, AppError, user_message
from interfaces import ClipboardAccessor, PasteService
from models import (
    ControllerState,
    GestureEvent,
    Language,
    TransformMode,
    TransformRequest,
    TransformResult,
)
from orchestrator import TransformOrchestrator

logger = logging.getLogger(__name__)

StateCallback = Callable[[ControllerState, ControllerState], None]
ResultCallback = Callable[[TransformResult], None]
ErrorCallback = Callable[[str, str], None]


@dataclass
class DeliveryPolicy:
    auto_clipboard: bool = True
    auto_paste: bool = False
    preserve_line_breaks: bool = True
    mode: TransformMode = TransformMode.TRANSLATE
    input_language: Language = Language.AUTO
    output_language: Language = Language.AUTO
    timeout_s: float = 30.0


class TransformController:
    def __init__(
        self,
        orchestrator: TransformOrchestrator,
        clipboard: ClipboardAccessor,
        paste_service: Optional[PasteService] = None,
        policy: Optional[DeliveryPolicy] = None,
        on_state_change: Optional[StateCallback] = None,
        on_result: Optional[ResultCallback] = None,
        on_error: Optional[ErrorCallback] = None,
    ) -> None:
        self._orchestrator = orchestrator
        self._clipboard = clipboard
        self._paste_service = paste_service
        self.policy = policy or DeliveryPolicy()
        self._on_state_change = on_state_change
        self._on_result = on_result
        self._on_error = on_error

        self._lock = threading.RLock()
        self._state = ControllerState.IDLE
        self._thread: Optional[threading.Thread] = None

    @property
    def state(self) -> ControllerState:
        return self._state

    def set_callbacks(
        self,
        on_state_change: Optional[StateCallback] = None,
        on_result: Optional[ResultCallback] = None,
        on_error: Optional[ErrorCallback] = None,
    ) -> None:
        self._on_state_change = on_state_change
        self._on_result = on_result
        self._on_error = on_error

    def handle_gesture(self, event: GestureEvent) -> None:
        self.trigger(event.text)

    def trigger(self, text: str) -> bool:
        """Start a transform of ``text`` in the background.

        Returns False when another transform is still running.
        """
        with self._lock:
            if self._state != ControllerState.IDLE:
                logger.info("Transform already in progress; trigger dropped")
                return False
            self._transition(ControllerState.TRANSFORMING)
            self._thread = threading.Thread(target=self._run, args=(text,), name="transform", daemon=True)
            self._thread.start()
            return True

    def wait(self, timeout: Optional[float] = None) -> None:
        thread = self._thread
        if thread is not None and thread is not threading.current_thread():
            thread.join(timeout=timeout)

    def run_sync(self, text: str) -> Optional[TransformResult]:
        with self._lock:
            if self._state != ControllerState.IDLE:
                return None
            self._transition(ControllerState.TRANSFORMING)
        return self._run(text)

    # ------------------------------------------------------------------
    # Internal
    # ------------------------------------------------------------------

    def _run(self, text: str) -> Optional[TransformResult]:
        policy = self.policy
        request = TransformRequest(
            input_text=text,
            mode=policy.mode,
            input_language=policy.input_language,
            output_language=policy.output_language,
        )
        try:
            result = self._orchestrator.handle(request, timeout_s=policy.timeout_s)
        except AppError as exc:
            self._fail(exc.code, user_message(exc))
            return None
        except Exception as exc:
            logger.exception("Unexpected transform failure")
            self._fail(UNKNOWN_ERROR, user_message(exc))
            return None

        if not policy.preserve_line_breaks:
            result = replace(result, output_text=_join_lines(result.output_text))
        with self._lock:
            self._transition(ControllerState.DELIVERING)
        self._deliver(result, policy)
        with self._lock:
            self._transition(ControllerState.IDLE)
        if self._on_result:
            self._on_result(result)
        return result

    def _deliver(self, result: TransformResult, policy: DeliveryPolicy) -> None:
        if policy.auto_paste and self._paste_service is not None:
            # Keep the result on the clipboard unless only pasting was asked for.
            paste = self._paste_service.paste_text(
                result.output_text, restore_clipboard=not policy.auto_clipboard
            )
            if not paste.success:
                self._emit_error(NO_ACTIVE_TARGET, paste.reason)
            return
        if policy.auto_clipboard:
            try:
                self._clipboard.write_text(result.output_text)
            except AppError as exc:
                self._emit_error(exc.code, user_message(exc))

    def _fail(self, code: str, message: str) -> None:
        with self._lock:
            self._transition(ControllerState.ERROR)
            self._emit_error(code, message)
            self._transition(ControllerState.IDLE)

    def _emit_error(self, code: str, message: str) -> None:
        logger.warning("Transform error %s: %s", code, message)
        if self._on_error:
            self._on_error(code, message)

    def _transition(self, to_state: ControllerState) -> None:
        from_state = self._state
        if from_state == to_state:
            return
        self._state = to_state
        if self._on_state_change:
            self._on_state_change(from_state, to_state)


def _join_lines(text: str) -> str:
    return " ".join(line.strip() for line in text.splitlines() if line.strip())
