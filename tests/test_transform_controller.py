from __future__ import annotations

import threading

from errors import AUTH_FAILED, EMPTY_INPUT, NO_ACTIVE_TARGET, TEXT_EXCLUDED, UNKNOWN_ERROR, UnauthorizedError
from fakes import FakeClipboard, FakeProvider
from models import ControllerState, GestureEvent, PasteResult, TransformMode
from orchestrator import TransformOrchestrator
from transform_controller import DeliveryPolicy, TransformController


class FakePasteService:
    def __init__(self, success: bool = True) -> None:
        self.success = success
        self.calls: list[tuple[str, bool]] = []

    def paste_text(self, text: str, restore_clipboard: bool = True) -> PasteResult:
        self.calls.append((text, restore_clipboard))
        if self.success:
            return PasteResult(success=True, reason="ok", clipboard_restored=restore_clipboard)
        return PasteResult(success=False, reason="no target", clipboard_restored=True)


class BlockingProvider(FakeProvider):
    def __init__(self) -> None:
        super().__init__()
        self.entered = threading.Event()
        self.release = threading.Event()

    def generate(self, request, timeout_s):  # noqa: ANN001, ANN201
        self.entered.set()
        self.release.wait(2.0)
        return super().generate(request, timeout_s)


def _controller(provider=None, paste=None, policy=None, exclude=()):  # noqa: ANN001, ANN202
    clipboard = FakeClipboard()
    transitions: list[tuple[ControllerState, ControllerState]] = []
    errors: list[tuple[str, str]] = []
    results: list = []
    controller = TransformController(
        orchestrator=TransformOrchestrator(provider=provider, exclude_patterns=exclude),
        clipboard=clipboard,
        paste_service=paste,
        policy=policy,
        on_state_change=lambda f, t: transitions.append((f, t)),
        on_result=results.append,
        on_error=lambda c, m: errors.append((c, m)),
    )
    return controller, clipboard, transitions, errors, results


def test_happy_path_writes_result_and_returns_to_idle() -> None:
    provider = FakeProvider(output="Hello")
    controller, clipboard, transitions, errors, results = _controller(provider=provider)

    assert controller.trigger("こんにちは") is True
    controller.wait(2.0)

    assert clipboard.writes == ["Hello"]
    assert controller.state == ControllerState.IDLE
    assert transitions == [
        (ControllerState.IDLE, ControllerState.TRANSFORMING),
        (ControllerState.TRANSFORMING, ControllerState.DELIVERING),
        (ControllerState.DELIVERING, ControllerState.IDLE),
    ]
    assert errors == []
    assert results[0].output_text == "Hello"


def test_policy_mode_and_timeout_reach_provider() -> None:
    provider = FakeProvider()
    policy = DeliveryPolicy(mode=TransformMode.SUMMARIZE, timeout_s=7.0)
    controller, _, _, _, _ = _controller(provider=provider, policy=policy)

    controller.run_sync("some text")

    request, timeout = provider.calls[0]
    assert request.mode == TransformMode.SUMMARIZE
    assert timeout == 7.0


def test_gesture_event_triggers_transform() -> None:
    provider = FakeProvider()
    controller, clipboard, _, _, _ = _controller(provider=provider)

    controller.handle_gesture(GestureEvent(text="hello", timestamp_ms=0, count=2))
    controller.wait(2.0)

    assert provider.calls[0][0].input_text == "hello"
    assert clipboard.writes == ["translated"]


def test_trigger_while_busy_is_dropped() -> None:
    provider = BlockingProvider()
    controller, _, _, _, _ = _controller(provider=provider)

    assert controller.trigger("first") is True
    assert provider.entered.wait(2.0)
    assert controller.trigger("second") is False
    assert controller.run_sync("third") is None

    provider.release.set()
    controller.wait(2.0)

    assert [r.input_text for r, _ in provider.calls] == ["first"]
    assert controller.state == ControllerState.IDLE


def test_transport_error_goes_to_error_then_idle() -> None:
    provider = FakeProvider(error=UnauthorizedError("HTTP 401 raw provider body"))
    controller, clipboard, transitions, errors, results = _controller(provider=provider)

    assert controller.run_sync("hello") is None

    assert controller.state == ControllerState.IDLE
    assert (ControllerState.TRANSFORMING, ControllerState.ERROR) in transitions
    assert (ControllerState.ERROR, ControllerState.IDLE) in transitions
    assert errors[0][0] == AUTH_FAILED
    assert "raw provider body" not in errors[0][1]
    assert clipboard.writes == []
    assert results == []


def test_policy_and_validation_failures_are_reported() -> None:
    controller, _, _, errors, _ = _controller(provider=FakeProvider(), exclude=["secret"])

    controller.run_sync("my secret")
    controller.run_sync("   ")

    assert [code for code, _ in errors] == [TEXT_EXCLUDED, EMPTY_INPUT]


def test_unexpected_error_is_unknown() -> None:
    controller, _, _, errors, _ = _controller(provider=FakeProvider(error=KeyError("bug")))

    controller.run_sync("hello")

    assert errors[0][0] == UNKNOWN_ERROR
    assert controller.state == ControllerState.IDLE


def test_auto_paste_keeps_result_on_clipboard_by_default() -> None:
    paste = FakePasteService(success=True)
    policy = DeliveryPolicy(auto_clipboard=True, auto_paste=True)
    controller, clipboard, _, errors, _ = _controller(provider=FakeProvider(), paste=paste, policy=policy)

    controller.run_sync("hello")

    assert paste.calls == [("translated", False)]
    assert clipboard.writes == []
    assert errors == []


def test_paste_only_restores_clipboard() -> None:
    paste = FakePasteService(success=True)
    policy = DeliveryPolicy(auto_clipboard=False, auto_paste=True)
    controller, _, _, _, _ = _controller(provider=FakeProvider(), paste=paste, policy=policy)

    controller.run_sync("hello")

    assert paste.calls == [("translated", True)]


def test_paste_failure_reports_no_active_target() -> None:
    paste = FakePasteService(success=False)
    policy = DeliveryPolicy(auto_paste=True)
    controller, _, _, errors, results = _controller(provider=FakeProvider(), paste=paste, policy=policy)

    controller.run_sync("hello")

    assert errors == [(NO_ACTIVE_TARGET, "no target")]
    assert controller.state == ControllerState.IDLE
    assert len(results) == 1


def test_no_delivery_when_outputs_disabled() -> None:
    policy = DeliveryPolicy(auto_clipboard=False, auto_paste=False)
    controller, clipboard, _, _, results = _controller(provider=FakeProvider(), policy=policy)

    result = controller.run_sync("hello")

    assert result is not None
    assert clipboard.writes == []
    assert results == [result]


def test_line_breaks_joined_when_not_preserved() -> None:
    provider = FakeProvider(output="first line\n\n  second line  \nthird")
    policy = DeliveryPolicy(preserve_line_breaks=False)
    controller, clipboard, _, _, results = _controller(provider=provider, policy=policy)

    controller.run_sync("hello")

    assert clipboard.writes == ["first line second line third"]
    assert results[0].output_text == "first line second line third"


def test_line_breaks_kept_by_default() -> None:
    controller, clipboard, _, _, _ = _controller(provider=FakeProvider(output="a\nb"))

    controller.run_sync("hello")

    assert clipboard.writes == ["a\nb"]
