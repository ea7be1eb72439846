"""Process-scoped application context.

Everything the app needs is created once in ``build_context`` and passed
around explicitly; nothing here is a module-level singleton.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable, Optional

from auto_paste import KeyboardPasteService
from clipboard import GuardedClipboard, PyperclipAccessor
from clock import SystemClock
from config import JsonSettingsStore, Settings
from dispatcher import EventDispatcher
from gesture_detector import GestureDetector
from interfaces import ClipboardAccessor, Clock, SecretStore, SettingsStore, TransformProvider
from models import GestureEvent, GestureKind, Language, TransformMode
from notifications import NotificationCenter
from orchestrator import TransformOrchestrator
from secret_store import ACCOUNT_NAME, SERVICE_NAME, KeyringSecretStore
from transform_client import DashscopeTransformProvider
from transform_controller import DeliveryPolicy, TransformController

logger = logging.getLogger(__name__)

ProviderFactory = Callable[[str, Settings], TransformProvider]

_TRIGGER_KINDS = {
    "double_copy": GestureKind.DOUBLE_COPY,
    "triple_copy": GestureKind.TRIPLE_COPY,
}


def dashscope_provider_factory(api_key: str, settings: Settings) -> TransformProvider:
    return DashscopeTransformProvider(
        api_key=api_key,
        model=settings.provider.model,
        endpoint=settings.provider.endpoint,
        max_tokens=settings.provider.max_tokens_per_request,
    )


@dataclass
class AppContext:
    settings_store: SettingsStore
    secret_store: SecretStore
    clock: Clock
    clipboard: GuardedClipboard
    dispatcher: EventDispatcher
    detector: GestureDetector
    orchestrator: TransformOrchestrator
    controller: TransformController
    notifications: NotificationCenter
    provider_factory: ProviderFactory
    settings: Settings

    def refresh_provider(self) -> bool:
        """Rebuild the provider from the stored credential.

        Returns False (and leaves the orchestrator unconfigured) when no
        credential is stored.
        """
        api_key = self.secret_store.get(SERVICE_NAME, ACCOUNT_NAME)
        if not api_key:
            self.orchestrator.clear_provider()
            logger.info("No API credential stored; transforms are disabled")
            return False
        self.orchestrator.configure(self.provider_factory(api_key, self.settings))
        return True

    def apply_settings(self, settings: Settings) -> None:
        self.settings = settings
        self.detector.set_window(settings.shortcut.double_copy_threshold_ms)
        self.detector.set_min_trigger_count(3 if settings.shortcut.trigger_type == "triple_copy" else 2)
        self.orchestrator.set_exclude_patterns(settings.privacy.exclude_patterns)
        self.orchestrator.set_default_timeout(settings.provider.timeout_s)
        self.controller.policy = DeliveryPolicy(
            auto_clipboard=settings.output.auto_clipboard,
            auto_paste=settings.output.auto_paste,
            preserve_line_breaks=settings.output.preserve_line_breaks,
            mode=TransformMode(settings.language.default_mode),
            input_language=Language(settings.language.default_input_language),
            output_language=Language(settings.language.default_output_language),
            timeout_s=settings.provider.timeout_s,
        )

    def start_monitor(self) -> None:
        shortcut = self.settings.shortcut
        self.detector.start(
            poll_interval_ms=shortcut.poll_interval_ms,
            copy_window_ms=shortcut.double_copy_threshold_ms,
        )

    def stop_monitor(self) -> None:
        self.detector.stop()

    def shutdown(self) -> None:
        self.detector.stop()
        self.notifications.clear()

    def _on_gesture(self, event: GestureEvent) -> None:
        self.dispatcher.emit(event.kind, event)

    def _on_trigger_gesture(self, event: GestureEvent) -> None:
        if _TRIGGER_KINDS.get(self.settings.shortcut.trigger_type) == event.kind:
            self.controller.handle_gesture(event)


def build_context(
    settings_store: Optional[SettingsStore] = None,
    secret_store: Optional[SecretStore] = None,
    clipboard: Optional[ClipboardAccessor] = None,
    clock: Optional[Clock] = None,
    provider_factory: Optional[ProviderFactory] = None,
) -> AppContext:
    settings_store = settings_store or JsonSettingsStore()
    secret_store = secret_store or KeyringSecretStore()
    clock = clock or SystemClock()
    settings = settings_store.load()

    accessor = clipboard or PyperclipAccessor()
    dispatcher = EventDispatcher()
    detector = GestureDetector(
        clipboard=accessor,
        clock=clock,
        copy_window_ms=settings.shortcut.double_copy_threshold_ms,
        poll_interval_ms=settings.shortcut.poll_interval_ms,
    )
    guarded = GuardedClipboard(accessor, detector)
    orchestrator = TransformOrchestrator()
    controller = TransformController(
        orchestrator=orchestrator,
        clipboard=guarded,
        paste_service=KeyboardPasteService(guarded),
    )
    context = AppContext(
        settings_store=settings_store,
        secret_store=secret_store,
        clock=clock,
        clipboard=guarded,
        dispatcher=dispatcher,
        detector=detector,
        orchestrator=orchestrator,
        controller=controller,
        notifications=NotificationCenter(clock=clock, dispatcher=dispatcher),
        provider_factory=provider_factory or dashscope_provider_factory,
        settings=settings,
    )
    detector.set_callback(context._on_gesture)
    dispatcher.on(GestureKind.DOUBLE_COPY, context._on_trigger_gesture)
    dispatcher.on(GestureKind.TRIPLE_COPY, context._on_trigger_gesture)
    context.apply_settings(settings)
    context.refresh_provider()
    return context
