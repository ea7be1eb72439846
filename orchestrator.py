"""Transform orchestration: validation, privacy policy, provider relay."""

from __future__ import annotations

import logging
import re
import threading
from typing import Iterable, Optional

from errors import ConfigurationError, PolicyError, ValidationError
from interfaces import TransformProvider
from language import detect_language, resolve_languages
from models import LanguageEstimate, TransformMode, TransformRequest, TransformResult

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT_S = 30.0


class TransformOrchestrator:
    def __init__(
        self,
        provider: Optional[TransformProvider] = None,
        exclude_patterns: Iterable[str] = (),
        default_timeout_s: float = DEFAULT_TIMEOUT_S,
    ) -> None:
        self._lock = threading.Lock()
        self._provider = provider
        self._exclude_patterns: list[str] = list(exclude_patterns)
        self._default_timeout_s = default_timeout_s

    @property
    def is_configured(self) -> bool:
        return self._provider is not None

    def configure(self, provider: TransformProvider) -> None:
        with self._lock:
            self._provider = provider

    def clear_provider(self) -> None:
        with self._lock:
            self._provider = None

    def set_exclude_patterns(self, patterns: Iterable[str]) -> None:
        with self._lock:
            self._exclude_patterns = list(patterns)

    def set_default_timeout(self, timeout_s: float) -> None:
        self._default_timeout_s = timeout_s

    def is_text_excluded(self, text: str) -> bool:
        """True when any exclusion pattern matches ``text`` (case-insensitive).

        Malformed patterns are logged and skipped.
        """
        for pattern in list(self._exclude_patterns):
            try:
                compiled = re.compile(pattern, re.IGNORECASE)
            except re.error as exc:
                logger.warning("Skipping invalid exclusion pattern %r: %s", pattern, exc)
                continue
            if compiled.search(text):
                return True
        return False

    def handle(self, request: TransformRequest, timeout_s: Optional[float] = None) -> TransformResult:
        if not request.input_text or not request.input_text.strip():
            raise ValidationError()

        with self._lock:
            provider = self._provider
        if provider is None:
            raise ConfigurationError()

        if self.is_text_excluded(request.input_text):
            logger.info("Input text matched an exclusion pattern; request blocked")
            raise PolicyError()

        input_language, output_language = resolve_languages(
            request.input_text, request.input_language, request.output_language
        )
        resolved = TransformRequest(
            input_text=request.input_text,
            mode=TransformMode(request.mode),
            input_language=input_language,
            output_language=output_language,
        )
        timeout = self._default_timeout_s if timeout_s is None else timeout_s
        logger.info(
            "Transforming %d chars (mode=%s, %s -> %s)",
            len(request.input_text),
            resolved.mode.value,
            input_language.value,
            output_language.value,
        )
        # Transport errors pass through untouched so callers can tell them apart.
        return provider.generate(resolved, timeout)

    def health_check(self) -> bool:
        with self._lock:
            provider = self._provider
        if provider is None:
            return False
        return provider.health_check()

    def estimate(self, text: str) -> LanguageEstimate:
        return LanguageEstimate(language=detect_language(text), suggested_mode=TransformMode.TRANSLATE)
