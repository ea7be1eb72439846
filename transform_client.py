"""Text transform provider using DashScope text generation.

Each request is a two-message chat: a mode-specific system instruction and a
user message built from the mode template. The provider never retries; the
caller decides what to do with a failure.
"""

from __future__ import annotations

import logging
from http import HTTPStatus
from typing import Any, Optional

from clock import now_ms
from errors import (
    ConfigurationError,
    RateLimitedError,
    RequestTimeoutError,
    ServerError,
    TransportError,
    UnauthorizedError,
)
from language import detect_language, resolve_languages
from models import LanguageEstimate, TransformMode, TransformRequest, TransformResult
from prompts import build_prompt

try:
    import dashscope
except Exception:  # pragma: no cover
    dashscope = None  # type: ignore

logger = logging.getLogger(__name__)

DEFAULT_MODEL = "qwen-plus"


class DashscopeTransformProvider:
    def __init__(
        self,
        api_key: str,
        model: str = DEFAULT_MODEL,
        endpoint: Optional[str] = None,
        max_tokens: int = 2000,
        temperature: float = 0.3,
    ) -> None:
        self._api_key = api_key
        self._model = model
        self._endpoint = endpoint
        self._max_tokens = max_tokens
        self._temperature = temperature

    @property
    def model(self) -> str:
        return self._model

    def generate(self, request: TransformRequest, timeout_s: float = 30.0) -> TransformResult:
        input_language, output_language = resolve_languages(
            request.input_text, request.input_language, request.output_language
        )
        system_prompt, user_prompt = build_prompt(
            request.mode, input_language, output_language, request.input_text
        )
        response = self._call(
            messages=[
                {"role": "system", "content": system_prompt},
                {"role": "user", "content": user_prompt},
            ],
            max_tokens=self._max_tokens,
            timeout_s=timeout_s,
        )
        return TransformResult(
            output_text=self._extract_text(response).strip(),
            mode=TransformMode(request.mode),
            input_language=input_language,
            output_language=output_language,
            timestamp_ms=now_ms(),
            tokens_used=self._extract_tokens(response),
        )

    def estimate(self, text: str) -> LanguageEstimate:
        return LanguageEstimate(language=detect_language(text), suggested_mode=TransformMode.TRANSLATE)

    def health_check(self) -> bool:
        try:
            self._call(
                messages=[{"role": "user", "content": "ping"}],
                max_tokens=1,
                timeout_s=10.0,
            )
        except (TransportError, ConfigurationError) as exc:
            logger.warning("Provider health check failed: %s", exc)
            return False
        return True

    # ------------------------------------------------------------------
    # Internal
    # ------------------------------------------------------------------

    def _call(self, messages: list[dict], max_tokens: int, timeout_s: float) -> Any:
        if dashscope is None:
            raise ConfigurationError("dashscope is not installed")
        if not self._api_key:
            raise ConfigurationError()

        kwargs: dict[str, Any] = {}
        if self._endpoint:
            kwargs["base_address"] = self._endpoint
        try:
            response = dashscope.Generation.call(
                api_key=self._api_key,
                model=self._model,
                messages=messages,
                result_format="message",
                max_tokens=max_tokens,
                temperature=self._temperature,
                request_timeout=timeout_s,
                **kwargs,
            )
        except Exception as exc:
            error = self._to_transport_error(exc)
            logger.warning("Transform request failed (%s): %s", error.code, exc)
            raise error from exc

        status = _field(response, "status_code")
        if status is not None and int(status) != HTTPStatus.OK:
            error = self._status_to_error(int(status), _field(response, "code"), _field(response, "message"))
            logger.warning("Transform request rejected (%s): HTTP %s", error.code, status)
            raise error
        return response

    def _extract_text(self, response: Any) -> str:
        output = _field(response, "output") or {}
        choices = _field(output, "choices") or []
        if choices:
            message = _field(choices[0], "message") or {}
            content = _field(message, "content")
            if isinstance(content, str):
                return content
            if isinstance(content, list) and content:
                return str(_field(content[0], "text") or "")
        text = _field(output, "text")
        if isinstance(text, str):
            return text
        raise ServerError("provider response did not contain any text")

    def _extract_tokens(self, response: Any) -> Optional[int]:
        usage = _field(response, "usage")
        if not usage:
            return None
        total = _field(usage, "total_tokens")
        if total is None:
            parts = [_field(usage, "input_tokens"), _field(usage, "output_tokens")]
            if all(p is None for p in parts):
                return None
            total = sum(int(p or 0) for p in parts)
        return int(total)

    def _status_to_error(self, status: int, code: Any, message: Any) -> TransportError:
        detail = f"HTTP {status} {code or ''} {message or ''}".strip()
        if status in (HTTPStatus.UNAUTHORIZED, HTTPStatus.FORBIDDEN):
            return UnauthorizedError(detail)
        if status == HTTPStatus.TOO_MANY_REQUESTS:
            return RateLimitedError(detail)
        if status in (HTTPStatus.REQUEST_TIMEOUT, HTTPStatus.GATEWAY_TIMEOUT):
            return RequestTimeoutError(detail)
        return ServerError(detail)

    def _to_transport_error(self, exc: Exception) -> TransportError:
        """Map an SDK/network exception to a transport error kind."""
        low = str(exc).lower()
        if isinstance(exc, TimeoutError) or "timeout" in low or "timed out" in low:
            return RequestTimeoutError(str(exc))
        if "401" in low or "403" in low or "unauthorized" in low or "api key" in low:
            return UnauthorizedError(str(exc))
        if "429" in low or "rate limit" in low or "throttl" in low:
            return RateLimitedError(str(exc))
        return ServerError(str(exc))


def _field(obj: Any, key: str) -> Any:
    if obj is None:
        return None
    if isinstance(obj, dict):
        return obj.get(key)
    return getattr(obj, key, None)
