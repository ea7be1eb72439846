"""Shared error codes, user-facing messages and typed failures."""

from __future__ import annotations

NOT_CONFIGURED = "NOT_CONFIGURED"
TEXT_EXCLUDED = "TEXT_EXCLUDED"
EMPTY_INPUT = "EMPTY_INPUT"
CLIPBOARD_UNAVAILABLE = "CLIPBOARD_UNAVAILABLE"
AUTH_FAILED = "AUTH_FAILED"
RATE_LIMITED = "RATE_LIMITED"
SERVER_ERROR = "SERVER_ERROR"
REQUEST_TIMEOUT = "REQUEST_TIMEOUT"
NO_ACTIVE_TARGET = "NO_ACTIVE_TARGET"
UNKNOWN_ERROR = "UNKNOWN_ERROR"

ERROR_MESSAGES = {
    NOT_CONFIGURED: "No API key configured. Set one in the tray menu.",
    TEXT_EXCLUDED: "This text matches a privacy exclusion pattern and was not sent.",
    EMPTY_INPUT: "There is no text to transform.",
    CLIPBOARD_UNAVAILABLE: "The clipboard could not be accessed.",
    AUTH_FAILED: "API key is invalid. Check your settings.",
    RATE_LIMITED: "Rate limit reached. Wait a moment and retry.",
    SERVER_ERROR: "The AI provider is having a temporary problem. Please retry.",
    REQUEST_TIMEOUT: "The request timed out. Check your network.",
    NO_ACTIVE_TARGET: "No active input target, result kept in clipboard.",
    UNKNOWN_ERROR: "Something went wrong.",
}


class AppError(Exception):
    code = UNKNOWN_ERROR

    def __init__(self, message: str = "") -> None:
        super().__init__(message or ERROR_MESSAGES[self.code])
        self.message = message or ERROR_MESSAGES[self.code]


class ConfigurationError(AppError):
    code = NOT_CONFIGURED


class PolicyError(AppError):
    code = TEXT_EXCLUDED


class ValidationError(AppError):
    code = EMPTY_INPUT


class PlatformError(AppError):
    code = CLIPBOARD_UNAVAILABLE


class TransportError(AppError):
    code = SERVER_ERROR


class UnauthorizedError(TransportError):
    code = AUTH_FAILED


class RateLimitedError(TransportError):
    code = RATE_LIMITED


class ServerError(TransportError):
    code = SERVER_ERROR


class RequestTimeoutError(TransportError):
    code = REQUEST_TIMEOUT


def user_message(exc: BaseException) -> str:
    """Human-readable summary for the presentation layer.

    Transport failures only ever show the canned message for their kind so
    raw provider payloads stay in the logs.
    """
    if isinstance(exc, TransportError):
        return ERROR_MESSAGES[exc.code]
    if isinstance(exc, AppError):
        return exc.message
    return ERROR_MESSAGES[UNKNOWN_ERROR]
