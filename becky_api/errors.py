"""Error taxonomy and classifier for the API client.

Every failure the client can observe is folded into one of six ``ErrorKind``
values. ``ApiError`` carries the kind, the HTTP status (when there was one)
and a technical message for logs; ``user_message()`` is the only text that
ever reaches end users.

Programmer errors (bad configuration, invalid interceptor registration) use a
separate ``ClientError`` hierarchy and are raised, never normalized.
"""

from __future__ import annotations

import asyncio
from enum import Enum
from typing import Any

import httpx


class ErrorKind(str, Enum):
    """Failure categories."""

    NETWORK_ERROR = "NETWORK_ERROR"
    TIMEOUT_ERROR = "TIMEOUT_ERROR"
    AUTH_ERROR = "AUTH_ERROR"
    VALIDATION_ERROR = "VALIDATION_ERROR"
    SERVER_ERROR = "SERVER_ERROR"
    UNKNOWN_ERROR = "UNKNOWN_ERROR"


_USER_MESSAGES: dict[ErrorKind, str] = {
    ErrorKind.NETWORK_ERROR: "Unable to connect. Please check your internet connection.",
    ErrorKind.TIMEOUT_ERROR: "Request timed out. Please try again.",
    ErrorKind.AUTH_ERROR: "Please log in to continue.",
    ErrorKind.VALIDATION_ERROR: "Invalid request. Please check your input.",
    ErrorKind.SERVER_ERROR: "Server error. Please try again later.",
    ErrorKind.UNKNOWN_ERROR: "An unexpected error occurred. Please try again.",
}

_RETRYABLE_KINDS = frozenset({
    ErrorKind.NETWORK_ERROR,
    ErrorKind.TIMEOUT_ERROR,
    ErrorKind.SERVER_ERROR,
})

# Rate limited responses are worth another try even though they are not 5xx.
_RETRYABLE_STATUSES = frozenset({429})

_DEFAULT_MESSAGES: dict[ErrorKind, str] = {
    ErrorKind.NETWORK_ERROR: "Network connection failed",
    ErrorKind.TIMEOUT_ERROR: "Request timed out",
    ErrorKind.AUTH_ERROR: "Authentication required",
    ErrorKind.VALIDATION_ERROR: "Invalid request",
    ErrorKind.SERVER_ERROR: "Server error occurred",
    ErrorKind.UNKNOWN_ERROR: "An unexpected error occurred",
}


def user_message_for(kind: ErrorKind) -> str:
    """Fixed, non-technical sentence for an error kind."""
    return _USER_MESSAGES[kind]


# ---------------------------------------------------------------------------
# Programmer errors
# ---------------------------------------------------------------------------


class ClientError(Exception):
    """Base error for build/config defects in the API client."""

    message: str = "API client misconfigured"

    def __init__(self, message: str | None = None, **kwargs: object) -> None:
        self.message = message or self.__class__.message
        self.details = kwargs
        super().__init__(self.message)


class ConfigurationError(ClientError):
    """No usable base URL or invalid client parameters."""

    message = "API client configuration is invalid"


class InterceptorRegistrationError(ClientError):
    """An interceptor could not be registered."""

    message = "Invalid interceptor registration"


# ---------------------------------------------------------------------------
# Runtime API errors
# ---------------------------------------------------------------------------


class ApiError(Exception):
    """A classified failure of a single request attempt."""

    def __init__(
        self,
        message: str,
        kind: ErrorKind = ErrorKind.UNKNOWN_ERROR,
        status_code: int | None = None,
        response_data: Any = None,
    ) -> None:
        self.message = message
        self.kind = kind
        self.status_code = status_code
        self.response_data = response_data
        super().__init__(message)

    @property
    def retryable(self) -> bool:
        if self.kind in _RETRYABLE_KINDS:
            return True
        return self.status_code in _RETRYABLE_STATUSES

    def user_message(self) -> str:
        return user_message_for(self.kind)

    def to_dict(self) -> dict:
        """Log-friendly representation. Never shown to users."""
        return {
            "kind": self.kind.value,
            "status_code": self.status_code,
            "message": self.message,
            "retryable": self.retryable,
        }

    def __repr__(self) -> str:
        return (
            f"ApiError(kind={self.kind.value}, status_code={self.status_code}, "
            f"message={self.message!r})"
        )


class InterceptorError(Exception):
    """Raised by the pipeline when an interceptor handler fails."""

    def __init__(self, name: str, cause: BaseException) -> None:
        self.name = name
        self.api_error = ApiError(
            f"Interceptor '{name}' failed: {cause}",
            ErrorKind.UNKNOWN_ERROR,
        )
        super().__init__(self.api_error.message)


# ---------------------------------------------------------------------------
# Classification
# ---------------------------------------------------------------------------


def kind_for_status(status_code: int) -> ErrorKind:
    """Map an HTTP status to an error kind."""
    if status_code in (401, 403):
        return ErrorKind.AUTH_ERROR
    if status_code in (400, 422):
        return ErrorKind.VALIDATION_ERROR
    if status_code == 408:
        return ErrorKind.TIMEOUT_ERROR
    if status_code >= 500:
        return ErrorKind.SERVER_ERROR
    return ErrorKind.UNKNOWN_ERROR


def classify(
    error_or_status: BaseException | int,
    message: str | None = None,
    response_data: Any = None,
) -> ApiError:
    """Classify a raw exception or HTTP status into an ``ApiError``.

    Timeouts are checked first: ``httpx.TimeoutException`` is a
    ``httpx.TransportError`` and the builtin ``TimeoutError`` is an ``OSError``.
    """
    if isinstance(error_or_status, ApiError):
        return error_or_status

    if isinstance(error_or_status, bool):
        raise TypeError("classify() expects an exception or an HTTP status code")

    if isinstance(error_or_status, int):
        kind = kind_for_status(error_or_status)
        return ApiError(
            message or _DEFAULT_MESSAGES[kind],
            kind,
            status_code=error_or_status,
            response_data=response_data,
        )

    if isinstance(
        error_or_status, (asyncio.TimeoutError, TimeoutError, httpx.TimeoutException)
    ):
        kind = ErrorKind.TIMEOUT_ERROR
    elif isinstance(error_or_status, (httpx.TransportError, ConnectionError, OSError)):
        kind = ErrorKind.NETWORK_ERROR
    else:
        kind = ErrorKind.UNKNOWN_ERROR

    detail = message or str(error_or_status) or _DEFAULT_MESSAGES[kind]
    return ApiError(detail, kind, response_data=response_data)
