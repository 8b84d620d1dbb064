"""Structured request/response logging interceptors.

The request and response logging interceptors are registered in debug builds
only. The rate limit interceptor is always on and only speaks up when the
server sends ``X-RateLimit-*`` headers.

SECURITY: Authorization and cookie headers are redacted before logging.
"""

from __future__ import annotations

import json
import logging
from datetime import datetime, timezone

import httpx

from becky_api.interceptors.request_id import REQUEST_ID_HEADER
from becky_api.models.requests import RequestConfig

logger = logging.getLogger(__name__)

_REDACTED_HEADERS = frozenset({"authorization", "cookie", "set-cookie", "x-api-key"})
_BODY_METHODS = frozenset({"POST", "PUT", "PATCH"})
_LOW_RATE_LIMIT = 10


def redact_headers(headers: httpx.Headers) -> dict[str, str]:
    """Header dict safe for logs."""
    return {
        key: "[REDACTED]" if key.lower() in _REDACTED_HEADERS else value
        for key, value in headers.items()
    }


def request_logging_interceptor(
    url: str, config: RequestConfig
) -> tuple[str, RequestConfig]:
    extra: dict = {
        "method": config.method,
        "url": url,
        "request_id": config.headers.get(REQUEST_ID_HEADER),
        "headers": redact_headers(config.headers),
    }
    if config.has_body and config.method in _BODY_METHODS:
        body = config.body
        if not isinstance(body, (str, bytes)):
            body = json.dumps(body, default=str)
        extra["body_bytes"] = len(body)
    logger.debug("API request %s %s", config.method, url, extra=extra)
    return url, config


def response_logging_interceptor(response: httpx.Response) -> None:
    request = response.request
    extra = {
        "method": request.method,
        "url": str(request.url),
        "status_code": response.status_code,
        "request_id": request.headers.get(REQUEST_ID_HEADER),
    }
    if response.status_code >= 400:
        logger.warning(
            "API response %d %s - %s",
            response.status_code,
            response.reason_phrase,
            request.url,
            extra=extra,
        )
    else:
        logger.debug(
            "API response %d %s - %s",
            response.status_code,
            response.reason_phrase,
            request.url,
            extra=extra,
        )


def rate_limit_interceptor(response: httpx.Response) -> None:
    """Log ``X-RateLimit-*`` headers and warn when the budget runs low."""
    remaining = response.headers.get("X-RateLimit-Remaining")
    limit = response.headers.get("X-RateLimit-Limit")
    if remaining is None or limit is None:
        return

    try:
        remaining_count = int(remaining)
    except ValueError:
        logger.debug("Ignoring non-numeric X-RateLimit-Remaining: %r", remaining)
        return

    reset = response.headers.get("X-RateLimit-Reset")
    reset_at = None
    if reset and reset.isdigit():
        reset_at = datetime.fromtimestamp(int(reset), tz=timezone.utc).isoformat()

    if remaining_count < _LOW_RATE_LIMIT:
        logger.warning(
            "Low on API requests: %d/%s remaining (resets at %s)",
            remaining_count,
            limit,
            reset_at or "unknown",
        )
    else:
        logger.debug("Rate limit: %d/%s requests remaining", remaining_count, limit)
