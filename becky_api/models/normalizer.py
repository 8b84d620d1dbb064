"""Response normalization.

Parses the heterogeneous payloads the backend returns into the canonical
``ApiResponse``. Three shapes are recognised, each by its own branch:

1. bare payload: a JSON array or an object without envelope markers
2. envelope: ``{ success, data, error }`` (or a singular resource key such as
   ``receipt``/``event`` in place of ``data``); an object ``data`` is returned
   as-is even when sibling keys hold lists
3. paginated: a list under ``data``/``clients``/``conversations``/... next to
   ``total``/``page``/``limit``

HTTP status >= 400 always produces a failure regardless of the body. The
normalizer never raises.
"""

from __future__ import annotations

import json
import logging
from enum import Enum
from http import HTTPStatus
from typing import Any

from becky_api.errors import ApiError, ErrorKind, user_message_for
from becky_api.models.responses import ApiResponse

logger = logging.getLogger(__name__)

# Keys that carry a list payload in paginated responses
_LIST_KEYS = (
    "data",
    "clients",
    "conversations",
    "messages",
    "events",
    "receipts",
    "goals",
    "milestones",
    "testimonials",
)

# Keys that carry a single resource in envelopes without ``data``
_RESOURCE_KEYS = (
    "receipt",
    "event",
    "client",
    "conversation",
    "goal",
    "testimonial",
)

_PAGINATION_KEYS = ("total", "page", "limit")

# Backend event fields -> client event fields
_EVENT_FIELD_MAP = {
    "startDateTime": "startTime",
    "endDateTime": "endTime",
}


class ResponseShape(str, Enum):
    """Detected payload shape."""

    EMPTY = "empty"
    BARE = "bare"
    ENVELOPE = "envelope"
    PAGINATED = "paginated"


class MalformedBodyError(Exception):
    """Response body is not valid UTF-8 JSON."""


def normalize_event_fields(event: Any) -> Any:
    """Map ``startDateTime``/``endDateTime`` to ``startTime``/``endTime``."""
    if not isinstance(event, dict):
        return event
    normalized = dict(event)
    for source, target in _EVENT_FIELD_MAP.items():
        if normalized.get(source) and not normalized.get(target):
            normalized[target] = normalized.pop(source)
    return normalized


def _as_int(value: Any) -> int | None:
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, str) and value.strip().isdigit():
        return int(value)
    return None


def status_message(status_code: int) -> str:
    """Generic error text derived from an HTTP status code."""
    try:
        phrase = HTTPStatus(status_code).phrase
    except ValueError:
        return f"Request failed with status {status_code}"
    return f"Request failed with status {status_code} ({phrase})"


def error_message_from_body(body: Any) -> str | None:
    """Extract ``error`` or ``message`` from an error body, if present."""
    if not isinstance(body, dict):
        return None
    for key in ("error", "message"):
        value = body.get(key)
        if isinstance(value, str) and value.strip():
            return value.strip()
        if isinstance(value, dict):
            nested = value.get("message")
            if isinstance(nested, str) and nested.strip():
                return nested.strip()
    return None


def detect_shape(body: Any) -> ResponseShape:
    """Classify a decoded JSON body into one of the supported shapes."""
    if body is None:
        return ResponseShape.EMPTY
    if not isinstance(body, dict):
        return ResponseShape.BARE
    # A non-list ``data`` is the payload; sibling lists belong to it.
    has_object_data = "data" in body and not isinstance(body["data"], list)
    if "success" in body:
        if has_object_data:
            return ResponseShape.ENVELOPE
        list_key = _find_list_key(body)
        if list_key is not None and (
            list_key != "data" or any(k in body for k in _PAGINATION_KEYS)
        ):
            return ResponseShape.PAGINATED
        return ResponseShape.ENVELOPE
    # A single resource (it has an id) may legitimately embed lists.
    if has_object_data:
        return ResponseShape.BARE
    if "id" not in body and _find_list_key(body) is not None:
        return ResponseShape.PAGINATED
    return ResponseShape.BARE


def _find_list_key(body: dict) -> str | None:
    for key in _LIST_KEYS:
        if isinstance(body.get(key), list):
            return key
    return None


class ResponseNormalizer:
    """Turns raw response bodies into canonical ``ApiResponse`` values."""

    def decode(self, raw_body: bytes | str | None) -> Any:
        """Decode a JSON body; empty bodies decode to ``None``.

        Raises ``MalformedBodyError`` for non-JSON content.
        """
        if raw_body is None:
            return None
        if isinstance(raw_body, bytes):
            try:
                raw_body = raw_body.decode("utf-8")
            except UnicodeDecodeError as exc:
                raise MalformedBodyError(str(exc)) from exc
        if not raw_body.strip():
            return None
        try:
            return json.loads(raw_body)
        except ValueError as exc:
            raise MalformedBodyError(str(exc)) from exc

    def parse(self, raw_body: bytes | str | None, status_code: int) -> ApiResponse[Any]:
        """Parse a raw body and HTTP status into an ``ApiResponse``."""
        try:
            body = self.decode(raw_body)
        except MalformedBodyError as exc:
            if status_code >= 400:
                return ApiResponse.fail(status_message(status_code))
            logger.warning("Malformed JSON in %d response: %s", status_code, exc)
            return ApiResponse.fail(user_message_for(ErrorKind.UNKNOWN_ERROR))

        if status_code >= 400:
            return ApiResponse.fail(
                error_message_from_body(body) or status_message(status_code)
            )

        return self.parse_body(body)

    def parse_body(self, body: Any) -> ApiResponse[Any]:
        """Normalize an already-decoded 2xx body."""
        shape = detect_shape(body)

        if shape is ResponseShape.EMPTY:
            return ApiResponse.ok({})

        if shape is ResponseShape.BARE:
            return ApiResponse.ok(body)

        if shape is ResponseShape.PAGINATED:
            return self._parse_paginated(body)

        return self._parse_envelope(body)

    def _parse_envelope(self, body: dict) -> ApiResponse[Any]:
        if body.get("success") is False:
            return ApiResponse.fail(
                error_message_from_body(body)
                or user_message_for(ErrorKind.UNKNOWN_ERROR)
            )

        if "data" in body:
            data = body["data"]
        else:
            resource_key = next((k for k in _RESOURCE_KEYS if k in body), None)
            if resource_key is not None:
                data = body[resource_key]
                if resource_key == "event":
                    data = normalize_event_fields(data)
            else:
                # {success: true, ...fields} carries its payload inline
                data = {k: v for k, v in body.items() if k != "success"}

        return ApiResponse.ok(
            {} if data is None else data,
            total=_as_int(body.get("total")),
            page=_as_int(body.get("page")),
            limit=_as_int(body.get("limit")),
        )

    def _parse_paginated(self, body: dict) -> ApiResponse[Any]:
        if body.get("success") is False:
            return self._parse_envelope(body)

        list_key = _find_list_key(body)
        items = body[list_key]
        if list_key == "events":
            items = [normalize_event_fields(event) for event in items]

        return ApiResponse.ok(
            items,
            total=_as_int(body.get("total")),
            page=_as_int(body.get("page")),
            limit=_as_int(body.get("limit")),
        )

    def from_error(self, error: ApiError) -> ApiResponse[Any]:
        """Failure envelope carrying the fixed user message for ``error``."""
        return ApiResponse.fail(error.user_message())
