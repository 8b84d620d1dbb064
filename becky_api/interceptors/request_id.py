"""Request ID propagation.

Adds an ``X-Request-ID`` header (UUID4) to every outgoing request so that a
call can be traced through backend logs. A caller-provided ID is kept.
"""

from __future__ import annotations

import uuid

from becky_api.models.requests import RequestConfig

REQUEST_ID_HEADER = "X-Request-ID"


def request_id_interceptor(url: str, config: RequestConfig) -> tuple[str, RequestConfig]:
    if REQUEST_ID_HEADER in config.headers:
        return url, config

    updated = config.copy()
    updated.headers[REQUEST_ID_HEADER] = str(uuid.uuid4())
    return url, updated
