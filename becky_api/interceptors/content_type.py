"""Content-Type defaulting for requests with a body."""

from __future__ import annotations

from becky_api.models.requests import RequestConfig

JSON_CONTENT_TYPE = "application/json"


def content_type_interceptor(url: str, config: RequestConfig) -> tuple[str, RequestConfig]:
    """Set ``Content-Type: application/json`` when a body is sent without one."""
    if not config.has_body or "content-type" in config.headers:
        return url, config

    updated = config.copy()
    updated.headers["Content-Type"] = JSON_CONTENT_TYPE
    return url, updated
