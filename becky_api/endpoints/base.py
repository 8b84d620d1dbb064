"""Shared base for resource endpoint groups."""

from __future__ import annotations

from urllib.parse import quote

from becky_api.client import APIClient


def path_id(value: str) -> str:
    """Percent-encode a resource id for use as a path segment."""
    if not value:
        raise ValueError("resource id must be a non-empty string")
    return quote(str(value), safe="")


class ResourceApi:
    """Thin wrapper binding endpoint helpers to an ``APIClient``."""

    def __init__(self, client: APIClient) -> None:
        self._client = client

    @property
    def client(self) -> APIClient:
        return self._client
