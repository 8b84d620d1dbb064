"""Read-only access to the persisted credential key-value store.

The client only ever reads the bearer token; writing it (login/logout) is the
job of the surrounding application. A missing token is not an error here: the
auth interceptor simply omits the header and the server rejects the call.

SECURITY: Never logs token values.
"""

from __future__ import annotations

import asyncio
import json
import logging
import time
from collections.abc import Mapping
from pathlib import Path
from typing import Protocol, runtime_checkable

logger = logging.getLogger(__name__)


@runtime_checkable
class CredentialStore(Protocol):
    """Async key-value reader for persisted credentials."""

    async def get_item(self, key: str) -> str | None: ...


class InMemoryCredentialStore:
    """Credential store backed by a plain mapping (tests, embedded use)."""

    def __init__(self, items: Mapping[str, str] | None = None) -> None:
        self._items = dict(items or {})

    async def get_item(self, key: str) -> str | None:
        return self._items.get(key)


class JsonFileCredentialStore:
    """Credential store backed by a JSON object file.

    The file is read off the event loop thread. Parsed contents are cached for
    ``cache_ttl_seconds`` so that a burst of requests does not re-read the file.

    Parameters
    ----------
    path:
        Path to a JSON file containing a flat object of string values.
    cache_ttl_seconds:
        How long parsed contents are reused (default 5 seconds, 0 disables).
    """

    def __init__(self, path: str | Path, cache_ttl_seconds: float = 5.0) -> None:
        self._path = Path(path)
        self._cache_ttl_seconds = cache_ttl_seconds
        self._cached: tuple[dict[str, str], float] | None = None

    @property
    def path(self) -> Path:
        return self._path

    async def get_item(self, key: str) -> str | None:
        items = await self._load()
        value = items.get(key)
        return value if isinstance(value, str) and value else None

    async def _load(self) -> dict[str, str]:
        if self._cached is not None:
            items, expiry = self._cached
            if time.monotonic() < expiry:
                return items

        items = await asyncio.to_thread(self._read)
        self._cached = (items, time.monotonic() + self._cache_ttl_seconds)
        return items

    def _read(self) -> dict[str, str]:
        if not self._path.exists():
            logger.debug("Credential store file %s does not exist", self._path)
            return {}
        raw = json.loads(self._path.read_text(encoding="utf-8"))
        if not isinstance(raw, dict):
            raise ValueError(f"Credential store at {self._path} is not a JSON object")
        return raw
