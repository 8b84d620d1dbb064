"""Request-side models: endpoint, per-call request config and retry attempt."""

from __future__ import annotations

import time
from collections.abc import Mapping
from dataclasses import dataclass, field, replace
from typing import Any
from urllib.parse import urlencode

import httpx

HTTP_METHODS = frozenset({"GET", "POST", "PUT", "PATCH", "DELETE", "HEAD", "OPTIONS"})


def _query_value(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


@dataclass(frozen=True)
class Endpoint:
    """A path plus optional query parameters. Immutable per call."""

    path: str
    query: tuple[tuple[str, str], ...] = ()

    @classmethod
    def of(cls, path: str, query: Mapping[str, Any] | None = None) -> Endpoint:
        """Build an endpoint, dropping ``None`` query values.

        List/tuple values expand into repeated keys.
        """
        pairs: list[tuple[str, str]] = []
        for key, value in (query or {}).items():
            if value is None:
                continue
            if isinstance(value, (list, tuple)):
                pairs.extend((key, _query_value(v)) for v in value if v is not None)
            else:
                pairs.append((key, _query_value(value)))
        return cls(path=path, query=tuple(pairs))

    @property
    def target(self) -> str:
        """Path with the encoded query string appended."""
        if not self.query:
            return self.path
        separator = "&" if "?" in self.path else "?"
        return f"{self.path}{separator}{urlencode(self.query)}"

    def __str__(self) -> str:
        return self.target


@dataclass
class RequestConfig:
    """Per-call request configuration.

    Owned by the call that builds it; never shared across concurrent calls.
    ``headers`` is an ordered, case-insensitive multimap.
    """

    method: str = "GET"
    headers: httpx.Headers = field(default_factory=httpx.Headers)
    body: Any = None
    timeout: float | None = None  # seconds, overrides the client default
    retry: bool = True
    skip_auth: bool = False
    skip_interceptors: bool = False

    def __post_init__(self) -> None:
        self.method = self.method.upper()
        if self.method not in HTTP_METHODS:
            raise ValueError(f"Unsupported HTTP method: {self.method}")
        if not isinstance(self.headers, httpx.Headers):
            self.headers = httpx.Headers(self.headers)
        if self.timeout is not None and self.timeout <= 0:
            raise ValueError("timeout must be positive")

    @property
    def has_body(self) -> bool:
        return self.body is not None

    def copy(self, **changes: Any) -> RequestConfig:
        """Independent copy (headers included), optionally with changes."""
        changes.setdefault("headers", httpx.Headers(self.headers))
        return replace(self, **changes)


@dataclass(frozen=True)
class Attempt:
    """One dispatch inside a single ``request()`` retry loop."""

    index: int
    started_at: float = field(default_factory=time.monotonic)

    def elapsed_ms(self) -> float:
        return (time.monotonic() - self.started_at) * 1000
