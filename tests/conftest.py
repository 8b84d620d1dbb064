"""Shared test fixtures for the API client test suite."""

from __future__ import annotations

import os
import random
from collections.abc import Callable

import httpx
import pytest

from becky_api.client import APIClient
from becky_api.config.resolver import ConfigResolver
from becky_api.config.settings import ClientSettings
from becky_api.interceptors.pipeline import InterceptorPipeline
from becky_api.resilience.retry_policy import RetryPolicy

BASE_URL = "https://api.example.com"


# ---------------------------------------------------------------------------
# Keep the developer's environment out of ClientSettings
# ---------------------------------------------------------------------------

@pytest.fixture(autouse=True)
def _clear_client_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Remove BECKY_* env vars so settings only come from the test."""
    for key in list(os.environ):
        if key.startswith("BECKY_"):
            monkeypatch.delenv(key, raising=False)


# ---------------------------------------------------------------------------
# Settings fixture
# ---------------------------------------------------------------------------

@pytest.fixture
def settings() -> ClientSettings:
    """Test settings with a fixed base URL and fast retries."""
    return ClientSettings(
        api_url=BASE_URL,
        timeout_seconds=5.0,
        retry_max_attempts=3,
        retry_initial_delay=1.0,
        retry_max_delay=10.0,
        retry_jitter_ratio=0.3,
    )


# ---------------------------------------------------------------------------
# Component fixtures
# ---------------------------------------------------------------------------

@pytest.fixture
def retry_policy() -> RetryPolicy:
    return RetryPolicy(
        max_attempts=3,
        initial_delay=1.0,
        max_delay=10.0,
        jitter_ratio=0.3,
        rng=random.Random(1234),
    )


@pytest.fixture
def make_client(
    settings: ClientSettings, retry_policy: RetryPolicy
) -> Callable[..., APIClient]:
    """Factory building an ``APIClient`` on top of an ``httpx.MockTransport``."""

    def _make(
        handler: Callable[[httpx.Request], httpx.Response],
        pipeline: InterceptorPipeline | None = None,
        policy: RetryPolicy | None = None,
        timeout_seconds: float | None = None,
    ) -> APIClient:
        return APIClient(
            ConfigResolver(settings),
            pipeline,
            policy or retry_policy,
            timeout_seconds=timeout_seconds,
            transport=httpx.MockTransport(handler),
        )

    return _make

