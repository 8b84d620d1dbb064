"""Process wiring for the API client.

``create_client`` builds the single process-scoped ``APIClient``: settings,
base URL resolver, interceptor pipeline, retry policy. Build it once at
startup and pass it to whoever needs it.

Request interceptors, in order: content type, auth, request id, then request
logging in debug builds. Response interceptors: rate limit, then response
logging in debug builds.
"""

from __future__ import annotations

import logging

import httpx

from becky_api.client import APIClient
from becky_api.config.resolver import ConfigResolver
from becky_api.config.settings import ClientSettings
from becky_api.integration.credential_store import (
    CredentialStore,
    InMemoryCredentialStore,
    JsonFileCredentialStore,
)
from becky_api.interceptors.auth import AuthInterceptor
from becky_api.interceptors.content_type import content_type_interceptor
from becky_api.interceptors.pipeline import InterceptorPipeline
from becky_api.interceptors.request_id import request_id_interceptor
from becky_api.interceptors.request_logging import (
    rate_limit_interceptor,
    request_logging_interceptor,
    response_logging_interceptor,
)
from becky_api.logging_config import configure_logging
from becky_api.resilience.retry_policy import RetryPolicy

logger = logging.getLogger(__name__)


def default_credential_store(settings: ClientSettings) -> CredentialStore:
    """JSON file store when a path is configured, else an empty in-memory one."""
    if settings.credential_store_path:
        return JsonFileCredentialStore(settings.credential_store_path)
    logger.info("No credential store configured; requests will be sent without auth")
    return InMemoryCredentialStore()


def build_pipeline(
    settings: ClientSettings, credential_store: CredentialStore
) -> InterceptorPipeline:
    """Register the built-in interceptors in their fixed order."""
    pipeline = InterceptorPipeline()
    pipeline.add_request_interceptor(content_type_interceptor, name="content_type")
    pipeline.add_request_interceptor(
        AuthInterceptor(credential_store, token_key=settings.auth_token_key),
        name="auth",
    )
    pipeline.add_request_interceptor(request_id_interceptor, name="request_id")
    if settings.debug:
        pipeline.add_request_interceptor(request_logging_interceptor, name="request_logging")

    pipeline.add_response_interceptor(rate_limit_interceptor, name="rate_limit")
    if settings.debug:
        pipeline.add_response_interceptor(
            response_logging_interceptor, name="response_logging"
        )
    return pipeline


def create_client(
    settings: ClientSettings | None = None,
    *,
    credential_store: CredentialStore | None = None,
    transport: httpx.AsyncBaseTransport | None = None,
    setup_logging: bool = False,
) -> APIClient:
    """Create and configure the process-scoped ``APIClient``.

    The base URL is resolved lazily on the first request, so a missing
    configuration surfaces as ``ConfigurationError`` at first use. With
    ``setup_logging`` the root logger is switched to JSON output at
    ``settings.log_level``.
    """
    settings = settings or ClientSettings()
    if setup_logging:
        configure_logging(settings.log_level)
    store = credential_store or default_credential_store(settings)

    client = APIClient(
        resolver=ConfigResolver(settings),
        pipeline=build_pipeline(settings, store),
        retry_policy=RetryPolicy.from_settings(settings),
        timeout_seconds=settings.timeout_seconds,
        transport=transport,
    )

    logger.info(
        "API client initialized (timeout=%.1fs, %r, debug=%s)",
        settings.timeout_seconds,
        client.retry_policy,
        settings.debug,
    )
    return client
