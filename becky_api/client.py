"""Resilient async API client.

``APIClient.request`` turns a logical endpoint call into a network exchange:

    build url -> request interceptors -> dispatch (deadline)
        success  -> normalize -> response interceptors -> return
        failure  -> classify -> RetryPolicy.next_delay
                        delay -> sleep -> dispatch again
                        None  -> normalize as error -> return

It never raises for expected failure modes; every outcome is an
``ApiResponse``. Only programmer errors (``ConfigurationError``) escape.

The client holds no per-call state, so one instance can serve any number of
concurrent calls.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Mapping
from typing import Any

import httpx
from pydantic import TypeAdapter, ValidationError

from becky_api.config.resolver import ConfigResolver
from becky_api.errors import (
    ApiError,
    ErrorKind,
    InterceptorError,
    classify,
    user_message_for,
)
from becky_api.interceptors.pipeline import InterceptorPipeline
from becky_api.models.normalizer import ResponseNormalizer
from becky_api.models.requests import Attempt, Endpoint, RequestConfig
from becky_api.models.responses import ApiResponse
from becky_api.resilience.retry_policy import RetryPolicy

logger = logging.getLogger(__name__)

_REQUEST_OPTIONS = frozenset({"headers", "timeout", "retry", "skip_auth", "skip_interceptors"})


class APIClient:
    """Process-scoped API client.

    Parameters
    ----------
    resolver:
        Base URL resolver; resolution happens on the first request.
    pipeline:
        Interceptor pipeline shared by all calls.
    retry_policy:
        Retry policy (defaults to one built from the resolver's settings).
    normalizer:
        Response normalizer (default ``ResponseNormalizer()``).
    timeout_seconds:
        Per-attempt deadline (defaults to ``settings.timeout_seconds``, 30s).
    transport:
        Optional ``httpx`` transport, e.g. ``httpx.MockTransport`` in tests.
    """

    def __init__(
        self,
        resolver: ConfigResolver,
        pipeline: InterceptorPipeline | None = None,
        retry_policy: RetryPolicy | None = None,
        *,
        normalizer: ResponseNormalizer | None = None,
        timeout_seconds: float | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._resolver = resolver
        self._pipeline = pipeline if pipeline is not None else InterceptorPipeline()
        self._retry_policy = retry_policy or RetryPolicy.from_settings(resolver.settings)
        self._normalizer = normalizer or ResponseNormalizer()
        self._timeout_seconds = timeout_seconds or resolver.settings.timeout_seconds
        self._transport = transport

    @property
    def base_url(self) -> str:
        return self._resolver.resolve_base_url()

    @property
    def interceptors(self) -> InterceptorPipeline:
        return self._pipeline

    @property
    def retry_policy(self) -> RetryPolicy:
        return self._retry_policy

    @property
    def timeout_seconds(self) -> float:
        return self._timeout_seconds

    # ------------------------------------------------------------------
    # Core request loop
    # ------------------------------------------------------------------

    async def request(
        self,
        endpoint: str | Endpoint,
        config: RequestConfig | None = None,
        *,
        response_model: Any = None,
    ) -> ApiResponse[Any]:
        """Perform a request with interceptors, deadline and retries.

        Raises
        ------
        ConfigurationError
            If the base URL cannot be resolved.
        TypeError
            If the body cannot be serialized to JSON.
        """
        config = config.copy() if config is not None else RequestConfig()
        url = self._resolver.build_url(endpoint)

        if not config.skip_interceptors:
            try:
                url, config = await self._pipeline.run_request(url, config)
            except InterceptorError as exc:
                return self._fail(exc.api_error, config.method, url)

        timeout = config.timeout if config.timeout is not None else self._timeout_seconds
        retries = 0

        while True:
            attempt = Attempt(index=retries)
            response: httpx.Response | None = None
            try:
                response = await self._dispatch(url, config, timeout)
            except (httpx.HTTPError, asyncio.TimeoutError, OSError) as exc:
                error = classify(exc)
            else:
                error = self._retryable_status_error(response)
                if error is None:
                    return await self._finish(response, config, url, attempt, response_model)

            delay = self._retry_policy.next_delay(retries, error) if config.retry else None
            if delay is None:
                if response is not None:
                    return await self._finish(
                        response, config, url, attempt, response_model, error=error
                    )
                return self._fail(error, config.method, url, attempt)

            logger.warning(
                "%s %s failed with %s (attempt %d/%d), retrying in %.2fs",
                config.method,
                url,
                error.kind.value,
                retries + 1,
                self._retry_policy.max_attempts + 1,
                delay,
                extra={
                    "method": config.method,
                    "url": url,
                    "attempt": retries + 1,
                    "delay_seconds": round(delay, 3),
                    "error_kind": error.kind.value,
                    "status_code": error.status_code,
                    "duration_ms": round(attempt.elapsed_ms(), 1),
                },
            )
            await asyncio.sleep(delay)
            retries += 1

    async def _dispatch(
        self, url: str, config: RequestConfig, timeout: float
    ) -> httpx.Response:
        """Send one attempt, cancelling it when the deadline passes."""
        kwargs: dict[str, Any] = {}
        if config.body is not None:
            if isinstance(config.body, (str, bytes)):
                kwargs["content"] = config.body
            else:
                kwargs["json"] = config.body

        async with httpx.AsyncClient(
            transport=self._transport, timeout=timeout, follow_redirects=True
        ) as client:
            return await asyncio.wait_for(
                client.request(config.method, url, headers=config.headers, **kwargs),
                timeout=timeout,
            )

    def _retryable_status_error(self, response: httpx.Response) -> ApiError | None:
        """Classified error for a retryable HTTP status, else ``None``."""
        if response.status_code < 400:
            return None
        error = classify(response.status_code)
        return error if error.retryable else None

    async def _finish(
        self,
        response: httpx.Response,
        config: RequestConfig,
        url: str,
        attempt: Attempt,
        response_model: Any,
        error: ApiError | None = None,
    ) -> ApiResponse[Any]:
        parsed = self._normalizer.parse(response.content, response.status_code)

        if not config.skip_interceptors:
            try:
                await self._pipeline.run_response(response)
            except InterceptorError as exc:
                return self._fail(exc.api_error, config.method, url, attempt)

        if 300 <= response.status_code < 400:
            # Redirects are followed, so one still here has no usable target
            return self._fail(
                ApiError(
                    f"Unresolved redirect ({response.status_code})",
                    ErrorKind.UNKNOWN_ERROR,
                    status_code=response.status_code,
                ),
                config.method,
                url,
                attempt,
            )

        if parsed.success:
            if response_model is not None:
                return self._validate(parsed, response_model, config.method, url)
            logger.debug(
                "%s %s succeeded with %d",
                config.method,
                url,
                response.status_code,
                extra={
                    "method": config.method,
                    "url": url,
                    "status_code": response.status_code,
                    "attempt": attempt.index + 1,
                    "duration_ms": round(attempt.elapsed_ms(), 1),
                },
            )
            return parsed

        if error is None:
            if response.status_code >= 400:
                error = classify(response.status_code, message=parsed.error)
            else:
                error = ApiError(
                    parsed.error or "Request failed",
                    ErrorKind.UNKNOWN_ERROR,
                    status_code=response.status_code,
                )
        return self._fail(error, config.method, url, attempt)

    def _validate(
        self, parsed: ApiResponse[Any], response_model: Any, method: str, url: str
    ) -> ApiResponse[Any]:
        try:
            data = TypeAdapter(response_model).validate_python(parsed.data)
        except ValidationError as exc:
            logger.error(
                "%s %s returned data that does not match %s: %s",
                method,
                url,
                getattr(response_model, "__name__", response_model),
                exc.error_count(),
            )
            return ApiResponse.fail(user_message_for(ErrorKind.UNKNOWN_ERROR))
        return ApiResponse.ok(data, total=parsed.total, page=parsed.page, limit=parsed.limit)

    def _fail(
        self,
        error: ApiError,
        method: str,
        url: str,
        attempt: Attempt | None = None,
    ) -> ApiResponse[Any]:
        logger.error(
            "%s %s failed: %s",
            method,
            url,
            error.message,
            extra={
                "method": method,
                "url": url,
                "error_kind": error.kind.value,
                "status_code": error.status_code,
                "attempt": attempt.index + 1 if attempt else 0,
            },
        )
        return self._normalizer.from_error(error)

    # ------------------------------------------------------------------
    # Verb helpers
    # ------------------------------------------------------------------

    def _config(self, method: str, body: Any, options: Mapping[str, Any]) -> RequestConfig:
        unknown = set(options) - _REQUEST_OPTIONS
        if unknown:
            raise TypeError(f"Unexpected request options: {', '.join(sorted(unknown))}")
        return RequestConfig(method=method, body=body, **options)

    async def get(
        self,
        endpoint: str | Endpoint,
        query: Mapping[str, Any] | None = None,
        *,
        response_model: Any = None,
        **options: Any,
    ) -> ApiResponse[Any]:
        if query:
            path = endpoint.target if isinstance(endpoint, Endpoint) else endpoint
            endpoint = Endpoint.of(path, query)
        return await self.request(
            endpoint, self._config("GET", None, options), response_model=response_model
        )

    async def post(
        self,
        endpoint: str | Endpoint,
        body: Any = None,
        *,
        response_model: Any = None,
        **options: Any,
    ) -> ApiResponse[Any]:
        return await self.request(
            endpoint, self._config("POST", body, options), response_model=response_model
        )

    async def put(
        self,
        endpoint: str | Endpoint,
        body: Any = None,
        *,
        response_model: Any = None,
        **options: Any,
    ) -> ApiResponse[Any]:
        return await self.request(
            endpoint, self._config("PUT", body, options), response_model=response_model
        )

    async def patch(
        self,
        endpoint: str | Endpoint,
        body: Any = None,
        *,
        response_model: Any = None,
        **options: Any,
    ) -> ApiResponse[Any]:
        return await self.request(
            endpoint, self._config("PATCH", body, options), response_model=response_model
        )

    async def delete(
        self,
        endpoint: str | Endpoint,
        *,
        response_model: Any = None,
        **options: Any,
    ) -> ApiResponse[Any]:
        return await self.request(
            endpoint, self._config("DELETE", None, options), response_model=response_model
        )
