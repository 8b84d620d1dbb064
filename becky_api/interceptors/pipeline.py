"""Ordered request/response interceptor pipeline.

Interceptors are plain values, a tagged union of ``RequestInterceptor`` and
``ResponseInterceptor``, kept in two registration-ordered lists. They are
registered once at startup and never removed. Registering the same handler
twice runs it twice.

Request interceptors may rewrite the URL and config; each sees the output of
the previous one. Response interceptors observe only: their return value is
ignored and the original response is passed on. Handlers may be sync or
async.

If a handler raises, the pipeline stops and raises ``InterceptorError``
wrapping an UNKNOWN_ERROR ``ApiError``.
"""

from __future__ import annotations

import inspect
import logging
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from typing import Any, Union

import httpx

from becky_api.errors import InterceptorError, InterceptorRegistrationError
from becky_api.models.requests import RequestConfig

logger = logging.getLogger(__name__)

RequestResult = tuple[str, RequestConfig]
RequestHandler = Callable[
    [str, RequestConfig], Union[RequestResult, Awaitable[RequestResult]]
]
ResponseHandler = Callable[[httpx.Response], Any]


def _handler_name(handler: Callable[..., Any]) -> str:
    return getattr(handler, "__name__", None) or type(handler).__name__


@dataclass(frozen=True)
class RequestInterceptor:
    """Request-phase interceptor: may rewrite url and config."""

    name: str
    handler: RequestHandler


@dataclass(frozen=True)
class ResponseInterceptor:
    """Response-phase interceptor: observation only."""

    name: str
    handler: ResponseHandler


Interceptor = Union[RequestInterceptor, ResponseInterceptor]


class InterceptorPipeline:
    """Registration-ordered interceptor chain shared by all calls."""

    def __init__(self) -> None:
        self._request: list[RequestInterceptor] = []
        self._response: list[ResponseInterceptor] = []

    @property
    def request_interceptors(self) -> tuple[RequestInterceptor, ...]:
        return tuple(self._request)

    @property
    def response_interceptors(self) -> tuple[ResponseInterceptor, ...]:
        return tuple(self._response)

    def register(self, interceptor: Interceptor) -> None:
        """Append an interceptor to its phase's list."""
        if not callable(getattr(interceptor, "handler", None)):
            raise InterceptorRegistrationError(
                f"Interceptor {interceptor!r} has no callable handler"
            )
        if isinstance(interceptor, RequestInterceptor):
            self._request.append(interceptor)
        elif isinstance(interceptor, ResponseInterceptor):
            self._response.append(interceptor)
        else:
            raise InterceptorRegistrationError(
                f"Unsupported interceptor type: {type(interceptor).__name__}"
            )
        logger.debug(
            "Registered %s interceptor '%s'",
            "request" if isinstance(interceptor, RequestInterceptor) else "response",
            interceptor.name,
        )

    def add_request_interceptor(
        self, handler: RequestHandler, name: str | None = None
    ) -> RequestInterceptor:
        if not callable(handler):
            raise InterceptorRegistrationError(
                f"Request interceptor must be callable, got {type(handler).__name__}"
            )
        interceptor = RequestInterceptor(name=name or _handler_name(handler), handler=handler)
        self.register(interceptor)
        return interceptor

    def add_response_interceptor(
        self, handler: ResponseHandler, name: str | None = None
    ) -> ResponseInterceptor:
        if not callable(handler):
            raise InterceptorRegistrationError(
                f"Response interceptor must be callable, got {type(handler).__name__}"
            )
        interceptor = ResponseInterceptor(name=name or _handler_name(handler), handler=handler)
        self.register(interceptor)
        return interceptor

    async def run_request(self, url: str, config: RequestConfig) -> RequestResult:
        """Run request interceptors in order, threading url/config through."""
        for interceptor in self._request:
            try:
                result = interceptor.handler(url, config)
                if inspect.isawaitable(result):
                    result = await result
                url, config = _unpack_request_result(result)
            except Exception as exc:
                logger.error(
                    "Request interceptor '%s' failed: %s", interceptor.name, exc
                )
                raise InterceptorError(interceptor.name, exc) from exc
        return url, config

    async def run_response(self, response: httpx.Response) -> httpx.Response:
        """Run response interceptors in order; returns ``response`` unchanged."""
        for interceptor in self._response:
            try:
                result = interceptor.handler(response)
                if inspect.isawaitable(result):
                    await result
            except Exception as exc:
                logger.error(
                    "Response interceptor '%s' failed: %s", interceptor.name, exc
                )
                raise InterceptorError(interceptor.name, exc) from exc
        return response

    def __len__(self) -> int:
        return len(self._request) + len(self._response)


def _unpack_request_result(result: Any) -> RequestResult:
    if (
        not isinstance(result, tuple)
        or len(result) != 2
        or not isinstance(result[0], str)
        or not isinstance(result[1], RequestConfig)
    ):
        raise TypeError(
            "request interceptor must return a (url, RequestConfig) tuple, "
            f"got {type(result).__name__}"
        )
    return result
