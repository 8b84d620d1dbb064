"""Interceptor pipeline and built-in interceptors."""

from becky_api.interceptors.auth import AuthInterceptor
from becky_api.interceptors.content_type import content_type_interceptor
from becky_api.interceptors.pipeline import (
    Interceptor,
    InterceptorPipeline,
    RequestInterceptor,
    ResponseInterceptor,
)
from becky_api.interceptors.request_id import request_id_interceptor
from becky_api.interceptors.request_logging import (
    rate_limit_interceptor,
    request_logging_interceptor,
    response_logging_interceptor,
)

__all__ = [
    "AuthInterceptor",
    "Interceptor",
    "InterceptorPipeline",
    "RequestInterceptor",
    "ResponseInterceptor",
    "content_type_interceptor",
    "rate_limit_interceptor",
    "request_id_interceptor",
    "request_logging_interceptor",
    "response_logging_interceptor",
]
