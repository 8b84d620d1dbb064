"""Resilient async API client for the Becky CRM backend."""

from becky_api.client import APIClient
from becky_api.config.resolver import ClientConfig, ConfigResolver
from becky_api.config.settings import ClientSettings
from becky_api.errors import (
    ApiError,
    ClientError,
    ConfigurationError,
    ErrorKind,
    InterceptorRegistrationError,
    classify,
)
from becky_api.main import create_client
from becky_api.models.requests import Endpoint, RequestConfig
from becky_api.models.responses import ApiResponse
from becky_api.resilience.retry_policy import RetryPolicy

__all__ = [
    "APIClient",
    "ApiError",
    "ApiResponse",
    "ClientConfig",
    "ClientError",
    "ClientSettings",
    "ConfigResolver",
    "ConfigurationError",
    "Endpoint",
    "ErrorKind",
    "InterceptorRegistrationError",
    "RequestConfig",
    "RetryPolicy",
    "classify",
    "create_client",
]
