"""Resilience components for the API client."""

from becky_api.resilience.retry_policy import RetryPolicy

__all__ = [
    "RetryPolicy",
]
