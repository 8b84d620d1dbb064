"""Public models for the API client."""

from becky_api.models.normalizer import ResponseNormalizer, ResponseShape, detect_shape
from becky_api.models.requests import Attempt, Endpoint, RequestConfig
from becky_api.models.responses import ApiResponse

__all__ = [
    "ApiResponse",
    "Attempt",
    "Endpoint",
    "RequestConfig",
    "ResponseNormalizer",
    "ResponseShape",
    "detect_shape",
]
