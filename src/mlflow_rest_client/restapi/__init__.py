"""MLflow REST API client package.

Provides a lightweight HTTP client for the MLflow tracking and model
registry REST API that returns validated response types and raises typed
errors.

Exports:
    MlflowRestApiClient: HTTP client with authentication and error handling.
    types: Module containing Pydantic models for requests and responses.
    endpoints: Module containing endpoint paths.
    ApiError: Raised for non-2xx replies.
    DEFAULT_TIMEOUT: Default HTTP request timeout.
"""

from ..config import DEFAULT_TIMEOUT
from . import endpoints, types
from .client import MlflowRestApiClient, now_millis
from .errors import (
    ApiError,
    IncompatibleServerError,
    InvalidRequestError,
    MlflowClientError,
    RequestSerializationError,
    ResponseDecodeError,
)

__all__ = [
    "DEFAULT_TIMEOUT",
    "ApiError",
    "IncompatibleServerError",
    "InvalidRequestError",
    "MlflowClientError",
    "MlflowRestApiClient",
    "RequestSerializationError",
    "ResponseDecodeError",
    "endpoints",
    "now_millis",
    "types",
]
