"""MLflow REST client.

Typed Python client for the MLflow tracking and model registry REST API:
experiments, runs, metrics, parameters, tags, registered models and model
versions.
"""

from . import compat
from .config import ClientConfig
from .restapi import ApiError, MlflowRestApiClient

__version__ = "0.1.0"

__all__ = ["ApiError", "ClientConfig", "MlflowRestApiClient", "compat"]
