"""Endpoint paths for the MLflow REST API.

All tracking and registry endpoints live under ``/api/2.0/mlflow``; the
liveness and version endpoints sit at the server root and return plain
text.
"""

from collections.abc import Mapping, Sequence
from enum import Enum
from urllib.parse import urlencode

API_VERSION = "2.0"
API_PREFIX = f"/api/{API_VERSION}/mlflow"

HEALTH = "/health"
VERSION = "/version"

# Experiments
EXPERIMENTS_CREATE = f"{API_PREFIX}/experiments/create"
EXPERIMENTS_GET = f"{API_PREFIX}/experiments/get"
EXPERIMENTS_GET_BY_NAME = f"{API_PREFIX}/experiments/get-by-name"
EXPERIMENTS_LIST = f"{API_PREFIX}/experiments/list"
EXPERIMENTS_SEARCH = f"{API_PREFIX}/experiments/search"
EXPERIMENTS_UPDATE = f"{API_PREFIX}/experiments/update"
EXPERIMENTS_DELETE = f"{API_PREFIX}/experiments/delete"
EXPERIMENTS_RESTORE = f"{API_PREFIX}/experiments/restore"
EXPERIMENTS_SET_TAG = f"{API_PREFIX}/experiments/set-experiment-tag"
EXPERIMENTS_DELETE_TAG = f"{API_PREFIX}/experiments/delete-experiment-tag"

# Runs
RUNS_CREATE = f"{API_PREFIX}/runs/create"
RUNS_GET = f"{API_PREFIX}/runs/get"
RUNS_SEARCH = f"{API_PREFIX}/runs/search"
RUNS_UPDATE = f"{API_PREFIX}/runs/update"
RUNS_DELETE = f"{API_PREFIX}/runs/delete"
RUNS_RESTORE = f"{API_PREFIX}/runs/restore"
RUNS_LOG_METRIC = f"{API_PREFIX}/runs/log-metric"
RUNS_LOG_PARAM = f"{API_PREFIX}/runs/log-parameter"
RUNS_SET_TAG = f"{API_PREFIX}/runs/set-tag"
RUNS_DELETE_TAG = f"{API_PREFIX}/runs/delete-tag"
RUNS_LOG_BATCH = f"{API_PREFIX}/runs/log-batch"
RUNS_LOG_MODEL = f"{API_PREFIX}/runs/log-model"
RUNS_LOG_INPUTS = f"{API_PREFIX}/runs/log-inputs"
METRICS_GET_HISTORY = f"{API_PREFIX}/metrics/get-history"
ARTIFACTS_LIST = f"{API_PREFIX}/artifacts/list"

# Registered models
REGISTERED_MODELS_CREATE = f"{API_PREFIX}/registered-models/create"
REGISTERED_MODELS_GET = f"{API_PREFIX}/registered-models/get"
REGISTERED_MODELS_LIST = f"{API_PREFIX}/registered-models/list"
REGISTERED_MODELS_SEARCH = f"{API_PREFIX}/registered-models/search"
REGISTERED_MODELS_UPDATE = f"{API_PREFIX}/registered-models/update"
REGISTERED_MODELS_RENAME = f"{API_PREFIX}/registered-models/rename"
REGISTERED_MODELS_DELETE = f"{API_PREFIX}/registered-models/delete"
REGISTERED_MODELS_GET_LATEST_VERSIONS = (
    f"{API_PREFIX}/registered-models/get-latest-versions"
)
REGISTERED_MODELS_SET_TAG = f"{API_PREFIX}/registered-models/set-tag"
REGISTERED_MODELS_DELETE_TAG = f"{API_PREFIX}/registered-models/delete-tag"
REGISTERED_MODELS_ALIAS = f"{API_PREFIX}/registered-models/alias"
REGISTERED_MODELS_GET_BY_ALIAS = (
    f"{API_PREFIX}/registered-models/get-model-version-by-alias"
)

# Model versions
MODEL_VERSIONS_CREATE = f"{API_PREFIX}/model-versions/create"
MODEL_VERSIONS_GET = f"{API_PREFIX}/model-versions/get"
MODEL_VERSIONS_LIST = f"{API_PREFIX}/model-versions/list"
MODEL_VERSIONS_SEARCH = f"{API_PREFIX}/model-versions/search"
MODEL_VERSIONS_UPDATE = f"{API_PREFIX}/model-versions/update"
MODEL_VERSIONS_DELETE = f"{API_PREFIX}/model-versions/delete"
MODEL_VERSIONS_TRANSITION_STAGE = f"{API_PREFIX}/model-versions/transition-stage"
MODEL_VERSIONS_GET_DOWNLOAD_URIS = f"{API_PREFIX}/model-versions/get-download-uris"
MODEL_VERSIONS_SET_TAG = f"{API_PREFIX}/model-versions/set-tag"
MODEL_VERSIONS_DELETE_TAG = f"{API_PREFIX}/model-versions/delete-tag"

QueryValue = str | int | Sequence[str] | None


def with_query(path: str, params: Mapping[str, QueryValue] | None = None) -> str:
    """Append URL-escaped query parameters to an endpoint path.

    ``None`` values and empty strings or sequences are dropped. Sequences
    are repeated once per element (``stages=a&stages=b``). Parameter order
    follows the mapping order.

    Args:
        path: Endpoint path, e.g. :data:`EXPERIMENTS_GET`.
        params: Query parameters to embed.

    Returns:
        The path, followed by ``?`` and the encoded query when any
        parameter survives.
    """
    pairs: list[tuple[str, str]] = []
    for key, value in (params or {}).items():
        if value is None or value == "":
            continue
        if isinstance(value, (str, int)):
            pairs.append((key, _query_text(value)))
        else:
            pairs.extend((key, _query_text(item)) for item in value)

    if not pairs:
        return path
    return f"{path}?{urlencode(pairs)}"


def _query_text(value: str | int) -> str:
    # str() of a str-mixin Enum is "Class.MEMBER", not its value
    if isinstance(value, Enum):
        return str(value.value)
    return str(value)
