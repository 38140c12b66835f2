"""MLflow REST API client.

Provides a synchronous HTTP client with bearer-token authentication,
thread-local connections, and response decoding into Pydantic models.
Each public method maps to exactly one HTTP request; nothing is retried.
"""

import json
import threading
import time
from collections.abc import Mapping, Sequence
from typing import Any, TypeVar

import httpx
import pydantic
import structlog

from .. import compat
from ..config import DEFAULT_TIMEOUT, ClientConfig
from . import endpoints
from .errors import (
    ApiError,
    InvalidRequestError,
    RequestSerializationError,
    ResponseDecodeError,
)
from .types import (
    CreateExperimentRequest,
    CreateExperimentResponse,
    CreateModelVersionRequest,
    CreateModelVersionResponse,
    CreateRegisteredModelRequest,
    CreateRegisteredModelResponse,
    CreateRunRequest,
    CreateRunResponse,
    DeleteModelVersionTagRequest,
    DeleteRegisteredModelAliasRequest,
    DeleteRegisteredModelTagRequest,
    DeleteTagRequest,
    GetDownloadUrisRequest,
    GetDownloadUrisResponse,
    GetExperimentResponse,
    GetLatestModelVersionsRequest,
    GetLatestModelVersionsResponse,
    GetMetricHistoryRequest,
    GetMetricHistoryResponse,
    GetModelVersionByAliasRequest,
    GetModelVersionByAliasResponse,
    GetModelVersionResponse,
    GetRegisteredModelResponse,
    GetRunResponse,
    ListArtifactsResponse,
    ListExperimentsResponse,
    ListModelVersionsResponse,
    ListRegisteredModelsResponse,
    LogBatchRequest,
    LogInputsRequest,
    LogMetricRequest,
    LogModelRequest,
    LogParamRequest,
    Metric,
    ModelVersionStage,
    Param,
    RenameRegisteredModelRequest,
    RenameRegisteredModelResponse,
    RunTag,
    SearchExperimentsRequest,
    SearchExperimentsResponse,
    SearchModelVersionsRequest,
    SearchModelVersionsResponse,
    SearchRegisteredModelsRequest,
    SearchRegisteredModelsResponse,
    SearchRunsRequest,
    SearchRunsResponse,
    SetModelVersionTagRequest,
    SetRegisteredModelAliasRequest,
    SetRegisteredModelTagRequest,
    SetTagRequest,
    TransitionModelVersionStageRequest,
    TransitionModelVersionStageResponse,
    UpdateModelVersionRequest,
    UpdateModelVersionResponse,
    UpdateRegisteredModelRequest,
    UpdateRegisteredModelResponse,
    UpdateRunRequest,
    UpdateRunResponse,
)

logger = structlog.get_logger(__name__)

ResponseT = TypeVar("ResponseT", bound=pydantic.BaseModel)

RequestBody = pydantic.BaseModel | Mapping[str, Any]


def now_millis() -> int:
    """Current wall-clock time in epoch milliseconds."""
    return int(time.time() * 1000)


def encode_body(body: RequestBody) -> bytes:
    """Serialize a request body to JSON bytes.

    Pydantic models are dumped without their unset (``None``) fields.

    Raises:
        RequestSerializationError: If the body holds values JSON cannot
            represent.
    """
    try:
        if isinstance(body, pydantic.BaseModel):
            payload = body.model_dump(mode="json", by_alias=True, exclude_none=True)
        else:
            payload = body
        return json.dumps(payload, allow_nan=False).encode()
    except (TypeError, ValueError) as exc:
        msg = f"Request body is not JSON serializable: {exc}"
        raise RequestSerializationError(msg) from exc


def _require_positive(max_results: int | None) -> None:
    if max_results is not None and max_results <= 0:
        msg = f"max_results must be positive, got {max_results}"
        raise InvalidRequestError(msg)


def _page_size(max_results: int | None) -> int | None:
    # The list endpoints choose their own page size for unset or non-positive values
    if max_results is None or max_results <= 0:
        return None
    return max_results


class MlflowRestApiClient:
    """HTTP client for the MLflow tracking and model registry REST API.

    Every operation issues exactly one request. Non-2xx replies raise
    :class:`ApiError`; transport failures propagate as httpx exceptions.

    The configuration is immutable; :meth:`with_token` and
    :meth:`with_timeout` return new clients. Thread-safe through
    thread-local storage of httpx.Client instances. Can be used as a
    context manager for automatic cleanup.
    """

    def __init__(
        self,
        base_url: str,
        token: str | None = None,
        timeout: float = DEFAULT_TIMEOUT,
        transport: httpx.BaseTransport | None = None,
    ):
        """Initialize the REST API client.

        Args:
            base_url: Tracking server URL (e.g., "http://localhost:5000").
                A trailing slash is ignored.
            token: Bearer token sent with every request, if any.
            timeout: Request timeout in seconds (default: 30.0).
            transport: Optional httpx transport, e.g. for proxies or tests.

        Raises:
            pydantic.ValidationError: If base_url is empty or timeout is not
                positive.
        """
        self.config = ClientConfig(base_url=base_url, token=token, timeout=timeout)
        self._transport = transport

        # Use thread-local storage for httpx.Client (thread safety)
        self._local = threading.local()

    @classmethod
    def from_config(
        cls,
        config: ClientConfig,
        transport: httpx.BaseTransport | None = None,
    ) -> "MlflowRestApiClient":
        """Create a client from an existing configuration."""
        return cls(
            base_url=config.base_url,
            token=config.token,
            timeout=config.timeout,
            transport=transport,
        )

    @property
    def base_url(self) -> str:
        return self.config.base_url

    def with_token(self, token: str | None) -> "MlflowRestApiClient":
        """Return a new client that authenticates with ``token``."""
        return self.from_config(
            self.config.model_copy(update={"token": token or None}),
            transport=self._transport,
        )

    def with_timeout(self, timeout: float) -> "MlflowRestApiClient":
        """Return a new client using ``timeout`` seconds per request."""
        return self.from_config(
            ClientConfig(
                base_url=self.config.base_url,
                token=self.config.token,
                timeout=timeout,
            ),
            transport=self._transport,
        )

    @property
    def client(self) -> httpx.Client:
        """Get or create thread-local httpx client.

        Each thread gets its own httpx.Client instance for thread safety.
        Clients are created lazily and reused within the same thread.

        Returns:
            Thread-local httpx.Client instance.
        """
        if not hasattr(self._local, "client") or self._local.client.is_closed:
            self._local.client = httpx.Client(
                base_url=self.config.base_url,
                timeout=self.config.timeout,
                transport=self._transport,
            )
        return self._local.client

    def __enter__(self):
        """Enter context manager."""
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        """Exit context manager and cleanup resources."""
        self.close()

    def close(self):
        """Close the thread-local HTTP client if open."""
        if hasattr(self._local, "client") and not self._local.client.is_closed:
            self._local.client.close()

    # -----------------------------------------------------------------------
    # Request execution
    # -----------------------------------------------------------------------

    def _headers(
        self,
        *,
        json_body: bool = False,
        accept: str = "application/json",
    ) -> dict[str, str]:
        headers = {"Accept": accept}
        if json_body:
            headers["Content-Type"] = "application/json"
        if self.config.token:
            headers["Authorization"] = f"Bearer {self.config.token}"
        return headers

    def _send(
        self,
        method: str,
        endpoint: str,
        content: bytes | None,
        headers: dict[str, str],
    ) -> httpx.Response:
        start_time = time.time()
        logger.debug("Making API request", method=method, endpoint=endpoint)
        response = self.client.request(
            method,
            endpoint,
            content=content,
            headers=headers,
        )
        logger.debug(
            "API request completed",
            method=method,
            endpoint=endpoint,
            status_code=response.status_code,
            duration_seconds=round(time.time() - start_time, 3),
        )
        return response

    def _request(
        self,
        method: str,
        endpoint: str,
        body: RequestBody | None = None,
    ) -> bytes:
        """Make a JSON request to the MLflow REST API.

        Args:
            method: HTTP method.
            endpoint: API endpoint path, query string included.
            body: Optional request body, serialized as JSON.

        Returns:
            The raw body of a 2xx reply.

        Raises:
            RequestSerializationError: If the body cannot be encoded.
            ApiError: If the server replies outside [200, 300).
            httpx.TransportError: If the request fails or times out.
        """
        content = None if body is None else encode_body(body)
        headers = self._headers(json_body=content is not None)
        response = self._send(method, endpoint, content, headers)
        if not response.is_success:
            raise ApiError.from_response(response.status_code, response.content)
        return response.content

    def _request_text(self, method: str, endpoint: str) -> str:
        """Make a request to an endpoint that answers in plain text.

        Error replies are not parsed: their body becomes the error message.
        """
        headers = self._headers(accept="text/plain")
        response = self._send(method, endpoint, None, headers)
        if not response.is_success:
            raise ApiError(
                response.status_code,
                response.content,
                message=response.text,
            )
        return response.text

    @staticmethod
    def _decode(response_type: type[ResponseT], body: bytes) -> ResponseT:
        """Validate a successful reply body against ``response_type``."""
        try:
            return response_type.model_validate_json(body)
        except pydantic.ValidationError as exc:
            msg = f"Failed to decode {response_type.__name__} from response: {exc}"
            raise ResponseDecodeError(msg) from exc

    def _call(
        self,
        method: str,
        endpoint: str,
        response_type: type[ResponseT],
        body: RequestBody | None = None,
    ) -> ResponseT:
        return self._decode(response_type, self._request(method, endpoint, body))

    # -----------------------------------------------------------------------
    # Server
    # -----------------------------------------------------------------------

    def get_health(self) -> str:
        """Fetch the server liveness text ("OK" when healthy)."""
        return self._request_text("GET", endpoints.HEALTH)

    def get_version(self) -> str:
        """Fetch the server version string."""
        return self._request_text("GET", endpoints.VERSION)

    def check_server(self, minimum_version: str | None = None) -> tuple[int, int, int]:
        """Verify the server is healthy and recent enough.

        See :func:`mlflow_rest_client.compat.check_server`; the minimum
        defaults to ``compat.MIN_SERVER_VERSION``.
        """
        return compat.check_server(
            self,
            minimum_version or compat.MIN_SERVER_VERSION,
        )

    # -----------------------------------------------------------------------
    # Experiments
    # -----------------------------------------------------------------------

    def create_experiment(
        self,
        request: CreateExperimentRequest,
    ) -> CreateExperimentResponse:
        """Create an experiment and return its ID."""
        return self._call(
            "POST",
            endpoints.EXPERIMENTS_CREATE,
            CreateExperimentResponse,
            request,
        )

    def get_experiment(self, experiment_id: str) -> GetExperimentResponse:
        endpoint = endpoints.with_query(
            endpoints.EXPERIMENTS_GET,
            {"experiment_id": experiment_id},
        )
        return self._call("GET", endpoint, GetExperimentResponse)

    def get_experiment_by_name(self, experiment_name: str) -> GetExperimentResponse:
        endpoint = endpoints.with_query(
            endpoints.EXPERIMENTS_GET_BY_NAME,
            {"experiment_name": experiment_name},
        )
        return self._call("GET", endpoint, GetExperimentResponse)

    def list_experiments(
        self,
        max_results: int | None = None,
        page_token: str | None = None,
    ) -> ListExperimentsResponse:
        """List one page of experiments.

        Args:
            max_results: Page size; the server default applies when unset.
            page_token: ``next_page_token`` of the previous page.
        """
        endpoint = endpoints.with_query(
            endpoints.EXPERIMENTS_LIST,
            {"max_results": _page_size(max_results), "page_token": page_token},
        )
        return self._call("GET", endpoint, ListExperimentsResponse)

    def search_experiments(
        self,
        request: SearchExperimentsRequest,
    ) -> SearchExperimentsResponse:
        return self._call(
            "POST",
            endpoints.EXPERIMENTS_SEARCH,
            SearchExperimentsResponse,
            request,
        )

    def update_experiment(self, experiment_id: str, new_name: str) -> None:
        """Rename an experiment."""
        self._request(
            "POST",
            endpoints.EXPERIMENTS_UPDATE,
            {"experiment_id": experiment_id, "new_name": new_name},
        )

    def delete_experiment(self, experiment_id: str) -> None:
        """Mark an experiment and its runs as deleted."""
        self._request(
            "POST",
            endpoints.EXPERIMENTS_DELETE,
            {"experiment_id": experiment_id},
        )

    def restore_experiment(self, experiment_id: str) -> None:
        self._request(
            "POST",
            endpoints.EXPERIMENTS_RESTORE,
            {"experiment_id": experiment_id},
        )

    def set_experiment_tag(self, experiment_id: str, key: str, value: str) -> None:
        self._request(
            "POST",
            endpoints.EXPERIMENTS_SET_TAG,
            {"experiment_id": experiment_id, "key": key, "value": value},
        )

    def delete_experiment_tag(self, experiment_id: str, key: str) -> None:
        self._request(
            "POST",
            endpoints.EXPERIMENTS_DELETE_TAG,
            {"experiment_id": experiment_id, "key": key},
        )

    # -----------------------------------------------------------------------
    # Runs
    # -----------------------------------------------------------------------

    def create_run(self, request: CreateRunRequest) -> CreateRunResponse:
        """Create a run.

        An unset (None or 0) ``start_time`` is replaced with the current
        time in epoch milliseconds. The caller's request is not modified.
        """
        if not request.start_time:
            request = request.model_copy(update={"start_time": now_millis()})
        return self._call("POST", endpoints.RUNS_CREATE, CreateRunResponse, request)

    def get_run(self, run_id: str) -> GetRunResponse:
        endpoint = endpoints.with_query(endpoints.RUNS_GET, {"run_id": run_id})
        return self._call("GET", endpoint, GetRunResponse)

    def search_runs(self, request: SearchRunsRequest) -> SearchRunsResponse:
        """Search runs across experiments.

        Raises:
            InvalidRequestError: If ``max_results`` is set and not positive.
        """
        _require_positive(request.max_results)
        return self._call("POST", endpoints.RUNS_SEARCH, SearchRunsResponse, request)

    def update_run(self, request: UpdateRunRequest) -> UpdateRunResponse:
        """Update run status, end time or name."""
        return self._call("POST", endpoints.RUNS_UPDATE, UpdateRunResponse, request)

    def delete_run(self, run_id: str) -> None:
        self._request("POST", endpoints.RUNS_DELETE, {"run_id": run_id})

    def restore_run(self, run_id: str) -> None:
        self._request("POST", endpoints.RUNS_RESTORE, {"run_id": run_id})

    def log_metric(self, request: LogMetricRequest) -> None:
        """Log one metric value.

        An unset (None or 0) ``timestamp`` is replaced with the current time
        in epoch milliseconds and an unset ``step`` with 0.
        """
        update: dict[str, int] = {}
        if not request.timestamp:
            update["timestamp"] = now_millis()
        if request.step is None:
            update["step"] = 0
        if update:
            request = request.model_copy(update=update)
        self._request("POST", endpoints.RUNS_LOG_METRIC, request)

    def log_param(self, request: LogParamRequest) -> None:
        self._request("POST", endpoints.RUNS_LOG_PARAM, request)

    def set_tag(self, request: SetTagRequest) -> None:
        """Set a tag on a run."""
        self._request("POST", endpoints.RUNS_SET_TAG, request)

    def delete_tag(self, run_id: str, key: str) -> None:
        """Delete a tag from a run."""
        self._request(
            "POST",
            endpoints.RUNS_DELETE_TAG,
            DeleteTagRequest(run_id=run_id, key=key),
        )

    def log_batch(
        self,
        run_id: str,
        metrics: Sequence[Metric] | None = None,
        params: Sequence[Param] | None = None,
        tags: Sequence[RunTag] | None = None,
    ) -> None:
        """Log metrics, params and tags for a run in one request."""
        request = LogBatchRequest(
            run_id=run_id,
            metrics=list(metrics) if metrics is not None else None,
            params=list(params) if params is not None else None,
            tags=list(tags) if tags is not None else None,
        )
        self._request("POST", endpoints.RUNS_LOG_BATCH, request)

    def log_model(self, request: LogModelRequest) -> None:
        self._request("POST", endpoints.RUNS_LOG_MODEL, request)

    def log_inputs(self, request: LogInputsRequest) -> None:
        """Log datasets and model inputs consumed by a run."""
        self._request("POST", endpoints.RUNS_LOG_INPUTS, request)

    def get_metric_history(
        self,
        request: GetMetricHistoryRequest,
    ) -> GetMetricHistoryResponse:
        """Fetch one page of the full history of a metric."""
        endpoint = endpoints.with_query(
            endpoints.METRICS_GET_HISTORY,
            {
                "run_id": request.run_id,
                # Older servers only understand run_uuid
                "run_uuid": request.run_id,
                "metric_key": request.metric_key,
                "max_results": _page_size(request.max_results),
                "page_token": request.page_token,
            },
        )
        return self._call("GET", endpoint, GetMetricHistoryResponse)

    def list_artifacts(
        self,
        run_id: str,
        path: str | None = None,
        page_token: str | None = None,
    ) -> ListArtifactsResponse:
        """List artifacts of a run, optionally below ``path``."""
        endpoint = endpoints.with_query(
            endpoints.ARTIFACTS_LIST,
            {"run_id": run_id, "path": path, "page_token": page_token},
        )
        return self._call("GET", endpoint, ListArtifactsResponse)

    # -----------------------------------------------------------------------
    # Registered models
    # -----------------------------------------------------------------------

    def create_registered_model(
        self,
        request: CreateRegisteredModelRequest,
    ) -> CreateRegisteredModelResponse:
        return self._call(
            "POST",
            endpoints.REGISTERED_MODELS_CREATE,
            CreateRegisteredModelResponse,
            request,
        )

    def get_registered_model(self, name: str) -> GetRegisteredModelResponse:
        endpoint = endpoints.with_query(
            endpoints.REGISTERED_MODELS_GET,
            {"name": name},
        )
        return self._call("GET", endpoint, GetRegisteredModelResponse)

    def list_registered_models(
        self,
        max_results: int | None = None,
        page_token: str | None = None,
    ) -> ListRegisteredModelsResponse:
        endpoint = endpoints.with_query(
            endpoints.REGISTERED_MODELS_LIST,
            {"max_results": _page_size(max_results), "page_token": page_token},
        )
        return self._call("GET", endpoint, ListRegisteredModelsResponse)

    def search_registered_models(
        self,
        request: SearchRegisteredModelsRequest,
    ) -> SearchRegisteredModelsResponse:
        """Search registered models.

        Raises:
            InvalidRequestError: If ``max_results`` is set and not positive.
        """
        _require_positive(request.max_results)
        endpoint = endpoints.with_query(
            endpoints.REGISTERED_MODELS_SEARCH,
            {
                "filter": request.filter,
                "max_results": request.max_results,
                "order_by": request.order_by,
                "page_token": request.page_token,
            },
        )
        return self._call("GET", endpoint, SearchRegisteredModelsResponse)

    def update_registered_model(
        self,
        name: str,
        description: str | None = None,
    ) -> UpdateRegisteredModelResponse:
        """Update the description of a registered model."""
        return self._call(
            "PATCH",
            endpoints.REGISTERED_MODELS_UPDATE,
            UpdateRegisteredModelResponse,
            UpdateRegisteredModelRequest(name=name, description=description or None),
        )

    def rename_registered_model(
        self,
        request: RenameRegisteredModelRequest,
    ) -> RenameRegisteredModelResponse:
        return self._call(
            "POST",
            endpoints.REGISTERED_MODELS_RENAME,
            RenameRegisteredModelResponse,
            request,
        )

    def delete_registered_model(self, name: str) -> None:
        endpoint = endpoints.with_query(
            endpoints.REGISTERED_MODELS_DELETE,
            {"name": name},
        )
        self._request("DELETE", endpoint)

    def get_latest_model_versions(
        self,
        request: GetLatestModelVersionsRequest,
    ) -> GetLatestModelVersionsResponse:
        """Fetch the latest version of a model for each requested stage."""
        endpoint = endpoints.with_query(
            endpoints.REGISTERED_MODELS_GET_LATEST_VERSIONS,
            {"name": request.name, "stages": request.stages},
        )
        return self._call("GET", endpoint, GetLatestModelVersionsResponse)

    def set_registered_model_tag(self, request: SetRegisteredModelTagRequest) -> None:
        self._request("POST", endpoints.REGISTERED_MODELS_SET_TAG, request)

    def delete_registered_model_tag(
        self,
        request: DeleteRegisteredModelTagRequest,
    ) -> None:
        endpoint = endpoints.with_query(
            endpoints.REGISTERED_MODELS_DELETE_TAG,
            {"name": request.name, "key": request.key},
        )
        self._request("DELETE", endpoint)

    def set_registered_model_alias(
        self,
        request: SetRegisteredModelAliasRequest,
    ) -> None:
        """Point ``alias`` at one version of a registered model."""
        self._request("POST", endpoints.REGISTERED_MODELS_ALIAS, request)

    def delete_registered_model_alias(
        self,
        request: DeleteRegisteredModelAliasRequest,
    ) -> None:
        endpoint = endpoints.with_query(
            endpoints.REGISTERED_MODELS_ALIAS,
            {"name": request.name, "alias": request.alias},
        )
        self._request("DELETE", endpoint)

    def get_model_version_by_alias(
        self,
        request: GetModelVersionByAliasRequest,
    ) -> GetModelVersionByAliasResponse:
        endpoint = endpoints.with_query(
            endpoints.REGISTERED_MODELS_GET_BY_ALIAS,
            {"name": request.name, "alias": request.alias},
        )
        return self._call("GET", endpoint, GetModelVersionByAliasResponse)

    # -----------------------------------------------------------------------
    # Model versions
    # -----------------------------------------------------------------------

    def create_model_version(
        self,
        request: CreateModelVersionRequest,
    ) -> CreateModelVersionResponse:
        return self._call(
            "POST",
            endpoints.MODEL_VERSIONS_CREATE,
            CreateModelVersionResponse,
            request,
        )

    def get_model_version(self, name: str, version: str) -> GetModelVersionResponse:
        endpoint = endpoints.with_query(
            endpoints.MODEL_VERSIONS_GET,
            {"name": name, "version": version},
        )
        return self._call("GET", endpoint, GetModelVersionResponse)

    def list_model_versions(
        self,
        name: str,
        max_results: int | None = None,
        page_token: str | None = None,
    ) -> ListModelVersionsResponse:
        endpoint = endpoints.with_query(
            endpoints.MODEL_VERSIONS_LIST,
            {
                "name": name,
                "max_results": _page_size(max_results),
                "page_token": page_token,
            },
        )
        return self._call("GET", endpoint, ListModelVersionsResponse)

    def search_model_versions(
        self,
        request: SearchModelVersionsRequest,
    ) -> SearchModelVersionsResponse:
        """Search model versions.

        Raises:
            InvalidRequestError: If ``max_results`` is set and not positive.
        """
        _require_positive(request.max_results)
        endpoint = endpoints.with_query(
            endpoints.MODEL_VERSIONS_SEARCH,
            {
                "filter": request.filter,
                "max_results": request.max_results,
                "order_by": request.order_by,
                "page_token": request.page_token,
            },
        )
        return self._call("GET", endpoint, SearchModelVersionsResponse)

    def update_model_version(
        self,
        name: str,
        version: str,
        description: str | None = None,
        stage: ModelVersionStage | str | None = None,
    ) -> UpdateModelVersionResponse:
        """Update the description and/or stage of a model version."""
        request = UpdateModelVersionRequest(
            name=name,
            version=version,
            description=description or None,
            stage=stage or None,
        )
        return self._call(
            "PATCH",
            endpoints.MODEL_VERSIONS_UPDATE,
            UpdateModelVersionResponse,
            request,
        )

    def delete_model_version(self, name: str, version: str) -> None:
        endpoint = endpoints.with_query(
            endpoints.MODEL_VERSIONS_DELETE,
            {"name": name, "version": version},
        )
        self._request("DELETE", endpoint)

    def transition_model_version_stage(
        self,
        name: str,
        version: str,
        stage: ModelVersionStage | str,
        archive_existing_versions: bool | None = None,
    ) -> TransitionModelVersionStageResponse:
        """Move a model version to ``stage``.

        Args:
            name: Registered model name.
            version: Model version.
            stage: Target stage.
            archive_existing_versions: Archive the versions currently in
                ``stage``; the server default applies when unset.
        """
        request = TransitionModelVersionStageRequest(
            name=name,
            version=version,
            stage=stage,
            archive_existing_versions=archive_existing_versions,
        )
        return self._call(
            "POST",
            endpoints.MODEL_VERSIONS_TRANSITION_STAGE,
            TransitionModelVersionStageResponse,
            request,
        )

    def get_download_uris(
        self,
        request: GetDownloadUrisRequest,
    ) -> GetDownloadUrisResponse:
        return self._call(
            "POST",
            endpoints.MODEL_VERSIONS_GET_DOWNLOAD_URIS,
            GetDownloadUrisResponse,
            request,
        )

    def set_model_version_tag(self, request: SetModelVersionTagRequest) -> None:
        self._request("POST", endpoints.MODEL_VERSIONS_SET_TAG, request)

    def delete_model_version_tag(self, request: DeleteModelVersionTagRequest) -> None:
        endpoint = endpoints.with_query(
            endpoints.MODEL_VERSIONS_DELETE_TAG,
            {"name": request.name, "version": request.version, "key": request.key},
        )
        self._request("DELETE", endpoint)
