"""Request and response types for the MLflow REST API.

Pydantic models mirroring the JSON documents exchanged with the tracking
server. Field names match the wire format one-to-one.

Request models leave optional fields as ``None`` and those fields are
dropped from the serialized body. Response models default missing fields
to empty values so that partial replies still validate.
"""

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


class MlflowModel(BaseModel):
    """Base model shared by every request and response type."""

    # Several MLflow fields start with "model_" (model_json, model_version).
    model_config = ConfigDict(protected_namespaces=(), populate_by_name=True)

    def to_dict(self) -> dict:
        """Return the JSON-ready representation, omitting unset fields."""
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)

    def to_json(self) -> str:
        """Return the JSON encoding, omitting unset fields."""
        return self.model_dump_json(by_alias=True, exclude_none=True)


# ---------------------------------------------------------------------------
# Enumerations
# ---------------------------------------------------------------------------


class ViewType(str, Enum):
    """Lifecycle filter for experiment and run searches."""

    ACTIVE_ONLY = "ACTIVE_ONLY"
    DELETED_ONLY = "DELETED_ONLY"
    ALL = "ALL"


class RunStatus(str, Enum):
    RUNNING = "RUNNING"
    SCHEDULED = "SCHEDULED"
    FINISHED = "FINISHED"
    FAILED = "FAILED"
    KILLED = "KILLED"


class ModelVersionStage(str, Enum):
    NONE = "None"
    STAGING = "Staging"
    PRODUCTION = "Production"
    ARCHIVED = "Archived"


class LifecycleStage(str, Enum):
    """Whether an experiment or run is active or soft-deleted."""

    ACTIVE = "active"
    DELETED = "deleted"


# ---------------------------------------------------------------------------
# Shared entities
# ---------------------------------------------------------------------------


class ErrorResponse(MlflowModel):
    """Structured error body returned with non-2xx replies."""

    error_code: str = ""
    message: str = ""


class ExperimentTag(MlflowModel):
    key: str
    value: str = ""


class Experiment(MlflowModel):
    """An experiment: a named grouping of runs."""

    experiment_id: str = ""
    name: str = ""
    artifact_location: str = ""
    # Unknown stages from newer servers are kept as plain strings
    lifecycle_stage: LifecycleStage | str = Field("", union_mode="left_to_right")
    last_update_time: int = 0
    creation_time: int = 0
    tags: list[ExperimentTag] = Field(default_factory=list)


class Metric(MlflowModel):
    """One point of a metric time series."""

    key: str
    value: float
    timestamp: int = 0
    step: int = 0


class Param(MlflowModel):
    key: str
    value: str = ""


class RunTag(MlflowModel):
    key: str
    value: str = ""


class DatasetSchemaColumn(MlflowModel):
    name: str
    type: str = ""


class DatasetSchema(MlflowModel):
    columns: list[DatasetSchemaColumn] = Field(default_factory=list)


class DatasetTag(MlflowModel):
    key: str
    value: str = ""


class Dataset(MlflowModel):
    """A dataset consumed by a run."""

    name: str
    digest: str = ""
    source_type: str = ""
    source: str = ""
    # "schema" would shadow BaseModel.schema
    dataset_schema: DatasetSchema | None = Field(None, alias="schema")
    profile: str | None = None
    tags: list[DatasetTag] | None = None


class ModelInputTag(MlflowModel):
    key: str
    value: str = ""


class ModelInput(MlflowModel):
    """A registered model consumed by a run."""

    model_name: str
    model_version: str | None = None
    model_stage: str | None = None
    alias: str | None = None
    tags: list[ModelInputTag] | None = None


class ModelOutput(MlflowModel):
    """A registered model produced by a run."""

    model_name: str
    model_version: str | None = None
    model_stage: str | None = None
    alias: str | None = None
    tags: list[ModelInputTag] | None = None


class RunInfo(MlflowModel):
    """Run metadata."""

    run_id: str = ""
    run_name: str = ""
    experiment_id: str = ""
    user_id: str = ""
    status: str = ""
    start_time: int = 0
    end_time: int = 0
    artifact_uri: str = ""
    lifecycle_stage: LifecycleStage | str = Field("", union_mode="left_to_right")


class RunData(MlflowModel):
    """Latest metric values, parameters and tags of a run."""

    metrics: list[Metric] = Field(default_factory=list)
    params: list[Param] = Field(default_factory=list)
    tags: list[RunTag] = Field(default_factory=list)

    def tag_value(self, key: str) -> str | None:
        """Return the value of tag ``key``, or None if the run lacks it."""
        for tag in self.tags:
            if tag.key == key:
                return tag.value
        return None


class RunInputs(MlflowModel):
    datasets: list[Dataset] = Field(default_factory=list)
    model_inputs: list[ModelInput] = Field(default_factory=list)


class RunOutputs(MlflowModel):
    model_outputs: list[ModelOutput] = Field(default_factory=list)


class Run(MlflowModel):
    """A single execution record under an experiment."""

    info: RunInfo = Field(default_factory=RunInfo)
    data: RunData = Field(default_factory=RunData)
    inputs: RunInputs = Field(default_factory=RunInputs)
    outputs: RunOutputs = Field(default_factory=RunOutputs)


class FileInfo(MlflowModel):
    """An artifact file or directory."""

    path: str
    is_dir: bool = False
    file_size: int | None = None


class ModelVersionTag(MlflowModel):
    key: str
    value: str = ""


class ModelVersion(MlflowModel):
    """One immutable version of a registered model."""

    name: str = ""
    version: str = ""
    creation_timestamp: int = 0
    last_updated_timestamp: int = 0
    user_id: str = ""
    current_stage: str = ""
    description: str = ""
    source: str = ""
    run_id: str = ""
    status: str = ""
    status_message: str = ""
    tags: list[ModelVersionTag] = Field(default_factory=list)
    aliases: list[str] = Field(default_factory=list)


class RegisteredModelTag(MlflowModel):
    key: str
    value: str = ""


class RegisteredModelAlias(MlflowModel):
    alias: str
    version: str


class RegisteredModel(MlflowModel):
    """A named, versioned model independent of any single run."""

    name: str = ""
    creation_timestamp: int = 0
    last_updated_timestamp: int = 0
    user_id: str = ""
    description: str = ""
    latest_versions: list[ModelVersion] = Field(default_factory=list)
    tags: list[RegisteredModelTag] = Field(default_factory=list)
    aliases: list[RegisteredModelAlias] = Field(default_factory=list)


class DownloadUriInfo(MlflowModel):
    path: str = ""
    artifact_uri: str = ""


# ---------------------------------------------------------------------------
# Experiments
# ---------------------------------------------------------------------------


class CreateExperimentRequest(MlflowModel):
    name: str
    artifact_location: str | None = None
    tags: list[ExperimentTag] | None = None


class CreateExperimentResponse(MlflowModel):
    experiment_id: str = ""


class GetExperimentResponse(MlflowModel):
    experiment: Experiment = Field(default_factory=Experiment)


class ListExperimentsResponse(MlflowModel):
    experiments: list[Experiment] = Field(default_factory=list)
    next_page_token: str | None = None


class SearchExperimentsRequest(MlflowModel):
    view_type: ViewType | None = None
    max_results: int | None = None
    page_token: str | None = None
    filter: str | None = None
    order_by: list[str] | None = None


class SearchExperimentsResponse(MlflowModel):
    experiments: list[Experiment] = Field(default_factory=list)
    next_page_token: str | None = None


# ---------------------------------------------------------------------------
# Runs
# ---------------------------------------------------------------------------


class CreateRunRequest(MlflowModel):
    experiment_id: str
    user_id: str | None = None
    run_name: str | None = None
    # Epoch milliseconds; filled in with the current time when unset.
    start_time: int | None = None
    tags: list[RunTag] | None = None


class CreateRunResponse(MlflowModel):
    run: Run = Field(default_factory=Run)


class GetRunResponse(MlflowModel):
    run: Run = Field(default_factory=Run)


class UpdateRunRequest(MlflowModel):
    run_id: str
    status: RunStatus | None = None
    end_time: int | None = None
    run_name: str | None = None


class UpdateRunResponse(MlflowModel):
    run_info: RunInfo = Field(default_factory=RunInfo)


class SearchRunsRequest(MlflowModel):
    experiment_ids: list[str] | None = None
    filter: str | None = None
    run_view_type: ViewType | None = None
    max_results: int | None = None
    order_by: list[str] | None = None
    page_token: str | None = None


class SearchRunsResponse(MlflowModel):
    runs: list[Run] = Field(default_factory=list)
    next_page_token: str | None = None


class LogMetricRequest(MlflowModel):
    run_id: str
    key: str
    value: float
    # Epoch milliseconds; filled in with the current time when unset.
    timestamp: int | None = None
    step: int | None = None


class LogParamRequest(MlflowModel):
    run_id: str
    key: str
    value: str


class SetTagRequest(MlflowModel):
    run_id: str
    key: str
    value: str


class DeleteTagRequest(MlflowModel):
    run_id: str
    key: str


class LogBatchRequest(MlflowModel):
    run_id: str
    metrics: list[Metric] | None = None
    params: list[Param] | None = None
    tags: list[RunTag] | None = None


class LogModelRequest(MlflowModel):
    run_id: str
    model_json: str


class LogInputsRequest(MlflowModel):
    run_id: str
    datasets: list[Dataset] | None = None
    model_inputs: list[ModelInput] | None = None


class GetMetricHistoryRequest(MlflowModel):
    run_id: str
    metric_key: str
    max_results: int | None = None
    page_token: str | None = None


class GetMetricHistoryResponse(MlflowModel):
    metrics: list[Metric] = Field(default_factory=list)
    next_page_token: str | None = None


class ListArtifactsResponse(MlflowModel):
    root_uri: str = ""
    files: list[FileInfo] = Field(default_factory=list)
    next_page_token: str | None = None


# ---------------------------------------------------------------------------
# Registered models
# ---------------------------------------------------------------------------


class CreateRegisteredModelRequest(MlflowModel):
    name: str
    description: str | None = None
    tags: list[RegisteredModelTag] | None = None


class CreateRegisteredModelResponse(MlflowModel):
    registered_model: RegisteredModel = Field(default_factory=RegisteredModel)


class GetRegisteredModelResponse(MlflowModel):
    registered_model: RegisteredModel = Field(default_factory=RegisteredModel)


class UpdateRegisteredModelRequest(MlflowModel):
    name: str
    description: str | None = None


class UpdateRegisteredModelResponse(MlflowModel):
    registered_model: RegisteredModel = Field(default_factory=RegisteredModel)


class RenameRegisteredModelRequest(MlflowModel):
    name: str
    new_name: str


class RenameRegisteredModelResponse(MlflowModel):
    registered_model: RegisteredModel = Field(default_factory=RegisteredModel)


class ListRegisteredModelsResponse(MlflowModel):
    registered_models: list[RegisteredModel] = Field(default_factory=list)
    next_page_token: str | None = None


class SearchRegisteredModelsRequest(MlflowModel):
    filter: str | None = None
    max_results: int | None = None
    order_by: list[str] | None = None
    page_token: str | None = None


class SearchRegisteredModelsResponse(MlflowModel):
    registered_models: list[RegisteredModel] = Field(default_factory=list)
    next_page_token: str | None = None


class GetLatestModelVersionsRequest(MlflowModel):
    name: str
    stages: list[str] | None = None


class GetLatestModelVersionsResponse(MlflowModel):
    model_versions: list[ModelVersion] = Field(default_factory=list)


class SetRegisteredModelTagRequest(MlflowModel):
    name: str
    key: str
    value: str


class DeleteRegisteredModelTagRequest(MlflowModel):
    name: str
    key: str


class SetRegisteredModelAliasRequest(MlflowModel):
    name: str
    alias: str
    version: str


class DeleteRegisteredModelAliasRequest(MlflowModel):
    name: str
    alias: str


class GetModelVersionByAliasRequest(MlflowModel):
    name: str
    alias: str


class GetModelVersionByAliasResponse(MlflowModel):
    model_version: ModelVersion = Field(default_factory=ModelVersion)


# ---------------------------------------------------------------------------
# Model versions
# ---------------------------------------------------------------------------


class CreateModelVersionRequest(MlflowModel):
    name: str
    source: str
    run_id: str | None = None
    tags: list[ModelVersionTag] | None = None
    run_link: str | None = None
    description: str | None = None


class CreateModelVersionResponse(MlflowModel):
    model_version: ModelVersion = Field(default_factory=ModelVersion)


class GetModelVersionResponse(MlflowModel):
    model_version: ModelVersion = Field(default_factory=ModelVersion)


class ListModelVersionsResponse(MlflowModel):
    model_versions: list[ModelVersion] = Field(default_factory=list)
    next_page_token: str | None = None


class SearchModelVersionsRequest(MlflowModel):
    filter: str | None = None
    max_results: int | None = None
    order_by: list[str] | None = None
    page_token: str | None = None


class SearchModelVersionsResponse(MlflowModel):
    model_versions: list[ModelVersion] = Field(default_factory=list)
    next_page_token: str | None = None


class UpdateModelVersionRequest(MlflowModel):
    name: str
    version: str
    description: str | None = None
    stage: ModelVersionStage | str | None = None


class UpdateModelVersionResponse(MlflowModel):
    model_version: ModelVersion = Field(default_factory=ModelVersion)


class TransitionModelVersionStageRequest(MlflowModel):
    name: str
    version: str
    stage: ModelVersionStage | str
    archive_existing_versions: bool | None = None


class TransitionModelVersionStageResponse(MlflowModel):
    model_version: ModelVersion = Field(default_factory=ModelVersion)


class GetDownloadUrisRequest(MlflowModel):
    name: str
    version: str
    paths: list[str] | None = None


class GetDownloadUrisResponse(MlflowModel):
    files: list[DownloadUriInfo] = Field(default_factory=list)


class SetModelVersionTagRequest(MlflowModel):
    name: str
    version: str
    key: str
    value: str


class DeleteModelVersionTagRequest(MlflowModel):
    name: str
    version: str
    key: str
