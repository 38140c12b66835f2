"""Shared fixtures: stubbed transports and an in-process fake tracking server.

``make_client`` returns clients whose HTTP traffic is answered by an
``httpx.MockTransport`` and recorded for inspection.

``tracking_client`` returns a client wired to :class:`FakeTrackingServer`,
a small in-memory Starlette implementation of the MLflow endpoints used by
the scenario tests. It stands in for a real ``mlflow server`` process.
"""

import itertools
import time
from collections.abc import Callable, Iterator
from typing import Any

import httpx
import pytest
import starlette.applications
import starlette.requests
import starlette.responses
import starlette.routing
from starlette.testclient import TestClient

from mlflow_rest_client.restapi import MlflowRestApiClient, endpoints

BASE_URL = "http://mlflow.test"
SERVER_VERSION = "2.14.1"

JSONResponse = starlette.responses.JSONResponse
Request = starlette.requests.Request

# ---------------------------------------------------------------------------
# Stubbed transport
# ---------------------------------------------------------------------------


@pytest.fixture
def sent_requests() -> list[httpx.Request]:
    """Requests captured by clients built with ``make_client``."""
    return []


@pytest.fixture
def make_client(
    sent_requests: list[httpx.Request],
) -> Callable[..., MlflowRestApiClient]:
    """Factory for clients answered by a canned reply or a custom handler."""

    def _make(
        status_code: int = 200,
        json: Any = None,
        content: bytes | None = None,
        token: str | None = None,
        handler: Callable[[httpx.Request], httpx.Response] | None = None,
    ) -> MlflowRestApiClient:
        def _handle(request: httpx.Request) -> httpx.Response:
            sent_requests.append(request)
            if handler is not None:
                return handler(request)
            if content is not None:
                return httpx.Response(status_code, content=content)
            return httpx.Response(status_code, json={} if json is None else json)

        return MlflowRestApiClient(
            BASE_URL,
            token=token,
            transport=httpx.MockTransport(_handle),
        )

    return _make


# ---------------------------------------------------------------------------
# Fake tracking server
# ---------------------------------------------------------------------------


def _error(status_code: int, error_code: str, message: str) -> JSONResponse:
    return JSONResponse(
        {"error_code": error_code, "message": message},
        status_code=status_code,
    )


def _not_found(message: str) -> JSONResponse:
    return _error(404, "RESOURCE_DOES_NOT_EXIST", message)


def _set_tag(tags: list[dict], key: str, value: str) -> None:
    tags[:] = [tag for tag in tags if tag["key"] != key]
    tags.append({"key": key, "value": value})


def _drop_tag(tags: list[dict], key: str) -> None:
    tags[:] = [tag for tag in tags if tag["key"] != key]


def _millis() -> int:
    return int(time.time() * 1000)


class FakeTrackingServer:
    """In-memory MLflow tracking server covering the scenario tests.

    Search filters are limited to ``name = '<value>'`` and
    ``name LIKE '<prefix>%'``; everything else is matched exhaustively.
    """

    def __init__(self, token: str | None = None, version: str = SERVER_VERSION):
        self.token = token
        self.version = version
        self.experiments: dict[str, dict] = {}
        self.runs: dict[str, dict] = {}
        self.metric_history: dict[tuple[str, str], list[dict]] = {}
        self.models: dict[str, dict] = {}
        self.versions: dict[str, list[dict]] = {}
        self._ids = itertools.count(1)

    # -- plumbing -----------------------------------------------------------

    def _authorized(self, request: Request) -> bool:
        if self.token is None:
            return True
        return request.headers.get("authorization") == f"Bearer {self.token}"

    def _wrap(self, handler):
        async def endpoint(request: Request) -> starlette.responses.Response:
            if not self._authorized(request):
                return _error(401, "UNAUTHENTICATED", "Invalid credentials")
            body = await request.json() if await request.body() else {}
            return handler(body, request.query_params)

        return endpoint

    @property
    def app(self) -> starlette.applications.Starlette:
        def route(path: str, handler, method: str) -> starlette.routing.Route:
            return starlette.routing.Route(path, self._wrap(handler), methods=[method])

        async def health(request: Request) -> starlette.responses.Response:
            return starlette.responses.PlainTextResponse("OK")

        async def version(request: Request) -> starlette.responses.Response:
            return starlette.responses.PlainTextResponse(self.version)

        routes = [
            starlette.routing.Route(endpoints.HEALTH, health, methods=["GET"]),
            starlette.routing.Route(endpoints.VERSION, version, methods=["GET"]),
            route(endpoints.EXPERIMENTS_CREATE, self.create_experiment, "POST"),
            route(endpoints.EXPERIMENTS_GET, self.get_experiment, "GET"),
            route(
                endpoints.EXPERIMENTS_GET_BY_NAME,
                self.get_experiment_by_name,
                "GET",
            ),
            route(endpoints.EXPERIMENTS_SEARCH, self.search_experiments, "POST"),
            route(endpoints.EXPERIMENTS_UPDATE, self.update_experiment, "POST"),
            route(endpoints.EXPERIMENTS_DELETE, self.delete_experiment, "POST"),
            route(endpoints.EXPERIMENTS_RESTORE, self.restore_experiment, "POST"),
            route(endpoints.EXPERIMENTS_SET_TAG, self.set_experiment_tag, "POST"),
            route(endpoints.RUNS_CREATE, self.create_run, "POST"),
            route(endpoints.RUNS_GET, self.get_run, "GET"),
            route(endpoints.RUNS_SEARCH, self.search_runs, "POST"),
            route(endpoints.RUNS_UPDATE, self.update_run, "POST"),
            route(endpoints.RUNS_DELETE, self.delete_run, "POST"),
            route(endpoints.RUNS_LOG_METRIC, self.log_metric, "POST"),
            route(endpoints.RUNS_LOG_PARAM, self.log_param, "POST"),
            route(endpoints.RUNS_SET_TAG, self.set_run_tag, "POST"),
            route(endpoints.RUNS_DELETE_TAG, self.delete_run_tag, "POST"),
            route(endpoints.RUNS_LOG_BATCH, self.log_batch, "POST"),
            route(endpoints.METRICS_GET_HISTORY, self.get_metric_history, "GET"),
            route(endpoints.REGISTERED_MODELS_CREATE, self.create_model, "POST"),
            route(endpoints.REGISTERED_MODELS_GET, self.get_model, "GET"),
            route(endpoints.REGISTERED_MODELS_SEARCH, self.search_models, "GET"),
            route(endpoints.REGISTERED_MODELS_UPDATE, self.update_model, "PATCH"),
            route(endpoints.REGISTERED_MODELS_RENAME, self.rename_model, "POST"),
            route(endpoints.REGISTERED_MODELS_DELETE, self.delete_model, "DELETE"),
            route(endpoints.REGISTERED_MODELS_SET_TAG, self.set_model_tag, "POST"),
            route(
                endpoints.REGISTERED_MODELS_DELETE_TAG,
                self.delete_model_tag,
                "DELETE",
            ),
            route(endpoints.REGISTERED_MODELS_ALIAS, self.set_alias, "POST"),
            route(endpoints.REGISTERED_MODELS_ALIAS, self.delete_alias, "DELETE"),
            route(endpoints.REGISTERED_MODELS_GET_BY_ALIAS, self.get_by_alias, "GET"),
            route(
                endpoints.REGISTERED_MODELS_GET_LATEST_VERSIONS,
                self.get_latest_versions,
                "GET",
            ),
            route(endpoints.MODEL_VERSIONS_CREATE, self.create_version, "POST"),
            route(endpoints.MODEL_VERSIONS_GET, self.get_version, "GET"),
            route(endpoints.MODEL_VERSIONS_SEARCH, self.search_versions, "GET"),
            route(endpoints.MODEL_VERSIONS_UPDATE, self.update_version, "PATCH"),
            route(
                endpoints.MODEL_VERSIONS_TRANSITION_STAGE,
                self.transition_stage,
                "POST",
            ),
            route(endpoints.MODEL_VERSIONS_DELETE, self.delete_version, "DELETE"),
            route(endpoints.MODEL_VERSIONS_SET_TAG, self.set_version_tag, "POST"),
            route(
                endpoints.MODEL_VERSIONS_DELETE_TAG,
                self.delete_version_tag,
                "DELETE",
            ),
        ]
        return starlette.applications.Starlette(routes=routes)

    @staticmethod
    def _matches(name: str, filter_string: str | None) -> bool:
        if not filter_string:
            return True
        _, _, operand = filter_string.partition(" LIKE ")
        if operand:
            return name.startswith(operand.strip().strip("'").rstrip("%"))
        _, _, operand = filter_string.partition("=")
        return name == operand.strip().strip("'")

    # -- experiments --------------------------------------------------------

    def _experiment_by_name(self, name: str) -> dict | None:
        for experiment in self.experiments.values():
            if experiment["name"] == name:
                return experiment
        return None

    def create_experiment(self, body: dict, query) -> JSONResponse:
        if self._experiment_by_name(body["name"]) is not None:
            return _error(
                400,
                "RESOURCE_ALREADY_EXISTS",
                f"Experiment '{body['name']}' already exists.",
            )
        experiment_id = str(next(self._ids))
        self.experiments[experiment_id] = {
            "experiment_id": experiment_id,
            "name": body["name"],
            "artifact_location": body.get(
                "artifact_location",
                f"mlflow-artifacts:/{experiment_id}",
            ),
            "lifecycle_stage": "active",
            "creation_time": _millis(),
            "last_update_time": _millis(),
            "tags": list(body.get("tags", [])),
        }
        return JSONResponse({"experiment_id": experiment_id})

    def get_experiment(self, body: dict, query) -> JSONResponse:
        experiment = self.experiments.get(query.get("experiment_id", ""))
        if experiment is None:
            return _not_found(f"No Experiment with id={query.get('experiment_id')}")
        return JSONResponse({"experiment": experiment})

    def get_experiment_by_name(self, body: dict, query) -> JSONResponse:
        experiment = self._experiment_by_name(query.get("experiment_name", ""))
        if experiment is None:
            return _not_found("Could not find experiment")
        return JSONResponse({"experiment": experiment})

    def search_experiments(self, body: dict, query) -> JSONResponse:
        view_type = body.get("view_type", "ACTIVE_ONLY")
        want_deleted = view_type == "DELETED_ONLY"
        found = [
            experiment
            for experiment in self.experiments.values()
            if view_type == "ALL"
            or want_deleted == (experiment["lifecycle_stage"] == "deleted")
        ]
        found = [e for e in found if self._matches(e["name"], body.get("filter"))]
        return self._page(found, "experiments", body)

    def update_experiment(self, body: dict, query) -> JSONResponse:
        experiment = self.experiments.get(body["experiment_id"])
        if experiment is None:
            return _not_found("Experiment not found")
        experiment["name"] = body["new_name"]
        return JSONResponse({})

    def delete_experiment(self, body: dict, query) -> JSONResponse:
        experiment = self.experiments.get(body["experiment_id"])
        if experiment is None:
            return _not_found("Experiment not found")
        experiment["lifecycle_stage"] = "deleted"
        return JSONResponse({})

    def restore_experiment(self, body: dict, query) -> JSONResponse:
        experiment = self.experiments.get(body["experiment_id"])
        if experiment is None:
            return _not_found("Experiment not found")
        experiment["lifecycle_stage"] = "active"
        return JSONResponse({})

    def set_experiment_tag(self, body: dict, query) -> JSONResponse:
        experiment = self.experiments.get(body["experiment_id"])
        if experiment is None:
            return _not_found("Experiment not found")
        _set_tag(experiment["tags"], body["key"], body["value"])
        return JSONResponse({})

    # -- runs ---------------------------------------------------------------

    def _run(self, run_id: str) -> dict | None:
        return self.runs.get(run_id)

    def create_run(self, body: dict, query) -> JSONResponse:
        if body.get("experiment_id") not in self.experiments:
            return _not_found("Experiment not found")
        run_id = f"run{next(self._ids)}"
        self.runs[run_id] = {
            "info": {
                "run_id": run_id,
                "run_name": body.get("run_name", run_id),
                "experiment_id": body["experiment_id"],
                "user_id": body.get("user_id", ""),
                "status": "RUNNING",
                "start_time": body.get("start_time", 0),
                "artifact_uri": f"mlflow-artifacts:/{body['experiment_id']}/{run_id}",
                "lifecycle_stage": "active",
            },
            "data": {"metrics": [], "params": [], "tags": list(body.get("tags", []))},
        }
        return JSONResponse({"run": self.runs[run_id]})

    def get_run(self, body: dict, query) -> JSONResponse:
        run = self._run(query.get("run_id", ""))
        if run is None:
            return _not_found(f"Run '{query.get('run_id')}' not found")
        return JSONResponse({"run": run})

    def search_runs(self, body: dict, query) -> JSONResponse:
        experiment_ids = set(body.get("experiment_ids", []))
        found = [
            run
            for run in self.runs.values()
            if run["info"]["experiment_id"] in experiment_ids
            and run["info"]["lifecycle_stage"] == "active"
        ]
        return self._page(found, "runs", body)

    def update_run(self, body: dict, query) -> JSONResponse:
        run = self._run(body["run_id"])
        if run is None:
            return _not_found("Run not found")
        for field in ("status", "end_time", "run_name"):
            if field in body:
                run["info"][field] = body[field]
        return JSONResponse({"run_info": run["info"]})

    def delete_run(self, body: dict, query) -> JSONResponse:
        run = self._run(body["run_id"])
        if run is None:
            return _not_found("Run not found")
        run["info"]["lifecycle_stage"] = "deleted"
        return JSONResponse({})

    def _record_metric(self, run: dict, metric: dict) -> None:
        key = metric["key"]
        history = self.metric_history.setdefault((run["info"]["run_id"], key), [])
        history.append(metric)
        latest = [m for m in run["data"]["metrics"] if m["key"] != key]
        run["data"]["metrics"] = [*latest, metric]

    def log_metric(self, body: dict, query) -> JSONResponse:
        run = self._run(body["run_id"])
        if run is None:
            return _not_found("Run not found")
        metric = {
            "key": body["key"],
            "value": body["value"],
            "timestamp": body["timestamp"],
            "step": body.get("step", 0),
        }
        self._record_metric(run, metric)
        return JSONResponse({})

    def log_param(self, body: dict, query) -> JSONResponse:
        run = self._run(body["run_id"])
        if run is None:
            return _not_found("Run not found")
        _set_tag(run["data"]["params"], body["key"], body["value"])
        return JSONResponse({})

    def set_run_tag(self, body: dict, query) -> JSONResponse:
        run = self._run(body["run_id"])
        if run is None:
            return _not_found("Run not found")
        _set_tag(run["data"]["tags"], body["key"], body["value"])
        return JSONResponse({})

    def delete_run_tag(self, body: dict, query) -> JSONResponse:
        run = self._run(body["run_id"])
        if run is None:
            return _not_found("Run not found")
        _drop_tag(run["data"]["tags"], body["key"])
        return JSONResponse({})

    def log_batch(self, body: dict, query) -> JSONResponse:
        run = self._run(body["run_id"])
        if run is None:
            return _not_found("Run not found")
        for metric in body.get("metrics", []):
            self._record_metric(run, metric)
        for param in body.get("params", []):
            _set_tag(run["data"]["params"], param["key"], param["value"])
        for tag in body.get("tags", []):
            _set_tag(run["data"]["tags"], tag["key"], tag["value"])
        return JSONResponse({})

    def get_metric_history(self, body: dict, query) -> JSONResponse:
        history = self.metric_history.get((query["run_id"], query["metric_key"]), [])
        return self._page(history, "metrics", dict(query))

    # -- registered models --------------------------------------------------

    def _model_view(self, name: str) -> dict:
        model = self.models[name]
        return {
            **model,
            "aliases": [
                {"alias": alias, "version": version}
                for alias, version in model["aliases"].items()
            ],
        }

    def create_model(self, body: dict, query) -> JSONResponse:
        name = body["name"]
        if name in self.models:
            return _error(
                400,
                "RESOURCE_ALREADY_EXISTS",
                f"Registered Model (name={name}) already exists.",
            )
        self.models[name] = {
            "name": name,
            "description": body.get("description", ""),
            "creation_timestamp": _millis(),
            "last_updated_timestamp": _millis(),
            "tags": list(body.get("tags", [])),
            "aliases": {},
        }
        self.versions[name] = []
        return JSONResponse({"registered_model": self._model_view(name)})

    def get_model(self, body: dict, query) -> JSONResponse:
        name = query.get("name", "")
        if name not in self.models:
            return _not_found(f"Registered Model with name={name} not found")
        return JSONResponse({"registered_model": self._model_view(name)})

    def search_models(self, body: dict, query) -> JSONResponse:
        found = [
            self._model_view(name)
            for name in self.models
            if self._matches(name, query.get("filter"))
        ]
        return self._page(found, "registered_models", dict(query))

    def update_model(self, body: dict, query) -> JSONResponse:
        name = body["name"]
        if name not in self.models:
            return _not_found(f"Registered Model with name={name} not found")
        if "description" in body:
            self.models[name]["description"] = body["description"]
        return JSONResponse({"registered_model": self._model_view(name)})

    def rename_model(self, body: dict, query) -> JSONResponse:
        name, new_name = body["name"], body["new_name"]
        if name not in self.models:
            return _not_found(f"Registered Model with name={name} not found")
        self.models[new_name] = {**self.models.pop(name), "name": new_name}
        self.versions[new_name] = [
            {**version, "name": new_name} for version in self.versions.pop(name)
        ]
        return JSONResponse({"registered_model": self._model_view(new_name)})

    def delete_model(self, body: dict, query) -> JSONResponse:
        name = query.get("name", "")
        if name not in self.models:
            return _not_found(f"Registered Model with name={name} not found")
        del self.models[name]
        del self.versions[name]
        return JSONResponse({})

    def set_model_tag(self, body: dict, query) -> JSONResponse:
        if body["name"] not in self.models:
            return _not_found("Registered Model not found")
        _set_tag(self.models[body["name"]]["tags"], body["key"], body["value"])
        return JSONResponse({})

    def delete_model_tag(self, body: dict, query) -> JSONResponse:
        if query["name"] not in self.models:
            return _not_found("Registered Model not found")
        _drop_tag(self.models[query["name"]]["tags"], query["key"])
        return JSONResponse({})

    def set_alias(self, body: dict, query) -> JSONResponse:
        if self._version(body["name"], body["version"]) is None:
            return _not_found("Model version not found")
        self.models[body["name"]]["aliases"][body["alias"]] = body["version"]
        return JSONResponse({})

    def delete_alias(self, body: dict, query) -> JSONResponse:
        if query["name"] not in self.models:
            return _not_found("Registered Model not found")
        self.models[query["name"]]["aliases"].pop(query["alias"], None)
        return JSONResponse({})

    def get_by_alias(self, body: dict, query) -> JSONResponse:
        model = self.models.get(query["name"])
        if model is None or query["alias"] not in model["aliases"]:
            return _not_found(f"Registered model alias {query['alias']} not found.")
        version = self._version(query["name"], model["aliases"][query["alias"]])
        return JSONResponse({"model_version": self._version_view(version)})

    def get_latest_versions(self, body: dict, query) -> JSONResponse:
        name = query.get("name", "")
        if name not in self.models:
            return _not_found(f"Registered Model with name={name} not found")
        stages = query.getlist("stages")
        latest: dict[str, dict] = {}
        for version in self.versions[name]:
            if not stages or version["current_stage"] in stages:
                latest[version["current_stage"]] = version
        return JSONResponse(
            {"model_versions": [self._version_view(v) for v in latest.values()]},
        )

    # -- model versions -----------------------------------------------------

    def _version(self, name: str, version: str) -> dict | None:
        for candidate in self.versions.get(name, []):
            if candidate["version"] == version:
                return candidate
        return None

    def _version_view(self, version: dict) -> dict:
        aliases = self.models[version["name"]]["aliases"]
        return {
            **version,
            "aliases": [a for a, v in aliases.items() if v == version["version"]],
        }

    def create_version(self, body: dict, query) -> JSONResponse:
        name = body["name"]
        if name not in self.models:
            return _not_found(f"Registered Model with name={name} not found")
        version = {
            "name": name,
            "version": str(len(self.versions[name]) + 1),
            "creation_timestamp": _millis(),
            "last_updated_timestamp": _millis(),
            "current_stage": "None",
            "description": body.get("description", ""),
            "source": body["source"],
            "run_id": body.get("run_id", ""),
            "status": "READY",
            "tags": list(body.get("tags", [])),
        }
        self.versions[name].append(version)
        return JSONResponse({"model_version": self._version_view(version)})

    def get_version(self, body: dict, query) -> JSONResponse:
        version = self._version(query.get("name", ""), query.get("version", ""))
        if version is None:
            return _not_found("Model version not found")
        return JSONResponse({"model_version": self._version_view(version)})

    def search_versions(self, body: dict, query) -> JSONResponse:
        found = [
            self._version_view(version)
            for name, versions in self.versions.items()
            if self._matches(name, query.get("filter"))
            for version in versions
        ]
        return self._page(found, "model_versions", dict(query))

    def update_version(self, body: dict, query) -> JSONResponse:
        version = self._version(body["name"], body["version"])
        if version is None:
            return _not_found("Model version not found")
        if "description" in body:
            version["description"] = body["description"]
        if "stage" in body:
            version["current_stage"] = body["stage"]
        return JSONResponse({"model_version": self._version_view(version)})

    def transition_stage(self, body: dict, query) -> JSONResponse:
        version = self._version(body["name"], body["version"])
        if version is None:
            return _not_found("Model version not found")
        if body.get("archive_existing_versions"):
            for other in self.versions[body["name"]]:
                if other["current_stage"] == body["stage"]:
                    other["current_stage"] = "Archived"
        version["current_stage"] = body["stage"]
        return JSONResponse({"model_version": self._version_view(version)})

    def delete_version(self, body: dict, query) -> JSONResponse:
        version = self._version(query.get("name", ""), query.get("version", ""))
        if version is None:
            return _not_found("Model version not found")
        self.versions[query["name"]].remove(version)
        return JSONResponse({})

    def set_version_tag(self, body: dict, query) -> JSONResponse:
        version = self._version(body["name"], body["version"])
        if version is None:
            return _not_found("Model version not found")
        _set_tag(version["tags"], body["key"], body["value"])
        return JSONResponse({})

    def delete_version_tag(self, body: dict, query) -> JSONResponse:
        version = self._version(query["name"], query["version"])
        if version is None:
            return _not_found("Model version not found")
        _drop_tag(version["tags"], query["key"])
        return JSONResponse({})

    # -- pagination ---------------------------------------------------------

    @staticmethod
    def _page(items: list[dict], field: str, params: dict) -> JSONResponse:
        """Serve one page; the page token is the stringified start offset."""
        start = int(params.get("page_token") or 0)
        size = int(params.get("max_results") or 1000)
        page = {field: items[start : start + size]}
        if start + size < len(items):
            page["next_page_token"] = str(start + size)
        return JSONResponse(page)


@pytest.fixture
def fake_server(request: pytest.FixtureRequest) -> FakeTrackingServer:
    """Fake server; parametrize indirectly with a token to require auth."""
    return FakeTrackingServer(token=getattr(request, "param", None))


@pytest.fixture
def tracking_client(
    fake_server: FakeTrackingServer,
) -> Iterator[MlflowRestApiClient]:
    """Client whose requests are served by ``fake_server``."""
    with TestClient(fake_server.app) as test_client:

        def forward(request: httpx.Request) -> httpx.Response:
            headers = {
                key: value
                for key, value in request.headers.items()
                if key in ("authorization", "content-type", "accept")
            }
            reply = test_client.request(
                request.method,
                request.url.raw_path.decode(),
                content=request.content,
                headers=headers,
            )
            return httpx.Response(
                reply.status_code,
                headers={"content-type": reply.headers.get("content-type", "")},
                content=reply.content,
            )

        client = MlflowRestApiClient(
            BASE_URL,
            token=fake_server.token,
            transport=httpx.MockTransport(forward),
        )
        with client:
            yield client
