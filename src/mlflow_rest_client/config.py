"""Client configuration and logging setup.

Configuration is an immutable pydantic model. It can be built directly,
loaded from a JSON file, or read from the standard MLflow environment
variables.
"""

import json
import logging
import os
import pathlib
from collections.abc import Mapping

import pydantic
import structlog

CONFIG_ENV_VAR = "MLFLOW_CLIENT_CONFIG_PATH"
TRACKING_URI_ENV_VAR = "MLFLOW_TRACKING_URI"
TRACKING_TOKEN_ENV_VAR = "MLFLOW_TRACKING_TOKEN"
TIMEOUT_ENV_VAR = "MLFLOW_HTTP_REQUEST_TIMEOUT"

DEFAULT_TIMEOUT = 30.0

logger = structlog.get_logger(__name__)


class ClientConfig(pydantic.BaseModel):
    """Connection settings for one tracking server.

    Frozen: use ``model_copy(update=...)`` or the client's ``with_token`` /
    ``with_timeout`` to derive a changed configuration.
    """

    model_config = pydantic.ConfigDict(frozen=True)

    base_url: str = pydantic.Field(description="Tracking server base URL")
    token: str | None = pydantic.Field(
        None,
        description="Bearer token sent with every request",
    )
    timeout: float = pydantic.Field(
        DEFAULT_TIMEOUT,
        description="Request timeout in seconds",
        gt=0,
    )

    @pydantic.field_validator("base_url")
    @classmethod
    def _strip_base_url(cls, value: str) -> str:
        value = value.strip().rstrip("/")
        if not value:
            msg = "base_url cannot be empty"
            raise ValueError(msg)
        return value

    @pydantic.field_validator("token")
    @classmethod
    def _empty_token_is_none(cls, value: str | None) -> str | None:
        return value or None


class ConfigFile(pydantic.BaseModel):
    """On-disk JSON layout accepted by :func:`load_config`."""

    base_url: str
    token: str | None = None
    token_file: str | None = None
    timeout: float = DEFAULT_TIMEOUT


def configure_logging(log_level_name: str) -> None:
    """Configure structlog for logfmt output."""
    log_level = getattr(logging, log_level_name.upper(), logging.INFO)
    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.EventRenamer("msg"),
            structlog.processors.format_exc_info,
            structlog.processors.LogfmtRenderer(
                key_order=("timestamp", "level", "msg"),
            ),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(log_level),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(),
        cache_logger_on_first_use=True,
    )


def read_token_file(token_file: str | pathlib.Path) -> str:
    """Read a bearer token from a file, stripping surrounding whitespace."""
    token_path = pathlib.Path(token_file)
    if not token_path.exists():
        msg = f"Token file not found: {token_file}"
        raise FileNotFoundError(msg)
    return token_path.read_text().strip()


def load_config(config_path: str | pathlib.Path) -> ClientConfig:
    """Load configuration from a JSON file.

    An inline ``token`` wins over ``token_file``.
    """
    path = pathlib.Path(config_path)
    if not path.exists():
        msg = f"Configuration file not found: {config_path}"
        raise FileNotFoundError(msg)

    with path.open("r") as f:
        data = ConfigFile(**json.load(f))

    token = data.token
    if not token and data.token_file:
        token = read_token_file(data.token_file)

    logger.debug("Loaded client configuration", path=str(path))
    return ClientConfig(base_url=data.base_url, token=token, timeout=data.timeout)


def config_from_env(environ: Mapping[str, str] | None = None) -> ClientConfig:
    """Build configuration from the standard MLflow environment variables."""
    environ = os.environ if environ is None else environ

    base_url = environ.get(TRACKING_URI_ENV_VAR, "")
    if not base_url:
        msg = f"{TRACKING_URI_ENV_VAR} is not set"
        raise ValueError(msg)

    timeout = environ.get(TIMEOUT_ENV_VAR)
    return ClientConfig(
        base_url=base_url,
        token=environ.get(TRACKING_TOKEN_ENV_VAR),
        timeout=float(timeout) if timeout else DEFAULT_TIMEOUT,
    )


def resolve_config(config_path: str | None = None) -> ClientConfig:
    """Load configuration from a path, the config env var, or the environment."""
    resolved_path = config_path or os.environ.get(CONFIG_ENV_VAR)
    if resolved_path:
        return load_config(resolved_path)
    return config_from_env()
