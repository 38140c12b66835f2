"""Error types raised by the MLflow REST API client.

Transport failures (connection refused, DNS, timeouts) are not wrapped:
they surface as the ``httpx.TransportError`` subclass raised by httpx.
Everything the client itself detects derives from
:class:`MlflowClientError`.
"""

import pydantic

from .types import ErrorResponse


class MlflowClientError(Exception):
    """Base class for errors raised by the client."""


class ApiError(MlflowClientError):
    """Raised when the server replies with a status outside [200, 300).

    Attributes:
        status_code: HTTP status code of the reply.
        response_body: Raw reply body.
        error_code: MLflow error code (e.g. ``RESOURCE_DOES_NOT_EXIST``),
            empty when the body was not a structured error.
        message: Server message, or the raw body text when the body was
            not a structured error.
    """

    def __init__(
        self,
        status_code: int,
        response_body: bytes = b"",
        error_code: str = "",
        message: str = "",
    ):
        self.status_code = status_code
        self.response_body = response_body
        self.error_code = error_code
        self.message = message
        super().__init__(str(self))

    @classmethod
    def from_response(cls, status_code: int, body: bytes) -> "ApiError":
        """Build an error from a JSON reply shaped ``{error_code, message}``.

        Falls back to the raw body text as message when the body is not a
        JSON object.
        """
        try:
            payload = ErrorResponse.model_validate_json(body)
        except pydantic.ValidationError:
            return cls(status_code, body, message=body.decode(errors="replace"))

        return cls(
            status_code,
            body,
            error_code=payload.error_code,
            message=payload.message,
        )

    @property
    def response_text(self) -> str:
        """Raw reply body decoded as text."""
        return self.response_body.decode(errors="replace")

    def __str__(self) -> str:
        if self.error_code:
            return (
                f"MLflow API error [{self.status_code}]: "
                f"{self.error_code} - {self.message}"
            )
        if self.message:
            return f"MLflow API error [{self.status_code}]: {self.message}"
        return f"MLflow API error [{self.status_code}]: {self.response_text}"


class RequestSerializationError(MlflowClientError, TypeError):
    """Raised when a request body cannot be encoded as JSON."""


class ResponseDecodeError(MlflowClientError, ValueError):
    """Raised when a successful reply does not match the expected type."""


class InvalidRequestError(MlflowClientError, ValueError):
    """Raised by client-side validation before any request is sent."""


class IncompatibleServerError(MlflowClientError):
    """Raised when the tracking server is unhealthy or too old."""
