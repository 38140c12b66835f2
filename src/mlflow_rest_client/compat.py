"""Tracking server compatibility check.

Versions are compared as parsed ``(major, minor, patch)`` tuples, so
``3.10.0`` correctly sorts after ``3.9.0``.
"""

import re
from typing import TYPE_CHECKING

import structlog

from .restapi.errors import IncompatibleServerError

if TYPE_CHECKING:
    from .restapi.client import MlflowRestApiClient

logger = structlog.get_logger(__name__)

# Oldest server exposing every endpoint the client calls (aliases, log-inputs).
MIN_SERVER_VERSION = "2.3.0"

HEALTHY = "OK"

_VERSION_RE = re.compile(
    r"""
    ^v?
    (?P<major>\d+)
    (?:\.(?P<minor>\d+))?
    (?:\.(?P<patch>\d+))?
    (?:[.+\-]?[A-Za-z][0-9A-Za-z.+\-]*)?   # pre-release / dev / local suffix
    $
    """,
    re.VERBOSE,
)

Version = tuple[int, int, int]


def parse_version(version: str) -> Version:
    """Parse a server version string into a comparable tuple.

    Missing minor or patch components count as zero. Pre-release, dev and
    local suffixes (``2.9.0rc1``, ``2.9.0.dev0``, ``2.9.0+local``) are
    ignored for ordering.

    Raises:
        ValueError: If the string does not start with a numeric version.
    """
    match = _VERSION_RE.match(version.strip())
    if match is None:
        msg = f"Unrecognized version string: {version!r}"
        raise ValueError(msg)
    return (
        int(match["major"]),
        int(match["minor"] or 0),
        int(match["patch"] or 0),
    )


def check_server(
    client: "MlflowRestApiClient",
    minimum_version: str = MIN_SERVER_VERSION,
) -> Version:
    """Verify that the server is healthy and at least ``minimum_version``.

    Args:
        client: Client connected to the server under test.
        minimum_version: Oldest acceptable server version.

    Returns:
        The parsed server version.

    Raises:
        IncompatibleServerError: If the health text is not "OK", the version
            is empty or unparsable, or the version is below the minimum.
        ApiError: If either endpoint replies with an error status.
    """
    health = client.get_health().strip()
    if health != HEALTHY:
        msg = f"Server at {client.base_url} is not healthy: {health!r}"
        raise IncompatibleServerError(msg)

    raw_version = client.get_version().strip()
    if not raw_version:
        msg = f"Server at {client.base_url} reported an empty version"
        raise IncompatibleServerError(msg)

    try:
        version = parse_version(raw_version)
    except ValueError as exc:
        msg = f"Server at {client.base_url} reported an invalid version"
        raise IncompatibleServerError(msg) from exc

    minimum = parse_version(minimum_version)
    if version < minimum:
        msg = (
            f"Server version {raw_version} is older than the minimum "
            f"supported version {minimum_version}"
        )
        raise IncompatibleServerError(msg)

    logger.info("Server compatible", base_url=client.base_url, version=raw_version)
    return version
