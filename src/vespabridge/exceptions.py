"""Request-level exceptions and the OpenSearch-style error envelope.

Every exception carries the HTTP status it maps to. The dispatcher renders any
``BridgeError`` that escapes an action with :func:`error_envelope`.
"""

from __future__ import annotations

import re
from typing import Any

_CAMEL_BOUNDARY = re.compile(r"(?<=[a-z0-9])(?=[A-Z])")


def decamelize(name: str) -> str:
    """``IndexNotFoundError`` -> ``index_not_found_error``."""
    return _CAMEL_BOUNDARY.sub("_", name).lower()


class BridgeError(Exception):
    """Base exception for errors surfaced to OpenSearch clients."""

    status: int = 500
    error_type: str | None = None

    def __init__(self, reason: str, *, status: int | None = None) -> None:
        super().__init__(reason)
        self.reason = reason
        if status is not None:
            self.status = status

    @property
    def type(self) -> str:
        return self.error_type or decamelize(type(self).__name__)


class ParseError(BridgeError):
    """Raised when a request body is not valid JSON."""

    status = 400


class ValidationError(BridgeError):
    """Raised when a required id, body or field is missing or malformed."""

    status = 400


class NotFoundError(BridgeError):
    """Raised when an index or document does not exist."""

    status = 404


class IndexNotFoundError(NotFoundError):
    """Raised when an index is unknown to the metadata store."""

    error_type = "index_not_found_exception"

    def __init__(self, index: str) -> None:
        super().__init__(f"no such index [{index}]")
        self.index = index


class DownstreamError(BridgeError):
    """Raised when the backend call fails or returns a non-success status."""

    status = 500


class RoutingError(BridgeError):
    """Raised when no action matches the method and path."""

    status = 405
    error_type = "incorrect_http_method_exception"

    def __init__(self, method: str, path: str) -> None:
        super().__init__(f"Incorrect HTTP method for uri [{path}] and method [{method}]")


def error_envelope(error: BridgeError) -> dict[str, Any]:
    """Render an exception as ``{status, error:{type, reason, ...}}``."""
    body: dict[str, Any] = {
        "type": error.type,
        "reason": error.reason,
        "index_uuid": "_na_",
        "index": getattr(error, "index", "_na_"),
        "root_cause": [],
    }
    return {"status": error.status, "error": body}
