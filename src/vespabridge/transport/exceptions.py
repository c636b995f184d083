"""Transport-specific exceptions."""

from vespabridge.exceptions import DownstreamError


class TransportError(DownstreamError):
    """Base exception for backend transport errors."""


class ConnectionError(TransportError):
    """Raised when the transport cannot reach the backend."""


class DocumentNotFoundError(TransportError):
    """Raised when a requested document does not exist."""

    status = 404


class QueryError(TransportError):
    """Raised when a backend request returns a non-success status."""


class ConfigurationError(TransportError):
    """Raised when transport configuration is invalid."""
