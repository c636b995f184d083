"""Tests for the exception hierarchy and error envelope."""

from __future__ import annotations

from vespabridge.exceptions import (
    BridgeError,
    DownstreamError,
    IndexNotFoundError,
    ParseError,
    RoutingError,
    decamelize,
    error_envelope,
)
from vespabridge.transport.exceptions import DocumentNotFoundError, QueryError


class TestExceptions:
    def test_decamelize(self) -> None:
        assert decamelize("IndexNotFoundError") == "index_not_found_error"
        assert decamelize("HTTPError") == "httperror"

    def test_status_codes(self) -> None:
        assert ParseError("x").status == 400
        assert DownstreamError("x").status == 500
        assert QueryError("x").status == 500
        assert DocumentNotFoundError("x").status == 404
        assert RoutingError("GET", "/").status == 405

    def test_status_override(self) -> None:
        assert BridgeError("x", status=503).status == 503
        assert BridgeError("x").status == 500

    def test_transport_errors_are_downstream(self) -> None:
        assert isinstance(QueryError("x"), DownstreamError)

    def test_envelope(self) -> None:
        body = error_envelope(IndexNotFoundError("books"))
        assert body == {
            "status": 404,
            "error": {
                "type": "index_not_found_exception",
                "reason": "no such index [books]",
                "index_uuid": "_na_",
                "index": "books",
                "root_cause": [],
            },
        }
